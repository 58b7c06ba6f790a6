import json

import httpx
import pytest
import respx
from inline_snapshot import snapshot

from profile_jutsu.avatars.generator import ImageGenerator, build_avatar_prompt
from profile_jutsu.config import Settings
from profile_jutsu.errors import AvatarTimeoutError, AvatarUpstreamError, MissingConfigurationError, NoImageReturnedError
from profile_jutsu.models.badge import AnimeBadge
from tests.conftest import IMAGEROUTER_TEST_KEY

GENERATE_URL = "https://api.imagerouter.ai/v1/generate"


@pytest.fixture
def generator(settings: Settings) -> ImageGenerator:
    return ImageGenerator(settings=settings)


def test_build_avatar_prompt(anime_badge: AnimeBadge):
    prompt = build_avatar_prompt(anime_badge)

    assert "Naruto Uzumaki from Naruto" in prompt
    assert "#FF7F00" in prompt
    assert "circular headshot" in prompt


@respx.mock
async def test_generate_avatar_image(generator: ImageGenerator, anime_badge: AnimeBadge):
    route = respx.post(GENERATE_URL).respond(json={"image": {"base64": "aGVsbG8="}})

    avatar = await generator.generate_avatar_image(anime_badge)

    assert avatar == "data:image/jpeg;base64,aGVsbG8="

    request = route.calls.last.request
    assert request.headers["Authorization"] == f"Bearer {IMAGEROUTER_TEST_KEY}"

    body = json.loads(request.content)
    assert body.pop("prompt") == build_avatar_prompt(anime_badge)
    assert body == snapshot(
        {
            "model": "flux-pro",
            "width": 512,
            "height": 512,
            "steps": 28,
            "guidance": 3.5,
            "output_format": "jpeg",
            "output_quality": 90,
        }
    )


@respx.mock
async def test_generate_avatar_image_error_status(generator: ImageGenerator, anime_badge: AnimeBadge):
    _ = respx.post(GENERATE_URL).respond(status_code=402, json={"error": "insufficient credits"})

    with pytest.raises(AvatarUpstreamError) as exc_info:
        _ = await generator.generate_avatar_image(anime_badge)

    assert exc_info.value.status == 402


@respx.mock
async def test_generate_avatar_image_without_image(generator: ImageGenerator, anime_badge: AnimeBadge):
    _ = respx.post(GENERATE_URL).respond(json={"image": {}})

    with pytest.raises(NoImageReturnedError):
        _ = await generator.generate_avatar_image(anime_badge)


@respx.mock
async def test_generate_avatar_image_not_json(generator: ImageGenerator, anime_badge: AnimeBadge):
    _ = respx.post(GENERATE_URL).respond(text="ok")

    with pytest.raises(NoImageReturnedError):
        _ = await generator.get_avatar(anime_badge)


@respx.mock
async def test_generate_avatar_image_timeout(generator: ImageGenerator, anime_badge: AnimeBadge):
    _ = respx.post(GENERATE_URL).mock(side_effect=httpx.ReadTimeout("timed out"))

    with pytest.raises(AvatarTimeoutError):
        _ = await generator.generate_avatar_image(anime_badge)


async def test_generate_avatar_image_missing_key(anime_badge: AnimeBadge):
    generator = ImageGenerator(settings=Settings())

    with respx.mock:
        with pytest.raises(MissingConfigurationError, match="IMAGEROUTER_API_KEY"):
            _ = await generator.generate_avatar_image(anime_badge)

        assert len(respx.calls) == 0
