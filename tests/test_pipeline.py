import pytest
import respx

from profile_jutsu.avatars.catalog import CHARACTER_IMAGES
from profile_jutsu.avatars.generator import ImageGenerator
from profile_jutsu.avatars.imagen import GoogleImagenGenerator
from profile_jutsu.avatars.resolver import AvatarResolver, StaticCharacterStrategy
from profile_jutsu.badges.providers.google_genai import GoogleGenaiBadgeProvider
from profile_jutsu.badges.providers.openrouter import OpenRouterBadgeProvider
from profile_jutsu.badges.resolver import BadgeResolver
from profile_jutsu.clients.github import GitHubProfileClient
from profile_jutsu.config import Settings
from profile_jutsu.errors import AvatarUpstreamError, InvalidInputError, MalformedResponseError, UserNotFoundError
from profile_jutsu.pipeline import ProfileJutsuPipeline
from tests.conftest import SAMPLE_BADGE, SAMPLE_REPOS, SAMPLE_USER, StaticBadgeProvider

USER_URL = "https://api.github.com/users/testuser"
REPOS_URL = "https://api.github.com/users/testuser/repos"


@pytest.fixture
def pipeline(settings: Settings, static_badge_provider: StaticBadgeProvider) -> ProfileJutsuPipeline:
    return ProfileJutsuPipeline(
        profile_client=GitHubProfileClient(settings=settings),
        badge_resolver=BadgeResolver(provider=static_badge_provider, timeout=settings.request_timeout),
        avatar_source=AvatarResolver(strategies=[StaticCharacterStrategy()]),
    )


@respx.mock
async def test_run(pipeline: ProfileJutsuPipeline, static_badge_provider: StaticBadgeProvider):
    _ = respx.get(USER_URL).respond(json=SAMPLE_USER)
    _ = respx.get(REPOS_URL).respond(json=SAMPLE_REPOS)

    result = await pipeline.run("testuser")

    assert result.profile.user.login == "testuser"
    assert [repo.name for repo in result.profile.repos] == ["awesome-react-app", "node-api-server"]
    assert result.badge.to_wire() == SAMPLE_BADGE
    assert result.avatar == CHARACTER_IMAGES["Naruto Uzumaki"]
    assert len(static_badge_provider.prompts) == 1


@respx.mock
async def test_run_without_avatars(settings: Settings, static_badge_provider: StaticBadgeProvider):
    _ = respx.get(USER_URL).respond(json=SAMPLE_USER)
    _ = respx.get(REPOS_URL).respond(json=[])

    pipeline = ProfileJutsuPipeline(
        profile_client=GitHubProfileClient(settings=settings),
        badge_resolver=BadgeResolver(provider=static_badge_provider),
    )

    result = await pipeline.run("testuser")

    assert result.avatar is None


@pytest.mark.parametrize("username", ["", "   "])
async def test_run_blank_username(pipeline: ProfileJutsuPipeline, static_badge_provider: StaticBadgeProvider, username: str):
    with pytest.raises(InvalidInputError, match="Please enter a GitHub username"):
        _ = await pipeline.run(username)

    assert static_badge_provider.prompts == []


@respx.mock
async def test_run_missing_user_stops_pipeline(pipeline: ProfileJutsuPipeline, static_badge_provider: StaticBadgeProvider):
    _ = respx.get(USER_URL).respond(status_code=404, json={"message": "Not Found"})
    _ = respx.get(REPOS_URL).respond(status_code=404, json={"message": "Not Found"})

    with pytest.raises(UserNotFoundError):
        _ = await pipeline.run("testuser")

    assert static_badge_provider.prompts == []


@respx.mock(assert_all_called=False)
async def test_run_malformed_badge_stops_pipeline(settings: Settings, respx_mock: respx.MockRouter):
    _ = respx_mock.get(USER_URL).respond(json=SAMPLE_USER)
    _ = respx_mock.get(REPOS_URL).respond(json=SAMPLE_REPOS)
    generate_route = respx_mock.post("https://api.imagerouter.ai/v1/generate").respond(json={"image": {"base64": "aGVsbG8="}})

    pipeline = ProfileJutsuPipeline(
        profile_client=GitHubProfileClient(settings=settings),
        badge_resolver=BadgeResolver(provider=StaticBadgeProvider(text="not json")),
        avatar_source=ImageGenerator(settings=settings),
    )

    with pytest.raises(MalformedResponseError):
        _ = await pipeline.run("testuser")

    assert not generate_route.called


@respx.mock
async def test_run_generated_avatar_failure_propagates(settings: Settings, static_badge_provider: StaticBadgeProvider):
    _ = respx.get(USER_URL).respond(json=SAMPLE_USER)
    _ = respx.get(REPOS_URL).respond(json=SAMPLE_REPOS)
    _ = respx.post("https://api.imagerouter.ai/v1/generate").respond(status_code=500)

    pipeline = ProfileJutsuPipeline(
        profile_client=GitHubProfileClient(settings=settings),
        badge_resolver=BadgeResolver(provider=static_badge_provider),
        avatar_source=ImageGenerator(settings=settings),
    )

    with pytest.raises(AvatarUpstreamError):
        _ = await pipeline.run("testuser")


def test_from_settings_selects_components(settings: Settings):
    pipeline = ProfileJutsuPipeline.from_settings(settings=settings)

    assert isinstance(pipeline.badge_resolver.provider, OpenRouterBadgeProvider)
    assert isinstance(pipeline.avatar_source, AvatarResolver)
    assert pipeline.badge_resolver.timeout == 5


def test_from_settings_google_and_generate():
    pipeline = ProfileJutsuPipeline.from_settings(settings=Settings(google_api_key="google-key", avatar_strategy="generate"))

    assert isinstance(pipeline.badge_resolver.provider, GoogleGenaiBadgeProvider)
    assert isinstance(pipeline.avatar_source, GoogleImagenGenerator)


def test_from_settings_imagerouter_generate(settings: Settings):
    pipeline = ProfileJutsuPipeline.from_settings(settings=settings.model_copy(update={"avatar_strategy": "generate"}))

    assert isinstance(pipeline.avatar_source, ImageGenerator)


def test_from_settings_without_avatars():
    pipeline = ProfileJutsuPipeline.from_settings(settings=Settings(avatar_strategy="none"))

    assert pipeline.avatar_source is None
