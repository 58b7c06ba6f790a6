from logging import Logger, getLogger
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from profile_jutsu.config import Settings
from profile_jutsu.errors import AvatarTimeoutError, AvatarUpstreamError, NoImageReturnedError, redact_secrets
from profile_jutsu.models.badge import AnimeBadge

ACTION = "Image generation"

DEFAULT_IMAGE_SIZE = 512
DEFAULT_STEPS = 28
DEFAULT_GUIDANCE = 3.5
DEFAULT_OUTPUT_FORMAT = "jpeg"
DEFAULT_OUTPUT_QUALITY = 90

DATA_URL_PREFIX = "data:image/jpeg;base64,"


def build_avatar_prompt(badge: AnimeBadge) -> str:
    return (
        "Create a visually stunning, anime-style avatar for a GitHub profile picture. "
        f"The character is {badge.character_name} from {badge.anime}. "
        "The avatar should be a circular headshot, vibrant, and capture their essence. "
        f"The background should be simple and abstract, using thematic colors like {badge.badge_color}. "
        "The style should be modern anime, clean, and professional."
    )


class GeneratedImage(BaseModel):
    base64: str | None = None


class ImageGenerationResponse(BaseModel):
    image: GeneratedImage | None = None


class ImageGenerator:
    """Generates an avatar for a badge through an ImageRouter-compatible image-generation endpoint."""

    settings: Settings
    http_client: httpx.AsyncClient | None
    logger: Logger

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient | None = None, logger: Logger | None = None):
        self.settings = settings
        self.http_client = http_client
        self.logger = logger or getLogger(__name__)

    def _build_request_body(self, badge: AnimeBadge) -> dict[str, Any]:
        return {
            "prompt": build_avatar_prompt(badge),
            "model": self.settings.imagerouter_model,
            "width": DEFAULT_IMAGE_SIZE,
            "height": DEFAULT_IMAGE_SIZE,
            "steps": DEFAULT_STEPS,
            "guidance": DEFAULT_GUIDANCE,
            "output_format": DEFAULT_OUTPUT_FORMAT,
            "output_quality": DEFAULT_OUTPUT_QUALITY,
        }

    async def _post(self, client: httpx.AsyncClient, api_key: str, body: dict[str, Any]) -> httpx.Response:
        return await client.post(
            f"{self.settings.imagerouter_base_url.rstrip('/')}/generate",
            json=body,
            headers={"Authorization": f"Bearer {api_key}"},
            timeout=self.settings.request_timeout,
        )

    async def generate_avatar_image(self, badge: AnimeBadge) -> str:
        """Generate an avatar image and return it as a JPEG data URL.

        Raises:
            MissingConfigurationError: If IMAGEROUTER_API_KEY is not set.
            AvatarTimeoutError: If the endpoint does not answer in time.
            AvatarUpstreamError: If the endpoint answers with a non-success status or cannot be reached.
            NoImageReturnedError: If the endpoint answers without an image.
        """

        api_key = self.settings.require_imagerouter_api_key()
        body = self._build_request_body(badge)

        self.logger.info(f"Generating avatar for {badge.character_name} with model {self.settings.imagerouter_model}")

        try:
            if self.http_client is not None:
                response = await self._post(self.http_client, api_key, body)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._post(client, api_key, body)
        except httpx.TimeoutException as e:
            self.logger.warning(f"Avatar generation for {badge.character_name} timed out")
            raise AvatarTimeoutError(action=ACTION, timeout=self.settings.request_timeout) from e
        except httpx.HTTPError as e:
            self.logger.warning(redact_secrets(f"Avatar generation for {badge.character_name} failed: {e}"))
            raise AvatarUpstreamError(action=ACTION, body=str(e)) from e

        if response.is_error:
            self.logger.warning(f"Avatar generation for {badge.character_name} failed with status {response.status_code}")
            raise AvatarUpstreamError(action=ACTION, status=response.status_code)

        try:
            image = ImageGenerationResponse.model_validate_json(response.content).image
        except ValidationError as e:
            raise NoImageReturnedError() from e

        if image is None or not image.base64:
            raise NoImageReturnedError()

        return DATA_URL_PREFIX + image.base64

    async def get_avatar(self, badge: AnimeBadge) -> str:
        return await self.generate_avatar_image(badge)
