import base64
from logging import Logger, getLogger

import httpx
from google.genai import Client as GoogleGenaiClient
from google.genai.errors import APIError as GoogleGenaiAPIError
from google.genai.types import GenerateImagesConfig, GenerateImagesResponse, HttpOptions

from profile_jutsu.avatars.generator import ACTION, DATA_URL_PREFIX, build_avatar_prompt
from profile_jutsu.config import Settings
from profile_jutsu.errors import AvatarTimeoutError, AvatarUpstreamError, NoImageReturnedError, redact_secrets
from profile_jutsu.models.badge import AnimeBadge

OUTPUT_MIME_TYPE = "image/jpeg"


def get_image_bytes_from_response(response: GenerateImagesResponse) -> bytes | None:
    if not response.generated_images:
        return None

    image = response.generated_images[0].image

    return image.image_bytes if image else None


class GoogleImagenGenerator:
    """Generates an avatar for a badge with a Gemini Imagen model."""

    settings: Settings
    logger: Logger

    def __init__(self, settings: Settings, client: GoogleGenaiClient | None = None, logger: Logger | None = None):
        self.settings = settings
        self.logger = logger or getLogger(__name__)
        self._client: GoogleGenaiClient | None = client

    @property
    def client(self) -> GoogleGenaiClient:
        if self._client is None:
            self._client = GoogleGenaiClient(
                api_key=self.settings.require_google_api_key(),
                http_options=HttpOptions(timeout=int(self.settings.request_timeout * 1000)),
            )

        return self._client

    async def generate_avatar_image(self, badge: AnimeBadge) -> str:
        """Generate an avatar image and return it as a JPEG data URL.

        Raises:
            MissingConfigurationError: If GOOGLE_API_KEY is not set.
            AvatarTimeoutError: If the model does not answer in time.
            AvatarUpstreamError: If the model call fails.
            NoImageReturnedError: If the model answers without an image.
        """

        client = self.client

        self.logger.info(f"Generating avatar for {badge.character_name} with model {self.settings.google_image_model}")

        try:
            response: GenerateImagesResponse = await client.aio.models.generate_images(
                model=self.settings.google_image_model,
                prompt=build_avatar_prompt(badge),
                config=GenerateImagesConfig(number_of_images=1, output_mime_type=OUTPUT_MIME_TYPE),
            )
        except GoogleGenaiAPIError as e:
            self.logger.warning(f"Avatar generation for {badge.character_name} failed with status {e.code}")
            raise AvatarUpstreamError(action=ACTION, status=e.code, body=e.message) from e
        except (httpx.TimeoutException, TimeoutError) as e:
            self.logger.warning(f"Avatar generation for {badge.character_name} timed out")
            raise AvatarTimeoutError(action=ACTION, timeout=self.settings.request_timeout) from e
        except Exception as e:
            # transport and response parsing failures outside the SDK's error type
            self.logger.warning(redact_secrets(f"Avatar generation for {badge.character_name} failed: {e}"))
            raise AvatarUpstreamError(action=ACTION, body=str(e)) from e

        if not (image_bytes := get_image_bytes_from_response(response)):
            raise NoImageReturnedError()

        return DATA_URL_PREFIX + base64.b64encode(image_bytes).decode("ascii")

    async def get_avatar(self, badge: AnimeBadge) -> str:
        return await self.generate_avatar_image(badge)
