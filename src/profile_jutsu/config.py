import os
from typing import Literal, Self

from pydantic import BaseModel, ConfigDict, Field

from profile_jutsu.errors import MissingConfigurationError

BadgeProviderName = Literal["openrouter", "google"]
AvatarStrategyName = Literal["lookup", "generate", "none"]
ImageProviderName = Literal["imagerouter", "google"]

DEFAULT_REQUEST_TIMEOUT = 30.0

DEFAULT_GITHUB_BASE_URL = "https://api.github.com"
DEFAULT_OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_OPENROUTER_MODEL = "anthropic/claude-3.5-sonnet"
DEFAULT_GOOGLE_MODEL = "gemini-2.5-flash"
DEFAULT_GOOGLE_IMAGE_MODEL = "imagen-3.0-generate-002"
DEFAULT_IMAGEROUTER_BASE_URL = "https://api.imagerouter.ai/v1"
DEFAULT_IMAGEROUTER_MODEL = "flux-pro"
DEFAULT_JIKAN_BASE_URL = "https://api.jikan.moe/v4"


def _getenv(*names: str) -> str | None:
    for name in names:
        if value := os.getenv(name):
            return value
    return None


class Settings(BaseModel):
    """Settings for every component of the pipeline.

    Values are read once, credentials are only checked by the `require_*` methods so that a
    missing key for one provider never blocks code paths that do not use it.
    """

    model_config = ConfigDict(frozen=True)

    github_token: str | None = Field(default=None, description="Optional GitHub token, raises the anonymous rate limit.")
    github_base_url: str = Field(default=DEFAULT_GITHUB_BASE_URL, description="The GitHub REST API base URL.")

    badge_provider: BadgeProviderName | None = Field(default=None, description="The text-generation backend, auto-detected if unset.")

    openrouter_api_key: str | None = Field(default=None, description="The OpenRouter API key.")
    openrouter_model: str = Field(default=DEFAULT_OPENROUTER_MODEL, description="The OpenRouter model identifier.")
    openrouter_base_url: str = Field(default=DEFAULT_OPENROUTER_BASE_URL, description="The OpenRouter API base URL.")
    openrouter_referer: str | None = Field(default=None, description="Optional HTTP-Referer attribution header.")
    openrouter_title: str | None = Field(default=None, description="Optional X-Title attribution header.")

    google_api_key: str | None = Field(default=None, description="The Google Gemini API key.")
    google_model: str = Field(default=DEFAULT_GOOGLE_MODEL, description="The Gemini model identifier.")
    google_image_model: str = Field(default=DEFAULT_GOOGLE_IMAGE_MODEL, description="The Imagen model identifier.")

    image_provider: ImageProviderName | None = Field(default=None, description="The image-generation backend, auto-detected if unset.")

    imagerouter_api_key: str | None = Field(default=None, description="The ImageRouter API key.")
    imagerouter_model: str = Field(default=DEFAULT_IMAGEROUTER_MODEL, description="The image-generation model identifier.")
    imagerouter_base_url: str = Field(default=DEFAULT_IMAGEROUTER_BASE_URL, description="The ImageRouter API base URL.")

    jikan_base_url: str = Field(default=DEFAULT_JIKAN_BASE_URL, description="The character-search API base URL.")

    avatar_strategy: AvatarStrategyName = Field(default="lookup", description="How avatars are acquired.")

    request_timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0, description="Timeout in seconds for each outbound call.")

    @classmethod
    def from_env(cls) -> Self:
        values: dict[str, str | None] = {
            "github_token": _getenv("GITHUB_TOKEN", "GITHUB_PERSONAL_ACCESS_TOKEN"),
            "github_base_url": _getenv("GITHUB_BASE_URL"),
            "badge_provider": _getenv("BADGE_PROVIDER"),
            "openrouter_api_key": _getenv("OPENROUTER_API_KEY"),
            "openrouter_model": _getenv("OPENROUTER_MODEL"),
            "openrouter_base_url": _getenv("OPENROUTER_BASE_URL"),
            "openrouter_referer": _getenv("OPENROUTER_REFERER"),
            "openrouter_title": _getenv("OPENROUTER_TITLE"),
            "google_api_key": _getenv("GOOGLE_API_KEY"),
            "google_model": _getenv("GOOGLE_MODEL"),
            "google_image_model": _getenv("GOOGLE_IMAGE_MODEL"),
            "image_provider": _getenv("IMAGE_PROVIDER"),
            "imagerouter_api_key": _getenv("IMAGEROUTER_API_KEY"),
            "imagerouter_model": _getenv("IMAGEROUTER_MODEL"),
            "imagerouter_base_url": _getenv("IMAGEROUTER_BASE_URL"),
            "jikan_base_url": _getenv("JIKAN_BASE_URL"),
            "avatar_strategy": _getenv("AVATAR_STRATEGY"),
            "request_timeout": _getenv("REQUEST_TIMEOUT"),
        }

        # unset variables fall back to the field defaults
        return cls.model_validate({key: value for key, value in values.items() if value is not None})

    def resolved_badge_provider(self) -> BadgeProviderName:
        if self.badge_provider:
            return self.badge_provider

        return "google" if self.google_api_key else "openrouter"

    def resolved_image_provider(self) -> ImageProviderName:
        if self.image_provider:
            return self.image_provider

        if not self.imagerouter_api_key and self.google_api_key:
            return "google"

        return "imagerouter"

    def require_openrouter_api_key(self) -> str:
        if not self.openrouter_api_key:
            raise MissingConfigurationError("OPENROUTER_API_KEY")
        return self.openrouter_api_key

    def require_google_api_key(self) -> str:
        if not self.google_api_key:
            raise MissingConfigurationError("GOOGLE_API_KEY")
        return self.google_api_key

    def require_imagerouter_api_key(self) -> str:
        if not self.imagerouter_api_key:
            raise MissingConfigurationError("IMAGEROUTER_API_KEY")
        return self.imagerouter_api_key
