from fastmcp.utilities.logging import get_logger

from profile_jutsu.badges.providers.base import BadgeProvider
from profile_jutsu.badges.providers.google_genai import GoogleGenaiBadgeProvider
from profile_jutsu.badges.providers.openrouter import OpenRouterBadgeProvider
from profile_jutsu.config import Settings

logger = get_logger(__name__)


def get_badge_provider(settings: Settings) -> BadgeProvider:
    """Pick the text-generation backend. Credentials are checked when the provider is first used."""

    if settings.resolved_badge_provider() == "google":
        logger.debug(f"Using Google Gemini badge provider with model {settings.google_model}")
        return GoogleGenaiBadgeProvider(settings=settings)

    if not settings.openrouter_api_key:
        logger.warning("OPENROUTER_API_KEY is not set, badge requests will fail until it is. Set OPENROUTER_API_KEY or GOOGLE_API_KEY.")

    logger.debug(f"Using OpenRouter badge provider with model {settings.openrouter_model}")
    return OpenRouterBadgeProvider(settings=settings)
