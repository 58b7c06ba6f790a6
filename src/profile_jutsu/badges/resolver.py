import asyncio
from collections.abc import Mapping
from logging import Logger, getLogger
from typing import Any

from pydantic import ValidationError

from profile_jutsu.badges.extract import parse_badge
from profile_jutsu.badges.prompts import build_badge_prompt
from profile_jutsu.badges.providers.base import DEFAULT_TEMPERATURE, BadgeProvider
from profile_jutsu.config import DEFAULT_REQUEST_TIMEOUT
from profile_jutsu.errors import BadgeError, BadgeInputError, BadgeTimeoutError
from profile_jutsu.models.badge import AnimeBadge
from profile_jutsu.models.github import UserProfile

ACTION = "Text generation"


def validate_profile(profile: UserProfile | Mapping[str, Any]) -> UserProfile:
    """Coerce the input into a UserProfile or raise BadgeInputError describing what is wrong."""

    if isinstance(profile, UserProfile):
        return profile

    if not isinstance(profile, Mapping):  # pyright: ignore[reportUnnecessaryIsInstance]
        raise BadgeInputError(field="profile", message=f"expected a user profile, got {type(profile).__name__}.")

    user: Any = profile.get("user")  # pyright: ignore[reportAny]
    if not isinstance(user, Mapping) or not user.get("login"):  # pyright: ignore[reportUnknownMemberType]
        raise BadgeInputError(field="user.login", message="a non-empty user login is required.")

    repos: Any = profile.get("repos", [])  # pyright: ignore[reportAny]
    if isinstance(repos, str | bytes | Mapping) or not isinstance(repos, list | tuple):
        raise BadgeInputError(field="repos", message="a sequence of repositories is required.")

    try:
        return UserProfile.model_validate(profile)
    except ValidationError as e:
        fields = sorted({".".join(str(part) for part in error["loc"]) for error in e.errors()})
        raise BadgeInputError(field=", ".join(fields), message="the profile does not match the expected shape.") from e


class BadgeResolver:
    provider: BadgeProvider
    timeout: float
    temperature: float
    logger: Logger

    def __init__(
        self,
        provider: BadgeProvider,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        temperature: float = DEFAULT_TEMPERATURE,
        logger: Logger | None = None,
    ):
        self.provider = provider
        self.timeout = timeout
        self.temperature = temperature
        self.logger = logger or getLogger(__name__)

    async def resolve_badge(self, profile: UserProfile | Mapping[str, Any]) -> AnimeBadge:
        """Ask the provider for the anime character that best fits the profile.

        A single attempt is made. The call is cancelled if it does not finish within the timeout.

        Raises:
            BadgeInputError: If the profile is malformed. No request is made.
            BadgeTimeoutError: If the provider does not answer in time.
            BadgeUpstreamError: If the provider answers with a non-success status.
            MalformedResponseError: If the answer is not a badge object.
            IncompleteResponseError: If the badge object is missing required fields.
        """

        user_profile = validate_profile(profile)

        prompt = build_badge_prompt(user_profile)

        self.logger.info(f"Resolving badge for {user_profile.user.login} with a prompt of {len(prompt) // 4} tokens.")

        try:
            async with asyncio.timeout(self.timeout):
                text = await self.provider.complete(prompt, temperature=self.temperature)
        except TimeoutError as e:
            self.logger.warning(f"Badge request for {user_profile.user.login} timed out after {self.timeout}s")
            raise BadgeTimeoutError(action=ACTION, timeout=self.timeout) from e
        except BadgeError as e:
            self.logger.warning(f"Badge request for {user_profile.user.login} failed: {e}")
            raise

        try:
            badge = parse_badge(text)
        except BadgeError as e:
            self.logger.warning(f"Badge response for {user_profile.user.login} was rejected: {e}")
            raise

        self.logger.info(f"Assigned {badge.character_name} ({badge.anime}) to {user_profile.user.login}")

        return badge
