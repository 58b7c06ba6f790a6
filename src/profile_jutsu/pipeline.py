from logging import Logger
from typing import Self

from fastmcp.utilities.logging import get_logger

from profile_jutsu.avatars.source import AvatarSource, get_avatar_source
from profile_jutsu.badges.handler import get_badge_provider
from profile_jutsu.badges.resolver import BadgeResolver
from profile_jutsu.clients.github import GitHubProfileClient
from profile_jutsu.config import Settings
from profile_jutsu.errors import InvalidInputError
from profile_jutsu.models.badge import ProfileBadgeResult


class ProfileJutsuPipeline:
    """Fetches a profile, assigns it a badge and acquires an avatar, one step after the other."""

    profile_client: GitHubProfileClient
    badge_resolver: BadgeResolver
    avatar_source: AvatarSource | None
    logger: Logger

    def __init__(
        self,
        profile_client: GitHubProfileClient,
        badge_resolver: BadgeResolver,
        avatar_source: AvatarSource | None = None,
        logger: Logger | None = None,
    ):
        self.profile_client = profile_client
        self.badge_resolver = badge_resolver
        self.avatar_source = avatar_source
        self.logger = logger or get_logger(name=__name__)

    @classmethod
    def from_settings(cls, settings: Settings | None = None, logger: Logger | None = None) -> Self:
        settings = settings or Settings.from_env()

        return cls(
            profile_client=GitHubProfileClient(settings=settings),
            badge_resolver=BadgeResolver(provider=get_badge_provider(settings), timeout=settings.request_timeout),
            avatar_source=get_avatar_source(settings),
            logger=logger,
        )

    async def run(self, username: str) -> ProfileBadgeResult:
        """Run the whole pipeline for a GitHub username.

        Errors from the profile fetch, the badge request and avatar generation propagate unchanged.
        Avatar lookup never fails."""

        if not username or not username.strip():
            raise InvalidInputError(field="username", message="Please enter a GitHub username.")

        profile = await self.profile_client.fetch_profile(username)

        badge = await self.badge_resolver.resolve_badge(profile)

        avatar: str | None = None
        if self.avatar_source is not None:
            avatar = await self.avatar_source.get_avatar(badge)

        self.logger.info(f"Summoned {badge.character_name} for {profile.user.login}")

        return ProfileBadgeResult(profile=profile, badge=badge, avatar=avatar)
