from logging import Logger
from typing import Annotated, Any

from fastmcp.server import FastMCP
from fastmcp.tools import Tool
from fastmcp.utilities.logging import get_logger
from pydantic import Field

from profile_jutsu.models.badge import AnimeBadge, ProfileBadgeResult
from profile_jutsu.models.github import UserProfile
from profile_jutsu.pipeline import ProfileJutsuPipeline
from profile_jutsu.servers.shared.annotations import BADGE_DESCRIPTION, USERNAME


class JutsuServer:
    """Exposes the profile badge pipeline as MCP tools."""

    pipeline: ProfileJutsuPipeline
    logger: Logger

    def __init__(self, pipeline: ProfileJutsuPipeline | None = None, logger: Logger | None = None):
        self.logger = logger or get_logger(name=__name__)
        self.pipeline = pipeline or ProfileJutsuPipeline.from_settings(logger=self.logger)

    def register_tools(self, fastmcp: FastMCP[Any]) -> FastMCP[Any]:
        _ = fastmcp.add_tool(tool=Tool.from_function(fn=self.get_user_profile))
        _ = fastmcp.add_tool(tool=Tool.from_function(fn=self.get_anime_badge))

        if self.pipeline.avatar_source is not None:
            _ = fastmcp.add_tool(tool=Tool.from_function(fn=self.get_avatar))

        _ = fastmcp.add_tool(tool=Tool.from_function(fn=self.summon_profile_badge))

        return fastmcp

    async def get_user_profile(self, username: USERNAME) -> UserProfile:
        """Get a GitHub user's public profile and their most starred repositories."""

        return await self.pipeline.profile_client.fetch_profile(username)

    async def get_anime_badge(self, username: USERNAME) -> AnimeBadge:
        """Assign a Naruto or Demon Slayer character to a GitHub user based on their profile and repositories."""

        profile = await self.pipeline.profile_client.fetch_profile(username)

        return await self.pipeline.badge_resolver.resolve_badge(profile)

    async def get_avatar(self, badge: Annotated[AnimeBadge, Field(description=BADGE_DESCRIPTION)]) -> str:
        """Get an avatar image (URL or data URL) for the character on an anime badge."""

        if self.pipeline.avatar_source is None:
            msg = "Avatars are disabled for this server."
            raise ValueError(msg)

        return await self.pipeline.avatar_source.get_avatar(badge)

    async def summon_profile_badge(self, username: USERNAME) -> ProfileBadgeResult:
        """Fetch a GitHub user's profile, assign them an anime character and acquire an avatar for it."""

        return await self.pipeline.run(username)
