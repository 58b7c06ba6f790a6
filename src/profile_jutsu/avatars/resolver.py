from abc import ABC, abstractmethod
from collections.abc import Sequence
from logging import Logger, getLogger
from typing import override

import httpx
from pydantic import BaseModel, Field, ValidationError

from profile_jutsu.avatars.catalog import CHARACTER_IMAGES, GLOBAL_DEFAULT_IMAGE, SERIES_DEFAULT_IMAGES
from profile_jutsu.config import DEFAULT_JIKAN_BASE_URL, DEFAULT_REQUEST_TIMEOUT, Settings
from profile_jutsu.errors import redact_secrets
from profile_jutsu.models.badge import AnimeBadge


class AvatarStrategy(ABC):
    """One tier of avatar resolution."""

    name: str

    @abstractmethod
    async def attempt(self, badge: AnimeBadge) -> str | None:
        """Return an image URL for the badge, or None to defer to the next tier."""
        ...


class StaticCharacterStrategy(AvatarStrategy):
    name: str = "static"

    def __init__(self, images: dict[str, str] | None = None):
        self.images: dict[str, str] = CHARACTER_IMAGES if images is None else images

    @override
    async def attempt(self, badge: AnimeBadge) -> str | None:
        return self.images.get(badge.character_name)


class JikanImage(BaseModel):
    image_url: str | None = None


class JikanImages(BaseModel):
    jpg: JikanImage | None = None


class JikanCharacter(BaseModel):
    images: JikanImages | None = None


class JikanCharacterSearch(BaseModel):
    data: list[JikanCharacter] = Field(default_factory=list)

    def first_image_url(self) -> str | None:
        for character in self.data:
            if character.images and character.images.jpg and character.images.jpg.image_url:
                return character.images.jpg.image_url
        return None


class CharacterSearchStrategy(AvatarStrategy):
    """Looks the character up on a Jikan-compatible character-search API. Failures defer to the next tier."""

    name: str = "search"

    def __init__(
        self,
        base_url: str = DEFAULT_JIKAN_BASE_URL,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
        logger: Logger | None = None,
    ):
        self.base_url: str = base_url.rstrip("/")
        self.timeout: float = timeout
        self.http_client: httpx.AsyncClient | None = http_client
        self.logger: Logger = logger or getLogger(__name__)

    async def _search(self, client: httpx.AsyncClient, query: str) -> str | None:
        response = await client.get(f"{self.base_url}/characters", params={"q": query, "limit": 1})
        _ = response.raise_for_status()
        return JikanCharacterSearch.model_validate_json(response.content).first_image_url()

    @override
    async def attempt(self, badge: AnimeBadge) -> str | None:
        query = f"{badge.character_name} {badge.anime}"

        try:
            if self.http_client is not None:
                return await self._search(self.http_client, query)

            async with httpx.AsyncClient(timeout=self.timeout) as client:
                return await self._search(client, query)
        except (httpx.HTTPError, ValidationError) as e:
            self.logger.warning(redact_secrets(f"Character search for {query!r} failed: {e}"))
            return None


class SeriesDefaultStrategy(AvatarStrategy):
    name: str = "series"

    def __init__(self, images: dict[str, str] | None = None):
        self.images: dict[str, str] = SERIES_DEFAULT_IMAGES if images is None else images

    @override
    async def attempt(self, badge: AnimeBadge) -> str | None:
        return self.images.get(badge.anime)


class GlobalDefaultStrategy(AvatarStrategy):
    name: str = "default"

    def __init__(self, image: str = GLOBAL_DEFAULT_IMAGE):
        self.image: str = image

    @override
    async def attempt(self, badge: AnimeBadge) -> str:
        return self.image


def default_strategies(settings: Settings | None = None) -> list[AvatarStrategy]:
    settings = settings or Settings.from_env()

    return [
        StaticCharacterStrategy(),
        CharacterSearchStrategy(base_url=settings.jikan_base_url, timeout=settings.request_timeout),
        SeriesDefaultStrategy(),
        GlobalDefaultStrategy(),
    ]


class AvatarResolver:
    """Resolves an avatar image URL by trying each strategy in order. Never raises."""

    strategies: list[AvatarStrategy]
    logger: Logger

    def __init__(self, strategies: Sequence[AvatarStrategy] | None = None, logger: Logger | None = None):
        self.strategies = list(strategies) if strategies is not None else default_strategies()
        self.logger = logger or getLogger(__name__)

    async def resolve_avatar(self, badge: AnimeBadge) -> str:
        for strategy in self.strategies:
            try:
                image = await strategy.attempt(badge)
            except Exception:
                # no tier may fail the resolver
                self.logger.exception(f"Avatar strategy {strategy.name} failed for {badge.character_name}")
                continue

            if image:
                self.logger.debug(f"Resolved avatar for {badge.character_name} using {strategy.name}")
                return image

        return GLOBAL_DEFAULT_IMAGE

    async def get_avatar(self, badge: AnimeBadge) -> str:
        return await self.resolve_avatar(badge)
