from typing import Protocol

from profile_jutsu.avatars.generator import ImageGenerator
from profile_jutsu.avatars.imagen import GoogleImagenGenerator
from profile_jutsu.avatars.resolver import AvatarResolver, default_strategies
from profile_jutsu.config import Settings
from profile_jutsu.models.badge import AnimeBadge


class AvatarSource(Protocol):
    """Anything that can turn a badge into an image reference."""

    async def get_avatar(self, badge: AnimeBadge) -> str: ...


def get_image_generator(settings: Settings) -> ImageGenerator | GoogleImagenGenerator:
    """Pick the image-generation backend. Credentials are checked when the generator is first used."""

    if settings.resolved_image_provider() == "google":
        return GoogleImagenGenerator(settings=settings)

    return ImageGenerator(settings=settings)


def get_avatar_source(settings: Settings) -> AvatarSource | None:
    """Return the avatar acquisition strategy chosen by the deployment, or None if avatars are disabled."""

    if settings.avatar_strategy == "generate":
        return get_image_generator(settings)

    if settings.avatar_strategy == "lookup":
        return AvatarResolver(strategies=default_strategies(settings))

    return None
