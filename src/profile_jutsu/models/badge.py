import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from profile_jutsu.models.github import UserProfile

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"

SHORT_HEX_COLOR = re.compile(r"^#([0-9A-Fa-f])([0-9A-Fa-f])([0-9A-Fa-f])$")


class AnimeBadge(BaseModel):
    """The anime character persona assigned to a GitHub profile."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, str_strip_whitespace=True)

    character_name: str = Field(alias="characterName", min_length=1, description="The name of the character.")
    anime: str = Field(min_length=1, description="The series the character is from, usually Naruto or Demon Slayer.")
    reason: str = Field(min_length=1, description="A short explanation of why the character fits the profile.")
    badge_color: str = Field(alias="badgeColor", pattern=HEX_COLOR_PATTERN, description="A hex color that represents the character.")

    @field_validator("badge_color", mode="before")
    @classmethod
    def expand_short_hex(cls, value: Any) -> Any:  # pyright: ignore[reportAny]
        if isinstance(value, str) and (match := SHORT_HEX_COLOR.match(value.strip())):
            return "#" + "".join(channel * 2 for channel in match.groups())
        return value

    def to_wire(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)


class ProfileBadgeResult(BaseModel):
    """The outcome of one end-to-end run of the pipeline."""

    model_config = ConfigDict(frozen=True)

    profile: UserProfile = Field(description="The fetched GitHub profile.")
    badge: AnimeBadge = Field(description="The assigned anime badge.")
    avatar: str | None = Field(default=None, description="An image URL or data URL for the character, if avatars are enabled.")
