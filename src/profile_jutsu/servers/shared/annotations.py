from typing import Annotated

from pydantic import Field

USERNAME_DESCRIPTION = "The GitHub username (login) to analyze."
USERNAME = Annotated[str, Field(description=USERNAME_DESCRIPTION)]

BADGE_DESCRIPTION = "An anime badge previously returned by `get_anime_badge`."
