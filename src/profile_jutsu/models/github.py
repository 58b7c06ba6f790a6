from pydantic import BaseModel, ConfigDict, Field, field_validator


class GithubUser(BaseModel):
    """A GitHub user, as returned by `GET /users/{username}`."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    login: str = Field(min_length=1, description="The login of the user.")
    id: int = Field(description="The numeric id of the user.")
    avatar_url: str = Field(description="The URL of the user's avatar.")
    html_url: str = Field(description="The URL of the user's profile page.")
    name: str | None = Field(default=None, description="The display name of the user.")
    bio: str | None = Field(default=None, description="The bio of the user.")
    public_repos: int = Field(default=0, description="The number of public repositories the user owns.")
    followers: int = Field(default=0, description="The number of followers the user has.")


class GithubRepo(BaseModel):
    """A GitHub repository, as returned by `GET /users/{username}/repos`."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: int = Field(description="The numeric id of the repository.")
    name: str = Field(description="The name of the repository.")
    full_name: str = Field(description="The owner/name of the repository.")
    description: str | None = Field(default=None, description="The description of the repository.")
    stargazers_count: int = Field(default=0, description="The number of stars the repository has.")
    forks_count: int = Field(default=0, description="The number of forks the repository has.")
    language: str | None = Field(default=None, description="The primary language of the repository.")
    html_url: str = Field(description="The URL of the repository.")
    topics: tuple[str, ...] = Field(default=(), description="The topics of the repository.")

    @field_validator("topics", mode="before")
    @classmethod
    def none_topics_to_empty(cls, value: object) -> object:
        return () if value is None else value


class UserProfile(BaseModel):
    """A snapshot of a GitHub user and their top repositories."""

    model_config = ConfigDict(frozen=True)

    user: GithubUser = Field(description="The user.")
    repos: tuple[GithubRepo, ...] = Field(default=(), description="The user's top repositories, most starred first.")
