from pydantic import BaseModel, Field

from profile_jutsu.models.github import GithubRepo, UserProfile

DEFAULT_BIO_LENGTH = 300
DEFAULT_DESCRIPTION_LENGTH = 200
DEFAULT_TOPICS_LIMIT = 3
DEFAULT_REPOS_LIMIT = 10

TRUNCATION_MARKER = "..."


class PromptSection(BaseModel):
    title: str = Field(description="The title of the section.")
    level: int = Field(default=1, description="The level of the section.")
    section: str = Field(description="The section of the prompt.")

    def render_text(self) -> str:
        return f"{'#' * self.level} {self.title}\n{self.section.strip()}"


def truncate(text: str | None, max_length: int) -> str | None:
    """Trim the text to at most max_length characters, marking the cut."""

    if text is None:
        return None

    text = " ".join(text.split())

    if len(text) <= max_length:
        return text

    return text[: max_length - len(TRUNCATION_MARKER)].rstrip() + TRUNCATION_MARKER


class RepositorySummary(BaseModel):
    name: str
    description: str | None
    language: str | None
    stars: int
    forks: int
    topics: list[str]

    @classmethod
    def from_repo(cls, repo: GithubRepo, description_length: int = DEFAULT_DESCRIPTION_LENGTH, topics_limit: int = DEFAULT_TOPICS_LIMIT):
        return cls(
            name=repo.name,
            description=truncate(repo.description, description_length),
            language=repo.language,
            stars=repo.stargazers_count,
            forks=repo.forks_count,
            topics=list(repo.topics[:topics_limit]),
        )


class ProfileSummary(BaseModel):
    """The compact view of a profile that is shown to the model."""

    name: str | None
    login: str
    bio: str | None
    top_repos: list[RepositorySummary]

    @classmethod
    def from_profile(
        cls,
        profile: UserProfile,
        bio_length: int = DEFAULT_BIO_LENGTH,
        description_length: int = DEFAULT_DESCRIPTION_LENGTH,
        repos_limit: int = DEFAULT_REPOS_LIMIT,
    ):
        return cls(
            name=profile.user.name,
            login=profile.user.login,
            bio=truncate(profile.user.bio, bio_length),
            top_repos=[RepositorySummary.from_repo(repo, description_length=description_length) for repo in profile.repos[:repos_limit]],
        )


WHO_YOU_ARE = PromptSection(
    title="Who you are",
    section="""
You are an expert GitHub profile analyst with a deep love for anime, specifically Naruto and Demon Slayer. Your task is to
analyze the provided GitHub user's profile and their top repositories to assign them a character from either Naruto or
Demon Slayer that best represents their coding style, impact, and overall persona.
""",
)

WHAT_TO_ANALYZE = PromptSection(
    title="What to analyze",
    section="""
- **Overall Theme:** Do their repos have a common theme (e.g., building foundational tools, creating beautiful UIs, data
  science, system-level programming)?
- **Primary Languages:** What do their most-used languages say about them (e.g., Rust for safety, Python for versatility,
  C for performance)?
- **Impact (Stars/Forks):** Is this user highly influential like a Kage or a Hashira, creating projects that many others
  rely on? Or are they a specialist with niche but powerful skills?
- **Bio/Persona:** Does their bio give any clues to their personality?

Based on your holistic analysis, choose a single character. Be creative and insightful.
""",
)

RESPONSE_FORMAT = PromptSection(
    title="Response Format",
    section="""
Your output MUST be a single, valid JSON object with NO markdown formatting and no text before or after it, matching
this exact structure:

{
  "characterName": "string",
  "anime": "Naruto" | "Demon Slayer",
  "reason": "string (A creative, short explanation for your choice, max 2-3 sentences, explaining the connection to their code/profile)",
  "badgeColor": "string (A hex color code that represents the character, e.g., '#FF7F00' for Naruto, '#107C80' for Tanjiro)"
}
""",
)


def build_profile_section(summary: ProfileSummary) -> PromptSection:
    return PromptSection(
        title="User Profile Data",
        section=f"```json\n{summary.model_dump_json(indent=2)}\n```",
    )


def build_badge_prompt(profile: UserProfile, repos_limit: int = DEFAULT_REPOS_LIMIT) -> str:
    """Build the instruction that asks the model to assign an anime character to the profile."""

    summary = ProfileSummary.from_profile(profile=profile, repos_limit=repos_limit)

    sections = [WHO_YOU_ARE, WHAT_TO_ANALYZE, build_profile_section(summary), RESPONSE_FORMAT]

    return "\n\n".join(section.render_text() for section in sections)
