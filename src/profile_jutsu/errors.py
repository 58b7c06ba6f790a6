import re

ExtraInfoType = dict[str, str | None]

REDACTED = "[REDACTED]"

SECRET_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"(?i)(bearer\s+)[A-Za-z0-9._~+/=\-]+"),
    re.compile(r"\bsk-[A-Za-z0-9_\-]{8,}"),
    re.compile(r"\bgh[pousr]_[A-Za-z0-9]{16,}"),
    re.compile(r"\bAIza[0-9A-Za-z_\-]{20,}"),
]


def redact_secrets(text: str) -> str:
    """Replace bearer tokens and API-key shaped substrings with a redaction marker."""

    for pattern in SECRET_PATTERNS:
        text = pattern.sub(lambda match: (match.group(1) if match.groups() else "") + REDACTED, text)

    return text


class MissingConfigurationError(ValueError):
    """A required setting is missing. Raised unwrapped so the operator sees the exact setting."""

    def __init__(self, *env_vars: str):
        self.env_vars: tuple[str, ...] = env_vars
        super().__init__(" or ".join(env_vars) + " must be set")


class ProfileJutsuError(Exception):
    """An error from the Profile Jutsu pipeline."""

    def __init__(self, message: str, extra_info: ExtraInfoType | None = None):
        msg = message
        if extra_info:
            msg += " (" + ", ".join([f"{key}: {value}" for key, value in extra_info.items() if value is not None]) + ")"
        super().__init__(redact_secrets(msg))


class UpstreamError(ProfileJutsuError):
    """An upstream API answered with a non-success status or could not be reached."""

    def __init__(self, action: str, status: int | None = None, body: str | None = None, extra_info: ExtraInfoType | None = None):
        self.status: int | None = status
        self.body: str | None = redact_secrets(body) if body else body
        if not extra_info:
            extra_info = {}
        super().__init__(
            message=f"{action} failed with status {status}." if status is not None else f"{action} failed to reach the upstream.",
            extra_info={"status": str(status) if status is not None else None, **extra_info, "body": self.body},
        )


class RequestTimeoutError(ProfileJutsuError):
    """An upstream API did not answer within the configured window."""

    def __init__(self, action: str, timeout: float | None = None):
        self.timeout: float | None = timeout
        super().__init__(message=f"{action} timed out.", extra_info={"timeout": f"{timeout}s" if timeout is not None else None})


class InvalidInputError(ProfileJutsuError):
    """The caller provided malformed input."""

    def __init__(self, field: str, message: str):
        self.field: str = field
        super().__init__(message=f"Invalid input for {field}: {message}")


# Profile Fetcher


class ProfileError(ProfileJutsuError):
    """A failure fetching a GitHub profile."""


class UserNotFoundError(ProfileError):
    """The GitHub user does not exist."""

    def __init__(self, username: str):
        self.username: str = username
        super().__init__(message=f"GitHub user not found: {username}.")


class RateLimitedError(ProfileError):
    """The GitHub API quota is exhausted."""

    def __init__(self, retry_after: float | None = None):
        self.retry_after: float | None = retry_after
        super().__init__(
            message="GitHub API rate limit exceeded. Please wait and try again later.",
            extra_info={"retry_after": f"{retry_after}s" if retry_after is not None else None},
        )


class ProfileUpstreamError(ProfileError, UpstreamError):
    """The GitHub API answered with a non-success status."""


class ProfileTimeoutError(ProfileError, RequestTimeoutError):
    """The GitHub API did not answer in time."""


# Badge Resolver


class BadgeError(ProfileJutsuError):
    """A failure resolving an anime badge."""


class BadgeInputError(BadgeError, InvalidInputError):
    """The profile handed to the badge resolver is malformed."""


class BadgeUpstreamError(BadgeError, UpstreamError):
    """The text-generation endpoint answered with a non-success status."""


class BadgeTimeoutError(BadgeError, RequestTimeoutError):
    """The text-generation endpoint did not answer in time."""


class MalformedResponseError(BadgeError):
    """The text-generation endpoint returned something that is not a badge object."""

    def __init__(self, reason: str | None = None):
        super().__init__(message="The AI returned an invalid response. Please try again.", extra_info={"reason": reason})


class IncompleteResponseError(BadgeError):
    """The badge object returned by the text-generation endpoint is missing required fields."""

    def __init__(self, missing_fields: list[str]):
        self.missing_fields: list[str] = missing_fields
        super().__init__(message="The AI response is missing required fields: " + ", ".join(missing_fields) + ".")


# Image Generator


class AvatarError(ProfileJutsuError):
    """A failure generating an avatar image."""


class AvatarUpstreamError(AvatarError, UpstreamError):
    """The image-generation endpoint answered with a non-success status."""


class AvatarTimeoutError(AvatarError, RequestTimeoutError):
    """The image-generation endpoint did not answer in time."""


class NoImageReturnedError(AvatarError):
    """The image-generation endpoint answered without an image."""

    def __init__(self):
        super().__init__(message="The image model did not return an image. Please try again.")
