import asyncio
import re
from collections.abc import Callable
from datetime import timedelta
from logging import Logger, getLogger
from typing import Any

from githubkit import GitHub as GitHubKit
from githubkit.auth.token import TokenAuthStrategy
from githubkit.exception import GitHubException as GitHubKitGitHubException
from githubkit.exception import PrimaryRateLimitExceeded as GitHubKitPrimaryRateLimitExceeded
from githubkit.exception import RequestFailed as GitHubKitRequestFailed
from githubkit.exception import RequestTimeout as GitHubKitRequestTimeout
from githubkit.exception import SecondaryRateLimitExceeded as GitHubKitSecondaryRateLimitExceeded
from githubkit.response import Response as GitHubKitResponse
from pydantic import ValidationError

from profile_jutsu.config import Settings
from profile_jutsu.errors import (
    InvalidInputError,
    ProfileTimeoutError,
    ProfileUpstreamError,
    RateLimitedError,
    UserNotFoundError,
    redact_secrets,
)
from profile_jutsu.models.github import GithubRepo, GithubUser, UserProfile

NOT_FOUND_ERROR = 404
RATE_LIMIT_STATUSES = {403, 429}
RATE_LIMIT_MARKER = "rate limit exceeded"

DEFAULT_TOP_REPOS_LIMIT = 10

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9_-]{0,38})$")


def get_githubkit_client(settings: Settings) -> GitHubKit[Any]:
    auth = TokenAuthStrategy(token=settings.github_token) if settings.github_token else None

    # Rate limits and server errors are surfaced to the caller rather than retried
    return GitHubKit(auth=auth, base_url=settings.github_base_url, timeout=settings.request_timeout, auto_retry=False)


def is_rate_limit_response(error: GitHubKitRequestFailed) -> bool:
    """Whether a failed response carries GitHub's rate limit marker in its `message` field."""

    if error.response.status_code not in RATE_LIMIT_STATUSES:
        return False

    try:
        payload: Any = error.response.json()  # pyright: ignore[reportAny]
    except ValueError:
        return False

    message = payload.get("message") if isinstance(payload, dict) else None  # pyright: ignore[reportUnknownMemberType]

    return isinstance(message, str) and RATE_LIMIT_MARKER in message.lower()


def retry_after_seconds(retry_after: timedelta | None) -> float | None:
    return retry_after.total_seconds() if retry_after is not None else None


def sort_by_stars(repos: list[GithubRepo], limit: int) -> tuple[GithubRepo, ...]:
    """Order repositories by stars, most starred first, keeping the upstream order for ties."""

    return tuple(sorted(repos, key=lambda repo: repo.stargazers_count, reverse=True)[:limit])


class GitHubProfileClient:
    githubkit_client: GitHubKit[Any]
    logger: Logger

    timeout: float

    log_requests: bool
    log_responses: bool
    log_on_error: bool

    def __init__(
        self,
        settings: Settings | None = None,
        githubkit_client: GitHubKit[Any] | None = None,
        logger: Logger | None = None,
        log_requests: bool = True,
        log_responses: bool = False,
        log_on_error: bool = True,
    ):
        settings = settings or Settings.from_env()
        self.githubkit_client = githubkit_client or get_githubkit_client(settings=settings)
        self.timeout = settings.request_timeout
        self.logger = logger or getLogger(__name__)
        self.log_requests = log_requests
        self.log_responses = log_responses
        self.log_on_error = log_on_error

    def _get_loggers(self) -> tuple[Callable[[str], Any], Callable[[str], Any], Callable[[str], Any]]:
        request_logger = self.logger.info if self.log_requests else self.logger.debug
        response_logger = self.logger.info if self.log_responses else self.logger.debug
        error_logger = self.logger.warning if self.log_on_error else self.logger.debug
        return request_logger, response_logger, error_logger

    async def _perform_rest_request[T](
        self,
        action: str,
        url: str,
        response_model: type[T],
        username: str,
        params: dict[str, str | int] | None = None,
    ) -> T:
        """Perform a GET request against the GitHub REST API and parse the response.

        Args:
            action: The action being performed.
            url: The path to request, relative to the API base URL.
            response_model: The type to parse the response into.
            username: The user the request is about, used for not found errors.
            params: Query parameters.

        Raises:
            UserNotFoundError: If the upstream answers 404.
            RateLimitedError: If the upstream quota is exhausted.
            ProfileTimeoutError: If the request times out.
            ProfileUpstreamError: If the request fails for any other reason.
        """

        request_logger, response_logger, error_logger = self._get_loggers()

        request_logger(f"Performing {action} for {username} with params {params}")

        try:
            response: GitHubKitResponse[T] = await self.githubkit_client.arequest(
                "GET",
                url,
                params=params,
                response_model=response_model,
            )
            parsed: T = response.parsed_data
        except (GitHubKitPrimaryRateLimitExceeded, GitHubKitSecondaryRateLimitExceeded) as e:
            error_logger(f"Rate limit exceeded performing {action} for {username}")
            raise RateLimitedError(retry_after=retry_after_seconds(e.retry_after)) from e
        except GitHubKitRequestFailed as e:
            if e.response.status_code == NOT_FOUND_ERROR:
                raise UserNotFoundError(username=username) from e

            if is_rate_limit_response(e):
                error_logger(f"Rate limit exceeded performing {action} for {username}")
                raise RateLimitedError() from e

            error_logger(redact_secrets(f"Request failed performing {action} for {username}: {e}"))
            raise ProfileUpstreamError(action=action, status=e.response.status_code, body=e.response.text) from e
        except GitHubKitRequestTimeout as e:
            error_logger(f"Timed out performing {action} for {username}")
            raise ProfileTimeoutError(action=action, timeout=self.timeout) from e
        except GitHubKitGitHubException as e:
            error_logger(redact_secrets(f"Error performing {action} for {username}: {e}"))
            raise ProfileUpstreamError(action=action, body=str(e)) from e
        except ValidationError as e:
            error_logger(f"Unexpected response shape performing {action} for {username}")
            raise ProfileUpstreamError(action=action, status=response.status_code, body="unexpected response shape") from e

        response_logger(f"Completed {action} for {username}")

        return parsed

    async def get_user(self, username: str) -> GithubUser:
        """Get the public metadata of a GitHub user."""

        return await self._perform_rest_request(
            action="Get user",
            url=f"/users/{username}",
            response_model=GithubUser,
            username=username,
        )

    async def get_top_repositories(self, username: str, limit: int = DEFAULT_TOP_REPOS_LIMIT) -> tuple[GithubRepo, ...]:
        """Get the most starred repositories owned by a GitHub user."""

        repos: list[GithubRepo] = await self._perform_rest_request(
            action="Get repositories",
            url=f"/users/{username}/repos",
            response_model=list[GithubRepo],
            username=username,
            params={"type": "owner", "sort": "stars", "per_page": limit, "direction": "desc"},
        )

        return sort_by_stars(repos, limit=limit)

    async def fetch_profile(self, username: str, limit_repos: int = DEFAULT_TOP_REPOS_LIMIT) -> UserProfile:
        """Fetch a user and their top repositories concurrently.

        Both requests must succeed. If both fail, the error from the user lookup is raised so
        that a missing user is always reported as not found."""

        username = username.strip()

        if not USERNAME_PATTERN.match(username):
            raise InvalidInputError(field="username", message=f"{username!r} is not a valid GitHub username.")

        user_result, repos_result = await asyncio.gather(
            self.get_user(username=username),
            self.get_top_repositories(username=username, limit=limit_repos),
            return_exceptions=True,
        )

        if isinstance(user_result, BaseException):
            raise user_result

        if isinstance(repos_result, BaseException):
            if isinstance(repos_result, UserNotFoundError):
                raise ProfileUpstreamError(action="Get repositories", status=NOT_FOUND_ERROR) from repos_result
            raise repos_result

        return UserProfile(user=user_result, repos=repos_result)
