from logging import Logger, getLogger
from typing import override

from openai import APIConnectionError, APIStatusError, APITimeoutError, AsyncOpenAI, OpenAIError
from openai.types.chat import ChatCompletion

from profile_jutsu.badges.providers.base import DEFAULT_TEMPERATURE, BadgeProvider
from profile_jutsu.config import Settings
from profile_jutsu.errors import BadgeTimeoutError, BadgeUpstreamError, MalformedResponseError

ACTION = "Text generation"


def get_provenance_headers(settings: Settings) -> dict[str, str]:
    headers: dict[str, str] = {}

    if settings.openrouter_referer:
        headers["HTTP-Referer"] = settings.openrouter_referer

    if settings.openrouter_title:
        headers["X-Title"] = settings.openrouter_title

    return headers


class OpenRouterBadgeProvider(BadgeProvider):
    """Generates badges through an OpenAI-compatible chat completions endpoint (OpenRouter by default)."""

    name: str = "openrouter"

    def __init__(self, settings: Settings, client: AsyncOpenAI | None = None, logger: Logger | None = None):
        self.settings: Settings = settings
        self.model = settings.openrouter_model
        self.logger: Logger = logger or getLogger(__name__)
        self._client: AsyncOpenAI | None = client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.settings.require_openrouter_api_key(),
                base_url=self.settings.openrouter_base_url,
                timeout=self.settings.request_timeout,
                max_retries=0,
                default_headers=get_provenance_headers(self.settings),
            )

        return self._client

    @override
    async def complete(self, prompt: str, temperature: float = DEFAULT_TEMPERATURE) -> str:
        client = self.client

        self.logger.info(f"Requesting badge from {self.name} model {self.model}")

        try:
            completion: ChatCompletion = await client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=temperature,
                response_format={"type": "json_object"},
            )
        except APITimeoutError as e:
            raise BadgeTimeoutError(action=ACTION, timeout=self.settings.request_timeout) from e
        except APIStatusError as e:
            raise BadgeUpstreamError(action=ACTION, status=e.status_code, body=e.response.text) from e
        except APIConnectionError as e:
            raise BadgeUpstreamError(action=ACTION, body=str(e)) from e
        except OpenAIError as e:
            raise BadgeUpstreamError(action=ACTION, body=str(e)) from e

        # a 200 with a non-JSON body comes back as the raw text
        if not isinstance(completion, ChatCompletion):  # pyright: ignore[reportUnnecessaryIsInstance]
            raise MalformedResponseError(reason="the response is not a chat completion")

        if not completion.choices or not (content := completion.choices[0].message.content):
            raise MalformedResponseError(reason="the response has no content")

        return content
