from logging import Logger, getLogger
from typing import override

import httpx
from google.genai import Client as GoogleGenaiClient
from google.genai.errors import APIError as GoogleGenaiAPIError
from google.genai.types import Candidate, GenerateContentConfig, GenerateContentResponse, HttpOptions

from profile_jutsu.badges.providers.base import DEFAULT_TEMPERATURE, BadgeProvider
from profile_jutsu.config import Settings
from profile_jutsu.errors import BadgeTimeoutError, BadgeUpstreamError, MalformedResponseError

ACTION = "Text generation"


class GoogleGenaiBadgeProvider(BadgeProvider):
    """Generates badges through the Gemini API."""

    name: str = "google"

    def __init__(self, settings: Settings, client: GoogleGenaiClient | None = None, logger: Logger | None = None):
        self.settings: Settings = settings
        self.model = settings.google_model
        self.logger: Logger = logger or getLogger(__name__)
        self._client: GoogleGenaiClient | None = client

    @property
    def client(self) -> GoogleGenaiClient:
        if self._client is None:
            self._client = GoogleGenaiClient(
                api_key=self.settings.require_google_api_key(),
                http_options=HttpOptions(timeout=int(self.settings.request_timeout * 1000)),
            )

        return self._client

    @override
    async def complete(self, prompt: str, temperature: float = DEFAULT_TEMPERATURE) -> str:
        client = self.client

        self.logger.info(f"Requesting badge from {self.name} model {self.model}")

        try:
            response: GenerateContentResponse = await client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=GenerateContentConfig(
                    temperature=temperature,
                    response_mime_type="application/json",
                ),
            )
        except GoogleGenaiAPIError as e:
            raise BadgeUpstreamError(action=ACTION, status=e.code, body=e.message) from e
        except (httpx.TimeoutException, TimeoutError) as e:
            raise BadgeTimeoutError(action=ACTION, timeout=self.settings.request_timeout) from e
        except httpx.HTTPError as e:
            raise BadgeUpstreamError(action=ACTION, body=str(e)) from e
        except Exception as e:
            # other transports and response parsing raise outside the httpx hierarchy
            raise BadgeUpstreamError(action=ACTION, body=str(e)) from e

        if not (text := response.text):
            finish_reason = candidate.finish_reason if (candidate := get_candidate_from_response(response)) else None
            raise MalformedResponseError(reason=f"the response has no content, finish reason {finish_reason}")

        return text


def get_candidate_from_response(response: GenerateContentResponse) -> Candidate | None:
    if response.candidates and response.candidates[0]:
        return response.candidates[0]

    return None
