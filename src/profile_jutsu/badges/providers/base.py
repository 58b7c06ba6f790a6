from abc import ABC, abstractmethod

DEFAULT_TEMPERATURE = 0.8


class BadgeProvider(ABC):
    """A text-generation backend that can answer a badge prompt.

    Implementations send the prompt as the single user message, ask for JSON output when the
    backend supports it, and translate their transport failures into `BadgeUpstreamError` or
    `BadgeTimeoutError`. Parsing and validation of the returned text is shared by `BadgeResolver`.
    """

    name: str
    model: str

    @abstractmethod
    async def complete(self, prompt: str, temperature: float = DEFAULT_TEMPERATURE) -> str:
        """Return the raw text generated for the prompt."""
        ...
