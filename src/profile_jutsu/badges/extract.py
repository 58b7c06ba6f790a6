import json
import re
from typing import Any

from pydantic import ValidationError

from profile_jutsu.errors import IncompleteResponseError, MalformedResponseError
from profile_jutsu.models.badge import AnimeBadge

# The fence must wrap the entire text. DOTALL lets the payload span several lines.
CODE_FENCE_PATTERN = re.compile(r"^```(?:json)?[ \t]*\n?(.*?)\n?[ \t]*```$", re.DOTALL | re.IGNORECASE)

REQUIRED_FIELDS: dict[str, str] = {
    "characterName": "character_name",
    "anime": "anime",
    "reason": "reason",
    "badgeColor": "badge_color",
}


def strip_code_fence(text: str) -> str:
    """Unwrap a Markdown code fence that wraps the entire text, otherwise return the trimmed text.

    For example:
    ```json
    {"characterName": "Shikamaru Nara", ...}
    ```
    """

    text = text.strip()

    if match := CODE_FENCE_PATTERN.match(text):
        return match.group(1).strip()

    return text


def find_missing_fields(payload: dict[str, Any]) -> list[str]:
    """Return the wire names of required fields that are absent or empty."""

    missing: list[str] = []

    for wire_name, attribute_name in REQUIRED_FIELDS.items():
        value = payload.get(wire_name, payload.get(attribute_name))

        if isinstance(value, str):
            value = value.strip()

        if not value:
            missing.append(wire_name)

    return missing


def parse_badge(text: str) -> AnimeBadge:
    """Parse the text returned by a text-generation provider into an AnimeBadge.

    Raises:
        MalformedResponseError: If the text is not a JSON object or a field has the wrong shape.
        IncompleteResponseError: If a required field is absent or empty.
    """

    json_text = strip_code_fence(text)

    try:
        payload: Any = json.loads(json_text)  # pyright: ignore[reportAny]
    except ValueError as e:
        raise MalformedResponseError(reason="the response is not valid JSON") from e

    if not isinstance(payload, dict):
        raise MalformedResponseError(reason="the response is not a JSON object")

    if missing_fields := find_missing_fields(payload):  # pyright: ignore[reportUnknownArgumentType]
        raise IncompleteResponseError(missing_fields=missing_fields)

    try:
        return AnimeBadge.model_validate(payload)
    except ValidationError as e:
        invalid_fields = sorted({str(error["loc"][0]) for error in e.errors() if error["loc"]})
        raise MalformedResponseError(reason="invalid value for " + ", ".join(invalid_fields)) from e
