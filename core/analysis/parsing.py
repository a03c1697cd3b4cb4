"""LLM response parsing utilities."""

import json
from typing import Any

from .errors import MalformedResponseError


def strip_code_fences(content: str) -> str:
    """Remove a surrounding Markdown code block (```json ... ``` or ``` ... ```)."""
    content = content.strip()

    if "```json" in content:
        content = content.split("```json", 1)[1].split("```", 1)[0]
    elif content.startswith("```"):
        lines = content.split("\n")[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        content = "\n".join(lines)

    return content.strip()


def extract_json_object(content: str, provider: str | None = None) -> dict[str, Any]:
    """Parse an LLM response into a JSON object.

    Raises:
        MalformedResponseError: If the text is not JSON or not a JSON object
    """
    cleaned = strip_code_fences(content)
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(
            f"Invalid JSON response: {e.msg} at position {e.pos}", provider=provider
        ) from e
    except ValueError as e:
        # Integer literals past the int digit limit
        raise MalformedResponseError(f"Invalid JSON response: {e}", provider=provider) from e

    if not isinstance(parsed, dict):
        raise MalformedResponseError(
            f"Expected a JSON object, got {type(parsed).__name__}", provider=provider
        )
    return parsed
