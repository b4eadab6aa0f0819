"""
Helpers for pulling structured data out of model text output.
"""
import json
import re
from typing import Any

import structlog

logger = structlog.get_logger(__name__)

# A single fenced block wrapping the whole reply, with or without a language tag
_FENCE_RE = re.compile(r"^```[a-zA-Z]*[ \t]*\n?(.*?)\n?[ \t]*```$", re.DOTALL)


def strip_code_fence(text: str) -> str:
    """Remove a Markdown code fence wrapping ``text``, if there is one."""
    stripped = text.strip()
    match = _FENCE_RE.match(stripped)
    if match:
        return match.group(1).strip()
    return stripped


def extract_json(text: str) -> Any:
    """
    Parse JSON from model output.

    Args:
        text: Raw model text, possibly wrapped in a ```json fence

    Returns:
        Parsed JSON value

    Raises:
        ValueError: If the text is not valid JSON after unwrapping
    """
    content = strip_code_fence(text)
    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        logger.warning("model_json_parse_failed", error=str(e), length=len(content))
        raise ValueError(f"Model output is not valid JSON: {e}") from e
