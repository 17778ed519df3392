import json
import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

PARSE_FAILURE_TITLE = "Error: AI Response Parsing Failed"
PREVIEW_MAX_CHARS = 300

# ```json ... ``` 또는 ``` ... ``` 전체를 감싼 경우만 매칭
_FENCE_RE = re.compile(r"^```(\w*)?\s*\n?(.*?)\n?\s*```$", re.DOTALL)


def extract_fenced_payload(text: str) -> str:
    """Return the interior of a fenced block spanning the whole text, else the trimmed text."""
    candidate = (text or "").strip()
    m = _FENCE_RE.match(candidate)
    if m and m.group(2):
        return m.group(2).strip()
    return candidate


def decode_json(candidate: str) -> Any:
    return json.loads(candidate)


def parse_failure_envelope(raw: str) -> dict:
    preview = (raw or "")[:PREVIEW_MAX_CHARS]
    return {
        "error": (
            "Failed to parse AI response. Raw text might be incomplete or not valid JSON. "
            f"Preview: {preview}"
        ),
        "pathTitle": PARSE_FAILURE_TITLE,
        "phases": [],
    }


def is_parse_failure(obj: Any) -> bool:
    return isinstance(obj, dict) and obj.get("pathTitle") == PARSE_FAILURE_TITLE


def parse_model_json(raw: str) -> Any:
    """Decode model text that may be wrapped in a markdown fence.

    Never raises: undecodable text yields the parse-failure envelope, which has
    the same shape as a learning path response.
    """
    candidate = extract_fenced_payload(raw)
    try:
        return decode_json(candidate)
    except json.JSONDecodeError as exc:
        logger.error("Failed to parse JSON from model response: %s (raw preview: %r)",
                     exc, (raw or "")[:PREVIEW_MAX_CHARS])
        return parse_failure_envelope(raw)
