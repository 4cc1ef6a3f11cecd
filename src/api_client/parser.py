"""
Response parsing for the generation service.

No I/O occurs here; all functions are pure transformations of strings/dicts
to support easy unit testing.  The expected model payload is::

    {"answers": [{"q": "question", "a": "answer", "type": "mcq"}, ...]}

optionally wrapped in Markdown code fences or surrounded by stray prose.
"""

from __future__ import annotations

import json
import re

from .errors import ServiceError
from .models import RawAnswer

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


def extract_response_text(response_json: dict) -> str | None:
    """
    Return the first candidate's first text part, or ``None`` if absent.

    Gemini shape: ``candidates[0].content.parts[0].text``.  Any missing link
    in that chain yields ``None`` rather than an error; a batch may
    legitimately produce nothing.
    """
    candidates = response_json.get("candidates") or []
    if not candidates or not isinstance(candidates[0], dict):
        return None

    parts = (candidates[0].get("content") or {}).get("parts") or []
    if not parts or not isinstance(parts[0], dict):
        return None

    text = parts[0].get("text")
    return text if isinstance(text, str) and text else None


def detect_safety_block(response_json: dict) -> str | None:
    """
    Return a description of a content-safety block, or ``None``.

    Checks ``promptFeedback.blockReason`` (the prompt itself was blocked)
    and a first candidate finishing with ``finishReason == "SAFETY"``.
    """
    feedback = response_json.get("promptFeedback") or {}
    reason = feedback.get("blockReason")
    if reason:
        return f"Request blocked by safety filter: {reason}"

    candidates = response_json.get("candidates") or []
    if candidates and isinstance(candidates[0], dict):
        if candidates[0].get("finishReason") == "SAFETY":
            return "Response blocked by safety filter"

    return None


def extract_error_message(error_json: object, status_code: int) -> str:
    """
    Pick the message for a non-2xx reply.

    Uses ``error.message`` from the structured error body when present,
    otherwise ``"HTTP <status>"``.
    """
    if isinstance(error_json, dict):
        error = error_json.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return f"HTTP {status_code}"


def strip_code_fences(content: str) -> str:
    """Remove every ```` ``` ```` / ```` ```json ```` marker and trim."""
    return _FENCE_RE.sub("", content).strip()


def extract_json_object(content: str) -> str | None:
    """Return the outermost ``{...}`` span of ``content``, or ``None``."""
    start = content.find("{")
    end = content.rfind("}")
    if start == -1 or end <= start:
        return None
    return content[start:end + 1]


def parse_structured_json(content: str) -> object:
    """
    Decode the model's text payload.

    Code fences are stripped first.  If the remainder is not valid JSON, the
    outermost brace-delimited span is tried before giving up.

    Raises:
        ServiceError: Neither the cleaned text nor the brace span decodes.
    """
    cleaned = strip_code_fences(content)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as exc:
        first_error = exc

    span = extract_json_object(cleaned)
    if span is not None:
        try:
            return json.loads(span)
        except json.JSONDecodeError:
            pass  # fall through to the original decode error

    raise ServiceError(
        f"Could not parse answers from model response: {first_error}",
        category=ServiceError.INVALID_RESPONSE,
    )


def _coerce_answer_value(value: object) -> str | tuple[str, ...]:
    if value is None or value is False or value == "":
        return ""
    if isinstance(value, list):
        return tuple(str(item) for item in value if item is not None)
    if isinstance(value, str):
        return value
    return str(value)


def to_raw_answer(entry: dict) -> RawAnswer:
    """
    Map one ``{"q", "a", "type"}`` entry to a RawAnswer.

    Missing ``q`` / ``a`` default to ``""``; ``type`` is passed through
    unvalidated (the matcher dispatches on the page's own question kind).
    """
    kind = entry.get("type")
    return RawAnswer(
        question_text=str(entry.get("q") or ""),
        answer_value=_coerce_answer_value(entry.get("a")),
        kind="" if kind is None else str(kind),
    )


def parse_answers(content: str) -> list[RawAnswer]:
    """
    Parse the model's text payload into RawAnswers.

    A payload that is not an object, or whose ``answers`` field is not a
    list, yields ``[]``; the instructions ask the model to omit answers it
    cannot give.  Entries that are not objects are skipped.

    Raises:
        ServiceError: The payload cannot be decoded as JSON.
    """
    parsed = parse_structured_json(content)
    if not isinstance(parsed, dict):
        return []

    entries = parsed.get("answers")
    if not isinstance(entries, list):
        return []

    return [to_raw_answer(entry) for entry in entries if isinstance(entry, dict)]


def parse_api_response(response_json: dict) -> list[RawAnswer]:
    """
    Parse a successful (2xx) service reply into RawAnswers.

    Raises:
        ServiceError: Safety block, or an undecodable text payload.
    """
    blocked = detect_safety_block(response_json)
    if blocked:
        raise ServiceError(blocked, category=ServiceError.SAFETY_BLOCK)

    content = extract_response_text(response_json)
    if content is None:
        return []

    return parse_answers(content)
