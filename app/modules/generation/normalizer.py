"""Extract a JSON object from free-form model output.

Models are told not to wrap their answer, but they still do it often enough:
code fences around the payload, a sentence of prose before or after it. The
normalizer strips a fence around the payload, then takes the first balanced
``{...}`` span that parses to an object. It does not try to repair broken JSON.
"""

from __future__ import annotations

import json
import re
from typing import Any, Iterator, Optional

from app.core.logging import get_logger
from app.modules.generation.errors import NormalizationFailed

logger = get_logger(__name__)

# Only a fence opening the payload and one closing it; markers inside JSON
# string values are content.
_OPEN_FENCE_RE = re.compile(r"^\s*```[\w+-]*[ \t]*\n?")
_CLOSE_FENCE_RE = re.compile(r"\n?[ \t]*```\s*$")


def strip_fences(text: str) -> str:
    return _CLOSE_FENCE_RE.sub("", _OPEN_FENCE_RE.sub("", text, count=1), count=1).strip()


def _closing_brace(text: str, start: int) -> Optional[int]:
    """Index of the brace closing ``text[start]``, skipping string literals."""
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
    return None


def _balanced_spans(text: str) -> Iterator[str]:
    start = text.find("{")
    while start != -1:
        end = _closing_brace(text, start)
        if end is not None:
            yield text[start : end + 1]
        start = text.find("{", start + 1)


def _first_object(text: str) -> Optional[tuple[str, dict[str, Any]]]:
    for span in _balanced_spans(text):
        try:
            parsed = json.loads(span)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return span, parsed
    return None


def find_json_object(text: str) -> Optional[str]:
    """Return the first balanced ``{...}`` substring that parses to an object."""
    found = _first_object(text)
    return found[0] if found else None


def normalize(text: str) -> dict[str, Any]:
    """Turn raw model text into a parsed JSON object.

    Balanced ``{...}`` spans are tried in order and the first one that parses
    to an object wins. When none does, the whole cleaned text is parsed so
    that the failure reason reflects what the model actually sent.

    Raises:
        NormalizationFailed: with reason ``parse_failed`` when nothing parses,
            or ``not_an_object`` when the payload parses to a non-object.
    """
    text = text or ""
    cleaned = strip_fences(text)
    found = _first_object(cleaned)
    if found is not None:
        return found[1]

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.warning("Model output did not parse as JSON: %s | text=%r", e, text[:500])
        raise NormalizationFailed(NormalizationFailed.PARSE_FAILED, text) from e

    if not isinstance(parsed, dict):
        logger.warning("Model output parsed to %s, expected object", type(parsed).__name__)
        raise NormalizationFailed(NormalizationFailed.NOT_AN_OBJECT, text)
    return parsed
