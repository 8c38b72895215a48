"""
JSON extraction from free-text completions.

Models wrap their JSON in prose and code fences. The extractor takes the
first opening bracket of the requested shape and the *last* matching closing
bracket in the text and parses everything between them. Prose and code
fences around a single value are tolerated; a reply holding two top-level
values, or a stray closing bracket after the real JSON, fails to parse.
"""
import json
import logging
from typing import Any

from .exceptions import MalformedJson, NoJsonFound

logger = logging.getLogger(__name__)


SHAPE_DELIMITERS = {
    "object": ("{", "}"),
    "array": ("[", "]"),
}


def extract_json(raw_text: str, shape: str = "object") -> Any:
    """
    Return the JSON value of ``shape`` embedded in ``raw_text``.

    Raises:
        NoJsonFound: no opening/closing pair for the shape exists.
        MalformedJson: the delimited substring is not valid JSON.
    """
    try:
        opening, closing = SHAPE_DELIMITERS[shape]
    except KeyError:
        raise ValueError(f"Unknown JSON shape '{shape}'. Expected 'object' or 'array'.")

    text = raw_text or ""
    start = text.find(opening)
    end = text.rfind(closing)
    if start == -1 or end == -1 or end < start:
        logger.warning("No JSON %s found in completion (%d chars)", shape, len(text))
        raise NoJsonFound()

    if start > 0:
        logger.debug("Stripping non-JSON prefix: %s", text[:start][:100])

    candidate = text[start : end + 1]
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as exc:
        logger.warning(
            "JSON decode error at line %s col %s: %s. Payload preview: %s",
            exc.lineno, exc.colno, exc.msg, candidate[:500],
        )
        raise MalformedJson() from exc
    except RecursionError as exc:
        logger.warning("JSON %s nested too deeply to decode (%d chars)", shape, len(candidate))
        raise MalformedJson() from exc

    if not parsed:
        logger.warning("Completion contained an empty JSON %s", shape)
    return parsed
