"""Best-effort repair of JSON objects returned by language models.

Models asked for "only JSON" still wrap it in ``` fences, prefix it with
prose, cut it off at the token limit, or leave a stray ``,}`` at the end.
``repair_json`` strips and patches the text syntactically and parses it;
it never tries to correct what the model actually said.
"""

from __future__ import annotations

import json
import logging
import re

from .errors import ParseFailure

logger = logging.getLogger(__name__)

MIN_RESPONSE_LENGTH = 10

_FENCE_PATTERN = re.compile(r"```[a-zA-Z]*")
# {"key":"value"},}  →  {"key":"value"}}
_TRAILER_PATTERN = re.compile(r"\}\s*,\s*\}\s*$")
_TRAILING_COMMA_PATTERN = re.compile(r",\s*([}\]])")


def strip_fences(text: str) -> str:
    return _FENCE_PATTERN.sub("", text).replace("```", "").strip()


def repair_json(text: str) -> dict:
    """Extract and parse the JSON object in a model response.

    Args:
        text: Raw completion text.

    Returns:
        The parsed object.

    Raises:
        ParseFailure: If no JSON object can be recovered.
    """
    cleaned = strip_fences(text or "")
    if len(cleaned) < MIN_RESPONSE_LENGTH:
        raise ParseFailure("response too short to contain a JSON object", cleaned)

    body = cleaned
    if not (body.startswith("{") and body.endswith("}")):
        start = body.find("{")
        if start == -1:
            raise ParseFailure("no JSON object found", cleaned)
        end = body.rfind("}")
        body = body[start:end + 1] if end > start else body[start:]

    if not body.endswith("}"):
        body += "}"

    body = _TRAILER_PATTERN.sub("}", body)
    body = _TRAILING_COMMA_PATTERN.sub(r"\1", body)

    try:
        return _loads_object(body)
    except (json.JSONDecodeError, ParseFailure) as exc:
        first_error = exc

    for attempt in (first_balanced_span(body), close_brackets(body)):
        if attempt is None or attempt == body:
            continue
        try:
            return _loads_object(_TRAILING_COMMA_PATTERN.sub(r"\1", attempt))
        except (json.JSONDecodeError, ParseFailure):
            continue

    logger.debug("JSON repair failed: %s", first_error)
    raise ParseFailure(str(first_error), body) from first_error


def _loads_object(text: str) -> dict:
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ParseFailure(f"expected a JSON object, got {type(data).__name__}", text)
    return data


def first_balanced_span(text: str) -> str | None:
    """Return the first complete {...} span, ignoring braces inside strings."""
    start = text.find("{")
    if start == -1:
        return None

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
                return text[start:i + 1]
    return None


def close_brackets(text: str) -> str:
    """Append the closers a truncated object is missing.

    Drops surplus closers, terminates an unfinished string and removes a
    dangling comma before closing.
    """
    out: list[str] = []
    stack: list[str] = []
    in_string = False
    escaped = False
    for ch in text:
        if in_string:
            out.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in "{[":
            stack.append("}" if ch == "{" else "]")
        elif ch in "}]":
            if not stack or stack[-1] != ch:
                continue
            stack.pop()
        out.append(ch)

    result = "".join(out)
    if in_string:
        result += '"'
    result = result.rstrip().rstrip(",")
    return result + "".join(reversed(stack))
