"""Turns the analyzer's raw reply into a validated TraceDocument."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from .errors import MalformedTraceError
from .trace_types import TraceDocument

logger = logging.getLogger(__name__)


def _strip_markdown_fences(text: str) -> str:
    """Remove markdown code fences from LLM response text."""
    text = text.strip()
    if text.startswith("```"):
        first_newline = text.find("\n")
        text = text[first_newline + 1 :] if first_newline != -1 else text[3:]
    if text.endswith("```"):
        text = text[: text.rfind("```")]
    return text.strip()


def _repair_json(text: str) -> str:
    """Attempt to repair common JSON issues in an LLM reply.

    Fixes: JS-style // comments, trailing commas before ] or },
    and prose before or after the outermost JSON object.
    """
    text = re.sub(r"(?m)^\s*//[^\n]*", "", text)
    text = re.sub(r",\s*([}\]])", r"\1", text)

    start = text.find("{")
    if start == -1:
        return text

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
                return text[start : i + 1]

    logger.warning("JSON object appears truncated; leaving it for the decoder")
    return text[start:]


def _decode(raw_text: str) -> Any:
    cleaned = _strip_markdown_fences(raw_text)
    # ValueError includes oversized integer literals; RecursionError is
    # raised for nesting deeper than the decoder can follow.
    try:
        return json.loads(cleaned)
    except (ValueError, RecursionError):
        logger.warning("Initial JSON parse failed, attempting repair")
    repaired = _repair_json(cleaned)
    try:
        return json.loads(repaired)
    except (ValueError, RecursionError) as exc:
        logger.error("JSON repair also failed. Raw response:\n%s", raw_text[:2000])
        raise MalformedTraceError(
            f"Failed to parse analyzer response as JSON: {exc}"
        ) from exc


def build_document(data: Any) -> TraceDocument:
    """Map decoded JSON to a TraceDocument without judging its usability."""
    if not isinstance(data, dict):
        raise MalformedTraceError(
            f"Expected a JSON object, got {type(data).__name__}"
        )
    try:
        return TraceDocument.model_validate(data)
    except ValidationError as exc:
        raise MalformedTraceError(
            f"Analyzer response does not match the trace shape: "
            f"{exc.error_count()} problem(s), first at "
            f"{'.'.join(str(p) for p in exc.errors()[0]['loc'])}"
        ) from exc


def validate_trace(document: TraceDocument) -> TraceDocument:
    """Reject documents that cannot be played.

    - An ``error`` field means the rest of the document is unusable.
    - Zero steps without an error is a contract violation.
    """
    if document.has_error:
        raise MalformedTraceError(document.error)
    if not document.steps:
        raise MalformedTraceError("Analyzer returned a trace with no steps")
    return document


def parse_trace_response(raw_text: str) -> TraceDocument:
    """Parse and validate the analyzer's raw text reply."""
    document = build_document(_decode(raw_text))
    return validate_trace(document)


def load_trace_file(path: str) -> TraceDocument:
    """Read a saved analyzer reply from disk and validate it."""
    with open(path, encoding="utf-8") as f:
        return parse_trace_response(f.read())
