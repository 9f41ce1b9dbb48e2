"""
Completion parsing — multi-stage validation of untrusted model output.

Stages:
    1. Code fence stripping (```json ... ```)
    2. JSON parse
    3. Schema conformance (jsonschema)
    4. Model construction

Any failing stage degrades to "whole text is the body, empty subject".
Nothing here raises to the caller.
"""
import json
import logging
import re

from jsonschema import ValidationError, validate

from draftsplice.completion.errors import MalformedCompletionError
from draftsplice.config.constants import PLACEHOLDER_PATTERN
from draftsplice.config.schemas import COMPLETION_RESPONSE_SCHEMA
from draftsplice.config.settings import MAX_BODY_LOG_CHARS
from draftsplice.models.completion import CompletionResult
from draftsplice.observability.metrics import record_completion_fallback

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^\s*```(?:json)?\s*\n(?P<inner>[\s\S]*?)\n?```\s*$", re.IGNORECASE)
_PLACEHOLDER_RE = re.compile(PLACEHOLDER_PATTERN)


def parse_completion(raw_text: str) -> CompletionResult:
    """
    Turn raw model text into a CompletionResult.

    Args:
        raw_text: Text returned by the provider adapter.

    Returns:
        The parsed {subject, body} object, or {subject: "", body: raw_text}
        when the text is not the requested JSON object.
    """
    raw_text = raw_text or ""
    try:
        return _parse_strict(raw_text)
    except MalformedCompletionError as e:
        record_completion_fallback()
        logger.warning(
            "%s, using raw text as body (%s)",
            e,
            raw_text[:MAX_BODY_LOG_CHARS],
        )
        return CompletionResult(subject="", body=raw_text)


def _parse_strict(raw_text: str) -> CompletionResult:
    # ------------------------------------------------------------------
    # Stage 1: Strip code fence
    # ------------------------------------------------------------------
    text = raw_text
    fenced = _FENCE_RE.match(text)
    if fenced:
        text = fenced.group("inner")

    # ------------------------------------------------------------------
    # Stage 2: Parse JSON
    # ------------------------------------------------------------------
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedCompletionError(f"invalid JSON ({e.msg})", raw_text) from e

    # ------------------------------------------------------------------
    # Stage 3: Schema validation
    # ------------------------------------------------------------------
    try:
        validate(instance=data, schema=COMPLETION_RESPONSE_SCHEMA["schema"])
    except ValidationError as e:
        raise MalformedCompletionError(f"schema violation ({e.message})", raw_text) from e

    # ------------------------------------------------------------------
    # Stage 4: Build result
    # ------------------------------------------------------------------
    return CompletionResult(subject=data.get("subject", ""), body=data["body"])


def missing_placeholders(source_text: str, result: CompletionResult) -> list:
    """Placeholder tokens present in *source_text* but absent from the result body."""
    return [
        token
        for token in _PLACEHOLDER_RE.findall(source_text)
        if token not in result.body
    ]
