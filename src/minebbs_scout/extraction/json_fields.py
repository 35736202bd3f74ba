# ABOUTME: Fallback field resolution over parsed JSON trees
# ABOUTME: Picks the first present, non-null value among candidate paths that vary across backend versions

import json
from collections.abc import Sequence

from pydantic import JsonValue

from minebbs_scout.extraction.base import MalformedPayload

# A path is either dotted text ("data.basic.title", "data.updates.0") or explicit segments.
type PathSegment = str | int
type FieldPath = str | Sequence[PathSegment]

_MISSING = object()


def parse_json(raw: bytes | str) -> JsonValue:
    """Decode a response body into a JSON tree.

    Raises:
        MalformedPayload: If the body is empty or not valid JSON
    """
    if not raw or not raw.strip():
        raise MalformedPayload("Empty response body")
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        preview = raw[:100] if isinstance(raw, str) else raw[:100].decode("utf-8", errors="replace")
        raise MalformedPayload(f"Response is not JSON: {preview!r}") from e


def _segments(path: FieldPath) -> list[PathSegment]:
    if isinstance(path, str):
        return [segment for segment in path.split(".") if segment]
    return list(path)


def _step(node: JsonValue, segment: PathSegment):
    if isinstance(node, dict):
        key = str(segment)
        return node[key] if key in node else _MISSING
    if isinstance(node, list):
        try:
            index = int(segment)
        except ValueError:
            return _MISSING
        if -len(node) <= index < len(node):
            return node[index]
    return _MISSING


def resolve_path(node: JsonValue, path: FieldPath) -> JsonValue:
    """Walk a single path. Returns None when any step is missing or the value is JSON null."""
    current = node
    for segment in _segments(path):
        current = _step(current, segment)
        if current is _MISSING or current is None:
            return None
    return current


def resolve(node: JsonValue, candidates: Sequence[FieldPath]) -> JsonValue:
    """Return the value at the first candidate path that is present and not null.

    ``None`` means every candidate missed; callers apply their own default.
    """
    for path in candidates:
        value = resolve_path(node, path)
        if value is not None:
            return value
    return None


def resolve_text(node: JsonValue, candidates: Sequence[FieldPath], default: str = "") -> str:
    """Resolve a text field: the first candidate holding a scalar wins, objects and arrays are skipped."""
    for path in candidates:
        value = resolve_path(node, path)
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (str, int, float)):
            return str(value)
    return default


def resolve_int(node: JsonValue, candidates: Sequence[FieldPath], default: int = 0) -> int:
    """Resolve a field as an integer, falling back to ``default`` on any non-numeric value."""
    value = resolve(node, candidates)
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return default
    return default


def is_success(payload: JsonValue) -> bool:
    """True only for an object whose top-level ``success`` flag is literally true."""
    return isinstance(payload, dict) and payload.get("success") is True
