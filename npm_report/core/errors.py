"""Decode errors and warnings."""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple, Union

PathSegment = Union[str, int]

# Identifier-like keys render as ".key", everything else as '["key"]'
_PLAIN_KEY_CHARS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_")


class ErrorKind(Enum):
    """Closed set of fatal decode failures."""
    STRUCTURAL_MISMATCH = "structural-mismatch"
    UNRECOGNIZED_SCHEMA = "unrecognized-schema"
    UNKNOWN_SEVERITY = "unknown-severity"
    # Reserved: version fields degrade to UnparsableVersion instead of failing
    MALFORMED_VERSION = "malformed-version"
    INVALID_JSON = "invalid-json"
    SUMMARY_MISMATCH = "summary-mismatch"


class _Missing:
    """Placeholder value for a required field that is absent."""

    def __repr__(self) -> str:
        return "<missing>"


MISSING = _Missing()


@dataclass(frozen=True)
class JsonPath:
    """Navigation path from the document root to a value."""

    segments: Tuple[PathSegment, ...] = ()

    def child(self, segment: PathSegment) -> "JsonPath":
        return JsonPath(self.segments + (segment,))

    @property
    def is_root(self) -> bool:
        return not self.segments

    def __str__(self) -> str:
        parts = ["$"]
        for segment in self.segments:
            if isinstance(segment, int):
                parts.append(f"[{segment}]")
            elif segment and segment[0].isalpha() and set(segment) <= _PLAIN_KEY_CHARS:
                parts.append(f".{segment}")
            else:
                parts.append(f"[{json.dumps(segment)}]")
        return "".join(parts)


ROOT = JsonPath()


def render_snippet(value: Any, limit: int = 80) -> str:
    """Render a JSON value for diagnostics, truncated to ``limit`` characters."""
    if value is MISSING:
        return repr(MISSING)
    try:
        text = json.dumps(value, ensure_ascii=False, sort_keys=False)
    except (TypeError, ValueError):
        text = repr(value)
    if len(text) > limit:
        text = text[:limit - 3] + "..."
    return text


class DecodeError(Exception):
    """A fatal failure while decoding a report.

    Carries the exact path from the document root to the offending value so
    a failure in one schema guess can be told apart from the others.
    """

    def __init__(
        self,
        kind: ErrorKind,
        path: JsonPath,
        value: Any,
        expected: str,
        snippet_limit: int = 80,
        attempts: Tuple["DecodeError", ...] = (),
    ) -> None:
        self.kind = kind
        self.path = path
        self.value = value
        self.expected = expected
        self.snippet = render_snippet(value, snippet_limit)
        self.attempts = tuple(attempts)
        super().__init__(self._format())

    def _format(self) -> str:
        return f"{self.kind.value} at {self.path}: expected {self.expected}, got {self.snippet}"

    def describe(self) -> str:
        """Multi-line description including rejected schema attempts."""
        lines = [str(self)]
        for attempt in self.attempts:
            lines.append(f"  tried: {attempt}")
        return "\n".join(lines)


@dataclass(frozen=True)
class DecodeWarning:
    """A non-fatal problem found while decoding."""

    path: JsonPath
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


@dataclass(frozen=True)
class SummaryMismatchWarning(DecodeWarning):
    """A declared severity count that disagrees with the parsed data."""

    severity: Optional[Any] = None
    declared: int = 0
    actual: int = 0
