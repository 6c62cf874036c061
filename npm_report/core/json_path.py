"""Path-tracking access to decoded JSON documents.

Every value handed to a decoder is wrapped in a ``JsonNode`` that knows its
own path from the document root. Typed accessors raise ``DecodeError`` with
that path, the offending value and a description of what was expected.
"""

import json
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from .errors import MISSING, ROOT, DecodeError, ErrorKind, JsonPath, PathSegment
from .options import DEFAULT_OPTIONS, DecodeOptions

JsonSource = Union[str, bytes, bytearray, Mapping[str, Any], List[Any]]


class JsonNode:
    """A JSON value paired with its location in the document."""

    __slots__ = ("value", "path", "options")

    def __init__(
        self,
        value: Any,
        path: JsonPath = ROOT,
        options: DecodeOptions = DEFAULT_OPTIONS,
    ) -> None:
        self.value = value
        self.path = path
        self.options = options

    def __repr__(self) -> str:
        return f"JsonNode({self.path})"

    def error(
        self,
        expected: str,
        kind: ErrorKind = ErrorKind.STRUCTURAL_MISMATCH,
        attempts: Tuple[DecodeError, ...] = (),
    ) -> DecodeError:
        """Build (not raise) an error located at this node."""
        return DecodeError(
            kind,
            self.path,
            self.value,
            expected,
            snippet_limit=self.options.snippet_limit,
            attempts=attempts,
        )

    def _child(self, segment: PathSegment, value: Any) -> "JsonNode":
        return JsonNode(value, self.path.child(segment), self.options)

    # Typed accessors

    def object(self) -> Dict[str, Any]:
        if not isinstance(self.value, dict):
            raise self.error("an object")
        return self.value

    def array(self) -> List[Any]:
        if not isinstance(self.value, list):
            raise self.error("an array")
        return self.value

    def string(self) -> str:
        if not isinstance(self.value, str):
            raise self.error("a string")
        return self.value

    def integer(self) -> int:
        # bool is an int subclass; JSON true/false are not counts
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise self.error("an integer")
        return self.value

    def number(self) -> float:
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise self.error("a number")
        return float(self.value)

    def boolean(self) -> bool:
        if not isinstance(self.value, bool):
            raise self.error("a boolean")
        return self.value

    def is_null(self) -> bool:
        return self.value is None

    # Navigation

    def has(self, key: str) -> bool:
        return isinstance(self.value, dict) and key in self.value

    def get(self, key: str) -> "JsonNode":
        """Required member of an object."""
        members = self.object()
        if key not in members:
            raise self._child(key, MISSING).error(f"required field {key!r}")
        return self._child(key, members[key])

    def optional(self, key: str) -> Optional["JsonNode"]:
        """Optional member of an object; absent and null both give ``None``."""
        members = self.object()
        if members.get(key) is None:
            return None
        return self._child(key, members[key])

    def keys(self) -> List[str]:
        return list(self.object().keys())

    def items(self) -> Iterator[Tuple[str, "JsonNode"]]:
        for key, value in self.object().items():
            yield key, self._child(key, value)

    def elements(self) -> Iterator["JsonNode"]:
        for index, value in enumerate(self.array()):
            yield self._child(index, value)

    # Optional scalar shortcuts

    def optional_string(self, key: str) -> Optional[str]:
        node = self.optional(key)
        return node.string() if node is not None else None

    def optional_integer(self, key: str) -> Optional[int]:
        node = self.optional(key)
        return node.integer() if node is not None else None

    def optional_boolean(self, key: str, default: bool = False) -> bool:
        node = self.optional(key)
        return node.boolean() if node is not None else default

    def string_list(self) -> Tuple[str, ...]:
        """An array of strings, or a single string promoted to a one-element tuple."""
        if isinstance(self.value, str):
            return (self.value,)
        return tuple(element.string() for element in self.elements())


@contextmanager
def located(node: JsonNode, expected: str) -> Iterator[JsonNode]:
    """Re-raise a ``ValueError`` from a nested conversion as a located error.

    Args:
        node: The node whose value is being converted
        expected: Description of the accepted shape

    Yields:
        The node itself
    """
    try:
        yield node
    except ValueError as exc:
        raise node.error(f"{expected} ({exc})") from exc


def load_json(source: JsonSource, options: DecodeOptions = DEFAULT_OPTIONS) -> JsonNode:
    """Load raw report text (or an already-loaded value) into a root node.

    Args:
        source: JSON text, UTF-8 bytes, or a decoded JSON value
        options: Decoder configuration

    Returns:
        Node at the document root

    Raises:
        DecodeError: If the text is not valid JSON
    """
    if isinstance(source, (bytes, bytearray)):
        try:
            source = bytes(source).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError(
                ErrorKind.INVALID_JSON, ROOT, MISSING,
                f"UTF-8 encoded JSON ({exc})",
                snippet_limit=options.snippet_limit,
            ) from exc

    if isinstance(source, str):
        try:
            value = json.loads(source)
        except json.JSONDecodeError as exc:
            raise DecodeError(
                ErrorKind.INVALID_JSON, ROOT, source,
                f"valid JSON ({exc.msg} at line {exc.lineno} column {exc.colno})",
                snippet_limit=options.snippet_limit,
            ) from exc
        except RecursionError as exc:
            raise DecodeError(
                ErrorKind.INVALID_JSON, ROOT, source,
                "valid JSON (nesting is too deep to decode)",
                snippet_limit=options.snippet_limit,
            ) from exc
        return JsonNode(value, ROOT, options)

    return JsonNode(source, ROOT, options)
