"""Base class and shared field decoders for audit schema parsers."""

import re
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Dict, FrozenSet, Iterable, Optional

from ..errors import DecodeError, ErrorKind
from ..json_path import JsonNode, located
from ..models import AuditGeneration, AuditReport, DependencyChain, Severity, lookup_severity

# Separator npm uses between package names in a dependency path string
PATH_SEPARATOR = ">"
NODE_MODULES = "node_modules/"

RFC3339_PATTERN = re.compile(
    r'^(\d{4})-(\d{2})-(\d{2})[Tt ](\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?'
    r'(?:([Zz])|([+-])(\d{2}):(\d{2}))$'
)


class AuditSchemaParser(ABC):
    """Decoder for one ``npm audit --json`` schema generation.

    Generations are disjoint shapes. ``reject`` decides from the top-level
    marker alone whether a document belongs to this generation; once it
    does, ``parse`` treats any mismatch as fatal.
    """

    generation: AuditGeneration
    known_keys: FrozenSet[str] = frozenset()

    @abstractmethod
    def reject(self, root: JsonNode) -> Optional[DecodeError]:
        """Check the generation marker.

        Args:
            root: Node at the document root (already known to be an object)

        Returns:
            ``None`` if the document has this generation's marker, otherwise
            the error explaining why not
        """

    @abstractmethod
    def parse(self, root: JsonNode) -> AuditReport:
        """Decode a document that passed ``reject``.

        Returns:
            The report without summary-check warnings
        """

    @abstractmethod
    def counted_severities(self, report: AuditReport) -> Iterable[Severity]:
        """Severities of the items this generation's summary block counts."""

    def declared_counts(self, root: JsonNode) -> Optional[Dict[Severity, int]]:
        """Per-severity counts from ``metadata.vulnerabilities``, if present."""
        metadata = root.optional("metadata")
        if metadata is None:
            return None
        counts_node = metadata.optional("vulnerabilities")
        if counts_node is None:
            return None

        counts = {}
        for key, node in counts_node.items():
            if key == "total":
                continue
            severity = lookup_severity(key)
            if severity is None:
                raise node.error(
                    f"a count keyed by a known severity, not {key!r}",
                    kind=ErrorKind.UNKNOWN_SEVERITY,
                )
            counts[severity] = node.integer()
        return counts


def parse_severity(node: JsonNode) -> Severity:
    """Decode a severity string through the alias table."""
    severity = lookup_severity(node.string())
    if severity is None:
        known = ", ".join(severity.value for severity in Severity)
        raise node.error(f"a severity ({known})", kind=ErrorKind.UNKNOWN_SEVERITY)
    return severity


def parse_timestamp(node: JsonNode) -> datetime:
    """Decode an RFC 3339 timestamp such as ``2019-07-10T17:46:56.000Z``."""
    text = node.string()
    with located(node, "an RFC 3339 timestamp"):
        match = RFC3339_PATTERN.match(text)
        if not match:
            raise ValueError("not in YYYY-MM-DDTHH:MM:SS[.frac](Z|+HH:MM) form")
        year, month, day, hour, minute, second, fraction, utc, sign, off_h, off_m = match.groups()

        if utc:
            tz = timezone.utc
        else:
            offset = timedelta(hours=int(off_h), minutes=int(off_m))
            tz = timezone(-offset if sign == "-" else offset)
        # Sub-microsecond digits are dropped
        microsecond = int((fraction or "0")[:6].ljust(6, "0"))
        return datetime(
            int(year), int(month), int(day),
            int(hour), int(minute), int(second), microsecond, tzinfo=tz,
        )


def optional_timestamp(parent: JsonNode, key: str) -> Optional[datetime]:
    node = parent.optional(key)
    return parse_timestamp(node) if node is not None else None


def split_module_path(text: str) -> DependencyChain:
    """``"a>b>c"`` -> ``("a", "b", "c")``."""
    return tuple(text.split(PATH_SEPARATOR))


def node_to_chain(node_path: str) -> DependencyChain:
    """Turn an install location into the package chain leading to it.

    ``node_modules/a/node_modules/@scope/b`` -> ``("a", "@scope/b")``. A
    leading workspace directory (``packages/app/node_modules/x``) is kept
    as the first element.
    """
    head, *rest = node_path.split(NODE_MODULES)
    chain = [part.rstrip("/") for part in rest]
    head = head.rstrip("/")
    if head:
        chain.insert(0, head)
    return tuple(part for part in chain if part)
