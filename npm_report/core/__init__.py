"""Schema-tolerant decoders for npm outdated and audit reports."""

from .audit import AuditParser, parse_audit
from .errors import DecodeError, DecodeWarning, ErrorKind, JsonPath, SummaryMismatchWarning
from .models import (
    Action,
    Advisory,
    AuditGeneration,
    AuditReport,
    DependencyCounts,
    DependencyType,
    Finding,
    FixAvailable,
    OutdatedPackage,
    OutdatedReport,
    Resolution,
    Severity,
    VulnerablePackage,
)
from .options import DecodeOptions, SummaryPolicy
from .outdated import OutdatedParser, parse_outdated
from .versions import (
    IncomparableVersionError,
    Ordering,
    RangeExpression,
    SemVer,
    Unbounded,
    UnparsableVersion,
    compare,
    parse_version,
)

__all__ = [
    "Action",
    "Advisory",
    "AuditGeneration",
    "AuditParser",
    "AuditReport",
    "DecodeError",
    "DecodeOptions",
    "DecodeWarning",
    "DependencyCounts",
    "DependencyType",
    "ErrorKind",
    "Finding",
    "FixAvailable",
    "IncomparableVersionError",
    "JsonPath",
    "Ordering",
    "OutdatedPackage",
    "OutdatedParser",
    "OutdatedReport",
    "RangeExpression",
    "Resolution",
    "SemVer",
    "Severity",
    "SummaryMismatchWarning",
    "SummaryPolicy",
    "Unbounded",
    "UnparsableVersion",
    "VulnerablePackage",
    "compare",
    "parse_audit",
    "parse_outdated",
    "parse_version",
]
