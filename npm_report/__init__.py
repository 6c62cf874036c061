"""npm-report-parser - typed decoding of npm outdated and npm audit JSON output."""

__version__ = "0.3.2"

from .core import (
    Action,
    Advisory,
    AuditGeneration,
    AuditReport,
    DecodeError,
    DecodeOptions,
    DecodeWarning,
    DependencyCounts,
    DependencyType,
    ErrorKind,
    Finding,
    FixAvailable,
    IncomparableVersionError,
    Ordering,
    OutdatedPackage,
    OutdatedReport,
    RangeExpression,
    Resolution,
    SemVer,
    Severity,
    SummaryMismatchWarning,
    SummaryPolicy,
    Unbounded,
    UnparsableVersion,
    VulnerablePackage,
    compare,
    parse_audit,
    parse_outdated,
    parse_version,
)

__all__ = [
    "Action",
    "Advisory",
    "AuditGeneration",
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
    "Ordering",
    "OutdatedPackage",
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
