"""Typed report model shared by the outdated and audit decoders."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Tuple, Union

from .errors import DecodeWarning
from .versions import VersionLike

AdvisoryId = Union[int, str]
DependencyChain = Tuple[str, ...]


class Severity(Enum):
    """Advisory severity, lowest first."""
    INFO = "info"
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_ORDER.index(self)


_SEVERITY_ORDER = list(Severity)

# Spellings seen across npm releases and advisory feeds, compared casefolded.
# New spelling variants only need a new row here.
SEVERITY_ALIASES: Mapping[str, Severity] = MappingProxyType({
    "info": Severity.INFO,
    "informational": Severity.INFO,
    "low": Severity.LOW,
    "moderate": Severity.MODERATE,
    "medium": Severity.MODERATE,
    "high": Severity.HIGH,
    "critical": Severity.CRITICAL,
})


def lookup_severity(text: str) -> Optional[Severity]:
    """Map a severity string onto ``Severity``, or ``None`` if unknown."""
    return SEVERITY_ALIASES.get(text.strip().casefold())


class DependencyType(Enum):
    """Which package.json section a dependency comes from."""
    DIRECT = "dependencies"
    DEV = "devDependencies"
    PEER = "peerDependencies"
    OPTIONAL = "optionalDependencies"


DEPENDENCY_TYPE_ALIASES: Mapping[str, DependencyType] = MappingProxyType({
    dep_type.value.casefold(): dep_type for dep_type in DependencyType
})


def lookup_dependency_type(text: str) -> Optional[DependencyType]:
    return DEPENDENCY_TYPE_ALIASES.get(text.strip().casefold())


class AuditGeneration(Enum):
    """Known ``npm audit --json`` schema generations, newest first."""
    V2 = "v2"  # npm 7 and later: "vulnerabilities" keyed by package
    V1 = "v1"  # npm 6: "advisories" keyed by advisory id

    @property
    def npm_versions(self) -> str:
        return {"v2": "npm 7+", "v1": "npm 6"}[self.value]


@dataclass(frozen=True)
class OutdatedPackage:
    """One entry of ``npm outdated --json``."""

    name: str
    current: Optional[VersionLike] = None
    wanted: Optional[VersionLike] = None
    latest: Optional[VersionLike] = None
    location: Optional[str] = None
    dependent: Optional[str] = None
    dependency_type: Optional[DependencyType] = None
    homepage: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the entry."""
        if not self.name:
            raise ValueError("Package name cannot be empty")
        if self.current is None and self.wanted is None and self.latest is None:
            raise ValueError(f"Package {self.name!r} has no current, wanted or latest version")

    @property
    def is_installed(self) -> bool:
        return self.current is not None


@dataclass(frozen=True)
class OutdatedReport:
    """Decoded ``npm outdated`` output, in the order npm printed it."""

    packages: Tuple[OutdatedPackage, ...] = ()
    warnings: Tuple[DecodeWarning, ...] = ()

    def __iter__(self) -> Iterator[OutdatedPackage]:
        return iter(self.packages)

    def __len__(self) -> int:
        return len(self.packages)

    def find(self, name: str) -> Optional[OutdatedPackage]:
        for package in self.packages:
            if package.name == name:
                return package
        return None


@dataclass(frozen=True)
class Finding:
    """Where an advisory's module was found in the dependency tree."""

    version: Optional[VersionLike] = None
    paths: Tuple[DependencyChain, ...] = ()
    dev: bool = False
    optional: bool = False
    bundled: bool = False


@dataclass(frozen=True)
class Advisory:
    """A single vulnerability record, whatever generation it came from."""

    id: AdvisoryId
    title: str
    module_name: str
    severity: Severity
    vulnerable_versions: Optional[str] = None
    patched_versions: Optional[VersionLike] = None
    findings: Tuple[Finding, ...] = ()
    url: Optional[str] = None
    cves: Tuple[str, ...] = ()
    cwe: Tuple[str, ...] = ()
    github_advisory_id: Optional[str] = None
    npm_advisory_id: Optional[str] = None
    found_by: Optional[str] = None
    reported_by: Optional[str] = None
    overview: Optional[str] = None
    recommendation: Optional[str] = None
    references: Optional[str] = None
    access: Optional[str] = None
    created: Optional[datetime] = None
    updated: Optional[datetime] = None
    deleted: Optional[datetime] = None
    cvss_score: Optional[float] = None
    cvss_vector: Optional[str] = None

    @property
    def paths(self) -> List[DependencyChain]:
        """All dependency chains of all findings, duplicates kept."""
        return [path for finding in self.findings for path in finding.paths]


@dataclass(frozen=True)
class Resolution:
    """An advisory occurrence that an npm 6 action resolves."""

    id: AdvisoryId
    path: DependencyChain
    dev: bool = False
    optional: bool = False
    bundled: bool = False


@dataclass(frozen=True)
class Action:
    """A fix suggested by npm 6 (``install``, ``update`` or ``review``)."""

    action: str
    module: str
    resolves: Tuple[Resolution, ...] = ()
    target: Optional[VersionLike] = None
    depth: Optional[int] = None
    is_major: bool = False


@dataclass(frozen=True)
class FixAvailable:
    """The upgrade npm 7+ proposes for a vulnerable package."""

    name: str
    version: VersionLike
    is_semver_major: bool = False


@dataclass(frozen=True)
class VulnerablePackage:
    """A package-level entry of an npm 7+ report."""

    name: str
    severity: Severity
    is_direct: bool
    via: Tuple[AdvisoryId, ...] = ()
    effects: Tuple[str, ...] = ()
    range: Optional[str] = None
    nodes: Tuple[str, ...] = ()
    fix_available: Union[bool, FixAvailable] = False


@dataclass(frozen=True)
class DependencyCounts:
    """Dependency totals from a report's metadata block."""

    total: Optional[int] = None
    prod: Optional[int] = None
    dev: Optional[int] = None
    optional: Optional[int] = None
    peer: Optional[int] = None
    peer_optional: Optional[int] = None


def _freeze(mapping: Optional[Mapping]) -> Mapping:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class AuditReport:
    """Decoded ``npm audit --json`` output in generation-independent form."""

    generation: AuditGeneration
    advisories: Mapping[AdvisoryId, Advisory] = field(default_factory=dict)
    severity_counts: Mapping[Severity, int] = field(default_factory=dict)
    package_counts: Optional[Mapping[Severity, int]] = None
    declared_counts: Optional[Mapping[Severity, int]] = None
    total_dependencies: Optional[int] = None
    dependency_counts: Optional[DependencyCounts] = None
    timestamp: Optional[datetime] = None
    audit_report_version: Optional[int] = None
    run_id: Optional[str] = None
    muted: Tuple[str, ...] = ()
    actions: Tuple[Action, ...] = ()
    vulnerable_packages: Tuple[VulnerablePackage, ...] = ()
    warnings: Tuple[DecodeWarning, ...] = ()

    # Read-only mappings are not hashable, so neither is the report
    __hash__ = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "advisories", _freeze(self.advisories))
        object.__setattr__(self, "severity_counts", _freeze(self.severity_counts))
        for name in ("package_counts", "declared_counts"):
            if getattr(self, name) is not None:
                object.__setattr__(self, name, _freeze(getattr(self, name)))

    def advisories_with_severity(self, severity: Severity) -> List[Advisory]:
        return [advisory for advisory in self.advisories.values() if advisory.severity is severity]

    @property
    def highest_severity(self) -> Optional[Severity]:
        present = [severity for severity, count in self.severity_counts.items() if count]
        if not present:
            return None
        return max(present, key=lambda severity: severity.rank)


def count_severities(severities: List[Severity]) -> Dict[Severity, int]:
    """Per-severity counts with every severity present, zero included."""
    counts = {severity: 0 for severity in Severity}
    for severity in severities:
        counts[severity] += 1
    return counts
