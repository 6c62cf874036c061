"""Version normalization for the version-like strings found in npm reports.

npm fills version fields with exact versions, ranges, dist-tags, git URLs and
local paths. ``parse_version`` maps every one of them onto a small closed set
of types so a record can always be built, even when a field is garbage:

* ``SemVer`` - an exact semantic version, ordered by semver precedence
* ``RangeExpression`` - an npm range such as ``^1.2.0`` or ``1.x || >=3``
* ``Unbounded`` - the ``latest`` tag or a bare ``*``
* ``UnparsableVersion`` - anything else, with the original text preserved
"""

import json
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Tuple, Union

import semantic_version


# Loose exact form accepted by npm: optional "v"/"=" prefix, full triple,
# optional pre-release and build metadata.
EXACT_VERSION_PATTERN = re.compile(
    r'^[=v\s]*'
    r'(\d+\.\d+\.\d+'
    r'(?:-[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?'
    r'(?:\+[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?)$'
)

UNBOUNDED_TOKENS = frozenset({"latest", "*"})

# A range has to start like a version or an operator; this keeps dist-tags,
# URLs and paths away from the range grammar.
RANGE_START_PATTERN = re.compile(r'^\s*(?:[<>=~^]|[vV]?[0-9xX*])')

# npm allows blanks between a comparator and its operand (">= 1.2.3")
COMPARATOR_SPACE_PATTERN = re.compile(r'([<>]=?|=|~|\^)\s+')


class Ordering(Enum):
    """Result of comparing two version-like values."""
    LESS = "less"
    EQUAL = "equal"
    GREATER = "greater"
    INCOMPARABLE = "incomparable"


class IncomparableVersionError(TypeError):
    """Raised when ordering is requested between values with no defined order."""

    def __init__(self, left: Any, right: Any) -> None:
        super().__init__(
            f"cannot order {type(left).__name__} {str(left)!r} "
            f"against {type(right).__name__} {str(right)!r}"
        )
        self.left = left
        self.right = right


class _Unordered:
    """Mixin for version-like values that never claim an ordering."""

    def __lt__(self, other: Any) -> bool:
        raise IncomparableVersionError(self, other)

    def __le__(self, other: Any) -> bool:
        raise IncomparableVersionError(self, other)

    def __gt__(self, other: Any) -> bool:
        raise IncomparableVersionError(self, other)

    def __ge__(self, other: Any) -> bool:
        raise IncomparableVersionError(self, other)


@dataclass(frozen=True)
class SemVer:
    """An exact semantic version.

    Equality is structural (build metadata included) while ordering follows
    semver precedence, where build metadata is ignored.
    """

    major: int
    minor: int
    patch: int
    prerelease: Tuple[str, ...] = ()
    build: Tuple[str, ...] = ()
    _parsed: semantic_version.Version = field(
        default=None, compare=False, repr=False, hash=False
    )

    def __post_init__(self) -> None:
        if self._parsed is None:
            object.__setattr__(self, "_parsed", semantic_version.Version(
                major=self.major,
                minor=self.minor,
                patch=self.patch,
                prerelease=self.prerelease or None,
                build=self.build or None,
            ))

    @classmethod
    def parse(cls, text: str) -> "SemVer":
        """Parse an exact version, raising ``ValueError`` if it is not one."""
        match = EXACT_VERSION_PATTERN.match(text.strip())
        if not match:
            raise ValueError(f"not an exact version: {text!r}")
        parsed = semantic_version.Version(match.group(1))
        return cls(
            major=parsed.major,
            minor=parsed.minor,
            patch=parsed.patch,
            prerelease=tuple(parsed.prerelease),
            build=tuple(parsed.build),
            _parsed=parsed,
        )

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    def _check(self, other: Any) -> "SemVer":
        if not isinstance(other, SemVer):
            raise IncomparableVersionError(self, other)
        return other

    def __lt__(self, other: Any) -> bool:
        return self._parsed < self._check(other)._parsed

    def __le__(self, other: Any) -> bool:
        return self._parsed <= self._check(other)._parsed

    def __gt__(self, other: Any) -> bool:
        return self._parsed > self._check(other)._parsed

    def __ge__(self, other: Any) -> bool:
        return self._parsed >= self._check(other)._parsed

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += "-" + ".".join(self.prerelease)
        if self.build:
            text += "+" + ".".join(self.build)
        return text


@dataclass(frozen=True)
class RangeExpression(_Unordered):
    """An npm range expression, kept as written."""

    raw: str
    _spec: semantic_version.NpmSpec = field(
        default=None, compare=False, repr=False, hash=False
    )

    def __post_init__(self) -> None:
        if self._spec is None:
            object.__setattr__(self, "_spec", semantic_version.NpmSpec(
                COMPARATOR_SPACE_PATTERN.sub(r"\1", self.raw)
            ))

    def contains(self, version: SemVer) -> bool:
        """Check whether an exact version satisfies this range."""
        return self._spec.match(version._parsed)

    def __str__(self) -> str:
        return self.raw


@dataclass(frozen=True)
class Unbounded(_Unordered):
    """Explicit "any version" marker for ``latest`` and ``*``."""

    raw: str = "latest"

    def __str__(self) -> str:
        return self.raw


@dataclass(frozen=True)
class UnparsableVersion(_Unordered):
    """A version field that could not be interpreted."""

    raw: str

    def __str__(self) -> str:
        return self.raw


VersionLike = Union[SemVer, RangeExpression, Unbounded, UnparsableVersion]


def parse_version(value: Any) -> VersionLike:
    """Normalize a version-like value. Never raises.

    Args:
        value: The raw JSON value of a version field

    Returns:
        The most specific version type the value can be read as
    """
    if not isinstance(value, str):
        return UnparsableVersion(json.dumps(value))

    text = value.strip()
    if text.lower() in UNBOUNDED_TOKENS:
        return Unbounded(text)

    try:
        return SemVer.parse(text)
    except ValueError:
        pass

    # A dangling pre-release or build separator is not a version
    if RANGE_START_PATTERN.match(text) and not text.endswith(("-", "+")):
        try:
            return RangeExpression(text)
        except (ValueError, TypeError):
            pass

    return UnparsableVersion(value)


def compare(left: VersionLike, right: VersionLike) -> Ordering:
    """Compare two version-like values without raising.

    Only two ``SemVer`` values have an order; every other pairing is
    reported as ``Ordering.INCOMPARABLE``.
    """
    if not isinstance(left, SemVer) or not isinstance(right, SemVer):
        return Ordering.INCOMPARABLE
    if left < right:
        return Ordering.LESS
    if left > right:
        return Ordering.GREATER
    return Ordering.EQUAL
