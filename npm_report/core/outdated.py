"""Decoder for ``npm outdated --json`` output."""

import logging
from typing import List, Optional, Tuple

from ..utils.logging import get_logger
from .errors import DecodeWarning
from .json_path import JsonNode, JsonSource, load_json
from .models import DependencyType, OutdatedPackage, OutdatedReport, lookup_dependency_type
from .options import DEFAULT_OPTIONS, DecodeOptions
from .versions import UnparsableVersion, parse_version

VERSION_FIELDS = ("current", "wanted", "latest")


class OutdatedParser:
    """Turns the package-name -> status mapping printed by npm into records.

    npm 5 and 6 print ``current``, ``wanted``, ``latest`` and ``location``;
    npm 7 added ``dependent``, and ``--long`` adds ``type`` and ``homepage``.
    All of them decode into the same ``OutdatedPackage``.
    """

    def __init__(self, options: DecodeOptions = DEFAULT_OPTIONS) -> None:
        self.options = options
        self.logger = get_logger("npm_report.outdated")

    def parse(self, source: JsonSource) -> OutdatedReport:
        """Decode one report.

        Args:
            source: JSON text or an already-loaded mapping

        Returns:
            Packages in the order npm printed them, with degraded-field warnings

        Raises:
            DecodeError: If the document is not an outdated report
        """
        if isinstance(source, (str, bytes, bytearray)) and not source.strip():
            # npm prints nothing at all when every package is up to date
            return OutdatedReport()

        root = load_json(source, self.options)
        packages: List[OutdatedPackage] = []
        warnings: List[DecodeWarning] = []

        for name, entry in root.items():
            if not name:
                raise entry.error("a non-empty package name as key")
            package, entry_warnings = self._parse_package(name, entry)
            packages.append(package)
            warnings.extend(entry_warnings)

        self.logger.debug(f"Decoded {len(packages)} outdated packages, {len(warnings)} degraded fields")
        return OutdatedReport(packages=tuple(packages), warnings=tuple(warnings))

    def _parse_package(self, name: str, entry: JsonNode) -> Tuple[OutdatedPackage, List[DecodeWarning]]:
        entry.object()
        versions = {}
        warnings = []

        for field_name in VERSION_FIELDS:
            node = entry.optional(field_name)
            if node is None:
                versions[field_name] = None
                continue
            # Per-field tolerance: whatever the JSON type, the entry survives
            version = parse_version(node.value)
            if isinstance(version, UnparsableVersion):
                self.logger.at_path(logging.DEBUG, node.path, f"keeping unparsable version {version.raw!r}")
                warnings.append(DecodeWarning(node.path, f"unparsable version {version.raw!r}"))
            versions[field_name] = version

        if all(version is None for version in versions.values()):
            raise entry.error("at least one of 'current', 'wanted' or 'latest'")

        return OutdatedPackage(
            name=name,
            current=versions["current"],
            wanted=versions["wanted"],
            latest=versions["latest"],
            location=entry.optional_string("location"),
            dependent=entry.optional_string("dependent"),
            dependency_type=self._parse_type(entry),
            homepage=entry.optional_string("homepage"),
        ), warnings

    def _parse_type(self, entry: JsonNode) -> Optional[DependencyType]:
        node = entry.optional("type")
        if node is None:
            return None
        dependency_type = lookup_dependency_type(node.string())
        if dependency_type is None:
            known = ", ".join(dep_type.value for dep_type in DependencyType)
            raise node.error(f"a dependency type ({known})")
        return dependency_type


def parse_outdated(source: JsonSource, options: Optional[DecodeOptions] = None) -> OutdatedReport:
    """Decode ``npm outdated --json`` output.

    Args:
        source: JSON text or an already-loaded mapping
        options: Decoder configuration

    Returns:
        The decoded report
    """
    return OutdatedParser(options or DEFAULT_OPTIONS).parse(source)
