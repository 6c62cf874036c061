"""Decoder for ``npm audit --json`` output across schema generations."""

import logging
from dataclasses import replace
from typing import List, Mapping, Optional, Tuple

from ..utils.logging import get_logger
from .errors import DecodeError, ErrorKind, SummaryMismatchWarning
from .json_path import JsonNode, JsonSource, load_json
from .models import AuditReport, Severity, count_severities
from .options import DEFAULT_OPTIONS, DecodeOptions, SummaryPolicy
from .parsers import AuditSchemaParser, SchemaRegistry, registry as default_registry


class AuditParser:
    """Detects the schema generation of an audit report and decodes it.

    Generations are tried newest first. A generation whose marker is absent
    is skipped; the first one whose marker matches decodes the document and
    any failure from then on is final.
    """

    def __init__(
        self,
        options: DecodeOptions = DEFAULT_OPTIONS,
        schemas: Optional[SchemaRegistry] = None,
    ) -> None:
        self.options = options
        self.schemas = schemas or default_registry
        self.logger = get_logger("npm_report.audit")

    def parse(self, source: JsonSource) -> AuditReport:
        """Decode one audit report.

        Args:
            source: JSON text or an already-loaded mapping

        Returns:
            The report, with any summary-count warnings attached

        Raises:
            DecodeError: If no generation matches or the matched one fails
        """
        root = load_json(source, self.options)
        parser = self.detect(root)
        self.logger.debug(f"Decoding audit report as generation {parser.generation.value}")

        report = parser.parse(root)
        severity_counts = count_severities([advisory.severity for advisory in report.advisories.values()])
        # The summary is compared in the unit each generation declares it in
        summary_counts = count_severities(list(parser.counted_severities(report)))
        warnings = self._check_summary(root, report.declared_counts, summary_counts)
        return replace(report, severity_counts=severity_counts, warnings=tuple(warnings))

    def detect(self, root: JsonNode) -> AuditSchemaParser:
        """Pick the schema parser for a document.

        Raises:
            DecodeError: ``UNRECOGNIZED_SCHEMA`` with every rejection attached
        """
        if not isinstance(root.value, dict):
            raise root.error("an audit report object", kind=ErrorKind.UNRECOGNIZED_SCHEMA)

        rejections: List[DecodeError] = []
        for parser in self.schemas.parsers():
            rejection = parser.reject(root)
            if rejection is None:
                return parser
            self.logger.debug(f"Not generation {parser.generation.value}: {rejection}")
            rejections.append(rejection)

        raise self._unrecognized(root, tuple(rejections))

    def _unrecognized(self, root: JsonNode, rejections: Tuple[DecodeError, ...]) -> DecodeError:
        known = self.schemas.known_keys()
        for key, node in root.items():
            if key not in known:
                return node.error("a top-level key of a known audit report generation",
                                  kind=ErrorKind.UNRECOGNIZED_SCHEMA, attempts=rejections)
        return root.error("a known audit report generation",
                          kind=ErrorKind.UNRECOGNIZED_SCHEMA, attempts=rejections)

    def _check_summary(
        self,
        root: JsonNode,
        declared: Optional[Mapping[Severity, int]],
        counted: Mapping[Severity, int],
    ) -> List[SummaryMismatchWarning]:
        if declared is None:
            return []

        counts_path = root.path.child("metadata").child("vulnerabilities")
        warnings = []
        for severity in Severity:
            if severity not in declared:
                continue
            expected, actual = declared[severity], counted.get(severity, 0)
            if expected == actual:
                continue

            path = counts_path.child(severity.value)
            message = f"summary declares {expected} {severity.value} but {actual} were decoded"
            if self.options.summary_mismatch is SummaryPolicy.FAIL:
                raise DecodeError(
                    ErrorKind.SUMMARY_MISMATCH, path, expected,
                    f"{actual} (the decoded {severity.value} count)",
                    snippet_limit=self.options.snippet_limit,
                )
            self.logger.at_path(logging.WARNING, path, message)
            warnings.append(SummaryMismatchWarning(
                path=path, message=message, severity=severity, declared=expected, actual=actual,
            ))
        return warnings


def parse_audit(source: JsonSource, options: Optional[DecodeOptions] = None) -> AuditReport:
    """Decode ``npm audit --json`` output of any known generation.

    Args:
        source: JSON text or an already-loaded mapping
        options: Decoder configuration

    Returns:
        The decoded report
    """
    return AuditParser(options or DEFAULT_OPTIONS).parse(source)
