"""Parser for the npm 7+ audit report (vulnerabilities keyed by package)."""

from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Tuple, Union

from ..errors import DecodeError
from ..json_path import JsonNode
from ..models import (
    Advisory,
    AdvisoryId,
    AuditGeneration,
    AuditReport,
    DependencyCounts,
    Finding,
    FixAvailable,
    Severity,
    VulnerablePackage,
    count_severities,
)
from ..versions import parse_version
from .base import AuditSchemaParser, node_to_chain, parse_severity

REPORT_VERSION = 2


class Npm7AuditParser(AuditSchemaParser):
    """Decoder for reports produced by npm 7 and later.

    Advisories are not listed on their own in this generation; they appear
    as the object entries of each vulnerable package's ``via`` list (the
    string entries name other vulnerable packages). Each package a given
    advisory is found under contributes one ``Finding`` built from that
    package's install ``nodes``.
    """

    generation = AuditGeneration.V2
    known_keys = frozenset({"auditReportVersion", "vulnerabilities", "metadata"})

    def reject(self, root: JsonNode) -> Optional[DecodeError]:
        version = root.optional("auditReportVersion")
        if version is not None:
            if version.value == REPORT_VERSION:
                return None
            return version.error(f"auditReportVersion {REPORT_VERSION}")
        # Early npm 7 releases omit auditReportVersion
        if root.has("vulnerabilities") and not root.has("advisories"):
            return None
        return root.error("an 'auditReportVersion' or 'vulnerabilities' member (npm 7+ report)")

    def parse(self, root: JsonNode) -> AuditReport:
        packages: List[VulnerablePackage] = []
        advisories: Dict[AdvisoryId, Advisory] = {}

        for _, node in root.get("vulnerabilities").items():
            package, full_via = self._parse_package(node)
            packages.append(package)
            finding = Finding(paths=tuple(node_to_chain(n) for n in package.nodes))
            for via_node in full_via:
                advisory = self._parse_via(via_node, package, finding)
                existing = advisories.get(advisory.id)
                if existing is not None:
                    advisory = replace(existing, findings=existing.findings + advisory.findings)
                advisories[advisory.id] = advisory

        counts = self._dependency_counts(root)
        return AuditReport(
            generation=self.generation,
            advisories=advisories,
            package_counts=count_severities([package.severity for package in packages]),
            declared_counts=self.declared_counts(root),
            total_dependencies=counts.total if counts is not None else None,
            dependency_counts=counts,
            audit_report_version=root.optional_integer("auditReportVersion"),
            vulnerable_packages=tuple(packages),
        )

    def counted_severities(self, report: AuditReport) -> Iterable[Severity]:
        # npm 7+ summarizes vulnerable packages, not advisories
        return [package.severity for package in report.vulnerable_packages]

    def _parse_package(self, node: JsonNode) -> Tuple[VulnerablePackage, List[JsonNode]]:
        via: List[AdvisoryId] = []
        full_via: List[JsonNode] = []
        for via_node in node.get("via").elements():
            if isinstance(via_node.value, str):
                via.append(via_node.value)
            elif isinstance(via_node.value, dict):
                via.append(self._advisory_id(via_node.get("source")))
                full_via.append(via_node)
            else:
                raise via_node.error("a package name or an advisory object")

        effects = node.optional("effects")
        nodes = node.optional("nodes")
        package = VulnerablePackage(
            name=node.get("name").string(),
            severity=parse_severity(node.get("severity")),
            is_direct=node.get("isDirect").boolean(),
            via=tuple(via),
            effects=effects.string_list() if effects is not None else (),
            range=node.optional_string("range"),
            nodes=nodes.string_list() if nodes is not None else (),
            fix_available=self._parse_fix(node.optional("fixAvailable")),
        )
        return package, full_via

    def _parse_via(self, node: JsonNode, package: VulnerablePackage, finding: Finding) -> Advisory:
        module_name = node.optional_string("dependency") or node.get("name").string()
        patched = None
        fix = package.fix_available
        if isinstance(fix, FixAvailable) and fix.name == module_name:
            patched = fix.version

        cwe = node.optional("cwe")
        cvss = node.optional("cvss")
        score = cvss.optional("score") if cvss is not None else None

        return Advisory(
            id=self._advisory_id(node.get("source")),
            title=node.get("title").string(),
            module_name=module_name,
            severity=parse_severity(node.get("severity")),
            vulnerable_versions=node.optional_string("range"),
            patched_versions=patched,
            findings=(finding,),
            url=node.optional_string("url"),
            cwe=cwe.string_list() if cwe is not None else (),
            cvss_score=score.number() if score is not None else None,
            cvss_vector=cvss.optional_string("vectorString") if cvss is not None else None,
        )

    def _advisory_id(self, node: JsonNode) -> AdvisoryId:
        if isinstance(node.value, str):
            return node.value
        return node.integer()

    def _parse_fix(self, node: Optional[JsonNode]) -> Union[bool, FixAvailable]:
        if node is None:
            return False
        if isinstance(node.value, bool):
            return node.value
        return FixAvailable(
            name=node.get("name").string(),
            version=parse_version(node.get("version").value),
            is_semver_major=node.optional_boolean("isSemVerMajor"),
        )

    def _dependency_counts(self, root: JsonNode) -> Optional[DependencyCounts]:
        metadata = root.optional("metadata")
        if metadata is None:
            return None
        dependencies = metadata.optional("dependencies")
        if dependencies is None:
            return None
        return DependencyCounts(
            total=dependencies.optional_integer("total"),
            prod=dependencies.optional_integer("prod"),
            dev=dependencies.optional_integer("dev"),
            optional=dependencies.optional_integer("optional"),
            peer=dependencies.optional_integer("peer"),
            peer_optional=dependencies.optional_integer("peerOptional"),
        )
