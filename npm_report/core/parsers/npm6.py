"""Parser for the npm 6 audit report (advisories keyed by advisory id)."""

from typing import Iterable, Optional

from ..errors import DecodeError
from ..json_path import JsonNode
from ..models import (
    Action,
    Advisory,
    AdvisoryId,
    AuditGeneration,
    AuditReport,
    DependencyCounts,
    Finding,
    Resolution,
    Severity,
)
from ..versions import parse_version
from .base import (
    AuditSchemaParser,
    optional_timestamp,
    parse_severity,
    split_module_path,
)

ACTION_KINDS = ("install", "update", "review")


class Npm6AuditParser(AuditSchemaParser):
    """Decoder for reports produced by npm 6.

    Example shape::

        {"actions": [...], "advisories": {"1523": {...}}, "muted": [],
         "metadata": {"vulnerabilities": {...}, "totalDependencies": 1},
         "runId": "..."}
    """

    generation = AuditGeneration.V1
    known_keys = frozenset({"actions", "advisories", "muted", "metadata", "runId"})

    def reject(self, root: JsonNode) -> Optional[DecodeError]:
        if root.has("advisories"):
            return None
        return root.error("an 'advisories' object (npm 6 report)")

    def parse(self, root: JsonNode) -> AuditReport:
        advisories = {}
        for key, node in root.get("advisories").items():
            advisory = self._parse_advisory(key, node)
            advisories[advisory.id] = advisory

        actions_node = root.optional("actions")
        actions = tuple(
            self._parse_action(node) for node in actions_node.elements()
        ) if actions_node is not None else ()

        muted_node = root.optional("muted")
        muted = tuple(self._muted_entry(node) for node in muted_node.elements()) if muted_node is not None else ()

        total, counts = self._dependency_counts(root)
        stamps = [
            stamp
            for advisory in advisories.values()
            for stamp in (advisory.created, advisory.updated)
            if stamp is not None
        ]

        return AuditReport(
            generation=self.generation,
            advisories=advisories,
            declared_counts=self.declared_counts(root),
            total_dependencies=total,
            dependency_counts=counts,
            timestamp=max(stamps) if stamps else None,
            run_id=root.optional_string("runId"),
            muted=muted,
            actions=actions,
        )

    def counted_severities(self, report: AuditReport) -> Iterable[Severity]:
        return [advisory.severity for advisory in report.advisories.values()]

    def _parse_advisory(self, key: str, node: JsonNode) -> Advisory:
        node.object()
        advisory_id: AdvisoryId = key
        id_node = node.optional("id")
        if id_node is not None:
            advisory_id = id_node.integer() if not isinstance(id_node.value, str) else id_node.value

        patched = node.optional_string("patched_versions")
        cves = node.optional("cves")
        cwe = node.optional("cwe")

        return Advisory(
            id=advisory_id,
            title=node.get("title").string(),
            module_name=node.get("module_name").string(),
            severity=parse_severity(node.get("severity")),
            vulnerable_versions=node.optional_string("vulnerable_versions"),
            patched_versions=parse_version(patched) if patched is not None else None,
            findings=tuple(self._parse_finding(f) for f in node.get("findings").elements()),
            url=node.optional_string("url"),
            cves=cves.string_list() if cves is not None else (),
            cwe=cwe.string_list() if cwe is not None else (),
            github_advisory_id=node.optional_string("github_advisory_id"),
            npm_advisory_id=self._optional_id(node.optional("npm_advisory_id")),
            found_by=self._credit(node.optional("found_by")),
            reported_by=self._credit(node.optional("reported_by")),
            overview=node.optional_string("overview"),
            recommendation=node.optional_string("recommendation"),
            references=node.optional_string("references"),
            access=node.optional_string("access"),
            created=optional_timestamp(node, "created"),
            updated=optional_timestamp(node, "updated"),
            deleted=optional_timestamp(node, "deleted"),
        )

    def _credit(self, node: Optional[JsonNode]) -> Optional[str]:
        # Credits appear either as {"name": ...} objects or as a bare name
        if node is None:
            return None
        if isinstance(node.value, dict):
            return node.optional_string("name")
        return node.string()

    def _optional_id(self, node: Optional[JsonNode]) -> Optional[str]:
        if node is None:
            return None
        if isinstance(node.value, str):
            return node.value
        return str(node.integer())

    def _parse_finding(self, node: JsonNode) -> Finding:
        version = node.optional("version")
        return Finding(
            version=parse_version(version.value) if version is not None else None,
            paths=tuple(split_module_path(p.string()) for p in node.get("paths").elements()),
            dev=node.optional_boolean("dev"),
            optional=node.optional_boolean("optional"),
            bundled=node.optional_boolean("bundled"),
        )

    def _parse_action(self, node: JsonNode) -> Action:
        kind_node = node.get("action")
        kind = kind_node.string()
        if kind not in ACTION_KINDS:
            raise kind_node.error(f"one of {', '.join(ACTION_KINDS)}")
        target = node.optional("target")
        return Action(
            action=kind,
            module=node.get("module").string(),
            resolves=tuple(self._parse_resolution(r) for r in node.get("resolves").elements()),
            target=parse_version(target.value) if target is not None else None,
            depth=node.optional_integer("depth"),
            is_major=node.optional_boolean("isMajor"),
        )

    def _parse_resolution(self, node: JsonNode) -> Resolution:
        id_node = node.get("id")
        return Resolution(
            id=id_node.value if isinstance(id_node.value, str) else id_node.integer(),
            path=split_module_path(node.get("path").string()),
            dev=node.optional_boolean("dev"),
            optional=node.optional_boolean("optional"),
            bundled=node.optional_boolean("bundled"),
        )

    def _muted_entry(self, node: JsonNode) -> str:
        # Plain advisory ids or objects carrying an "id"
        if isinstance(node.value, dict):
            return str(node.get("id").value)
        if isinstance(node.value, (str, int)) and not isinstance(node.value, bool):
            return str(node.value)
        raise node.error("an advisory id or muted-advisory object")

    def _dependency_counts(self, root: JsonNode):
        metadata = root.optional("metadata")
        if metadata is None:
            return None, None
        counts = DependencyCounts(
            total=metadata.optional_integer("totalDependencies"),
            prod=metadata.optional_integer("dependencies"),
            dev=metadata.optional_integer("devDependencies"),
            optional=metadata.optional_integer("optionalDependencies"),
        )
        return counts.total, counts
