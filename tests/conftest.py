"""Shared report documents for the decoder tests."""

import copy
import json

import pytest

NPM6_AUDIT = {
    "actions": [
        {
            "isMajor": False,
            "action": "install",
            "resolves": [
                {"id": 1523, "path": "lodash", "dev": False, "optional": False, "bundled": False}
            ],
            "module": "lodash",
            "target": "4.17.21",
        },
        {
            "action": "review",
            "module": "minimist",
            "resolves": [
                {"id": 1179, "path": "mkdirp>minimist", "dev": True, "optional": False, "bundled": False}
            ],
        },
    ],
    "advisories": {
        "1523": {
            "findings": [{"version": "4.17.15", "paths": ["lodash"]}],
            "id": 1523,
            "title": "Prototype Pollution",
            "module_name": "lodash",
            "cves": ["CVE-2019-10744"],
            "vulnerable_versions": "<4.17.19",
            "patched_versions": ">=4.17.19",
            "overview": "Versions of lodash before 4.17.19 are vulnerable to Prototype Pollution.",
            "recommendation": "Update to version 4.17.19 or later.",
            "references": "- [HackerOne Report](https://hackerone.com/reports/712065)",
            "access": "public",
            "severity": "high",
            "cwe": "CWE-471",
            "url": "https://npmjs.com/advisories/1523",
            "found_by": {"link": "", "name": "Snyk Security Team", "email": ""},
            "reported_by": "Alex Doe",
            "npm_advisory_id": None,
            "created": "2019-07-10T17:46:56.000Z",
            "updated": "2020-08-13T17:23:14.000Z",
            "deleted": None,
        },
        "1179": {
            "findings": [{"version": "0.0.8", "paths": ["mkdirp>minimist"], "dev": True}],
            "id": 1179,
            "title": "Prototype Pollution",
            "module_name": "minimist",
            "cves": [],
            "vulnerable_versions": "<0.2.1 || >=1.0.0 <1.2.3",
            "patched_versions": ">=0.2.1 <1.0.0 || >=1.2.3",
            "severity": "low",
            "cwe": "CWE-471",
            "url": "https://npmjs.com/advisories/1179",
            "created": "2020-03-11T22:25:45.000Z",
            "updated": "2020-03-11T22:25:45.000Z",
        },
    },
    "muted": [],
    "metadata": {
        "vulnerabilities": {"info": 0, "low": 1, "moderate": 0, "high": 1, "critical": 0},
        "dependencies": 10,
        "devDependencies": 5,
        "optionalDependencies": 0,
        "totalDependencies": 15,
    },
    "runId": "6c1a7d4c-2cd5-4b4f-9dcd-6a4e8f5b0b1f",
}

NPM7_AUDIT = {
    "auditReportVersion": 2,
    "vulnerabilities": {
        "lodash": {
            "name": "lodash",
            "severity": "high",
            "isDirect": True,
            "via": [
                {
                    "source": 1523,
                    "name": "lodash",
                    "dependency": "lodash",
                    "title": "Prototype Pollution",
                    "url": "https://github.com/advisories/GHSA-p6mc-m468-83gw",
                    "severity": "high",
                    "cwe": ["CWE-1321"],
                    "cvss": {"score": 7.4, "vectorString": "CVSS:3.1/AV:N/AC:H/PR:N/UI:N/S:U/C:N/I:H/A:H"},
                    "range": "<4.17.19",
                }
            ],
            "effects": [],
            "range": "<=4.17.18",
            "nodes": ["node_modules/lodash"],
            "fixAvailable": {"name": "lodash", "version": "4.17.21", "isSemVerMajor": False},
        },
        "minimist": {
            "name": "minimist",
            "severity": "low",
            "isDirect": False,
            "via": [
                {
                    "source": 1179,
                    "name": "minimist",
                    "dependency": "minimist",
                    "title": "Prototype Pollution",
                    "url": "https://github.com/advisories/GHSA-vh95-rmgr-6w4m",
                    "severity": "low",
                    "range": "<0.2.1",
                }
            ],
            "effects": ["mkdirp"],
            "range": "<0.2.1",
            "nodes": [
                "node_modules/mkdirp/node_modules/minimist",
                "packages/app/node_modules/minimist",
            ],
            "fixAvailable": True,
        },
        "mkdirp": {
            "name": "mkdirp",
            "severity": "low",
            "isDirect": True,
            "via": ["minimist"],
            "effects": [],
            "range": "0.4.1 - 0.5.1",
            "nodes": ["node_modules/mkdirp"],
            "fixAvailable": True,
        },
    },
    "metadata": {
        "vulnerabilities": {"info": 0, "low": 2, "moderate": 0, "high": 1, "critical": 0, "total": 3},
        "dependencies": {"prod": 10, "dev": 5, "optional": 0, "peer": 0, "peerOptional": 0, "total": 15},
    },
}

OUTDATED = {
    "pkg-a": {
        "current": "1.0.0",
        "wanted": "1.2.0",
        "latest": "2.0.0",
        "location": "node_modules/pkg-a",
        "type": "dependencies",
    },
    "left-pad": {
        "current": "1.1.0",
        "wanted": "1.3.0",
        "latest": "1.3.0",
        "dependent": "my-app",
        "location": "node_modules/left-pad",
        "type": "devDependencies",
        "homepage": "https://github.com/stevemao/left-pad#readme",
    },
}


@pytest.fixture
def npm6_audit():
    """An npm 6 audit report as a mutable dict."""
    return copy.deepcopy(NPM6_AUDIT)


@pytest.fixture
def npm7_audit():
    """An npm 7+ audit report as a mutable dict."""
    return copy.deepcopy(NPM7_AUDIT)


@pytest.fixture
def outdated_report():
    """An npm outdated report as a mutable dict."""
    return copy.deepcopy(OUTDATED)


@pytest.fixture
def write_json(tmp_path):
    """Write a document to a temporary file and return its path."""
    def _write(document, name="report.json"):
        path = tmp_path / name
        path.write_text(json.dumps(document))
        return path
    return _write
