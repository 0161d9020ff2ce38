from dataclasses import dataclass
from typing import Iterable, List


EMPTY_INPUT = "EMPTY_INPUT"
NO_TABLES_FOUND = "NO_TABLES_FOUND"
SCHEMA_VALIDATION_FAILED = "SCHEMA_VALIDATION_FAILED"


@dataclass(frozen=True)
class Issue:
    severity: str
    code: str
    message: str
    path: str = "/"


def has_errors(issues: Iterable[Issue]) -> bool:
    return any(issue.severity == "error" for issue in issues)


def to_lines(issues: List[Issue]) -> List[str]:
    lines = []
    for issue in issues:
        lines.append(
            f"[{issue.severity.upper()}] {issue.code} {issue.path}: {issue.message}"
        )
    return lines


def issues_as_json(issues: List[Issue]) -> List[dict]:
    return [
        {
            "severity": issue.severity,
            "code": issue.code,
            "message": issue.message,
            "path": issue.path,
        }
        for issue in issues
    ]
