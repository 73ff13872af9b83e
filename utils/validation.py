"""Data validation reporting for the climate actions tools.

The record schema itself lives in ``actions.schema`` and rejects a payload on
its first violation. The classes here collect *every* issue across a data
set so a snapshot build can report all problems in one run:

- ``ValidationIssue``: one problem with a severity
- ``ValidationResult``: issues plus passed/failed check names
- ``ValidationRegistry``: named checks run over a list of raw records
"""

from typing import Any, Callable, Dict, List, Optional

Check = Callable[[List[Dict[str, Any]]], List["ValidationIssue"]]


class ValidationIssue:
    """Represents a single validation issue found during checks."""

    def __init__(self, check_name: str, severity: str, detail: str,
                 sample: Optional[Any] = None, count: int = 1):
        """Initialize a validation issue.

        Args:
            check_name: Name of the check that found this issue
            severity: Issue severity ('error', 'warning', 'info')
            detail: Human-readable description of the issue
            sample: Example value that triggered the issue
            count: Number of affected records
        """
        self.check_name = check_name
        self.severity = severity
        self.detail = detail
        self.sample = sample
        self.count = count

    def __repr__(self) -> str:
        return (f"ValidationIssue(check={self.check_name}, severity={self.severity}, "
                f"count={self.count})")


class ValidationResult:
    """Collects and reports on validation check results."""

    def __init__(self):
        self.issues: List[ValidationIssue] = []
        self.passed_checks: List[str] = []
        self.failed_checks: List[str] = []

    def add_issue(self, check_name: str, severity: str, detail: str,
                  sample: Optional[Any] = None, count: int = 1) -> None:
        """Add a validation issue."""
        self.issues.append(ValidationIssue(check_name, severity, detail, sample, count))

    def mark_check_passed(self, check_name: str) -> None:
        self.passed_checks.append(check_name)

    def mark_check_failed(self, check_name: str) -> None:
        self.failed_checks.append(check_name)

    def get_issues_by_severity(self, severity: str) -> List[ValidationIssue]:
        """Get all issues of a specific severity ('error', 'warning', 'info')."""
        return [i for i in self.issues if i.severity == severity]

    def error_count(self) -> int:
        return len(self.get_issues_by_severity("error"))

    def warning_count(self) -> int:
        return len(self.get_issues_by_severity("warning"))

    def is_valid(self) -> bool:
        """Check if validation passed (no errors)."""
        return self.error_count() == 0

    def summary_text(self) -> str:
        """Generate human-readable validation summary."""
        lines = ["Validation Summary:"]
        lines.append(f"  Passed Checks: {len(self.passed_checks)}")
        lines.append(f"  Failed Checks: {len(self.failed_checks)}")
        lines.append(f"  Issues: {len(self.issues)}")
        lines.append(f"    - Errors: {self.error_count()}")
        lines.append(f"    - Warnings: {self.warning_count()}")
        for issue in self.issues:
            lines.append(f"  [{issue.severity}] {issue.check_name}: {issue.detail}")
        return "\n".join(lines)


class ValidationRegistry:
    """Manages a collection of validation check functions."""

    def __init__(self):
        self.checks: Dict[str, Check] = {}

    def register(self, name: str, check_fn: Check) -> None:
        """Register a check that returns a list of ValidationIssue."""
        self.checks[name] = check_fn

    def run_all(self, records: List[Dict[str, Any]],
                skip_checks: Optional[List[str]] = None) -> ValidationResult:
        """Run all registered checks over *records*.

        A check that raises is recorded as a failed check with an error
        issue; the remaining checks still run.
        """
        skip = skip_checks or []
        result = ValidationResult()

        for check_name, check_fn in self.checks.items():
            if check_name in skip:
                continue
            try:
                issues = check_fn(records)
            except Exception as e:
                result.add_issue(check_name, "error",
                                 f"Check raised exception: {str(e)[:100]}")
                result.mark_check_failed(check_name)
                continue
            if issues:
                result.issues.extend(issues)
                result.mark_check_failed(check_name)
            else:
                result.mark_check_passed(check_name)

        return result
