"""Validation data models.

This module defines core data structures for validation results:
- CheckResult: Outcome of a single validation check
- ValidationReport: Aggregated results from all checks of one project
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass(frozen=True)
class CheckResult:
    """Result of a single validation check.

    Attributes:
        check_id: Unique identifier for the check (e.g., "duplicate_item_codes").
        severity: Severity level - "error" for critical issues, "warning" for review items.
        passed: True if check passed without issues, False otherwise.
        fail_count: Number of failures detected (0 if passed).
        messages: Detailed failure messages with context (e.g., which codes failed).

    Examples:
        >>> CheckResult(
        ...     check_id="duplicate_item_codes",
        ...     severity="error",
        ...     passed=False,
        ...     fail_count=1,
        ...     messages=["Code '1.1' appears on 2 ITEM rows"]
        ... )
    """

    check_id: str
    severity: str  # "error" | "warning"
    passed: bool
    fail_count: int
    messages: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate field constraints."""
        if self.severity not in ("error", "warning"):
            raise ValueError(f"Invalid severity: {self.severity}. Must be 'error' or 'warning'.")
        if self.passed and self.fail_count != 0:
            raise ValueError("passed=True requires fail_count=0")
        if not self.passed and self.fail_count == 0:
            raise ValueError("passed=False requires fail_count > 0")

    @classmethod
    def from_messages(cls, check_id: str, severity: str, messages: List[str]) -> "CheckResult":
        """Passed result when `messages` is empty, otherwise one failure per message."""
        return cls(
            check_id=check_id,
            severity=severity,
            passed=not messages,
            fail_count=len(messages),
            messages=list(messages),
        )


@dataclass
class ValidationReport:
    """Aggregated validation results for a project.

    Attributes:
        results: List of check results (one per executed check).
        project_id: Id of the validated project.
        project_name: Display name of the validated project.
    """

    results: List[CheckResult]
    project_id: str
    project_name: str = ""

    def has_errors(self, strict: bool = False) -> bool:
        """Check if validation failed.

        Args:
            strict: If True, treat warnings as errors. Default False.
        """
        for result in self.results:
            if result.severity == "error" and not result.passed:
                return True
            if strict and result.severity == "warning" and not result.passed:
                return True
        return False

    def get_error_count(self) -> int:
        return sum(r.fail_count for r in self.results if r.severity == "error" and not r.passed)

    def get_warning_count(self) -> int:
        return sum(r.fail_count for r in self.results if r.severity == "warning" and not r.passed)

    def get_failed_checks(self, severity: Optional[str] = None) -> List[CheckResult]:
        """Get all failed checks, optionally filtered by severity ("error" or "warning")."""
        return [
            r for r in self.results if not r.passed and (severity is None or r.severity == severity)
        ]

    def _grouped(self):
        passed_checks = sorted([r for r in self.results if r.passed], key=lambda x: x.check_id)
        warning_checks = sorted(
            [r for r in self.results if not r.passed and r.severity == "warning"],
            key=lambda x: x.check_id,
        )
        error_checks = sorted(
            [r for r in self.results if not r.passed and r.severity == "error"],
            key=lambda x: x.check_id,
        )
        return passed_checks, warning_checks, error_checks

    def summary(self) -> str:
        """Generate a concise text summary of validation results.

        Examples:
            >>> print(report.summary())
            Validation Summary:
              Project: Puente peatonal (proj_3f2a9c1b7d4e)
              Checks: 6 executed (5 passed, 1 warnings, 0 failed)
              Issues: 0 errors, 2 warnings
        """
        total = len(self.results)
        passed = sum(1 for r in self.results if r.passed)
        warning_checks = sum(1 for r in self.results if not r.passed and r.severity == "warning")
        failed_checks = sum(1 for r in self.results if not r.passed and r.severity == "error")

        return (
            f"Validation Summary:\n"
            f"  Project: {self.project_name} ({self.project_id})\n"
            f"  Checks: {total} executed ({passed} passed, {warning_checks} warnings, "
            f"{failed_checks} failed)\n"
            f"  Issues: {self.get_error_count()} errors, {self.get_warning_count()} warnings"
        )

    def to_markdown(self) -> str:
        """Generate a detailed Markdown validation report."""
        total = len(self.results)
        errors = self.get_error_count()
        warnings = self.get_warning_count()
        passed_checks, warning_checks, error_checks = self._grouped()

        lines = [
            f"# Validation Report: {self.project_name}",
            "",
            f"**Project:** {self.project_id}",
            f"**Generated:** {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
            "",
            "## Summary",
            "",
            f"- **Total Rules:** {total}",
            f"- **Passed:** {len(passed_checks)} ✅",
            f"- **With Warnings:** {len(warning_checks)} ⚠️",
            f"- **With Errors:** {len(error_checks)} ❌",
            "",
            f"- **Errors:** {errors} ❌" if errors > 0 else f"- **Errors:** {errors}",
            f"- **Warnings:** {warnings} ⚠️" if warnings > 0 else f"- **Warnings:** {warnings}",
            "",
        ]

        if passed_checks:
            lines.append("## ✅ Passed Checks")
            lines.append("")
            for result in passed_checks:
                lines.append(f"- **{result.check_id}**")
            lines.append("")

        if not warning_checks and not error_checks:
            lines.append("## ✅ All Checks Passed")
            lines.append("")
            lines.append("No validation issues found.")
            lines.append("")
        else:
            for title, icon, group in (
                ("Warnings", "⚠️", warning_checks),
                ("Errors", "❌", error_checks),
            ):
                if not group:
                    continue
                lines.append(f"## {icon} {title}")
                lines.append("")
                for result in group:
                    lines.append(f"### {icon} {result.check_id} ({result.fail_count} failures)")
                    lines.append("")
                    for msg in result.messages:
                        lines.append(f"- {msg}")
                    lines.append("")

        return "\n".join(lines)

    def to_json(self) -> str:
        """Generate a detailed JSON validation report."""
        passed_checks, warning_checks, error_checks = self._grouped()

        def _entry(r: CheckResult) -> dict:
            return {
                "check_id": r.check_id,
                "severity": r.severity,
                "fail_count": r.fail_count,
                "messages": r.messages,
            }

        report_data = {
            "metadata": {
                "project_id": self.project_id,
                "project_name": self.project_name,
                "generated_at": datetime.now().isoformat(),
            },
            "summary": {
                "total_rules": len(self.results),
                "passed": len(passed_checks),
                "with_warnings": len(warning_checks),
                "with_errors": len(error_checks),
                "errors": self.get_error_count(),
                "warnings": self.get_warning_count(),
            },
            "passed_checks": [
                {"check_id": r.check_id, "severity": r.severity, "messages": r.messages}
                for r in passed_checks
            ],
            "warning_checks": [_entry(r) for r in warning_checks],
            "error_checks": [_entry(r) for r in error_checks],
        }
        return json.dumps(report_data, indent=2, ensure_ascii=False)

    def to_console_summary(self) -> str:
        """Summary plus a one-line entry (and first message) per failed check."""
        lines = [self.summary(), ""]

        failed_checks = self.get_failed_checks()
        if not failed_checks:
            lines.append("✅ All validation checks passed!")
        else:
            lines.append("Check Details:")
            for result in failed_checks:
                icon = "❌" if result.severity == "error" else "⚠️"
                lines.append(
                    f"{icon} {result.check_id} ({result.severity}): {result.fail_count} failures"
                )
                if result.messages:
                    lines.append(f"   - {result.messages[0]}")

        return "\n".join(lines)
