"""Validation check registry and runner.

This module orchestrates validation checks:
- ALL_CHECKS: List of all available validation check instances
- run_validation(): Executes applicable checks and returns ValidationReport
- print_report(): Displays validation results to console
"""

from __future__ import annotations

import logging
from typing import List

from obra_control.core.models import Project
from obra_control.core.settings import Settings
from .checks.contract_total_consistency import ContractTotalConsistencyCheck
from .checks.duplicate_item_codes import DuplicateItemCodesCheck
from .checks.executed_exceeds_contract import ExecutedExceedsContractCheck
from .checks.negative_period_quantities import NegativePeriodQuantitiesCheck
from .checks.quantity_precision import QuantityPrecisionCheck
from .checks.revision_targets import RevisionTargetsCheck
from .models import CheckResult, ValidationReport

logger = logging.getLogger(__name__)

# Budget structure first, then revisions, then progress reports
ALL_CHECKS = [
    DuplicateItemCodesCheck(),
    ContractTotalConsistencyCheck(),
    QuantityPrecisionCheck(),
    RevisionTargetsCheck(),
    NegativePeriodQuantitiesCheck(),
    ExecutedExceedsContractCheck(),
]


def run_validation(project: Project, settings: Settings) -> ValidationReport:
    """Run all applicable validation checks on a project.

    Examples:
        >>> report = run_validation(project, Settings())
        >>> print(report.summary())
    """
    all_results: List[CheckResult] = []
    for check in ALL_CHECKS:
        if check.applies_to(settings):
            results = check.validate(project, settings)
            all_results.extend(results)
        else:
            logger.debug("Skipping %s", type(check).__name__)

    return ValidationReport(results=all_results, project_id=project.id, project_name=project.name)


def print_report(report: ValidationReport) -> None:
    """Print validation report to console: summary, then every failed check with its messages."""
    print(report.summary())
    print()

    failed = report.get_failed_checks()
    if not failed:
        print("✅ All validation checks passed!")
        return

    print("Failed Checks:")
    for result in failed:
        icon = "❌" if result.severity == "error" else "⚠️"
        print(f"{icon} {result.check_id} ({result.severity}): {result.fail_count} failures")
        for msg in result.messages:
            print(f"   - {msg}")
