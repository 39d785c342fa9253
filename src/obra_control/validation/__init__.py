"""Project consistency validation.

- **Models**: CheckResult, ValidationReport - validation result data structures
- **Checks**: Individual validation check implementations (see validation/checks/)
- **Config**: Tolerance constants and severity rules (import from .config)
- **Registry**: run_validation(), print_report() - check orchestration and execution

Usage:
    >>> from obra_control.validation import run_validation, print_report
    >>> report = run_validation(project, settings)
    >>> print_report(report)
"""

from __future__ import annotations

from .models import CheckResult, ValidationReport
from .registry import print_report, run_validation

__all__ = [
    "CheckResult",
    "ValidationReport",
    "run_validation",
    "print_report",
]
