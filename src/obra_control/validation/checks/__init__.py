"""Validation checks base interface.

This module defines the protocol (interface) that all validation checks must implement.
Each check is responsible for one consistency aspect of a project (e.g., duplicate
item codes, report quantities going backwards).

To implement a new validation check:

1. Create a new file in this directory (e.g., `my_check.py`)
2. Define a class that implements the ValidationCheck protocol
3. Implement the required methods: `validate()` and `applies_to()`
4. Add the check to the ALL_CHECKS list in registry.py
"""

from __future__ import annotations

from typing import List, Protocol

from obra_control.core.models import Project
from obra_control.core.settings import Settings
from ..models import CheckResult


class ValidationCheck(Protocol):
    """Protocol defining the interface for validation checks.

    Methods:
        validate: Run the validation check and return results.
        applies_to: Determine if the check runs under the given settings.
    """

    def validate(self, project: Project, settings: Settings) -> List[CheckResult]:
        """Run the validation check.

        Args:
            project: Project to validate.
            settings: Active settings (rounding and precision).

        Returns:
            List of CheckResult objects.
        """
        ...

    def applies_to(self, settings: Settings) -> bool:
        """Return False to skip the check under these settings."""
        ...


__all__ = ["ValidationCheck"]
