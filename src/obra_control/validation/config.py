"""Validation configuration constants.

This module centralizes validation tolerances and severity rules.

Severity Levels:
    - "error": Structural problems that make valuation ambiguous
    - "warning": Issues that warrant review but may be legitimate
"""

from __future__ import annotations

# ============================================================================
# TOLERANCE CONSTANTS
# ============================================================================

# Explicit "VALOR TOTAL" row vs summed budget (in contract currency)
CONTRACT_TOTAL_ABS_TOL = 1.0

# Quantity comparisons between reports and against the contract
QUANTITY_ABS_TOL = 1e-9


# ============================================================================
# SEVERITY RULES
# ============================================================================

_SEVERITY_MAP = {
    # The two contract value paths may legitimately differ (rounding, AIU on
    # a different base), so divergence is only reported.
    "contract_total_consistency": "warning",
    "quantity_precision": "warning",
    # Report quantities are keyed by code; duplicates make them ambiguous.
    "duplicate_item_codes": "error",
    "revision_targets": "warning",
    "negative_period_quantities": "warning",
    "executed_exceeds_contract": "warning",
}


def get_severity(check_id: str) -> str:
    """Get severity level for a check.

    Raises:
        ValueError: If check_id is unknown.

    Examples:
        >>> get_severity("duplicate_item_codes")
        'error'
    """
    if check_id not in _SEVERITY_MAP:
        raise ValueError(f"Unknown check_id: {check_id}")
    return _SEVERITY_MAP[check_id]
