"""Hierarchical budget code helpers.

Codes such as "1", "1.2" and "1.2.3" describe chapter, sub-chapter and item
levels. Alphanumeric codes ("NP 1") are item-level rows outside the numeric
hierarchy.
"""

from __future__ import annotations

import re
from typing import Any

_HIERARCHICAL_RE = re.compile(r"^\d+(\.\d+)*$")

# Level reported for alphanumeric codes.
ALPHANUMERIC_LEVEL = 99


def normalize_code(code: Any) -> str:
    """Trim a code and drop one trailing "." ("1." -> "1")."""
    if code is None:
        return ""
    s = str(code).strip()
    return s[:-1] if s.endswith(".") else s


def is_hierarchical_code(code_norm: str) -> bool:
    return bool(code_norm) and bool(_HIERARCHICAL_RE.match(code_norm))


def code_level(code_norm: str) -> int:
    """Depth of a normalized code: 0 if empty, 99 if alphanumeric."""
    if not code_norm:
        return 0
    if is_hierarchical_code(code_norm):
        return len(code_norm.split("."))
    return ALPHANUMERIC_LEVEL


def parent_code(code_norm: str) -> str:
    """Parent of a numeric hierarchical code ("1.2.3" -> "1.2"), else ""."""
    if not is_hierarchical_code(code_norm):
        return ""
    parts = code_norm.split(".")
    if len(parts) < 2:
        return ""
    return ".".join(parts[:-1])


__all__ = [
    "ALPHANUMERIC_LEVEL",
    "normalize_code",
    "is_hierarchical_code",
    "code_level",
    "parent_code",
]
