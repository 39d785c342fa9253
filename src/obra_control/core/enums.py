"""Core enumerations used across the package."""

from __future__ import annotations

from enum import Enum


class ItemType(str, Enum):
    """Semantic type of one imported budget row.

    Values are strings to ease serialization and CLI interchange.
    """

    CAP = "CAP"
    SUB = "SUB"
    ITEM = "ITEM"
    TEXT = "TEXT"
    LUMP = "LUMP"
    SUBTOTAL = "SUBTOTAL"
    AIU = "AIU"
    TOTAL = "TOTAL"
    OTHER = "OTHER"


class FinanceEventType(str, Enum):
    """Kinds of disbursement recorded against a contract."""

    ADVANCE = "ADVANCE"
    PAYMENT = "PAYMENT"


__all__ = ["ItemType", "FinanceEventType"]
