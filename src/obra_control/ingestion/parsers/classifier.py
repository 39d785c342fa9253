"""Budget row classification.

Assigns an ItemType to one decoded row using ordered first-match rules:

  1. No code and no description          -> OTHER
  2. Starts with a subtotal marker        -> SUBTOTAL
  3. Administration/contingency/profit    -> AIU
  4. Grand-total marker                   -> TOTAL
  5. No code, has description             -> LUMP if it carries a total, else TEXT
  6. Numeric hierarchical code            -> CAP (depth 1), SUB (depth 2), ITEM (deeper)
  7. Any other code ("NP 1")              -> ITEM
  8. Otherwise                            -> OTHER

Markers in rules 2-4 are matched case-insensitively against both the code and
the description.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Optional

from obra_control.core.cells import cell_text, to_cell
from obra_control.core.codes import code_level, is_hierarchical_code, normalize_code
from obra_control.core.enums import ItemType
from ..vocabulary import DEFAULT_VOCABULARY, ClassifierVocabulary


def _text(value: Any) -> str:
    return cell_text(to_cell(value))


def _is_finite_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _starts_with_any(text: str, prefixes: Iterable[str]) -> bool:
    return any(text.startswith(p) for p in prefixes)


def _contains_any(text: str, needles: Iterable[str]) -> bool:
    return any(n in text for n in needles)


def _is_aiu(text: str, vocabulary: ClassifierVocabulary) -> bool:
    return (
        _starts_with_any(text, vocabulary.aiu_prefixes)
        or _contains_any(text, vocabulary.aiu_contains)
        or text in vocabulary.aiu_exact
    )


def classify_row(
    code: Any,
    description: Any,
    quantity: Optional[float] = None,
    unit: Any = None,
    unit_price: Optional[float] = None,
    total: Optional[float] = None,
    *,
    vocabulary: ClassifierVocabulary = DEFAULT_VOCABULARY.classifier,
) -> ItemType:
    """Classify one budget row.

    Args:
        code: Code cell (raw value or Cell).
        description: Description cell (raw value or Cell).
        quantity: Parsed quantity (unused by the rules, kept for the row contract).
        unit: Unit cell (unused by the rules).
        unit_price: Parsed unit price (unused by the rules).
        total: Parsed total; a finite number turns an uncoded row into LUMP.
        vocabulary: Marker tables.

    Returns:
        The ItemType of the row.

    Examples:
        >>> classify_row("1.2.3", "Excavación")
        <ItemType.ITEM: 'ITEM'>
        >>> classify_row("", "SUBTOTAL CAPITULO 1")
        <ItemType.SUBTOTAL: 'SUBTOTAL'>
    """
    code_raw = _text(code)
    desc_raw = _text(description)
    code_low = code_raw.lower()
    desc_low = desc_raw.lower()

    if not code_raw and not desc_raw:
        return ItemType.OTHER

    if _starts_with_any(code_low, vocabulary.subtotal_prefixes) or _starts_with_any(
        desc_low, vocabulary.subtotal_prefixes
    ):
        return ItemType.SUBTOTAL

    if _is_aiu(desc_low, vocabulary) or _is_aiu(code_low, vocabulary):
        return ItemType.AIU

    if _contains_any(desc_low, vocabulary.total_contains) or _contains_any(
        code_low, vocabulary.total_contains
    ):
        return ItemType.TOTAL

    if not code_raw:
        return ItemType.LUMP if _is_finite_number(total) else ItemType.TEXT

    code_norm = normalize_code(code_raw)
    if is_hierarchical_code(code_norm):
        level = code_level(code_norm)
        if level == 1:
            return ItemType.CAP
        if level == 2:
            return ItemType.SUB
        return ItemType.ITEM

    if code_norm:
        return ItemType.ITEM

    return ItemType.OTHER


__all__ = ["classify_row"]
