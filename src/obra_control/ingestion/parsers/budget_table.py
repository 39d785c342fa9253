"""Budget table parser.

Turns decoded spreadsheet rows into BudgetItem records:

1. Locate the header row (keyword scoring over the first rows).
2. Map semantic columns (code, description, unit, quantity, unit price, total).
3. Classify every following row and build an item for each kept row.

Malformed cells never raise; problems are reported as warning strings next to
the (possibly empty) item list.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from tqdm import tqdm

from obra_control.core.cells import cell_text, is_empty, to_rows
from obra_control.core.codes import code_level, normalize_code, parent_code
from obra_control.core.enums import ItemType
from obra_control.core.models import BudgetItem, new_id
from obra_control.core.numbers import decimals_count, parse_number
from obra_control.core.settings import Settings
from ..vocabulary import DEFAULT_VOCABULARY, REQUIRED_COLUMNS, Vocabulary
from ._common import find_header_row, map_columns, pick_cell
from .classifier import classify_row


logger = logging.getLogger(__name__)

NO_HEADER_WARNING = "No header row found."


def parse_budget_rows(
    rows: Sequence[Sequence[Any]],
    settings: Optional[Settings] = None,
    vocabulary: Vocabulary = DEFAULT_VOCABULARY,
    *,
    show_progress: bool = False,
) -> Tuple[List[BudgetItem], List[str]]:
    """Parse a decoded budget sheet.

    Args:
        rows: Decoded rows, one sequence of raw cell values per spreadsheet row.
        settings: Supplies the quantity precision used for the precision warning.
        vocabulary: Header and classification keyword tables.
        show_progress: Display a tqdm progress bar.

    Returns:
        items: BudgetItem records in sheet order (OTHER rows dropped).
        warnings: Human-readable, non-fatal problems.
    """
    settings = settings or Settings()
    table = to_rows(rows)
    warnings: List[str] = []

    # ===================== MARK: Header and columns ===========================
    header_idx = find_header_row(table, vocabulary.header)
    if header_idx < 0:
        logger.warning(NO_HEADER_WARNING)
        return [], [NO_HEADER_WARNING]

    columns = map_columns(table[header_idx], vocabulary.header)
    logger.debug("Column mapping: %s", columns)
    missing = [name for name in REQUIRED_COLUMNS if columns.get(name, -1) < 0]
    if missing:
        msg = (
            f"Missing expected columns: {', '.join(missing)}. "
            "Rename them in the workbook or extend the header vocabulary."
        )
        logger.warning(msg)
        warnings.append(msg)

    # ===================== MARK: Main Loop ====================================
    items: List[BudgetItem] = []
    rowtype_stats: Dict[ItemType, int] = {k: 0 for k in ItemType}

    data_rows = range(header_idx + 1, len(table))
    for r in tqdm(
        data_rows,
        desc=f"{'Parsing budget':<31}",
        unit="rows",
        disable=not show_progress,
    ):
        row = table[r]
        if all(is_empty(c) for c in row):
            continue

        code_cell = pick_cell(row, columns.get("code", -1))
        desc_cell = pick_cell(row, columns.get("description", -1))
        unit_cell = pick_cell(row, columns.get("unit", -1))
        qty = parse_number(pick_cell(row, columns.get("quantity", -1)))
        unit_price = parse_number(pick_cell(row, columns.get("unit_price", -1)))
        total = parse_number(pick_cell(row, columns.get("total", -1)))

        item_type = classify_row(
            code_cell,
            desc_cell,
            qty,
            unit_cell,
            unit_price,
            total,
            vocabulary=vocabulary.classifier,
        )
        rowtype_stats[item_type] += 1
        logger.debug("Row %d: Type=%s", r, item_type.name)
        if item_type == ItemType.OTHER:
            continue

        code_str = cell_text(code_cell)
        desc_str = cell_text(desc_cell)

        # Subtotal text sometimes sits in the code column; show it as description.
        if (
            item_type == ItemType.SUBTOTAL
            and not desc_str
            and code_str.lower().startswith(vocabulary.classifier.subtotal_prefixes)
        ):
            desc_str, code_str = code_str, ""

        code_norm = normalize_code(code_str)
        quantity = qty if qty is not None else 0.0
        price = unit_price if unit_price is not None else 0.0
        items.append(
            BudgetItem(
                id=new_id("itm", str(r)),
                code=code_str,
                code_norm=code_norm,
                description=desc_str,
                unit=cell_text(unit_cell),
                quantity=quantity,
                unit_price=price,
                total=total if total is not None else quantity * price,
                parent_code=parent_code(code_norm),
                level=code_level(code_norm),
                type=item_type,
            )
        )

    # ===================== MARK: Post-pass ====================================
    extra = [
        it
        for it in items
        if it.type == ItemType.ITEM and decimals_count(it.quantity) > settings.qty_decimals
    ]
    if extra:
        msg = (
            f"{len(extra)} item quantity(ies) have more than "
            f"{settings.qty_decimals} decimals."
        )
        logger.warning(msg)
        warnings.append(msg)

    logger.info(
        "Parsed %d budget rows (%s)",
        len(items),
        ", ".join(f"{k.name}={v}" for k, v in rowtype_stats.items() if v),
    )
    return items, warnings


__all__ = ["NO_HEADER_WARNING", "parse_budget_rows"]
