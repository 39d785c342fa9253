"""Shared parser helpers: header-row detection and column lookup."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from obra_control.core.cells import EMPTY, Cell, Row, cell_text
from ..vocabulary import HeaderVocabulary


logger = logging.getLogger(__name__)


def header_texts(row: Row) -> List[str]:
    """Lower-cased, trimmed text of every cell in a row."""
    return [cell_text(c).lower() for c in row]


def find_header_row(
    rows: Sequence[Row],
    vocabulary: HeaderVocabulary,
    extra_hit: Optional[Callable[[Cell], bool]] = None,
) -> int:
    """Return the index of the most header-like row, or -1 if none scores.

    Only the first `vocabulary.scan_limit` rows are scanned; ties keep the
    earliest row. `extra_hit` counts additional cells as keyword hits.
    """
    best_idx, best_score = -1, 0
    for i, row in enumerate(rows[: vocabulary.scan_limit]):
        texts = [t for t in header_texts(row) if t]
        hits = sum(1 for t in texts if any(kw in t for kw in vocabulary.keywords))
        if extra_hit is not None:
            hits += sum(1 for c in row if extra_hit(c))
        score = vocabulary.keyword_weight * hits + min(len(texts), vocabulary.max_filled_bonus)
        if score > best_score:
            best_idx, best_score = i, score
    logger.debug("Header row: %d (score %d)", best_idx, best_score)
    return best_idx


def find_column(header: Sequence[str], synonyms: Iterable[str]) -> int:
    """Index of the first non-empty header cell containing any synonym, else -1."""
    synonyms = tuple(synonyms)
    for i, h in enumerate(header):
        if h and any(s in h for s in synonyms):
            return i
    return -1


def map_columns(header_row: Row, vocabulary: HeaderVocabulary) -> Dict[str, int]:
    """Map each semantic column name to its index in the header row (-1 if missing)."""
    header = header_texts(header_row)
    return {name: find_column(header, synonyms) for name, synonyms in vocabulary.columns.items()}


def pick_cell(row: Row, index: int) -> Cell:
    """Cell at `index`, or an empty cell for a missing column."""
    if 0 <= index < len(row):
        return row[index]
    return EMPTY


__all__ = [
    "header_texts",
    "find_header_row",
    "find_column",
    "map_columns",
    "pick_cell",
]
