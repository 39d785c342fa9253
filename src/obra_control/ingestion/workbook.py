"""Workbook reader: the boundary to the spreadsheet decoding library.

Parsers never touch files. This module decodes a workbook sheet (or a CSV
file) into plain rows of raw cell values and hands them over.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Union

import pandas as pd

logger = logging.getLogger(__name__)

SheetRef = Union[str, int]


def sheet_names(path: Path) -> List[str]:
    """List the sheet names of a workbook (a CSV file has a single unnamed sheet)."""
    if path.suffix.lower() == ".csv":
        return [path.stem]
    with pd.ExcelFile(path) as xls:
        return [str(name) for name in xls.sheet_names]


def read_sheet_rows(path: Path, sheet_name: SheetRef = 0) -> List[List[Any]]:
    """Decode one sheet into rows of raw values (None for empty cells).

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file or sheet cannot be decoded.
    """
    if not path.exists():
        raise FileNotFoundError(f"Workbook not found: {path}")
    try:
        if path.suffix.lower() == ".csv":
            df = pd.read_csv(path, header=None, dtype=object, encoding="utf-8-sig")
        else:
            df = pd.read_excel(path, sheet_name=sheet_name, header=None)
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise ValueError(f"Failed to read workbook {path}: {e}") from e

    rows = [
        [None if pd.isna(v) else v for v in row]
        for row in df.itertuples(index=False, name=None)
    ]
    logger.debug("Read %d rows x %d columns from %s [%s]", len(rows), df.shape[1], path, sheet_name)
    return rows


__all__ = ["sheet_names", "read_sheet_rows"]
