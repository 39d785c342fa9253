"""Keyword tables used to recognise budget and planned-curve spreadsheets.

The tables target Spanish construction-budget vocabulary. They are plain data
so they can be extended from YAML without touching the scoring or
classification algorithms:

    replace: false          # true discards the built-in tables
    header:
      keywords: [code, description, quantity]
      columns:
        code: [code]
        quantity: [qty]
    classifier:
      aiu_prefixes: [overhead]
    planned:
      cost_columns: [amount]

Lists are lower-cased and appended to the defaults (duplicates dropped).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Tuple

import yaml

logger = logging.getLogger(__name__)

DEFAULT_HEADER_KEYWORDS: Tuple[str, ...] = (
    "item",
    "ítem",
    "codigo",
    "código",
    "descripcion",
    "descripción",
    "unidad",
    "und",
    "cantidad",
    "cant",
    "valor",
    "unit",
    "total",
    "vt",
    "vu",
)

# Column name -> substrings matched against the lower-cased header cell.
DEFAULT_COLUMN_SYNONYMS: Dict[str, Tuple[str, ...]] = {
    "code": ("item", "ítem", "codigo", "código"),
    "description": ("descripcion", "descripción", "desc"),
    "unit": ("unidad", "und"),
    "quantity": ("cantidad", "cant"),
    "unit_price": ("valor unit", "vr unit", "v/u", "vu"),
    "total": ("valor total", "vr total", "total", "vt"),
}

# The total column is optional: it can be derived as quantity x unit price.
REQUIRED_COLUMNS: Tuple[str, ...] = ("code", "description", "unit", "quantity", "unit_price")


@dataclass(frozen=True)
class HeaderVocabulary:
    """Header-row scoring and column-mapping tables.

    A row scores ``keyword_weight * hits + min(filled_cells, max_filled_bonus)``
    where hits counts cells containing any keyword.
    """

    keywords: Tuple[str, ...] = DEFAULT_HEADER_KEYWORDS
    columns: Mapping[str, Tuple[str, ...]] = field(
        default_factory=lambda: dict(DEFAULT_COLUMN_SYNONYMS)
    )
    scan_limit: int = 80
    keyword_weight: int = 3
    max_filled_bonus: int = 12


@dataclass(frozen=True)
class ClassifierVocabulary:
    """Markers for summary rows, matched case-insensitively on code and description."""

    subtotal_prefixes: Tuple[str, ...] = ("subtotal",)
    aiu_prefixes: Tuple[str, ...] = ("administr", "imprev", "utilidad")
    aiu_contains: Tuple[str, ...] = ("a.i.u",)
    aiu_exact: Tuple[str, ...] = ("aiu",)
    total_contains: Tuple[str, ...] = ("valor total", "incluye a.i.u", "incluye aiu")


@dataclass(frozen=True)
class PlannedVocabulary:
    """Column synonyms for the long planned-curve layout."""

    date_columns: Tuple[str, ...] = ("fecha", "date")
    cost_columns: Tuple[str, ...] = ("costo", "cost")
    min_date_columns: int = 3


@dataclass(frozen=True)
class Vocabulary:
    header: HeaderVocabulary = field(default_factory=HeaderVocabulary)
    classifier: ClassifierVocabulary = field(default_factory=ClassifierVocabulary)
    planned: PlannedVocabulary = field(default_factory=PlannedVocabulary)


DEFAULT_VOCABULARY = Vocabulary()


def _extend(base: Iterable[str], extra: Any) -> Tuple[str, ...]:
    if extra is None:
        return tuple(base)
    if isinstance(extra, str):
        extra = [extra]
    merged = list(base)
    for value in extra:
        token = str(value).strip().lower()
        if token and token not in merged:
            merged.append(token)
    return tuple(merged)


def _extend_section(section: Any, overrides: Mapping[str, Any], tuple_fields: Iterable[str]) -> Any:
    values: Dict[str, Any] = {}
    for name in tuple_fields:
        if name in overrides:
            values[name] = _extend(getattr(section, name), overrides[name])
    for name, value in overrides.items():
        if name not in values and hasattr(section, name) and isinstance(value, int):
            values[name] = value
    return replace(section, **values)


def extend_vocabulary(base: Vocabulary, data: Mapping[str, Any]) -> Vocabulary:
    """Return `base` extended with the keyword lists found in `data`."""
    if data.get("replace"):
        base = Vocabulary(
            header=HeaderVocabulary(keywords=(), columns={k: () for k in DEFAULT_COLUMN_SYNONYMS}),
            classifier=ClassifierVocabulary((), (), (), (), ()),
            planned=PlannedVocabulary((), ()),
        )

    header_data = data.get("header") or {}
    header = _extend_section(base.header, header_data, ("keywords",))
    columns_data = header_data.get("columns") or {}
    if columns_data:
        columns = dict(header.columns)
        for name, synonyms in columns_data.items():
            columns[name] = _extend(columns.get(name, ()), synonyms)
        header = replace(header, columns=columns)

    classifier = _extend_section(
        base.classifier,
        data.get("classifier") or {},
        ("subtotal_prefixes", "aiu_prefixes", "aiu_contains", "aiu_exact", "total_contains"),
    )
    planned = _extend_section(
        base.planned, data.get("planned") or {}, ("date_columns", "cost_columns")
    )
    return Vocabulary(header=header, classifier=classifier, planned=planned)


def load_vocabulary(path: Path) -> Vocabulary:
    """Load vocabulary extensions from YAML (defaults when the file is absent).

    Raises:
        ValueError: If the file exists but cannot be parsed.
    """
    if not path.exists():
        logger.debug("Vocabulary file not found, using defaults: %s", path)
        return DEFAULT_VOCABULARY
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ValueError(f"Failed to read vocabulary file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Vocabulary file {path} must contain a mapping")
    return extend_vocabulary(DEFAULT_VOCABULARY, data)


__all__ = [
    "DEFAULT_HEADER_KEYWORDS",
    "DEFAULT_COLUMN_SYNONYMS",
    "REQUIRED_COLUMNS",
    "HeaderVocabulary",
    "ClassifierVocabulary",
    "PlannedVocabulary",
    "Vocabulary",
    "DEFAULT_VOCABULARY",
    "extend_vocabulary",
    "load_vocabulary",
]
