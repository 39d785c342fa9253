"""Tests for vocabulary extension and loading."""

import pytest

from obra_control.ingestion.vocabulary import (
    DEFAULT_COLUMN_SYNONYMS,
    DEFAULT_HEADER_KEYWORDS,
    DEFAULT_VOCABULARY,
    extend_vocabulary,
    load_vocabulary,
)


def test_extend_appends_lowercase_without_duplicates():
    vocab = extend_vocabulary(
        DEFAULT_VOCABULARY,
        {
            "header": {"keywords": ["Code", "item"], "columns": {"code": "Ref"}, "scan_limit": 10},
            "classifier": {"aiu_prefixes": ["Overhead"]},
            "planned": {"cost_columns": ["Amount"]},
        },
    )
    assert vocab.header.keywords == DEFAULT_HEADER_KEYWORDS + ("code",)
    assert vocab.header.columns["code"] == DEFAULT_COLUMN_SYNONYMS["code"] + ("ref",)
    assert vocab.header.columns["quantity"] == DEFAULT_COLUMN_SYNONYMS["quantity"]
    assert vocab.header.scan_limit == 10
    assert vocab.classifier.aiu_prefixes[-1] == "overhead"
    assert vocab.planned.cost_columns == ("costo", "cost", "amount")
    # Defaults are untouched
    assert DEFAULT_VOCABULARY.header.scan_limit == 80


def test_replace_discards_defaults():
    vocab = extend_vocabulary(DEFAULT_VOCABULARY, {"replace": True, "header": {"keywords": ["code"]}})
    assert vocab.header.keywords == ("code",)
    assert vocab.header.columns["code"] == ()
    assert vocab.classifier.subtotal_prefixes == ()


def test_load_missing_file_gives_defaults(tmp_path):
    assert load_vocabulary(tmp_path / "vocabulary.yaml") == DEFAULT_VOCABULARY


def test_load_file(tmp_path):
    path = tmp_path / "vocabulary.yaml"
    path.write_text("header:\n  columns:\n    quantity: [qty]\n", encoding="utf-8")
    vocab = load_vocabulary(path)
    assert "qty" in vocab.header.columns["quantity"]


def test_load_invalid_file(tmp_path):
    path = tmp_path / "vocabulary.yaml"
    path.write_text("[1, 2]\n", encoding="utf-8")
    with pytest.raises(ValueError, match="mapping"):
        load_vocabulary(path)
