"""Tests for budget row classification."""

import pytest

from obra_control.core.cells import NumberCell, TextCell
from obra_control.core.enums import ItemType
from obra_control.ingestion.parsers.classifier import classify_row
from obra_control.ingestion.vocabulary import ClassifierVocabulary


@pytest.mark.parametrize("code, description", [(None, None), ("", "   "), (float("nan"), None)])
def test_no_code_no_description_is_other(code, description):
    assert classify_row(code, description, total=100.0) == ItemType.OTHER


class TestSummaryRows:
    """Subtotal, AIU and total markers match code or description, case-insensitively."""

    @pytest.mark.parametrize(
        "code, description, expected",
        [
            ("", "SUBTOTAL CAPITULO 1", ItemType.SUBTOTAL),
            ("Subtotal", None, ItemType.SUBTOTAL),
            ("", "Administración 10%", ItemType.AIU),
            ("", "IMPREVISTOS", ItemType.AIU),
            ("", "Utilidad 5%", ItemType.AIU),
            ("", "A.I.U. 25%", ItemType.AIU),
            ("AIU", "", ItemType.AIU),
            ("", "VALOR TOTAL", ItemType.TOTAL),
            ("", "Total incluye AIU", ItemType.TOTAL),
        ],
    )
    def test_markers(self, code, description, expected):
        assert classify_row(code, description) == expected

    def test_subtotal_wins_over_hierarchical_code(self):
        assert classify_row("1.2", "Subtotal excavaciones") == ItemType.SUBTOTAL


class TestUncodedRows:
    def test_with_total_is_lump(self):
        assert classify_row("", "Señalización", total=700.0) == ItemType.LUMP

    @pytest.mark.parametrize("total", [None, float("nan"), float("inf")])
    def test_without_finite_total_is_text(self, total):
        assert classify_row("", "Nota aclaratoria", total=total) == ItemType.TEXT


class TestCodedRows:
    @pytest.mark.parametrize(
        "code, expected",
        [
            ("1", ItemType.CAP),
            ("1.", ItemType.CAP),
            ("1.2", ItemType.SUB),
            ("1.2.3", ItemType.ITEM),
            ("1.2.3.4", ItemType.ITEM),
            ("NP 1", ItemType.ITEM),
            (NumberCell(2.0), ItemType.CAP),
            (TextCell(" 3.1 "), ItemType.SUB),
        ],
    )
    def test_hierarchy(self, code, expected):
        assert classify_row(code, "Descripción") == expected

    def test_code_without_description(self):
        assert classify_row("1.1.1", None) == ItemType.ITEM

    def test_dot_only_code_is_other(self):
        """A code that normalizes to nothing falls through every rule."""
        assert classify_row(".", None) == ItemType.OTHER


def test_custom_vocabulary():
    vocab = ClassifierVocabulary(subtotal_prefixes=("sub-total",), aiu_prefixes=("overhead",))
    assert classify_row("", "Sub-total chapter 1", vocabulary=vocab) == ItemType.SUBTOTAL
    assert classify_row("", "Overhead 10%", vocabulary=vocab) == ItemType.AIU
    assert classify_row("", "Subtotal", vocabulary=vocab) == ItemType.TEXT
