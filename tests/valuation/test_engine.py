"""Tests for contract and executed values."""

from datetime import date

import pytest

from obra_control.core.enums import ItemType
from obra_control.core.models import Project, Report
from obra_control.core.numbers import MONEY_THOUSANDS
from obra_control.core.settings import Settings
from obra_control.ingestion.parsers.budget_table import parse_budget_rows
from obra_control.valuation.engine import (
    contract_value,
    executed_percent,
    executed_values,
    latest_report,
    previous_report,
    report_rows,
)

BUDGET_HEADER = ["ITEM", "DESCRIPCION", "UNIDAD", "CANTIDAD", "VALOR UNITARIO", "VALOR TOTAL"]


class TestContractValue:
    def test_explicit_total_row_wins(self, item_factory, settings):
        p = Project(id="p")
        p.budget.items = [
            item_factory("1.1.1", quantity=10, unit_price=100),
            item_factory("", ItemType.TOTAL, total=1_000_000, description="VALOR TOTAL"),
        ]
        assert contract_value(p, settings).value == 1_000_000

    def test_sum_excludes_rollups(self, item_factory, settings):
        """ITEM effective totals plus AIU/LUMP totals; SUBTOTAL never counted."""
        p = Project(id="p")
        p.budget.items = [
            item_factory("1", ItemType.CAP, total=1050, description="Capítulo"),
            item_factory("1.1.1", quantity=10, unit_price=100),
            item_factory("", ItemType.AIU, total=50, description="AIU"),
            item_factory("", ItemType.SUBTOTAL, total=1050, description="Subtotal"),
        ]
        assert contract_value(p, settings).value == 1050

    def test_unlabelled_total_row_is_ignored(self, item_factory, settings):
        p = Project(id="p")
        p.budget.items = [
            item_factory("1.1.1", quantity=2, unit_price=100),
            item_factory("", ItemType.LUMP, total=30, description="Señalización"),
            item_factory("", ItemType.TOTAL, total=999, description="TOTAL COSTO DIRECTO"),
        ]
        assert contract_value(p, settings).value == 230

    def test_revisions_apply(self, project, settings):  # pylint: disable=redefined-outer-name
        money = contract_value(project, settings)
        assert money.value == 2300
        assert money.currency == "COP"

    def test_thousands_rounding(self, item_factory):
        p = Project(id="p")
        p.budget.items = [item_factory("1.1.1", quantity=1, unit_price=1_249_999)]
        assert contract_value(p, Settings(money_decimals=MONEY_THOUSANDS)).value == 1_249_000

    def test_label_only_total_row_falls_back_to_sum(self, settings):
        """A "VALOR TOTAL" row with an empty total cell does not zero the contract."""
        p = Project(id="p")
        p.budget.items, _ = parse_budget_rows(
            [
                BUDGET_HEADER,
                ["1.1.1", "Excavación", "m3", 10, 100, None],
                [None, "VALOR TOTAL", None, None, None, None],
            ]
        )
        assert p.budget.items[-1].type == ItemType.TOTAL
        assert contract_value(p, settings).value == 1000

    def test_huge_parsed_quantity_does_not_raise(self, settings):
        p = Project(id="p")
        p.budget.items, _ = parse_budget_rows(
            [BUDGET_HEADER, ["1.1.1", "Excavación", "m3", "1e70", 1, None]]
        )
        report = Report(id="r", cutoff_date=date(2024, 1, 31), quantities={"1.1.1": 1e70})
        p.reports = [report]
        assert contract_value(p, settings).value == 1e70
        assert executed_values(p, report, settings).accumulated_value == 1e70


class TestExecutedValues:
    def test_period_and_accumulated(self, item_factory, settings):
        p = Project(id="p")
        p.budget.items = [item_factory("1.1.1", quantity=10, unit_price=100)]
        a = Report(id="a", cutoff_date=date(2024, 1, 31), quantities={"1.1.1": 5})
        b = Report(id="b", cutoff_date=date(2024, 2, 29), quantities={"1.1.1": 8})
        p.reports = [b, a]

        values = executed_values(p, b, settings)
        assert values.period_value == 300
        assert values.accumulated_value == 800
        assert executed_values(p, a, settings).period_value == 500

    def test_fixture_reports(self, project, settings):  # pylint: disable=redefined-outer-name
        rep_b = next(r for r in project.reports if r.id == "rep_b")
        values = executed_values(project, rep_b, settings)
        assert values.accumulated_value == 1300
        assert values.period_value == 800
        assert executed_percent(project, rep_b, settings) == pytest.approx(1300 / 2300)

    def test_percent_undefined_without_contract_value(self, settings):
        p = Project(id="p")
        report = Report(id="r", cutoff_date=date(2024, 1, 1))
        p.reports = [report]
        assert executed_percent(p, report, settings) is None


def test_previous_and_latest_report(project):  # pylint: disable=redefined-outer-name
    rep_a = next(r for r in project.reports if r.id == "rep_a")
    rep_b = next(r for r in project.reports if r.id == "rep_b")
    assert previous_report(project, rep_b) is rep_a
    assert previous_report(project, rep_a) is None
    assert latest_report(project) is rep_b
    assert latest_report(Project(id="empty")) is None


def test_report_rows(project, settings):  # pylint: disable=redefined-outer-name
    rep_b = next(r for r in project.reports if r.id == "rep_b")
    rows = {row["code"]: row for row in report_rows(project, rep_b, settings)}
    assert set(rows) == {"1.1.1", "1.1.2"}
    assert rows["1.1.1"]["contract_quantity"] == 12
    assert rows["1.1.1"]["previous_quantity"] == 5
    assert rows["1.1.1"]["period_quantity"] == 3
    assert rows["1.1.2"]["accumulated_value"] == 500
