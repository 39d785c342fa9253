"""Tests for the project aggregate and its JSON mapping."""

from datetime import date

import pytest

from obra_control.core.enums import FinanceEventType
from obra_control.core.models import (
    BudgetItem,
    DEFAULT_CURRENCY,
    DEFAULT_PROJECT_NAME,
    Change,
    ContractTerms,
    FinanceEvent,
    Project,
    Report,
    Revision,
    Suspension,
    default_contract_terms,
    new_id,
)


class TestRevision:
    def test_duplicate_change_code_rejected(self):
        with pytest.raises(ValueError, match="more than one change"):
            Revision(id="r", name="MOD 1", changes=[Change("1.1"), Change("1.1", quantity=2)])

    def test_set_change_replaces_existing(self):
        rev = Revision(id="r", name="MOD 1", changes=[Change("1.1", quantity=5)])
        rev.set_change(Change("1.1", unit_price=80))
        rev.set_change(Change("1.2", quantity=1))
        assert rev.changes == [Change("1.1", unit_price=80), Change("1.2", quantity=1)]
        assert rev.change_for("1.1").quantity is None
        assert rev.change_for("9.9") is None


def test_project_round_trip(project):  # pylint: disable=redefined-outer-name
    """to_dict/from_dict reproduces an equal aggregate."""
    project.suspensions.append(Suspension(date(2024, 1, 10), date(2024, 1, 20), "Lluvias"))
    project.finance.events.append(
        FinanceEvent(date(2024, 1, 15), FinanceEventType.ADVANCE, 500.0, "Anticipo")
    )
    restored = Project.from_dict(project.to_dict())
    assert restored == project


def test_empty_strings_survive_round_trip():
    """Stored empty name and currency are kept; defaults only fill absent keys."""
    p = Project(id="p", name="", contract=ContractTerms(currency=""))
    assert Project.from_dict(p.to_dict()) == p

    bare = Project.from_dict({"id": "p"})
    assert bare.name == DEFAULT_PROJECT_NAME
    assert bare.contract.currency == DEFAULT_CURRENCY


def test_suspension_uses_from_to_keys():
    data = Suspension(date(2024, 1, 1), date(2024, 1, 3)).to_dict()
    assert data == {"from": "2024-01-01", "to": "2024-01-03", "reason": ""}


def test_invalid_documents_raise():
    with pytest.raises(ValueError, match="cutoff_date"):
        Report.from_dict({"id": "rep_x"})
    with pytest.raises(ValueError, match="Unknown item type"):
        BudgetItem.from_dict({"id": "i", "type": "CHAPTER"})
    with pytest.raises(ValueError, match="Invalid ISO date"):
        Report.from_dict({"id": "rep_x", "cutoff_date": "31/01/2024"})
    with pytest.raises(ValueError, match="no id"):
        Project.from_dict({"name": "x"})


def test_finance_event_defaults_to_payment():
    event = FinanceEvent.from_dict({"date": "2024-01-01", "amount": 10})
    assert event.type == FinanceEventType.PAYMENT
    assert event.amount == 10.0


def test_report_quantity_defaults_to_zero():
    report = Report(id="r", cutoff_date=date(2024, 1, 1), quantities={"1.1": 3})
    assert report.quantity_for("1.1") == 3.0
    assert report.quantity_for("1.2") == 0.0


def test_default_contract_terms():
    terms = default_contract_terms(today=date(2024, 1, 1))
    assert terms.start_date == date(2024, 1, 1)
    assert terms.initial_end_date == date(2024, 6, 29)
    assert terms.currency == "COP"


def test_new_id_format():
    assert new_id("rep", "20240131").startswith("rep_20240131_")
    assert new_id("proj") != new_id("proj")
