"""Shared pytest fixtures: sample budget sheets and a populated project."""

from datetime import date
from typing import List, Optional

import pytest

from obra_control.core.codes import code_level, normalize_code, parent_code
from obra_control.core.enums import ItemType
from obra_control.core.models import BudgetItem, Change, Project, Report, Revision
from obra_control.core.settings import Settings


BUDGET_HEADER = ["ITEM", "DESCRIPCION", "UNIDAD", "CANTIDAD", "VALOR UNITARIO", "VALOR TOTAL"]


def make_item(
    code: str,
    item_type: ItemType = ItemType.ITEM,
    quantity: float = 0.0,
    unit_price: float = 0.0,
    total: Optional[float] = None,
    description: str = "",
) -> BudgetItem:
    """Build a BudgetItem with derived code fields."""
    code_norm = normalize_code(code)
    return BudgetItem(
        id=f"itm_{code_norm or description}",
        code=code,
        code_norm=code_norm,
        description=description,
        unit="m3" if item_type == ItemType.ITEM else "",
        quantity=quantity,
        unit_price=unit_price,
        total=quantity * unit_price if total is None else total,
        parent_code=parent_code(code_norm),
        level=code_level(code_norm),
        type=item_type,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def budget_rows() -> List[list]:
    """A decoded budget sheet: title rows, header, chapters, items and summary rows."""
    return [
        ["PRESUPUESTO DE OBRA", None, None, None, None, None],
        ["Contrato 045-2024", None, None, None, None, None],
        [None, None, None, None, None, None],
        BUDGET_HEADER,
        ["1", "PRELIMINARES", None, None, None, None],
        ["1.1", "Localización y replanteo", None, None, None, None],
        ["1.1.1", "Replanteo topográfico", "m2", 100, 50, 5000],
        ["1.1.2", "Descapote manual", "m2", "12,5", "1.000,00", None],
        ["NP 1", "Cerramiento provisional", "ml", 10, 200, 2000],
        ["SUBTOTAL PRELIMINARES", None, None, None, None, 8500],
        [None, "Señalización de obra", None, None, None, 700],
        [None, "Nota: precios incluyen transporte", None, None, None, None],
        [None, "Administración 10%", None, None, None, 920],
        [None, "Imprevistos 5%", None, None, None, 460],
        [None, "Utilidad 5%", None, None, None, 460],
        [None, "VALOR TOTAL DEL CONTRATO", None, None, None, 22040],
    ]


@pytest.fixture
def project() -> Project:
    """Project with two items, one revision and two reports.

    Items: 1.1.1 (qty 10, price 100) and 1.1.2 (qty 20, price 50); an AIU row
    of 100. Revision MOD 1 raises 1.1.1 to qty 12. Contract value is
    12*100 + 20*50 + 100 = 2300.
    """
    p = Project(id="proj_test")
    p.budget.items = [
        make_item("1", ItemType.CAP, description="Preliminares"),
        make_item("1.1.1", quantity=10, unit_price=100, description="Excavación"),
        make_item("1.1.2", quantity=20, unit_price=50, description="Relleno"),
        make_item("", ItemType.AIU, total=100, description="Administración"),
    ]
    p.budget.revisions = [
        Revision(id="rev_1", name="MOD 1", changes=[Change("1.1.1", quantity=12)])
    ]
    p.reports = [
        Report(
            id="rep_b",
            cutoff_date=date(2024, 2, 29),
            label="Mes 2",
            quantities={"1.1.1": 8.0, "1.1.2": 10.0},
        ),
        Report(
            id="rep_a",
            cutoff_date=date(2024, 1, 31),
            label="Mes 1",
            quantities={"1.1.1": 5.0},
        ),
    ]
    return p


@pytest.fixture
def item_factory():
    """The `make_item` helper, for tests that build their own budgets."""
    return make_item
