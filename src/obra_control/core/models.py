"""Project aggregate and its embedded value types.

A Project owns everything: parties, contract terms, suspensions, the imported
budget with its revisions, progress reports, finance events and the planned
cost curve. Child records are plain values embedded in the project; nothing is
referenced across projects.

Every type maps to and from a JSON-compatible dict (`to_dict` / `from_dict`).
Dates are stored as ISO ``YYYY-MM-DD`` strings.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, List, Mapping, Optional

from .enums import FinanceEventType, ItemType

DEFAULT_CURRENCY = "COP"
DEFAULT_PROJECT_NAME = "Proyecto sin nombre"
DEFAULT_CONTRACT_DAYS = 180


def new_id(prefix: str, suffix: Optional[str] = None) -> str:
    """Generate a random identifier such as ``proj_3f2a9c1b7d4e``."""
    token = uuid.uuid4().hex[:12]
    return f"{prefix}_{token}" if suffix is None else f"{prefix}_{suffix}_{token}"


def _parse_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError as e:
        raise ValueError(f"Invalid ISO date: {value!r}") from e


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _float(value: Any, default: float = 0.0) -> float:
    if value is None:
        return default
    return float(value)


def _optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


# ===================== MARK: Parties and contract =========================


@dataclass
class Party:
    name: str = ""
    tax_id: str = ""
    representative: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "tax_id": self.tax_id, "representative": self.representative}

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "Party":
        data = data or {}
        return cls(
            name=str(data.get("name", "")),
            tax_id=str(data.get("tax_id", "")),
            representative=str(data.get("representative", "")),
        )


@dataclass
class Parties:
    owner: Party = field(default_factory=Party)
    contractor: Party = field(default_factory=Party)
    supervisor: Party = field(default_factory=Party)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "owner": self.owner.to_dict(),
            "contractor": self.contractor.to_dict(),
            "supervisor": self.supervisor.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "Parties":
        data = data or {}
        return cls(
            owner=Party.from_dict(data.get("owner")),
            contractor=Party.from_dict(data.get("contractor")),
            supervisor=Party.from_dict(data.get("supervisor")),
        )


@dataclass
class AIU:
    """Administration, contingency and profit percentages."""

    administration: float = 0.0
    contingency: float = 0.0
    profit: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "administration": self.administration,
            "contingency": self.contingency,
            "profit": self.profit,
        }

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "AIU":
        data = data or {}
        return cls(
            administration=_float(data.get("administration")),
            contingency=_float(data.get("contingency")),
            profit=_float(data.get("profit")),
        )


@dataclass
class ContractTerms:
    start_date: Optional[date] = None
    initial_end_date: Optional[date] = None
    currency: str = DEFAULT_CURRENCY
    aiu: AIU = field(default_factory=AIU)
    notes: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start_date": _iso(self.start_date),
            "initial_end_date": _iso(self.initial_end_date),
            "currency": self.currency,
            "aiu": self.aiu.to_dict(),
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ContractTerms":
        data = data or {}
        return cls(
            start_date=_parse_date(data.get("start_date")),
            initial_end_date=_parse_date(data.get("initial_end_date")),
            currency=str(data.get("currency", DEFAULT_CURRENCY)),
            aiu=AIU.from_dict(data.get("aiu")),
            notes=str(data.get("notes", "")),
        )


@dataclass
class Suspension:
    """Interval during which contract execution is frozen (both ends inclusive)."""

    start: Optional[date] = None
    end: Optional[date] = None
    reason: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"from": _iso(self.start), "to": _iso(self.end), "reason": self.reason}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Suspension":
        return cls(
            start=_parse_date(data.get("from")),
            end=_parse_date(data.get("to")),
            reason=str(data.get("reason", "")),
        )


# ===================== MARK: Budget =======================================


@dataclass(frozen=True)
class BudgetItem:
    """One imported budget row.

    `quantity`, `unit_price` and `total` are the base (contract) values;
    revisions never modify them.
    """

    id: str
    code: str
    code_norm: str
    description: str
    unit: str
    quantity: float
    unit_price: float
    total: float
    parent_code: str
    level: int
    type: ItemType

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "code": self.code,
            "code_norm": self.code_norm,
            "description": self.description,
            "unit": self.unit,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "total": self.total,
            "parent_code": self.parent_code,
            "level": self.level,
            "type": self.type.value,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BudgetItem":
        try:
            item_type = ItemType(data.get("type"))
        except ValueError as e:
            raise ValueError(f"Unknown item type: {data.get('type')!r}") from e
        return cls(
            id=str(data.get("id", "")),
            code=str(data.get("code", "")),
            code_norm=str(data.get("code_norm", "")),
            description=str(data.get("description", "")),
            unit=str(data.get("unit", "")),
            quantity=_float(data.get("quantity")),
            unit_price=_float(data.get("unit_price")),
            total=_float(data.get("total")),
            parent_code=str(data.get("parent_code", "")),
            level=int(data.get("level", 0)),
            type=item_type,
        )


@dataclass(frozen=True)
class Change:
    """New quantity and/or unit price for one item code within a revision."""

    code_norm: str
    quantity: Optional[float] = None
    unit_price: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"code_norm": self.code_norm, "quantity": self.quantity, "unit_price": self.unit_price}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Change":
        return cls(
            code_norm=str(data.get("code_norm", "")),
            quantity=_optional_float(data.get("quantity")),
            unit_price=_optional_float(data.get("unit_price")),
        )


@dataclass
class Revision:
    """A budget amendment (contract modification) applied on top of the base.

    `show` only controls whether the revision gets its own display column.
    """

    id: str
    name: str
    effective_date: Optional[date] = None
    changes: List[Change] = field(default_factory=list)
    show: bool = True

    def __post_init__(self) -> None:
        """Validate one change per code."""
        seen = set()
        for change in self.changes:
            if change.code_norm in seen:
                raise ValueError(
                    f"Revision {self.name!r} has more than one change for code {change.code_norm!r}"
                )
            seen.add(change.code_norm)

    def change_for(self, code_norm: str) -> Optional[Change]:
        for change in self.changes:
            if change.code_norm == code_norm:
                return change
        return None

    def set_change(self, change: Change) -> None:
        """Add a change, replacing any existing change for the same code."""
        for i, existing in enumerate(self.changes):
            if existing.code_norm == change.code_norm:
                self.changes[i] = change
                return
        self.changes.append(change)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "effective_date": _iso(self.effective_date),
            "changes": [c.to_dict() for c in self.changes],
            "show": self.show,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Revision":
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            effective_date=_parse_date(data.get("effective_date")),
            changes=[Change.from_dict(c) for c in data.get("changes") or []],
            show=bool(data.get("show", True)),
        )


@dataclass
class Budget:
    items: List[BudgetItem] = field(default_factory=list)
    revisions: List[Revision] = field(default_factory=list)

    def items_of_type(self, *types: ItemType) -> List[BudgetItem]:
        return [it for it in self.items if it.type in types]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [it.to_dict() for it in self.items],
            "revisions": [r.to_dict() for r in self.revisions],
        }

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "Budget":
        data = data or {}
        return cls(
            items=[BudgetItem.from_dict(it) for it in data.get("items") or []],
            revisions=[Revision.from_dict(r) for r in data.get("revisions") or []],
        )


# ===================== MARK: Progress, finance, plan ======================


@dataclass
class Report:
    """Progress cut-off holding absolute cumulative quantities per item code."""

    id: str
    cutoff_date: date
    label: str = ""
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    notes: str = ""
    quantities: Dict[str, float] = field(default_factory=dict)

    def quantity_for(self, code_norm: str) -> float:
        return float(self.quantities.get(code_norm, 0.0))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "cutoff_date": _iso(self.cutoff_date),
            "label": self.label,
            "period_start": _iso(self.period_start),
            "period_end": _iso(self.period_end),
            "notes": self.notes,
            "quantities": dict(self.quantities),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Report":
        cutoff = _parse_date(data.get("cutoff_date"))
        if cutoff is None:
            raise ValueError(f"Report {data.get('id')!r} has no cutoff_date")
        return cls(
            id=str(data.get("id", "")),
            cutoff_date=cutoff,
            label=str(data.get("label", "")),
            period_start=_parse_date(data.get("period_start")),
            period_end=_parse_date(data.get("period_end")),
            notes=str(data.get("notes", "")),
            quantities={str(k): float(v) for k, v in (data.get("quantities") or {}).items()},
        )


@dataclass(frozen=True)
class FinanceEvent:
    """Absolute disbursement entry (not cumulative)."""

    date: date
    type: FinanceEventType = FinanceEventType.PAYMENT
    amount: float = 0.0
    note: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": _iso(self.date),
            "type": self.type.value,
            "amount": self.amount,
            "note": self.note,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FinanceEvent":
        event_date = _parse_date(data.get("date"))
        if event_date is None:
            raise ValueError("Finance event has no date")
        try:
            event_type = FinanceEventType(data.get("type", FinanceEventType.PAYMENT.value))
        except ValueError as e:
            raise ValueError(f"Unknown finance event type: {data.get('type')!r}") from e
        return cls(
            date=event_date,
            type=event_type,
            amount=_float(data.get("amount")),
            note=str(data.get("note", "")),
        )


@dataclass
class Finance:
    events: List[FinanceEvent] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"events": [e.to_dict() for e in self.events]}

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "Finance":
        data = data or {}
        return cls(events=[FinanceEvent.from_dict(e) for e in data.get("events") or []])


@dataclass(frozen=True)
class PlannedCurvePoint:
    date: date
    planned_cost_accum: float

    def to_dict(self) -> Dict[str, Any]:
        return {"date": _iso(self.date), "planned_cost_accum": self.planned_cost_accum}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PlannedCurvePoint":
        point_date = _parse_date(data.get("date"))
        if point_date is None:
            raise ValueError("Planned curve point has no date")
        return cls(date=point_date, planned_cost_accum=_float(data.get("planned_cost_accum")))


@dataclass
class Planned:
    curve: List[PlannedCurvePoint] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"curve": [p.to_dict() for p in self.curve]}

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "Planned":
        data = data or {}
        return cls(curve=[PlannedCurvePoint.from_dict(p) for p in data.get("curve") or []])


# ===================== MARK: Project ======================================


@dataclass
class Project:
    id: str
    name: str = DEFAULT_PROJECT_NAME
    parties: Parties = field(default_factory=Parties)
    contract: ContractTerms = field(default_factory=ContractTerms)
    suspensions: List[Suspension] = field(default_factory=list)
    budget: Budget = field(default_factory=Budget)
    reports: List[Report] = field(default_factory=list)
    finance: Finance = field(default_factory=Finance)
    planned: Planned = field(default_factory=Planned)

    @property
    def currency(self) -> str:
        return self.contract.currency or DEFAULT_CURRENCY

    def sorted_reports(self) -> List[Report]:
        return sorted(self.reports, key=lambda r: r.cutoff_date)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "parties": self.parties.to_dict(),
            "contract": self.contract.to_dict(),
            "suspensions": [s.to_dict() for s in self.suspensions],
            "budget": self.budget.to_dict(),
            "reports": [r.to_dict() for r in self.reports],
            "finance": self.finance.to_dict(),
            "planned": self.planned.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Project":
        if not data.get("id"):
            raise ValueError("Project has no id")
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", DEFAULT_PROJECT_NAME)),
            parties=Parties.from_dict(data.get("parties")),
            contract=ContractTerms.from_dict(data.get("contract")),
            suspensions=[Suspension.from_dict(s) for s in data.get("suspensions") or []],
            budget=Budget.from_dict(data.get("budget")),
            reports=[Report.from_dict(r) for r in data.get("reports") or []],
            finance=Finance.from_dict(data.get("finance")),
            planned=Planned.from_dict(data.get("planned")),
        )


def default_contract_terms(today: Optional[date] = None) -> ContractTerms:
    """Contract terms starting today and ending after the default duration."""
    today = today or date.today()
    return ContractTerms(
        start_date=today,
        initial_end_date=today + timedelta(days=DEFAULT_CONTRACT_DAYS),
    )


__all__ = [
    "DEFAULT_CURRENCY",
    "DEFAULT_PROJECT_NAME",
    "new_id",
    "Party",
    "Parties",
    "AIU",
    "ContractTerms",
    "Suspension",
    "BudgetItem",
    "Change",
    "Revision",
    "Budget",
    "Report",
    "FinanceEvent",
    "Finance",
    "PlannedCurvePoint",
    "Planned",
    "Project",
    "default_contract_terms",
]
