"""Mini README: Flat master data records and a generic registry.

Structure:
    * Project, Supplier, Customer, CashAccount, RevenueCategory - records.
    * RecordDirectory - add/update/delete/get/list over one record type.
    * demo_* helpers - deterministic seed data for previews.

Each directory assigns identifiers from its own prefix and keeps insertion
order, which is the order lists are shown in.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from datetime import date
from typing import Dict, Generic, Iterable, List, Optional, Type, TypeVar

from ..errors import RecordNotFoundError, ValidationError, require_name
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class Project:
    record_id: str
    name: str
    address: str = ""
    start_date: Optional[date] = None


@dataclass(slots=True)
class Supplier:
    record_id: str
    name: str
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


@dataclass(slots=True)
class Customer:
    record_id: str
    name: str
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


@dataclass(slots=True)
class CashAccount:
    """Bank account or petty cash box; ``balance`` is the opening balance."""

    record_id: str
    name: str
    bank: Optional[str] = None
    agency: Optional[str] = None
    account_number: Optional[str] = None
    balance: float = 0.0


@dataclass(slots=True)
class RevenueCategory:
    record_id: str
    name: str


R = TypeVar("R", Project, Supplier, Customer, CashAccount, RevenueCategory)


class RecordDirectory(Generic[R]):
    """In-memory registry of one kind of master record."""

    def __init__(self, record_type: Type[R], id_prefix: str, records: Optional[Iterable[R]] = None) -> None:
        self.record_type = record_type
        self.id_prefix = id_prefix
        self._records: Dict[str, R] = {}
        self._sequence = 0
        self._editable = {f.name for f in fields(record_type)} - {"record_id"}
        for record in records or ():
            if record.record_id in self._records:
                raise ValidationError(f"Record {record.record_id} already exists.")
            self._records[record.record_id] = record
        LOGGER.debug(
            "%s directory initialised with %s records", record_type.__name__, len(self._records)
        )

    def _next_id(self) -> str:
        while True:
            self._sequence += 1
            candidate = f"{self.id_prefix}{self._sequence}"
            if candidate not in self._records:
                return candidate

    def _check_fields(self, values: Dict[str, object]) -> Dict[str, object]:
        unknown = set(values) - self._editable
        if unknown:
            raise ValidationError(
                f"Unsupported {self.record_type.__name__} fields: {', '.join(sorted(unknown))}"
            )
        if "name" in values:
            values["name"] = require_name(values["name"])
        if "start_date" in values and isinstance(values["start_date"], str):
            try:
                values["start_date"] = date.fromisoformat(values["start_date"][:10])
            except ValueError as error:
                raise ValidationError(f"Invalid ISO date: {values['start_date']}") from error
        if "balance" in values:
            try:
                values["balance"] = float(values["balance"] or 0.0)
            except (TypeError, ValueError) as error:
                raise ValidationError("Balance must be numeric.") from error
        return values

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    def list_records(self) -> List[R]:
        return list(self._records.values())

    def get(self, record_id: str) -> R:
        if record_id not in self._records:
            raise RecordNotFoundError(record_id)
        return self._records[record_id]

    def name_of(self, record_id: Optional[str], default: str = "N/A") -> str:
        """Display name of a record, or ``default`` when it is unknown."""

        record = self._records.get(record_id) if record_id else None
        return record.name if record else default

    def add(self, **values: object) -> R:
        values = self._check_fields(dict(values))
        if "name" not in values:
            raise ValidationError("The name is required.")
        record = self.record_type(record_id=self._next_id(), **values)
        self._records[record.record_id] = record
        LOGGER.info("Added %s %s (%s)", self.record_type.__name__, record.record_id, record.name)
        return record

    def update(self, record_id: str, **changes: object) -> R:
        current = self.get(record_id)
        updated = replace(current, **self._check_fields(dict(changes)))
        self._records[record_id] = updated
        LOGGER.info("Updated %s %s", self.record_type.__name__, record_id)
        return updated

    def delete(self, record_id: str) -> R:
        record = self.get(record_id)
        del self._records[record_id]
        LOGGER.info("Deleted %s %s", self.record_type.__name__, record_id)
        return record

    def export_snapshot(self) -> List[Dict[str, object]]:
        snapshot = []
        for record in self._records.values():
            payload = asdict(record)
            if isinstance(payload.get("start_date"), date):
                payload["start_date"] = payload["start_date"].isoformat()
            snapshot.append(payload)
        return snapshot


def demo_projects() -> List[Project]:
    return [
        Project("p1", "Sky Tower Residential", "123 Main Street", date(2024, 1, 15)),
        Project("p2", "Central Office Complex", "456 Oak Avenue", date(2024, 3, 1)),
    ]


def demo_suppliers() -> List[Supplier]:
    return [
        Supplier("s1", "Global Building Materials", email="sales@global.example"),
        Supplier("s2", "Heavy Machinery Rental Inc.", email="rental@hmr.example"),
    ]


def demo_customers() -> List[Customer]:
    return [
        Customer("c1", "Future Home Buyers LLC", email="contact@fhb.example"),
        Customer("c2", "Prime Commercial Realty", email="info@prime.example"),
    ]


def demo_cash_accounts() -> List[CashAccount]:
    return [
        CashAccount("ca1", "Main Bank Account", bank="Banco Alfa", agency="001", account_number="12345-6", balance=100000.0),
        CashAccount("ca2", "Petty Cash", balance=5000.0),
    ]


def demo_revenue_categories() -> List[RevenueCategory]:
    return [RevenueCategory("rc1", "Unit Sale"), RevenueCategory("rc2", "Service Fee")]
