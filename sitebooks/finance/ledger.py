"""Mini README: In-memory expense/revenue ledger with settlement tracking.

Structure:
    * EntryCategory, EntryType, TransactionType, EntryStatus - enums.
    * LineItem, ExpenseEntry, RevenueEntry, Settlement - ledger records.
    * resolve_line_item_amount, compute_total, derive_status - pure helpers
      used after every mutation so derived fields cannot drift.
    * FinanceLedger - owns entries and the append-only settlement log.

Entries start unsettled. Settlements only ever add to ``settled_amount``;
the status is always re-derived from ``settled_amount`` and
``total_amount`` rather than patched by hand. Over-settlement is accepted
but logged so operators can spot it.

Entries handed out by the ledger are copies: editing one never changes the
ledger, only ``update_entry`` and ``apply_settlement`` do.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple, Union

from ..errors import EntryNotFoundError, ValidationError
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


class _CoercibleEnum(str, Enum):
    @classmethod
    def from_str(cls, value: object):
        """Coerce arbitrary casing or enum members into a valid value."""

        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except (ValueError, AttributeError) as error:
            raise ValidationError(f"Unsupported {cls.__name__}: {value}") from error


class EntryCategory(_CoercibleEnum):
    """Which ledger an entry or settlement belongs to."""

    EXPENSE = "expense"
    REVENUE = "revenue"


class EntryType(_CoercibleEnum):
    ACCOUNTING = "accounting"
    FINANCIAL = "financial"


class TransactionType(_CoercibleEnum):
    PRODUCT = "product"
    SERVICE = "service"


class EntryStatus(str, Enum):
    """Settlement progress of an entry."""

    UNPAID = "unpaid"
    PARTIALLY_PAID = "partially_paid"
    PAID = "paid"
    UNRECEIVED = "unreceived"
    PARTIALLY_RECEIVED = "partially_received"
    RECEIVED = "received"


# (unsettled, partial, settled) per category.
STATUS_LADDER: Dict[EntryCategory, Tuple[EntryStatus, EntryStatus, EntryStatus]] = {
    EntryCategory.EXPENSE: (EntryStatus.UNPAID, EntryStatus.PARTIALLY_PAID, EntryStatus.PAID),
    EntryCategory.REVENUE: (
        EntryStatus.UNRECEIVED,
        EntryStatus.PARTIALLY_RECEIVED,
        EntryStatus.RECEIVED,
    ),
}


@dataclass(slots=True)
class LineItem:
    """Single priced line within an entry."""

    item_id: str
    description: str
    cost_center_id: str
    amount: float
    product_id: Optional[str] = None
    quantity: Optional[float] = None
    unit_price: Optional[float] = None

    def as_dict(self) -> Dict[str, object]:
        return {
            "item_id": self.item_id,
            "description": self.description,
            "cost_center_id": self.cost_center_id,
            "amount": self.amount,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
        }


@dataclass(slots=True, kw_only=True)
class _BaseEntry:
    entry_id: str
    entry_type: EntryType
    project_id: str
    issue_date: date
    description: str
    cash_account_id: str
    line_items: List[LineItem] = field(default_factory=list)
    invoice_number: Optional[str] = None
    total_amount: float = 0.0
    settled_amount: float = 0.0
    status: Optional[EntryStatus] = None

    category = EntryCategory.EXPENSE

    @property
    def outstanding_amount(self) -> float:
        return self.total_amount - self.settled_amount

    def as_dict(self) -> Dict[str, object]:
        """Export the entry with serialisable values."""

        return {
            "entry_id": self.entry_id,
            "category": self.category.value,
            "entry_type": self.entry_type.value,
            "invoice_number": self.invoice_number,
            "project_id": self.project_id,
            "issue_date": self.issue_date.isoformat(),
            "description": self.description,
            "cash_account_id": self.cash_account_id,
            "line_items": [item.as_dict() for item in self.line_items],
            "total_amount": self.total_amount,
            "settled_amount": self.settled_amount,
            "status": self.status.value if self.status else None,
        }


@dataclass(slots=True, kw_only=True)
class ExpenseEntry(_BaseEntry):
    """Payable owed to a supplier."""

    supplier_id: str
    disbursement_date: date
    transaction_type: TransactionType = TransactionType.PRODUCT

    category = EntryCategory.EXPENSE

    def as_dict(self) -> Dict[str, object]:
        payload = _BaseEntry.as_dict(self)
        payload.update(
            supplier_id=self.supplier_id,
            disbursement_date=self.disbursement_date.isoformat(),
            transaction_type=self.transaction_type.value,
        )
        return payload


@dataclass(slots=True, kw_only=True)
class RevenueEntry(_BaseEntry):
    """Receivable owed by a customer."""

    customer_id: str
    receipt_date: date

    category = EntryCategory.REVENUE

    def as_dict(self) -> Dict[str, object]:
        payload = _BaseEntry.as_dict(self)
        payload.update(
            customer_id=self.customer_id,
            receipt_date=self.receipt_date.isoformat(),
        )
        return payload


Entry = Union[ExpenseEntry, RevenueEntry]


@dataclass(frozen=True, slots=True)
class Settlement:
    """Append-only record of a payment or receipt against one entry."""

    settlement_id: str
    entry_id: str
    entry_category: EntryCategory
    settlement_date: date
    amount: float
    cash_account_id: str
    notes: Optional[str] = None

    def as_dict(self) -> Dict[str, object]:
        return {
            "settlement_id": self.settlement_id,
            "entry_id": self.entry_id,
            "entry_category": self.entry_category.value,
            "settlement_date": self.settlement_date.isoformat(),
            "amount": self.amount,
            "cash_account_id": self.cash_account_id,
            "notes": self.notes,
        }


def resolve_line_item_amount(
    category: EntryCategory,
    amount: Optional[float],
    quantity: Optional[float],
    unit_price: Optional[float],
) -> float:
    """Expense items with quantity and unit price are priced as their product."""

    if category is EntryCategory.EXPENSE and quantity and unit_price:
        return float(quantity) * float(unit_price)
    if amount is None:
        raise ValidationError("Line items need an amount or a quantity and unit price.")
    return float(amount)


def compute_total(line_items: Iterable[LineItem]) -> float:
    return sum((item.amount for item in line_items), 0.0)


def derive_status(category: EntryCategory, settled_amount: float, total_amount: float) -> EntryStatus:
    """Map settled versus total amounts onto the category's status ladder."""

    unsettled, partial, settled = STATUS_LADDER[category]
    if settled_amount <= 0:
        return unsettled
    if settled_amount >= total_amount:
        return settled
    return partial


_ENTRY_FIELDS = {
    EntryCategory.EXPENSE: {
        "entry_type",
        "invoice_number",
        "project_id",
        "issue_date",
        "description",
        "cash_account_id",
        "supplier_id",
        "disbursement_date",
        "transaction_type",
    },
    EntryCategory.REVENUE: {
        "entry_type",
        "invoice_number",
        "project_id",
        "issue_date",
        "description",
        "cash_account_id",
        "customer_id",
        "receipt_date",
    },
}
_DATE_FIELDS = {"issue_date", "disbursement_date", "receipt_date", "settlement_date"}
_DERIVED_FIELDS = {"entry_id", "category", "total_amount", "settled_amount", "status"}
_REFERENCE_FIELDS = {"project_id", "supplier_id", "customer_id", "cash_account_id"}


def _coerce_fields(category: EntryCategory, fields: Mapping[str, object]) -> Dict[str, object]:
    """Validate and coerce caller supplied entry fields."""

    allowed = _ENTRY_FIELDS[category]
    coerced: Dict[str, object] = {}
    for key, value in fields.items():
        if key in _DERIVED_FIELDS:
            raise ValidationError(f"Field '{key}' is managed by the ledger.")
        if key not in allowed:
            raise ValidationError(f"Field '{key}' is not supported for {category.value} entries.")
        if key == "entry_type":
            coerced[key] = EntryType.from_str(value)
        elif key == "transaction_type":
            coerced[key] = TransactionType.from_str(value)
        elif key in _DATE_FIELDS:
            coerced[key] = _parse_date(value)
        elif key == "invoice_number":
            coerced[key] = str(value) if value not in (None, "") else None
        elif key in _REFERENCE_FIELDS and value is None:
            raise ValidationError(f"Field '{key}' cannot be null.")
        else:
            coerced[key] = "" if value is None else str(value)
    return coerced


def _parse_date(value: object) -> date:
    """Parse ISO formatted strings or date objects safely."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value[:10])
        except ValueError as error:
            raise ValidationError(f"Invalid ISO date: {value}") from error
    raise ValidationError("Dates must be provided as ISO strings or date/datetime instances.")


def _optional_float(value: object, label: str) -> Optional[float]:
    if value is None or value == "":
        return None
    return _finite_float(value, f"Line item {label}")


def _finite_float(value: object, label: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as error:
        raise ValidationError(f"{label} must be numeric, got {value!r}.") from error
    if not math.isfinite(number):
        raise ValidationError(f"{label} must be a finite number, got {value!r}.")
    return number


def _copy_entry(entry: Entry) -> Entry:
    return replace(entry, line_items=[replace(item) for item in entry.line_items])


class FinanceLedger:
    """Own expense and revenue entries and apply settlements against them."""

    def __init__(
        self,
        entries: Optional[Iterable[Entry]] = None,
        settlements: Optional[Iterable[Settlement]] = None,
    ) -> None:
        self._entries: Dict[EntryCategory, Dict[str, Entry]] = {
            EntryCategory.EXPENSE: {},
            EntryCategory.REVENUE: {},
        }
        self._settlements: List[Settlement] = []
        self._sequence = 0
        self._taken_ids: Set[str] = set()
        for entry in entries or ():
            self._register(entry)
        for settlement in settlements or ():
            self._record_settlement(settlement)
        LOGGER.debug(
            "Finance ledger initialised with %s expenses, %s revenues and %s settlements",
            len(self._entries[EntryCategory.EXPENSE]),
            len(self._entries[EntryCategory.REVENUE]),
            len(self._settlements),
        )

    def _next_id(self, prefix: str) -> str:
        """Generate a deterministic identifier not yet used in the ledger."""

        while True:
            self._sequence += 1
            candidate = f"{prefix}_{self._sequence:04d}"
            if candidate not in self._taken_ids:
                self._taken_ids.add(candidate)
                return candidate

    def _register(self, entry: Entry) -> None:
        """Store a pre-built entry, normalising its derived fields.

        The settled amount is rebuilt from the settlement log, so whatever the
        entry carries is discarded before settlements are replayed.
        """

        ledger = self._entries[entry.category]
        if entry.entry_id in ledger:
            raise ValidationError(f"Entry {entry.entry_id} already exists.")
        entry.settled_amount = 0.0
        entry.total_amount = compute_total(entry.line_items)
        entry.status = derive_status(entry.category, entry.settled_amount, entry.total_amount)
        ledger[entry.entry_id] = entry
        self._taken_ids.add(entry.entry_id)
        self._taken_ids.update(item.item_id for item in entry.line_items)

    def _lookup(self, category: Union[EntryCategory, str], entry_id: str) -> Entry:
        ledger = self._entries[EntryCategory.from_str(category)]
        if entry_id not in ledger:
            raise EntryNotFoundError(entry_id)
        return ledger[entry_id]

    def _record_settlement(self, settlement: Settlement) -> None:
        if not math.isfinite(settlement.amount) or settlement.amount <= 0:
            raise ValidationError("Settlement amounts must be finite and greater than zero.")
        entry = self._lookup(settlement.entry_category, settlement.entry_id)
        self._settlements.append(settlement)
        self._taken_ids.add(settlement.settlement_id)
        entry.settled_amount += settlement.amount
        entry.status = derive_status(entry.category, entry.settled_amount, entry.total_amount)
        if entry.settled_amount > entry.total_amount:
            LOGGER.warning(
                "Entry %s over-settled: settled %.2f exceeds total %.2f",
                entry.entry_id,
                entry.settled_amount,
                entry.total_amount,
            )

    def _build_line_items(
        self,
        category: EntryCategory,
        raw_items: Iterable[Mapping[str, object]],
        *,
        keep_ids: bool,
    ) -> List[LineItem]:
        items: List[LineItem] = []
        for raw in raw_items:
            quantity = _optional_float(raw.get("quantity"), "quantity")
            unit_price = _optional_float(raw.get("unit_price"), "unit_price")
            amount = resolve_line_item_amount(
                category, _optional_float(raw.get("amount"), "amount"), quantity, unit_price
            )
            item_id = raw.get("item_id") if keep_ids else None
            items.append(
                LineItem(
                    item_id=str(item_id) if item_id else self._next_id("item"),
                    description=str(raw.get("description") or ""),
                    cost_center_id=str(raw.get("cost_center_id") or ""),
                    amount=amount,
                    product_id=str(raw["product_id"]) if raw.get("product_id") else None,
                    quantity=quantity,
                    unit_price=unit_price,
                )
            )
        return items

    # Reads --------------------------------------------------------------

    def get_entry(self, category: Union[EntryCategory, str], entry_id: str) -> Entry:
        """Return a copy of an entry, raising ``EntryNotFoundError`` when missing."""

        return _copy_entry(self._lookup(category, entry_id))

    def list_entries(self, category: Optional[Union[EntryCategory, str]] = None) -> List[Entry]:
        """Return entries ordered by most recent issue date first."""

        if category is None:
            pool: Iterable[Entry] = [
                entry for ledger in self._entries.values() for entry in ledger.values()
            ]
        else:
            pool = self._entries[EntryCategory.from_str(category)].values()
        ordered = sorted(pool, key=lambda entry: (entry.issue_date, entry.entry_id), reverse=True)
        return [_copy_entry(entry) for entry in ordered]

    def list_settlements(self, entry_id: Optional[str] = None) -> List[Settlement]:
        """Settlements in the order they were applied, optionally for one entry."""

        if entry_id is None:
            return list(self._settlements)
        return [settlement for settlement in self._settlements if settlement.entry_id == entry_id]

    def outstanding_amount(self, category: Union[EntryCategory, str], entry_id: str) -> float:
        return self.get_entry(category, entry_id).outstanding_amount

    def export_snapshot(self) -> Dict[str, List[Dict[str, object]]]:
        """Export entries and settlements for JSON responses."""

        return {
            "expenses": [entry.as_dict() for entry in self.list_entries(EntryCategory.EXPENSE)],
            "revenues": [entry.as_dict() for entry in self.list_entries(EntryCategory.REVENUE)],
            "settlements": [settlement.as_dict() for settlement in self._settlements],
        }

    # Mutations ----------------------------------------------------------

    def create_entry(
        self,
        category: Union[EntryCategory, str],
        fields: Mapping[str, object],
        line_items: Iterable[Mapping[str, object]],
    ) -> Entry:
        """Create an unsettled entry, deriving item amounts and the total."""

        category = EntryCategory.from_str(category)
        coerced = _coerce_fields(category, fields)
        coerced.setdefault("entry_type", EntryType.FINANCIAL)
        items = self._build_line_items(category, line_items, keep_ids=False)
        entry_cls = ExpenseEntry if category is EntryCategory.EXPENSE else RevenueEntry
        try:
            entry = entry_cls(
                entry_id=self._next_id(category.value[:3]),
                line_items=items,
                **coerced,
            )
        except TypeError as error:
            raise ValidationError(f"Incomplete {category.value} entry: {error}") from error
        self._register(entry)
        LOGGER.info(
            "Created %s entry %s with %s line items totalling %.2f",
            category.value,
            entry.entry_id,
            len(items),
            entry.total_amount,
        )
        return _copy_entry(entry)

    def update_entry(
        self,
        category: Union[EntryCategory, str],
        entry_id: str,
        changes: Mapping[str, object],
    ) -> Entry:
        """Apply edits and re-derive the total and status from the settlement log.

        ``changes`` may include ``line_items``, which replaces the whole list;
        items keep a supplied ``item_id`` and receive a fresh one otherwise.
        """

        category = EntryCategory.from_str(category)
        original = self._lookup(category, entry_id)
        changes = dict(changes)
        raw_items = changes.pop("line_items", None)
        coerced = _coerce_fields(category, changes)
        items = (
            self._build_line_items(category, raw_items, keep_ids=True)
            if raw_items is not None
            else [replace(item) for item in original.line_items]
        )
        self._taken_ids.update(item.item_id for item in items)
        updated = replace(original, line_items=items, **coerced)
        updated.total_amount = compute_total(items)
        updated.status = derive_status(category, updated.settled_amount, updated.total_amount)
        self._entries[category][entry_id] = updated
        LOGGER.info(
            "Updated %s entry %s; total %.2f status %s",
            category.value,
            entry_id,
            updated.total_amount,
            updated.status.value,
        )
        return _copy_entry(updated)

    def apply_settlement(self, fields: Mapping[str, Any]) -> Settlement:
        """Record a payment or receipt and advance the target entry's status."""

        try:
            amount = _finite_float(fields["amount"], "Settlement amount")
            settlement = Settlement(
                settlement_id=self._next_id("stl"),
                entry_id=str(fields["entry_id"]),
                entry_category=EntryCategory.from_str(fields["entry_category"]),
                settlement_date=_parse_date(fields["settlement_date"]),
                amount=amount,
                cash_account_id=str(fields.get("cash_account_id") or ""),
                notes=fields.get("notes") or None,
            )
        except KeyError as error:
            raise ValidationError(f"Settlement field {error} is required.") from error
        except (TypeError, ValueError) as error:
            if isinstance(error, ValidationError):
                raise
            raise ValidationError(f"Invalid settlement amount: {fields.get('amount')!r}") from error
        self._record_settlement(settlement)
        entry = self._lookup(settlement.entry_category, settlement.entry_id)
        LOGGER.info(
            "Applied settlement %s of %.2f to %s entry %s -> %s",
            settlement.settlement_id,
            settlement.amount,
            settlement.entry_category.value,
            settlement.entry_id,
            entry.status.value,
        )
        return settlement
