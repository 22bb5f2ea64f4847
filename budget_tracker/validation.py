"""
validation.py - turn raw form/import/storage records into SpendEntry values

Raw records come from three places: the add-entry form, imported CSV rows
and the persisted store. All of them pass through EntryValidator before they
reach aggregation, so a bad amount can never poison the totals.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Mapping, Union
import datetime

from budget_tracker.models import SpendEntry, ValidationError

ValidationResult = Union[SpendEntry, ValidationError]


def is_valid(result: ValidationResult) -> bool:
    return isinstance(result, SpendEntry)


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class EntryValidator:
    """
    Validates raw {store, amount, date} mappings.

    validate() never raises for bad input; it returns a ValidationError naming
    the first field that failed. `today` supplies the default date for
    new records without one; with require_date=True (used for stored
    records) a missing date is an error instead.
    """

    def __init__(self, today: Callable[[], datetime.date] = datetime.date.today,
                 require_date: bool = False):
        self.today = today
        self.require_date = require_date

    def validate(self, raw: Mapping[str, Any]) -> ValidationResult:
        store = raw.get("store")
        store = "" if store is None else str(store).strip()
        if not store:
            return ValidationError("store", "Store is required.", raw.get("store"))

        amount = self._parse_amount(raw.get("amount"))
        if isinstance(amount, ValidationError):
            return amount

        date = self._parse_date(raw.get("date"))
        if isinstance(date, ValidationError):
            return date

        return SpendEntry(store=store, amount=amount, date=date)

    @staticmethod
    def _parse_amount(value: Any) -> Union[Decimal, ValidationError]:
        if _blank(value):
            return ValidationError("amount", "Amount is required.", value)
        if isinstance(value, bool):
            return ValidationError("amount", "Amount must be a number.", value)
        try:
            # floats go through str() so 0.1 stays 0.1
            amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return ValidationError("amount", f"Amount {value!r} is not a number.", value)
        if not amount.is_finite():
            return ValidationError("amount", "Amount must be a finite number.", value)
        if amount < 0:
            return ValidationError("amount", "Amount cannot be negative.", value)
        return amount

    def _parse_date(self, value: Any) -> Union[datetime.date, ValidationError]:
        if _blank(value):
            if self.require_date:
                return ValidationError("date", "Date is required.", value)
            return self.today()
        if isinstance(value, datetime.datetime):
            return value.date()
        if isinstance(value, datetime.date):
            return value
        text = str(value).strip()
        try:
            return datetime.datetime.strptime(text, "%Y-%m-%d").date()
        except ValueError:
            return ValidationError("date", f"Date {text!r} is not a valid YYYY-MM-DD date.", value)
