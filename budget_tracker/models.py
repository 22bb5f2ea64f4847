"""
models.py - Data model definitions

This file defines the value types shared by the core and the UI:
SpendEntry (one logged purchase), BillingPeriod, Alert, ValidationError
and PeriodSummary. Entries are serialized to/from simple dicts so they can be
persisted as JSON or as rows in a Google Sheet.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional
import datetime

from budget_tracker.config import CategoryGroup


@dataclass(frozen=True)
class SpendEntry:
    """
    Represents a single spend at a store.

    Fields:
      - store: store name, exactly as typed (matching against groups is case-sensitive)
      - amount: non-negative Decimal amount in Rand
      - date: calendar date of the purchase (no time component)
    """
    store: str
    amount: Decimal
    date: datetime.date

    def to_dict(self) -> Dict[str, str]:
        """
        Convert to a plain dict suitable for JSON serialization.
        Amount is kept as a string so no precision is lost.
        """
        return {
            "store": self.store,
            "amount": str(self.amount),
            "date": self.date.isoformat(),
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "SpendEntry":
        """
        Construct a SpendEntry from an already-validated dict (inverse of to_dict).
        Stored records should go through EntryValidator instead.
        """
        return SpendEntry(
            store=d["store"],
            amount=Decimal(str(d["amount"])),
            date=datetime.date.fromisoformat(str(d["date"])),
        )


@dataclass(frozen=True)
class BillingPeriod:
    """Inclusive date range running from the 16th to the 15th of the next month."""
    start: datetime.date
    end: datetime.date

    def contains(self, day: datetime.date) -> bool:
        if isinstance(day, datetime.datetime):
            day = day.date()
        return self.start <= day <= self.end

    def label(self) -> str:
        return f"{self.start.isoformat()} to {self.end.isoformat()}"


@dataclass(frozen=True)
class Alert:
    group: CategoryGroup
    current_total: Decimal
    threshold: Decimal

    @property
    def message(self) -> str:
        return (
            f"{self.group.value} spending exceeds R{self.threshold} "
            f"(Current: R{self.current_total:.2f})"
        )


@dataclass(frozen=True)
class ValidationError:
    """
    Describes why a raw entry was rejected.

    This is returned (not raised) by EntryValidator so callers can decide
    whether to skip the row, abort, or show the message in a form.
    """
    field: str
    message: str
    value: Any = None

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


@dataclass
class PeriodSummary:
    """Everything the dashboard shows for one billing period."""
    period: BillingPeriod
    store_totals: Dict[str, Decimal] = field(default_factory=dict)
    group_totals: Dict[CategoryGroup, Decimal] = field(default_factory=dict)
    alerts: List[Alert] = field(default_factory=list)

    @property
    def overall_group_total(self) -> Decimal:
        # a store in two groups is counted twice here
        return sum(self.group_totals.values(), Decimal(0))

    @property
    def total_spent(self) -> Decimal:
        """Everything spent in the period, including stores outside every group."""
        return sum(self.store_totals.values(), Decimal(0))

    def alert_for(self, group: CategoryGroup) -> Optional[Alert]:
        for a in self.alerts:
            if a.group == group:
                return a
        return None
