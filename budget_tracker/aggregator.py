"""
aggregator.py - per-store and per-group totals for a billing period

Totals are always rebuilt from the full entry list; nothing is cached between
calls, so aggregating the same entries twice gives the same result.
"""

from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from budget_tracker.classifier import CategoryClassifier
from budget_tracker.config import BudgetConfig, CategoryGroup, DEFAULT_CONFIG
from budget_tracker.models import BillingPeriod, SpendEntry

StoreTotals = Dict[str, Decimal]
GroupTotals = Dict[CategoryGroup, Decimal]


def entries_in_period(entries: Iterable[SpendEntry], period: BillingPeriod) -> List[SpendEntry]:
    """Return the entries dated within period (both ends inclusive)."""
    return [e for e in entries if period.contains(e.date)]


class Aggregator:
    def __init__(self, config: BudgetConfig = DEFAULT_CONFIG,
                 classifier: Optional[CategoryClassifier] = None):
        self.config = config
        self.classifier = classifier or CategoryClassifier(config)

    def empty_group_totals(self) -> GroupTotals:
        return {group: Decimal(0) for group in self.config.groups}

    def aggregate(self, entries: Iterable[SpendEntry], period: BillingPeriod) -> Tuple[StoreTotals, GroupTotals]:
        """
        Sum the entries that fall inside period.

        Returns (store_totals, group_totals). store_totals has one key per store
        seen in the period, in first-seen order. group_totals has exactly one key
        per configured group, zero when nothing matched. An entry whose store is
        in several groups counts fully towards each of them.
        """
        store_totals: StoreTotals = {}
        group_totals = self.empty_group_totals()
        for entry in entries_in_period(entries, period):
            store_totals[entry.store] = store_totals.get(entry.store, Decimal(0)) + entry.amount
            for group in self.classifier.groups_for(entry.store):
                if group in group_totals:
                    group_totals[group] += entry.amount
        return store_totals, group_totals
