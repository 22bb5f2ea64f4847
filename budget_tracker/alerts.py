"""Threshold checks over group totals."""

from decimal import Decimal
from typing import List, Mapping

from budget_tracker.config import BudgetConfig, CategoryGroup, DEFAULT_CONFIG
from budget_tracker.models import Alert


class AlertEvaluator:
    def __init__(self, config: BudgetConfig = DEFAULT_CONFIG):
        self.config = config

    def evaluate(self, group_totals: Mapping[CategoryGroup, Decimal]) -> List[Alert]:
        """
        Return one Alert per group whose total is strictly above its threshold.

        Alerts follow the order of group_totals. Groups without a configured
        threshold are skipped; a total equal to the threshold does not alert.
        """
        alerts: List[Alert] = []
        for group, total in group_totals.items():
            threshold = self.config.threshold_for(group)
            if threshold is None:
                continue
            if total > threshold:
                alerts.append(Alert(group=group, current_total=total, threshold=threshold))
        return alerts
