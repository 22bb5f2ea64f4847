from decimal import Decimal

from budget_tracker.alerts import AlertEvaluator
from budget_tracker.config import BudgetConfig, CategoryGroup, DEFAULT_CONFIG, DEFAULT_STORE_GROUPS
from budget_tracker.models import Alert


def test_total_equal_to_threshold_does_not_alert():
    assert AlertEvaluator().evaluate({CategoryGroup.GROCERIES: Decimal("4000")}) == []


def test_total_above_threshold_alerts():
    alerts = AlertEvaluator().evaluate({CategoryGroup.GROCERIES: Decimal("4000.01")})
    assert alerts == [Alert(group=CategoryGroup.GROCERIES, current_total=Decimal("4000.01"), threshold=Decimal("4000"))]
    assert alerts[0].message == "groceries spending exceeds R4000 (Current: R4000.01)"


def test_alerts_follow_group_total_order():
    totals = {
        CategoryGroup.GROCERIES: Decimal("5000"),
        CategoryGroup.CHILD_HEALTH: Decimal("10"),
        CategoryGroup.FUEL: Decimal("3500"),
    }
    alerts = AlertEvaluator(DEFAULT_CONFIG).evaluate(totals)
    assert [a.group for a in alerts] == [CategoryGroup.GROCERIES, CategoryGroup.FUEL]


def test_group_without_threshold_never_alerts():
    config = BudgetConfig(groups=DEFAULT_STORE_GROUPS, thresholds={CategoryGroup.FUEL: Decimal("100")})
    alerts = AlertEvaluator(config).evaluate({
        CategoryGroup.GROCERIES: Decimal("999999"),
        CategoryGroup.FUEL: Decimal("100.5"),
    })
    assert [a.group for a in alerts] == [CategoryGroup.FUEL]
    assert alerts[0].threshold == Decimal("100")
