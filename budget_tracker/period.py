"""
period.py - billing period calculation

Spending is tracked over a "month" that starts on the 16th and ends on the
15th of the following month, not over calendar months.
"""

from typing import Optional
import datetime

from budget_tracker.models import BillingPeriod

PERIOD_START_DAY = 16


def _shift_month(year: int, month: int, delta: int):
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def current_period(reference_date: Optional[datetime.date] = None) -> BillingPeriod:
    """
    Return the billing period containing reference_date (default: today).

    Before the 16th the period is [16th of last month, 15th of this month];
    from the 16th on it is [16th of this month, 15th of next month].
    """
    if reference_date is None:
        reference_date = datetime.date.today()
    elif isinstance(reference_date, datetime.datetime):
        reference_date = reference_date.date()

    if reference_date.day < PERIOD_START_DAY:
        start_offset = -1
    else:
        start_offset = 0
    start_year, start_month = _shift_month(reference_date.year, reference_date.month, start_offset)
    end_year, end_month = _shift_month(start_year, start_month, 1)
    return BillingPeriod(
        start=datetime.date(start_year, start_month, PERIOD_START_DAY),
        end=datetime.date(end_year, end_month, PERIOD_START_DAY - 1),
    )
