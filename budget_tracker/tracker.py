"""
tracker.py - application logic used by the UI

Responsibilities:
 - keep an in-memory list of validated SpendEntry objects
 - persist/load them through a storage backend (Google Sheets or local JSON)
 - provide the APIs consumed by the dashboard:
     add_entry, import_csv, export_csv, clear,
     summary (store/group totals and alerts for the current billing period)

The totals are recomputed from the full entry list on every summary() call.
"""

from typing import Any, Callable, Dict, List, Optional, Tuple, Union
import datetime
import logging

from budget_tracker.aggregator import Aggregator
from budget_tracker.alerts import AlertEvaluator
from budget_tracker.config import BudgetConfig, load_config
from budget_tracker.errors import StorageUnavailableError
from budget_tracker.models import PeriodSummary, SpendEntry, ValidationError
from budget_tracker.period import current_period
from budget_tracker.storage import default_store
from budget_tracker.tabular import ImportResult, export_entries, import_entries
from budget_tracker.validation import EntryValidator, is_valid

logger = logging.getLogger(__name__)


class SpendTracker:
    """
    The UI creates one SpendTracker per run and uses its methods to read/write data.

    store: backend with load()/save()/clear(); defaults to default_store()
    config: category groups and thresholds; defaults to load_config()
    today: callable returning the current date (entry default date and summary period)
    """

    def __init__(self, store=None, config: Optional[BudgetConfig] = None,
                 today: Callable[[], datetime.date] = datetime.date.today):
        self.store = store if store is not None else default_store()
        self.config = config if config is not None else load_config()
        self.today = today
        self.validator = EntryValidator(today=today)
        # stored records must carry their own date
        self.stored_validator = EntryValidator(today=today, require_date=True)
        self.aggregator = Aggregator(self.config)
        self.evaluator = AlertEvaluator(self.config)
        self.entries: List[SpendEntry] = []
        self.skipped_on_load: List[ValidationError] = []
        self.invalid_records: List[Dict[str, Any]] = []
        self.load_error: Optional[str] = None
        try:
            self.load()
        except StorageUnavailableError as exc:
            # start empty; the UI shows load_error
            self.load_error = str(exc)
            logger.error("Could not load stored entries: %s", exc)

    def storage_status(self) -> Tuple[str, str]:
        """Return current storage backend name and a short diagnostic message for the UI."""
        name = getattr(self.store, "name", self.store.__class__.__name__)
        message = self.store.describe() if hasattr(self.store, "describe") else name
        reason = getattr(self.store, "fallback_reason", "")
        if reason:
            message = f"{message} Google Sheets not used: {reason}."
        return name, message

    def load(self):
        """
        Reload entries from storage.
        Stored records are validated like any other input, except that a missing
        date is an error. Bad ones are left out of the totals but kept in
        invalid_records and written back on every save until the data is cleared.
        """
        records = self.store.load() or []
        entries: List[SpendEntry] = []
        skipped: List[ValidationError] = []
        invalid: List[Dict[str, Any]] = []
        for record in records:
            result = self.stored_validator.validate(record)
            if is_valid(result):
                entries.append(result)
            else:
                skipped.append(result)
                invalid.append(record)
                logger.warning("Skipping stored entry %r: %s", record, result)
        self.entries = entries
        self.skipped_on_load = skipped
        self.invalid_records = invalid
        self.load_error = None
        logger.info("Loaded %d entries (%d skipped)", len(entries), len(skipped))

    def save(self):
        self.store.save(self.entries, invalid_records=self.invalid_records)

    def add_entry(self, store: Any, amount: Any, date: Any = None) -> Union[SpendEntry, ValidationError]:
        """
        Validate and persist a new entry.
        Returns the SpendEntry, or the ValidationError when the input is rejected
        (nothing is stored in that case).
        """
        result = self.validator.validate({"store": store, "amount": amount, "date": date})
        if not is_valid(result):
            logger.info("Rejected new entry: %s", result)
            return result
        self.entries.append(result)
        try:
            self.save()
        except StorageUnavailableError:
            self.entries.pop()
            raise
        return result

    def import_csv(self, text: Union[str, bytes]) -> ImportResult:
        """
        Merge entries from a Store,Amount,Date table (text or UTF-8 bytes) into the
        stored entries. Raises ImportFormatError when the header or encoding is wrong; invalid rows are
        skipped and listed in the returned ImportResult.
        """
        result = import_entries(text, validator=self.validator)
        if result.entries:
            previous = list(self.entries)
            self.entries.extend(result.entries)
            try:
                self.save()
            except StorageUnavailableError:
                self.entries = previous
                raise
        logger.info("Imported %d entries, skipped %d rows", len(result.entries), result.skipped_count)
        return result

    def export_csv(self) -> str:
        """All stored entries (not only the current period) as a Store,Amount,Date table."""
        return export_entries(self.entries)

    def clear(self):
        """Remove all entries from storage and memory."""
        self.store.clear()
        self.entries = []
        self.invalid_records = []
        self.skipped_on_load = []
        logger.info("All spend data cleared")

    def summary(self, reference_date: Optional[datetime.date] = None) -> PeriodSummary:
        """Totals and alerts for the billing period containing reference_date (default: today)."""
        period = current_period(reference_date or self.today())
        store_totals, group_totals = self.aggregator.aggregate(self.entries, period)
        alerts = self.evaluator.evaluate(group_totals)
        return PeriodSummary(
            period=period,
            store_totals=store_totals,
            group_totals=group_totals,
            alerts=alerts,
        )

