import datetime

import pytest

from budget_tracker.config import DEFAULT_CONFIG
from budget_tracker.errors import StorageUnavailableError
from budget_tracker.storage import JsonFileStore
from budget_tracker.tracker import SpendTracker

TODAY = datetime.date(2024, 3, 12)


class MemoryStore:
    """In-memory stand-in for the storage backends."""

    name = "memory"

    def __init__(self, records=None, fail_on_save=False, fail_on_clear=False):
        self.records = list(records or [])
        self.fail_on_save = fail_on_save
        self.fail_on_clear = fail_on_clear
        self.saves = 0

    def load(self):
        return [dict(r) for r in self.records]

    def save(self, entries, invalid_records=()):
        if self.fail_on_save:
            raise StorageUnavailableError("disk full")
        self.saves += 1
        self.records = [e.to_dict() for e in entries] + [dict(r) for r in invalid_records]

    def clear(self):
        if self.fail_on_clear:
            raise StorageUnavailableError("read-only")
        self.records = []

    def describe(self):
        return "In memory."


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def json_store(tmp_path):
    return JsonFileStore(str(tmp_path / "data" / "spend_data.json"))


@pytest.fixture
def tracker(json_store):
    return SpendTracker(store=json_store, config=DEFAULT_CONFIG, today=lambda: TODAY)
