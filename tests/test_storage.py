import datetime
import json
from decimal import Decimal

import pytest

from budget_tracker.errors import StorageUnavailableError
from budget_tracker.models import SpendEntry
from budget_tracker.storage import GoogleSheetsStore, JsonFileStore, default_store

ENTRIES = [
    SpendEntry("Pick n Pay", Decimal("1000"), datetime.date(2024, 3, 1)),
    SpendEntry("Sasol", Decimal("350.50"), datetime.date(2024, 3, 10)),
]


class FakeWorksheet:
    def __init__(self, values=None):
        self.values = [list(r) for r in (values or [])]

    def row_values(self, n):
        return self.values[n - 1] if len(self.values) >= n else []

    def get_all_values(self):
        return [list(r) for r in self.values]

    def clear(self):
        self.values = []

    def update(self, range_name, values, value_input_option):
        assert range_name == "A1"
        assert value_input_option == "RAW"
        self.values = [list(r) for r in values]


def test_json_store_missing_file_loads_empty(json_store):
    assert json_store.load() == []


def test_json_store_save_and_load(json_store):
    json_store.save(ENTRIES)
    assert json_store.load() == [
        {"store": "Pick n Pay", "amount": "1000", "date": "2024-03-01"},
        {"store": "Sasol", "amount": "350.50", "date": "2024-03-10"},
    ]


def test_json_store_accepts_bare_list(tmp_path):
    path = tmp_path / "legacy.json"
    path.write_text(json.dumps([{"store": "Sasol", "amount": 12.5, "date": "2024-03-10"}]), encoding="utf-8")
    assert JsonFileStore(str(path)).load() == [{"store": "Sasol", "amount": 12.5, "date": "2024-03-10"}]


def test_json_store_corrupt_file_raises(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{nope", encoding="utf-8")
    with pytest.raises(StorageUnavailableError):
        JsonFileStore(str(path)).load()


def test_json_store_clear(json_store):
    json_store.save(ENTRIES)
    json_store.clear()
    assert json_store.load() == []
    # clearing twice is fine
    json_store.clear()


def test_json_store_path_from_env(tmp_path, monkeypatch):
    monkeypatch.setenv("BUDGET_DATA_FILE", str(tmp_path / "env.json"))
    assert JsonFileStore().path == str(tmp_path / "env.json")


def test_sheets_store_round_trip():
    ws = FakeWorksheet([["store", "amount", "date"]])
    store = GoogleSheetsStore(worksheet=ws)
    assert store.available
    store.save(ENTRIES)
    assert ws.values[0] == ["store", "amount", "date"]
    assert ws.values[2] == ["Sasol", "350.50", "2024-03-10"]
    assert store.load() == [
        {"store": "Pick n Pay", "amount": "1000", "date": "2024-03-01"},
        {"store": "Sasol", "amount": "350.50", "date": "2024-03-10"},
    ]


def test_sheets_store_skips_blank_rows_and_short_rows():
    ws = FakeWorksheet([["Store", "Amount", "Date"], ["", "", ""], ["Sasol", "10"]])
    assert GoogleSheetsStore(worksheet=ws).load() == [{"store": "Sasol", "amount": "10", "date": ""}]


def test_sheets_store_clear_keeps_headers():
    ws = FakeWorksheet()
    store = GoogleSheetsStore(worksheet=ws)
    store.save(ENTRIES)
    store.clear()
    assert ws.values == [["store", "amount", "date"]]
    assert store.load() == []


def test_sheets_store_unconfigured(monkeypatch):
    monkeypatch.delenv("GOOGLE_SHEET_ID", raising=False)
    store = GoogleSheetsStore()
    assert not store.available
    assert store.reason == "GOOGLE_SHEET_ID is not set"
    with pytest.raises(StorageUnavailableError):
        store.load()


def test_default_store_falls_back_to_json(tmp_path, monkeypatch):
    monkeypatch.delenv("GOOGLE_SHEET_ID", raising=False)
    monkeypatch.setenv("BUDGET_DATA_FILE", str(tmp_path / "spend.json"))
    store = default_store()
    assert isinstance(store, JsonFileStore)
    assert store.fallback_reason == "GOOGLE_SHEET_ID is not set"


def test_json_store_writes_back_invalid_records(json_store):
    bad = {"store": "Woolworths", "amount": None, "date": "2024-03-02"}
    json_store.save(ENTRIES, invalid_records=[bad])
    records = json_store.load()
    assert len(records) == 3
    assert records[-1] == bad


def test_sheets_store_writes_back_invalid_records():
    ws = FakeWorksheet()
    store = GoogleSheetsStore(worksheet=ws)
    store.save(ENTRIES[:1], invalid_records=[{"store": "Woolworths", "amount": None}])
    assert ws.values[-1] == ["Woolworths", "", ""]
    assert store.load()[-1] == {"store": "Woolworths", "amount": "", "date": ""}
