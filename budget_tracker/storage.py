"""
storage.py - persistence of raw spend entries

Two backends share the same small contract:
    load() -> list of raw record dicts (store/amount/date)
    save(entries, invalid_records=()) -> replace stored contents with the given
        SpendEntry list, followed by any raw records that failed validation on
        load (they are kept as-is so nothing is lost without the user clearing it)
    clear() -> remove every stored entry

GoogleSheetsStore is used when GOOGLE_SHEET_ID and credentials are configured;
otherwise JsonFileStore writes a local JSON file (BUDGET_DATA_FILE).
Records are returned raw so the tracker can validate them like any other
input.
"""

from typing import Any, Dict, List, Sequence
import ast
import json
import logging
import os
import shutil
import tempfile

import gspread
from google.oauth2.service_account import Credentials

from budget_tracker.errors import StorageUnavailableError
from budget_tracker.models import SpendEntry

logger = logging.getLogger(__name__)

DATA_FILE_ENV = "BUDGET_DATA_FILE"
# location of the JSON persistence file (relative to the package)
DEFAULT_DATA_FILE = os.path.join(os.path.dirname(__file__), "..", "data", "spend_data.json")


class JsonFileStore:
    """Local JSON file: {"entries": [{"store": ..., "amount": ..., "date": ...}, ...]}"""

    name = "local_json"

    def __init__(self, path: str = None):
        self.path = os.path.abspath(path or os.getenv(DATA_FILE_ENV) or DEFAULT_DATA_FILE)

    def load(self) -> List[Dict[str, Any]]:
        if not os.path.exists(self.path):
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            raise StorageUnavailableError(f"Could not read {self.path}: {exc}") from exc
        if isinstance(data, list):
            # bare list of records, as the browser version kept them
            records = data
        elif isinstance(data, dict):
            records = data.get("entries", []) or []
        else:
            raise StorageUnavailableError(f"Unexpected data layout in {self.path}")
        return [dict(r) for r in records if isinstance(r, dict)]

    def save(self, entries: Sequence[SpendEntry], invalid_records: Sequence[Dict[str, Any]] = ()):
        """Write entries atomically: temp file in the same directory, then move."""
        data = {"entries": [e.to_dict() for e in entries] + [dict(r) for r in invalid_records]}
        dirn = os.path.dirname(self.path)
        try:
            os.makedirs(dirn, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix="tmp_spend_", dir=dirn, text=True)
        except OSError as exc:
            raise StorageUnavailableError(f"Could not write to {dirn}: {exc}") from exc
        logger.info("Saving data to %s (entries=%d)", self.path, len(data["entries"]))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            shutil.move(tmp_path, self.path)
        except OSError as exc:
            logger.exception("Failed to save data file")
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise StorageUnavailableError(f"Could not save {self.path}: {exc}") from exc

    def clear(self):
        if os.path.exists(self.path):
            try:
                os.remove(self.path)
            except OSError as exc:
                raise StorageUnavailableError(f"Could not remove {self.path}: {exc}") from exc
        logger.info("Cleared local data file %s", self.path)

    def describe(self) -> str:
        return f"Using local file: {self.path}."


class GoogleSheetsStore:
    """
    Google Sheets persistence backend.

    Data layout: worksheet "entries" with a header row store, amount, date and
    one row per entry. Values are written RAW so store names are never
    interpreted as formulas.
    """

    name = "google_sheets"
    WORKSHEET_NAME = "entries"
    HEADERS = ["store", "amount", "date"]
    SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

    def __init__(self, worksheet=None):
        self.available = False
        self.reason = ""
        self.sheet_id = (os.getenv("GOOGLE_SHEET_ID") or "").strip()
        self._ws = worksheet

        if worksheet is not None:
            # already-opened worksheet (used by tests and scripts)
            self.available = True
            return
        if not self.sheet_id:
            self.reason = "GOOGLE_SHEET_ID is not set"
            return

        try:
            client = gspread.authorize(self._build_credentials())
            spreadsheet = client.open_by_key(self.sheet_id)
            try:
                self._ws = spreadsheet.worksheet(self.WORKSHEET_NAME)
            except gspread.exceptions.WorksheetNotFound:
                self._ws = spreadsheet.add_worksheet(
                    title=self.WORKSHEET_NAME, rows=1000, cols=len(self.HEADERS)
                )
            self._ensure_headers()
            self.available = True
        except Exception as exc:
            self.reason = f"Google Sheets init failed ({exc.__class__.__name__})"
            logger.warning("Google Sheets backend unavailable: %s", self.reason)

    def _build_credentials(self):
        service_account_json = (os.getenv("GOOGLE_SERVICE_ACCOUNT_JSON") or "").strip()
        service_account_file = (os.getenv("GOOGLE_SERVICE_ACCOUNT_FILE") or "").strip()

        if service_account_json:
            try:
                info = json.loads(service_account_json)
            except ValueError:
                # tolerate Python-dict style strings often used by mistake in env vars
                info = ast.literal_eval(service_account_json)
            if not isinstance(info, dict):
                raise ValueError("GOOGLE_SERVICE_ACCOUNT_JSON must decode to an object")
            return Credentials.from_service_account_info(info, scopes=self.SCOPES)

        if service_account_file:
            return Credentials.from_service_account_file(service_account_file, scopes=self.SCOPES)

        # Fallback to application default credentials if available.
        import google.auth
        creds, _ = google.auth.default(scopes=self.SCOPES)
        return creds

    def _require(self):
        if not self.available:
            raise StorageUnavailableError(self.reason or "Google Sheets backend is not available")

    def _ensure_headers(self):
        first = self._ws.row_values(1) or []
        if [str(x).strip().lower() for x in first] != self.HEADERS:
            self._ws.update(range_name="A1", values=[self.HEADERS], value_input_option="RAW")

    def load(self) -> List[Dict[str, Any]]:
        self._require()
        try:
            values = self._ws.get_all_values() or []
        except Exception as exc:
            raise StorageUnavailableError(f"Failed to load entries from Google Sheets: {exc}") from exc
        if not values:
            return []
        headers = [str(h).strip().lower() for h in values[0]]
        records: List[Dict[str, Any]] = []
        for row in values[1:]:
            if not any(str(c).strip() for c in row):
                continue
            record: Dict[str, Any] = {}
            for idx, header in enumerate(headers):
                if header in self.HEADERS:
                    record[header] = row[idx] if idx < len(row) else ""
            records.append(record)
        return records

    def save(self, entries: Sequence[SpendEntry], invalid_records: Sequence[Dict[str, Any]] = ()):
        self._require()
        rows = [self.HEADERS]
        for e in entries:
            rows.append([e.store, str(e.amount), e.date.isoformat()])
        for r in invalid_records:
            rows.append(["" if r.get(h) is None else str(r.get(h)) for h in self.HEADERS])
        logger.info("Saving data to Google Sheets (entries=%d)", len(rows) - 1)
        try:
            self._ws.clear()
            self._ws.update(range_name="A1", values=rows, value_input_option="RAW")
        except Exception as exc:
            logger.exception("Failed to save entries to Google Sheets")
            raise StorageUnavailableError(f"Failed to save entries to Google Sheets: {exc}") from exc

    def clear(self):
        self.save([])

    def describe(self) -> str:
        return "Persistent storage active (Google Sheets)."


def default_store():
    """Google Sheets when configured and reachable, local JSON otherwise."""
    sheets = GoogleSheetsStore()
    if sheets.available:
        return sheets
    store = JsonFileStore()
    store.fallback_reason = sheets.reason
    return store
