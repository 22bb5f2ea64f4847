"""
tabular.py - Store,Amount,Date text export and import

The table is a header row followed by one comma-separated row per entry.
Fields are not quoted or escaped, so a store name containing a comma or a
line break cannot be written; export_entries refuses such entries rather
than producing a table that would import differently.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Union
import logging

from budget_tracker.errors import ExportFormatError, ImportFormatError
from budget_tracker.models import SpendEntry, ValidationError
from budget_tracker.validation import EntryValidator, is_valid

logger = logging.getLogger(__name__)

HEADERS = ["Store", "Amount", "Date"]
DELIMITER = ","


@dataclass
class SkippedRow:
    line_number: int
    line: str
    error: ValidationError


@dataclass
class ImportResult:
    entries: List[SpendEntry] = field(default_factory=list)
    skipped: List[SkippedRow] = field(default_factory=list)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)


def _unrepresentable(store: str) -> bool:
    return DELIMITER in store or "\n" in store or "\r" in store


def export_entries(entries: Iterable[SpendEntry]) -> str:
    """Render entries as a Store,Amount,Date table (no trailing newline)."""
    entries = list(entries)
    bad = sorted({e.store for e in entries if _unrepresentable(e.store)})
    if bad:
        raise ExportFormatError(
            "Store names containing commas or line breaks cannot be exported: " + "; ".join(bad),
            stores=bad,
        )
    lines = [DELIMITER.join(HEADERS)]
    for e in entries:
        lines.append(DELIMITER.join([e.store, str(e.amount), e.date.isoformat()]))
    return "\n".join(lines)


def decode_table(data: Union[bytes, str]) -> str:
    """Decode an uploaded table; anything other than UTF-8 is a format error."""
    if isinstance(data, str):
        return data
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ImportFormatError(
            f"The file is not UTF-8 text (bad byte at position {exc.start}). Save it as UTF-8 CSV and retry."
        ) from exc


def import_entries(text: Union[str, bytes], validator: Optional[EntryValidator] = None) -> ImportResult:
    """
    Parse a Store,Amount,Date table.

    The whole import is rejected with ImportFormatError when the header lacks
    any of Store, Amount, Date. Data rows are read positionally as
    store, amount, date; rows that fail validation are skipped and reported
    in the result instead of aborting the batch. A row with more fields than
    the header is rejected, since a comma inside the store name would shift
    every later field.
    """
    text = decode_table(text)
    validator = validator or EntryValidator()
    # keep physical line numbers for the skipped-row report
    lines = [(n, line) for n, line in enumerate(text.splitlines(), start=1) if line.strip()]
    if not lines:
        raise ImportFormatError("The file is empty. Expected headers: " + DELIMITER.join(HEADERS))

    _, header = lines[0]
    columns = [h.strip() for h in header.strip().split(DELIMITER)]
    missing = [h for h in HEADERS if h not in columns]
    if missing:
        raise ImportFormatError(
            "Invalid CSV format. Expected headers: " + DELIMITER.join(HEADERS)
            + " (missing: " + ", ".join(missing) + ")"
        )

    result = ImportResult()
    for line_number, line in lines[1:]:
        fields = [x.strip() for x in line.split(DELIMITER)]
        if len(fields) > len(columns):
            error = ValidationError(
                "row", f"Row has {len(fields)} fields but the header has {len(columns)}.", line
            )
            result.skipped.append(SkippedRow(line_number=line_number, line=line, error=error))
            continue
        fields += [""] * (len(HEADERS) - len(fields))
        raw = {"store": fields[0], "amount": fields[1], "date": fields[2]}
        outcome = validator.validate(raw)
        if is_valid(outcome):
            result.entries.append(outcome)
        else:
            result.skipped.append(SkippedRow(line_number=line_number, line=line, error=outcome))
    if result.skipped:
        logger.warning("Skipped %d invalid row(s) during import", result.skipped_count)
    logger.info("Parsed %d entries from imported table", len(result.entries))
    return result
