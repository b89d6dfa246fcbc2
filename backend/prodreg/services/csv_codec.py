# Overview: CSV export/import of the registration log.

"""
CSV Codec

EXPORT: header row, then one row per registration of the (already filtered
and sorted) view. Every field is quoted, inner quotes doubled, LF endings.

IMPORT: header cells are matched by name, in any order. All six required
columns must be present or nothing is read. Rows with a blank required
field, or a date/time pair that does not form a timestamp, are skipped.
Every remaining row is appended on its own; a failed append only lowers the
success count.

TIMESTAMP ON IMPORT: built from the literal Datum + Tijd columns. The stored
date/time are the literal column values, never re-derived.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Iterable

from prodreg.time_utils import combine_date_time, utcnow


COL_DATE = "Datum"
COL_TIME = "Tijd"
COL_USER = "Gebruiker"
COL_PRODUCT = "Product"
COL_LOCATION = "Locatie"
COL_PURPOSE = "Doel"
COL_QR_CODE = "QR Code"

EXPORT_HEADERS = [COL_DATE, COL_TIME, COL_USER, COL_PRODUCT, COL_LOCATION, COL_PURPOSE, COL_QR_CODE]
REQUIRED_HEADERS = [COL_DATE, COL_TIME, COL_USER, COL_PRODUCT, COL_LOCATION, COL_PURPOSE]

DEFAULT_FILENAME_PREFIX = "product-registraties"


class CsvError(ValueError):
    """Raised when an export or import cannot proceed at all."""


class CsvFormatError(CsvError):
    """Raised when the import header is missing required columns."""


@dataclass
class ImportSummary:
    success_count: int
    total: int
    errors: list[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        return f"{self.success_count} of {self.total} registrations imported"

    def to_dict(self) -> dict:
        return {
            "success_count": self.success_count,
            "total": self.total,
            "failed": self.total - self.success_count,
            "errors": self.errors,
            "message": self.message,
        }


def export_filename(today: date | None = None, prefix: str = DEFAULT_FILENAME_PREFIX) -> str:
    today = today or utcnow().date()
    return f"{prefix}-{today.isoformat()}.csv"


def _export_row(registration: Any) -> list[str]:
    return [
        registration.date or "",
        registration.time or "",
        registration.user_name or "",
        registration.product_name or "",
        registration.location or "",
        registration.purpose or "",
        registration.qr_code or "",
    ]


def export_csv(registrations: Iterable[Any]) -> str:
    """
    Serialize the view to CSV text.

    Raises:
        CsvError: the view is empty
    """
    rows = [_export_row(r) for r in registrations]
    if not rows:
        raise CsvError("No data to export")

    buffer = io.StringIO()
    buffer.write(",".join(EXPORT_HEADERS) + "\n")
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerows(rows)
    return buffer.getvalue()


def _clean_cell(value: str) -> str:
    return value.replace('"', "").strip()


def parse_csv(text: str) -> list[dict]:
    """
    Parse CSV text into registration records ready for append.

    Raises:
        CsvFormatError: empty input or missing required header columns
    """
    if text.startswith("\ufeff"):
        text = text[1:]

    reader = csv.reader(io.StringIO(text, newline=""))
    header_row = next(reader, None)
    if not header_row:
        raise CsvFormatError("CSV file is empty")

    headers = [_clean_cell(h) for h in header_row]
    missing = [h for h in REQUIRED_HEADERS if h not in headers]
    if missing:
        raise CsvFormatError(
            f"Invalid CSV format. Expected columns: {', '.join(REQUIRED_HEADERS)} "
            f"(missing: {', '.join(missing)})"
        )

    index = {h: headers.index(h) for h in REQUIRED_HEADERS}
    qr_index = headers.index(COL_QR_CODE) if COL_QR_CODE in headers else None

    def cell(values: list[str], position: int | None) -> str:
        if position is None or position >= len(values):
            return ""
        return values[position].strip()

    records: list[dict] = []
    for values in reader:
        if not any(v.strip() for v in values):
            continue

        fields = {h: cell(values, i) for h, i in index.items()}
        if not all(fields.values()):
            continue

        try:
            timestamp = combine_date_time(fields[COL_DATE], fields[COL_TIME])
        except ValueError:
            continue

        records.append({
            "user_name": fields[COL_USER],
            "product_name": fields[COL_PRODUCT],
            "location": fields[COL_LOCATION],
            "purpose": fields[COL_PURPOSE],
            "timestamp": timestamp,
            "date": fields[COL_DATE],
            "time": fields[COL_TIME],
            "qr_code": cell(values, qr_index) or None,
        })
    return records


def import_csv(text: str, append: Callable[[dict], Any]) -> ImportSummary:
    """
    Parse text and append every record through `append`.

    `append` returns an object with `ok` and `error` (see
    registration_service.AppendResult).

    Raises:
        CsvFormatError: header problems (nothing is appended)
        CsvError: no valid rows
    """
    records = parse_csv(text)
    if not records:
        raise CsvError("No valid registrations found in CSV")

    summary = ImportSummary(success_count=0, total=len(records))
    for row_number, record in enumerate(records, start=1):
        result = append(record)
        if result.ok:
            summary.success_count += 1
        else:
            summary.errors.append(f"Row {row_number}: {result.error}")
    return summary
