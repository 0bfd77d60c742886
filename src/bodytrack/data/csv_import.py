"""Import and export weight entries as CSV.

CSV format (header row required, its text is ignored):
    Date,Weight (kg),Cheat Meal,Retention,Notes
    2025-01-15,80.4,No,No,
    16/01/2025,"80,9",Yes,No,"Pizza night"

- Separator is ';' if the text contains one, ',' otherwise.
- Dates are yyyy-mm-dd or dd/mm/yyyy.
- Weights accept a comma or dot decimal separator and must be in (0, 500] kg.
- Flags are true for sí/si/yes/true/1 (any case), false otherwise.

Bad rows are skipped and reported; the import only fails if nothing at all
could be read.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, Optional

import pandas as pd

from bodytrack.errors import ImportFormatError
from bodytrack.tracking.models import WeightEntry, is_weight_in_range

logger = logging.getLogger(__name__)

COLUMNS = ["date", "weight", "cheat_meal", "retention", "notes"]
EXPORT_HEADER = ["Date", "Weight (kg)", "Cheat Meal", "Retention", "Notes"]

DATE_FORMATS = ("%Y-%m-%d", "%d/%m/%Y")
TRUE_VALUES = {"sí", "si", "yes", "true", "1"}


@dataclass
class CsvImportResult:
    """Entries read from a CSV file plus warnings for skipped rows."""

    entries: list[WeightEntry] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def parse_date(value: str) -> date:
    """Parse yyyy-mm-dd or dd/mm/yyyy.

    Raises:
        ValueError: If neither format matches
    """
    text = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Invalid date '{value}'")


def parse_weight(value: str) -> float:
    """Parse a weight with either decimal separator and check its range.

    Raises:
        ValueError: If not a number or outside (0, 500] kg
    """
    try:
        weight = float(value.strip().replace(",", "."))
    except ValueError:
        raise ValueError(f"Invalid weight '{value}'") from None
    if not is_weight_in_range(weight):
        raise ValueError(f"Invalid weight '{value}'")
    return weight


def parse_flag(value: str) -> bool:
    return value.strip().lower() in TRUE_VALUES


def detect_separator(text: str) -> str:
    return ";" if ";" in text else ","


def _read_rows(text: str) -> pd.DataFrame:
    return pd.read_csv(
        io.StringIO(text),
        sep=detect_separator(text),
        header=None,
        index_col=False,
        skiprows=1,
        names=COLUMNS,
        dtype=str,
        keep_default_na=False,
        # Blank lines are kept so row positions match physical lines
        skip_blank_lines=False,
        engine="python",
        # Extra trailing fields are ignored
        on_bad_lines=lambda fields: fields[: len(COLUMNS)],
    ).fillna("")


def parse_csv(text: str) -> CsvImportResult:
    """Parse CSV text into weight entries.

    Args:
        text: Full CSV file contents

    Returns:
        CsvImportResult with the valid entries and one warning per skipped row

    Raises:
        ImportFormatError: If the file has no data rows or no row is valid
    """
    text = text.lstrip("\ufeff").lstrip()
    if len(text.strip().splitlines()) < 2:
        raise ImportFormatError("The CSV file is empty or has no data rows")

    try:
        df = _read_rows(text)
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise ImportFormatError(f"Could not read CSV: {e}") from e

    result = CsvImportResult()

    for position, (_, row) in enumerate(df.iterrows()):
        line = position + 2  # 1-based, after the header

        if not any(value.strip() for value in row):
            continue

        if not row["weight"].strip():
            result.errors.append(f"Line {line}: invalid format")
            continue

        try:
            entry_date = parse_date(row["date"])
            weight = parse_weight(row["weight"])
        except ValueError as e:
            result.errors.append(f"Line {line}: {e}")
            continue

        notes = row["notes"].strip() or None
        result.entries.append(
            WeightEntry(
                date=entry_date,
                weight=weight,
                is_cheat_meal=parse_flag(row["cheat_meal"]),
                is_retention=parse_flag(row["retention"]),
                notes=notes,
            )
        )

    if result.errors:
        logger.warning("Skipped %d CSV rows: %s", len(result.errors), "; ".join(result.errors))

    if not result.entries:
        raise ImportFormatError("No valid entries could be imported from the CSV", result.errors)

    return result


def export_csv(entries: Iterable[WeightEntry]) -> str:
    """Write entries as CSV, oldest first, flags as Yes/No."""
    rows = [
        {
            "Date": e.date.isoformat(),
            "Weight (kg)": e.weight,
            "Cheat Meal": "Yes" if e.is_cheat_meal else "No",
            "Retention": "Yes" if e.is_retention else "No",
            "Notes": e.notes or "",
        }
        for e in sorted(entries, key=lambda e: e.date)
    ]
    df = pd.DataFrame(rows, columns=EXPORT_HEADER)
    return df.to_csv(index=False, lineterminator="\n")


def read_csv_file(path, encoding: Optional[str] = "utf-8") -> CsvImportResult:
    """Parse a CSV file from disk."""
    with open(path, encoding=encoding) as f:
        return parse_csv(f.read())
