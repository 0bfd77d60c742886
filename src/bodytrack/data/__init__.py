"""CSV and JSON import/export of weight data."""

from bodytrack.data.backup import Backup, export_backup, parse_backup
from bodytrack.data.csv_import import CsvImportResult, export_csv, parse_csv

__all__ = [
    "Backup",
    "CsvImportResult",
    "export_backup",
    "export_csv",
    "parse_backup",
    "parse_csv",
]
