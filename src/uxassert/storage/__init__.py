"""Report persistence (JSON output file, CSV log)."""

from uxassert.storage.csv_log import CSV_HEADERS, CsvResultRow, append_results_csv
from uxassert.storage.json_store import report_to_json, write_report_json

__all__ = [
    "CSV_HEADERS",
    "CsvResultRow",
    "append_results_csv",
    "report_to_json",
    "write_report_json",
]
