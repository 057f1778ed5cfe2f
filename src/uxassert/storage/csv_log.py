"""Append per-assertion result rows to a CSV log.

The header row is written only when the file does not exist yet.
"""

from __future__ import annotations

import csv
from dataclasses import dataclass
from pathlib import Path

CSV_HEADERS: list[str] = [
    "fps",
    "persona",
    "strategy",
    "text",
    "type",
    "testStepDescription",
    "resultJson",
]


@dataclass
class CsvResultRow:
    """One assertion of one run, with the full report JSON attached."""

    fps: float
    persona: str
    strategy: str
    text: str
    type: str
    test_step_description: str
    result_json: str

    def as_record(self) -> dict[str, object]:
        return {
            "fps": self.fps,
            "persona": self.persona,
            "strategy": self.strategy,
            "text": self.text,
            "type": self.type,
            "testStepDescription": self.test_step_description,
            "resultJson": self.result_json,
        }


def append_results_csv(csv_path: Path, rows: list[CsvResultRow]) -> int:
    """Append rows to csv_path.

    Returns:
        Number of rows written (0 for an empty list; the file is not touched).
    """
    if not rows:
        return 0

    resolved = Path(csv_path).resolve()
    write_header = not resolved.exists()
    resolved.parent.mkdir(parents=True, exist_ok=True)

    with resolved.open("a", encoding="utf-8", newline="") as fh:
        writer = csv.DictWriter(fh, fieldnames=CSV_HEADERS)
        if write_header:
            writer.writeheader()
        for row in rows:
            writer.writerow(row.as_record())

    return len(rows)
