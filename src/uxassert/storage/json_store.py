"""JSON file storage for validation reports.

Uses atomic writes (write to .tmp, then rename) to prevent partial files.
"""

from __future__ import annotations

import json
from pathlib import Path

from uxassert.models.report import ValidationReport


def report_to_json(report: ValidationReport) -> str:
    """Serialize a report to the camelCase JSON document (indent 2)."""
    data = report.model_dump(mode="json", by_alias=True)
    return json.dumps(data, indent=2, ensure_ascii=False)


def write_report_json(report: ValidationReport, path: Path) -> Path:
    """Write a report to path atomically, creating parent directories.

    Returns:
        The resolved output path.
    """
    out_path = Path(path).resolve()
    out_path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path = out_path.with_name(out_path.name + ".tmp")
    tmp_path.write_text(report_to_json(report), encoding="utf-8")
    tmp_path.replace(out_path)
    return out_path
