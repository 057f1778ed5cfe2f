"""Report assembly."""

from uxassert.report.aggregate import build_report, group_by_test_step, summarize_verdicts

__all__ = ["build_report", "group_by_test_step", "summarize_verdicts"]
