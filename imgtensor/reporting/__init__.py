from __future__ import annotations

from .timing import TimingReporter, parse_report_time

__all__ = ["TimingReporter", "parse_report_time"]
