"""Optional per-stage timing report.

Enabled by a ``<type>|<identifier>`` option string. The only type is
``json``; the identifier, when given, prefixes every emitted line::

    run1{"type": "image_preprocess", "value": 812.4, "metric": "convert", "unit": "us"}
"""

from __future__ import annotations

import json
import sys
import time
from contextlib import contextmanager
from typing import IO, Iterator, Optional

from imgtensor.errors import ConfigurationError
from imgtensor.utils.jsonable import to_jsonable

_VALID_TYPES = ("json",)


def parse_report_time(option: str | None) -> Optional[tuple[str, str]]:
    """Parse a report option into ``(type, identifier)``; ``None`` when disabled."""

    if option is None or str(option) == "":
        return None
    kind, _, identifier = str(option).partition("|")
    if kind not in _VALID_TYPES:
        raise ConfigurationError(
            f"Invalid report_time type {kind!r} in {option!r}. "
            f"Expected '<type>|<identifier>' with type one of: {', '.join(_VALID_TYPES)}"
        )
    return (kind, identifier)


class TimingReporter:
    """Emit one JSON line per timed event to `stream` (stdout by default)."""

    def __init__(self, option: str | None = "", *, stream: IO[str] | None = None) -> None:
        parsed = parse_report_time(option)
        self.enabled = parsed is not None
        self.identifier = parsed[1] if parsed is not None else ""
        self._stream = stream

    def report(self, type: str, value: float, metric: str, unit: str) -> None:  # noqa: A002
        if not self.enabled:
            return
        payload = {"type": type, "value": value, "metric": metric, "unit": unit}
        stream = self._stream if self._stream is not None else sys.stdout
        stream.write(self.identifier + json.dumps(to_jsonable(payload)) + "\n")
        stream.flush()

    @contextmanager
    def measure(self, type: str, metric: str) -> Iterator[None]:  # noqa: A002
        """Time the enclosed block in microseconds and report it on success."""

        start = time.perf_counter()
        yield
        elapsed_us = (time.perf_counter() - start) * 1e6
        self.report(type, elapsed_us, metric, "us")
