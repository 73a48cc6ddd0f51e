"""
Fan-out core: one record, zero or more independent sink deliveries.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .diagnostics import report
from .formatters import Formatter, render_line
from .levels import Level
from .record import LogRecord
from .sinks import SinkWriter

__all__ = ["FanOut", "SinkBinding", "report"]


@dataclass(frozen=True)
class SinkBinding:
    """A sink together with its formatter and minimum accepted level."""

    sink: SinkWriter
    formatter: Formatter
    min_level: Level = Level.DEBUG

    def accepts(self, level: Level) -> bool:
        return level >= self.min_level


class FanOut:
    """Delivers each record to every binding whose minimum level it meets.

    Bindings are fixed at construction. A failing sink is reported on stderr
    and never prevents delivery to the remaining bindings.
    """

    def __init__(self, bindings: Iterable[SinkBinding] = ()):
        self._bindings = tuple(bindings)

    @property
    def bindings(self) -> tuple[SinkBinding, ...]:
        return self._bindings

    @property
    def sinks(self) -> tuple[SinkWriter, ...]:
        return tuple(b.sink for b in self._bindings)

    @property
    def min_level(self) -> Level | None:
        if not self._bindings:
            return None
        return min(b.min_level for b in self._bindings)

    def dispatch(self, record: LogRecord) -> int:
        """Deliver ``record``; returns the number of successful deliveries."""
        delivered = 0
        for binding in self._bindings:
            if not binding.accepts(record.level):
                continue
            try:
                data = render_line(binding.formatter, record)
                written = binding.sink.write(data)
            except Exception as exc:  # noqa: BLE001
                report(f"{binding.sink.name}: write failed: {exc!r}")
                continue
            if written < len(data):
                report(f"{binding.sink.name}: short write ({written} of {len(data)} bytes)")
                continue
            delivered += 1
        return delivered

    def sync(self) -> None:
        """Flush every sink; network deliveries in flight are not awaited."""
        for sink in self.sinks:
            try:
                sink.flush()
            except Exception as exc:  # noqa: BLE001
                report(f"{sink.name}: flush failed: {exc!r}")

    def close(self) -> None:
        self.sync()
        for sink in self.sinks:
            try:
                sink.close()
            except Exception as exc:  # noqa: BLE001
                report(f"{sink.name}: close failed: {exc!r}")
