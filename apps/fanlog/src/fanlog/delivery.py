"""
Best-effort background delivery for network sinks.

Each network sink owns one worker thread consuming a FIFO queue, so payloads
for a single sink are sent in submission order while the caller never waits
on the network. Nothing joins the worker back to the caller: payloads still
queued when the process exits are lost.
"""

from __future__ import annotations

import threading
from collections import deque
from typing import Callable

from .diagnostics import report


class BackgroundDelivery:
    """Unbounded (or drop-oldest bounded) queue drained by a daemon thread.

    Args:
        name: Sink name used in thread names and diagnostics.
        send: Performs one delivery; exceptions are reported and swallowed.
        max_pending: 0 for an unbounded queue, otherwise the queue depth above
            which the oldest pending payload is dropped.
        on_close: Called once by the worker after it has drained and stopped.
    """

    def __init__(
        self,
        name: str,
        send: Callable[[bytes], None],
        *,
        max_pending: int = 0,
        on_close: Callable[[], None] | None = None,
    ) -> None:
        self._name = name
        self._send = send
        self._max_pending = max(0, max_pending)
        self._on_close = on_close
        self._queue: deque[bytes] = deque()
        self._cond = threading.Condition()
        self._closed = False
        self._dropped = 0
        self._thread = threading.Thread(target=self._run, name=f"fanlog-{name}", daemon=True)
        self._thread.start()

    @property
    def pending(self) -> int:
        with self._cond:
            return len(self._queue)

    @property
    def dropped(self) -> int:
        return self._dropped

    @property
    def closed(self) -> bool:
        return self._closed

    def submit(self, payload: bytes) -> bool:
        """Queue a payload; returns False when it was refused after close."""
        with self._cond:
            if self._closed:
                return False
            if self._max_pending and len(self._queue) >= self._max_pending:
                self._queue.popleft()
                self._dropped += 1
                report(f"{self._name}: queue full ({self._max_pending}), dropped oldest notification")
            self._queue.append(payload)
            self._cond.notify()
        return True

    def close(self, wait: float | None = None) -> None:
        """Stop accepting payloads; optionally wait up to ``wait`` seconds for the drain."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()
        if wait is not None and self._thread is not threading.current_thread():
            self._thread.join(wait)

    def _run(self) -> None:
        try:
            while True:
                with self._cond:
                    while not self._queue and not self._closed:
                        self._cond.wait()
                    if not self._queue:
                        return
                    payload = self._queue.popleft()
                try:
                    self._send(payload)
                except Exception as exc:  # noqa: BLE001
                    report(f"{self._name}: delivery failed: {exc!r}")
        finally:
            if self._on_close is not None:
                try:
                    self._on_close()
                except Exception as exc:  # noqa: BLE001
                    report(f"{self._name}: close failed: {exc!r}")
