import os
import threading

import httpx
import pytest

from fanlog.sinks import SinkWriter


class RecordingSink(SinkWriter):
    """In-memory sink capturing every formatted line."""

    name = "recording"

    def __init__(self):
        self.lines: list[str] = []
        self.flushed = 0
        self.closed = False
        self._lock = threading.Lock()

    def write(self, data: bytes) -> int:
        with self._lock:
            self.lines.append(data.decode("utf-8"))
        return len(data)

    def flush(self) -> None:
        self.flushed += 1

    def close(self) -> None:
        self.closed = True


class RequestRecorder:
    """httpx.MockTransport handler that records requests."""

    def __init__(self, status_code: int = 200, error: Exception | None = None):
        self.requests: list[httpx.Request] = []
        self.status_code = status_code
        self.error = error
        self._lock = threading.Lock()

    def __call__(self, request: httpx.Request) -> httpx.Response:
        with self._lock:
            self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, json={"ok": self.status_code < 400})


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """
    Run every test in an empty working directory without FANLOG_* variables,
    so default file paths and .env files never leak between tests.
    """
    for key in list(os.environ):
        if key.startswith("FANLOG_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    yield


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def recorder() -> RequestRecorder:
    return RequestRecorder()


@pytest.fixture
def mock_client(recorder):
    client = httpx.Client(transport=httpx.MockTransport(recorder))
    yield client
    client.close()


@pytest.fixture
def sink_factory():
    """Factory for additional recording sinks within one test."""
    return RecordingSink


@pytest.fixture
def recorder_factory():
    return RequestRecorder
