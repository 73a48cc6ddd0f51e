"""
Sink writer contract and concrete sinks.
"""

from __future__ import annotations

import os
import sys
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, TextIO

import httpx
import orjson

from .delivery import BackgroundDelivery
from .diagnostics import report
from .exceptions import DeliveryError, LoggerConfigurationError

DEFAULT_WEBHOOK_USERNAME = "Logger"
DEFAULT_WEBHOOK_AVATAR_URL = (
    "https://e7.pngegg.com/pngimages/836/966/"
    "png-clipart-go-programming-language-computer-programming-others-baltimore-web-application-thumbnail.png"
)
DEFAULT_BOT_API_BASE = "https://api.telegram.org"


# =============================================================================
# Sink Abstraction (Strategy Pattern)
# =============================================================================


class SinkWriter(ABC):
    """Destination for formatted records.

    ``write`` returns the number of bytes accepted. Fewer bytes than given, or
    a raised exception, marks a failed attempt; the fan-out core reports it
    and never retries.
    """

    name: str = "sink"

    @abstractmethod
    def write(self, data: bytes) -> int:
        """Deliver one formatted record."""
        ...

    def flush(self) -> None:
        """Push buffered bytes down to the transport."""

    def close(self) -> None:
        """Release resources."""


class ConsoleSink(SinkWriter):
    """Standard output sink.

    Args:
        stream: Output stream. When omitted, the current ``sys.stdout`` is
            looked up on every write so redirection is honored.
    """

    name = "console"

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream
        self._lock = threading.Lock()

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def isatty(self) -> bool:
        return bool(getattr(self.stream, "isatty", lambda: False)())

    def write(self, data: bytes) -> int:
        with self._lock:
            self.stream.write(data.decode("utf-8", errors="replace"))
            self.stream.flush()
        return len(data)

    def flush(self) -> None:
        with self._lock:
            self.stream.flush()


class FileSink(SinkWriter):
    """Local append-only file sink.

    Creates the parent directory if needed and opens the file for append
    (creating it when missing). Writes are synchronous and raise ``OSError``.
    """

    name = "file"
    DEFAULT_PATH = "app.log"

    def __init__(self, path: str | Path = ""):
        self._path = Path(path or self.DEFAULT_PATH)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self._path, "ab")
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def write(self, data: bytes) -> int:
        with self._lock:
            written = self._file.write(data)
            self._file.flush()
        return written

    def flush(self) -> None:
        with self._lock:
            if self._file.closed:
                return
            self._file.flush()
            os.fsync(self._file.fileno())

    def close(self) -> None:
        self.flush()
        with self._lock:
            self._file.close()


# =============================================================================
# Network Sinks (fire-and-forget)
# =============================================================================


class _NetworkSink(SinkWriter):
    """Submits each record to a background worker that POSTs it with httpx.

    ``write`` never blocks on the network and always reports full success.
    """

    def __init__(
        self,
        *,
        client: httpx.Client | None = None,
        timeout: float | None = None,
        max_pending: int = 0,
    ):
        self._owns_client = client is None
        if client is None:
            client = httpx.Client(timeout=timeout) if timeout is not None else httpx.Client()
        self._client = client
        self._delivery = BackgroundDelivery(
            self.name,
            self._send,
            max_pending=max_pending,
            on_close=self._close_client,
        )

    @property
    def delivery(self) -> BackgroundDelivery:
        return self._delivery

    def write(self, data: bytes) -> int:
        if not self._delivery.submit(data):
            report(f"{self.name}: sink closed, notification dropped")
        return len(data)

    def close(self, wait: float | None = None) -> None:
        self._delivery.close(wait)

    @abstractmethod
    def _request(self, text: str) -> tuple[str, dict[str, Any]]:
        """Return the target URL and JSON envelope for one message."""
        ...

    def _send(self, data: bytes) -> None:
        url, envelope = self._request(data.decode("utf-8", errors="replace").rstrip("\n"))
        try:
            response = self._client.post(
                url,
                content=orjson.dumps(envelope),
                headers={"content-type": "application/json"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise DeliveryError(f"HTTP {exc.response.status_code}") from None
        except httpx.HTTPError as exc:
            # httpx messages may embed the URL; keep credentials out of diagnostics
            raise DeliveryError(type(exc).__name__) from None

    def _close_client(self) -> None:
        if self._owns_client:
            self._client.close()


class WebhookSink(_NetworkSink):
    """Team-chat webhook sink (Discord-style envelope).

    The text is wrapped in a fenced code block so colors and indentation
    render verbatim in the chat client.
    """

    name = "webhook"

    def __init__(
        self,
        url: str,
        *,
        username: str = DEFAULT_WEBHOOK_USERNAME,
        avatar_url: str = DEFAULT_WEBHOOK_AVATAR_URL,
        client: httpx.Client | None = None,
        timeout: float | None = None,
        max_pending: int = 0,
    ):
        if not url:
            raise LoggerConfigurationError("webhook sink requires a URL")
        self._url = url
        self._username = username
        self._avatar_url = avatar_url
        super().__init__(client=client, timeout=timeout, max_pending=max_pending)

    def envelope(self, text: str) -> dict[str, Any]:
        return {
            "content": f"```{text}```",
            "username": self._username,
            "avatar_url": self._avatar_url,
        }

    def _request(self, text: str) -> tuple[str, dict[str, Any]]:
        return self._url, self.envelope(text)


class BotChannelSink(_NetworkSink):
    """Messaging-bot sink (Telegram Bot API ``sendMessage``)."""

    name = "bot"

    def __init__(
        self,
        token: str,
        chat_id: int | str,
        *,
        api_base: str = DEFAULT_BOT_API_BASE,
        client: httpx.Client | None = None,
        timeout: float | None = None,
        max_pending: int = 0,
    ):
        if not token or chat_id in (None, ""):
            raise LoggerConfigurationError("bot sink requires both a token and a chat id")
        self._endpoint = f"{api_base.rstrip('/')}/bot{token}/sendMessage"
        self._chat_id = chat_id
        super().__init__(client=client, timeout=timeout, max_pending=max_pending)

    def envelope(self, text: str) -> dict[str, Any]:
        return {"chat_id": self._chat_id, "text": text}

    def _request(self, text: str) -> tuple[str, dict[str, Any]]:
        return self._endpoint, self.envelope(text)
