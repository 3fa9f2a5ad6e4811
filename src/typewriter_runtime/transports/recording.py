"""In-process transports for local demos, the CLI and tests."""

from __future__ import annotations

from typing import Any

from typewriter_runtime.transports.base import TrackCallback


class RecordingTransport:
    """Keeps every delivered message in memory."""

    def __init__(self) -> None:
        self.messages: list[dict[str, Any]] = []

    def track(self, message: dict[str, Any], callback: TrackCallback | None = None) -> None:
        self.messages.append(message)
        if callback is not None:
            callback(None)

    @property
    def events(self) -> list[str]:
        return [message["event"] for message in self.messages]
