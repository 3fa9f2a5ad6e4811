"""Transport backed by the Segment ``analytics-python`` SDK.

The SDK is imported lazily so clients can be built and tested where it is not
installed; only constructing this adapter requires it.
"""

from __future__ import annotations

import importlib
from dataclasses import dataclass, field
from datetime import datetime
from types import ModuleType
from typing import Any

from typewriter_runtime.transports.base import TrackCallback, Transport

_SDK_MODULES = ("segment.analytics", "analytics")


class TransportUnavailableError(RuntimeError):
    """Raised when the analytics SDK is not installed or has no ``track`` API."""


@dataclass(slots=True)
class AnalyticsPythonTransport(Transport):
    """Adapter that forwards messages through a locally-imported Segment SDK module."""

    write_key: str | None = None
    _sdk: ModuleType = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._sdk = self._resolve_sdk()
        if self.write_key:
            self._sdk.write_key = self.write_key

    def track(self, message: dict[str, Any], callback: TrackCallback | None = None) -> None:
        try:
            self._sdk.track(**self._to_sdk_kwargs(message))
        except Exception as exc:  # noqa: BLE001 - reported through the caller's callback.
            if callback is None:
                raise
            callback(exc)
            return

        if callback is not None:
            callback(None)

    @staticmethod
    def _to_sdk_kwargs(message: dict[str, Any]) -> dict[str, Any]:
        timestamp = message.get("timestamp")
        if isinstance(timestamp, str):
            # fromisoformat only accepts a "Z" suffix from Python 3.11 on
            if timestamp.endswith(("Z", "z")):
                timestamp = f"{timestamp[:-1]}+00:00"
            timestamp = datetime.fromisoformat(timestamp)
        return {
            "event": message["event"],
            "properties": message.get("properties"),
            "user_id": message.get("userId"),
            "anonymous_id": message.get("anonymousId"),
            "context": message.get("context"),
            "integrations": message.get("integrations"),
            "timestamp": timestamp,
        }

    @staticmethod
    def _resolve_sdk() -> ModuleType:
        for name in _SDK_MODULES:
            try:
                module = importlib.import_module(name)
            except ImportError:
                continue
            if callable(getattr(module, "track", None)):
                return module

        raise TransportUnavailableError(
            "Unable to import the Segment SDK. Install it with: pip install 'typewriter-runtime[segment]'"
        )
