"""Graceful handling of calls to events missing from the generated client."""

from __future__ import annotations

import logging
from typing import Any, Callable

from typewriter_runtime.binding import TransportBinding
from typewriter_runtime.context import decorate
from typewriter_runtime.models import Identity, Message

UNKNOWN_CALL_EVENT = "Unknown Analytics Call Fired"
UNKNOWN_CALL_USER_ID = "typewriter"


class DynamicFallbackRouter:
    """Stands in for every method name the tracking plan does not define."""

    def __init__(self, binding: TransportBinding, logger: logging.Logger | None = None) -> None:
        self._binding = binding
        self._logger = logger or logging.getLogger("typewriter_runtime.fallback")

    def handler_for(self, method: str) -> Callable[..., None]:
        def _unknown_call(*args: Any, **kwargs: Any) -> None:
            self.fire(method)

        _unknown_call.__name__ = method
        return _unknown_call

    def fire(self, method: str) -> None:
        """Warn about ``method`` and send the unknown-call telemetry event; never raises."""
        self._logger.warning(
            "Unknown analytics method '%s' called. Regenerate your client to pick up "
            "the latest Tracking Plan, or add this event to your Tracking Plan.",
            method,
            extra={"method": method},
        )

        transport = self._binding.transport
        if transport is None:
            return

        message = decorate(
            Message(
                event=UNKNOWN_CALL_EVENT,
                properties={"method": method},
                identity=Identity(user_id=UNKNOWN_CALL_USER_ID),
            )
        )
        try:
            transport.track(message.to_payload())
        except Exception:  # noqa: BLE001 - an unknown call must never break the caller.
            self._logger.exception("unknown_call_telemetry_failed", extra={"method": method})
