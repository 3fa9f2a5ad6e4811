"""Boundary for analytics transport integrations."""

from typing import Any, Callable, Protocol

TrackCallback = Callable[[Exception | None], None]


class Transport(Protocol):
    """Sink that delivers a decorated analytics message to the backend."""

    def track(self, message: dict[str, Any], callback: TrackCallback | None = None) -> None:
        """Hand a message off for delivery; completion is reported through ``callback``."""
