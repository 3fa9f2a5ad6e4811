"""Analytics transports (e.g., the Segment SDK)."""

from .base import TrackCallback, Transport
from .recording import RecordingTransport
from .segment import AnalyticsPythonTransport, TransportUnavailableError

__all__ = [
    "AnalyticsPythonTransport",
    "RecordingTransport",
    "TrackCallback",
    "Transport",
    "TransportUnavailableError",
]
