"""Runtime dispatch and validation core for generated analytics clients."""

from .binding import MissingTransportError, TransportBinding, TypewriterOptions
from .client import TypewriterClient
from .context import LIBRARY_LANGUAGE, LIBRARY_VERSION, decorate
from .dispatcher import EventDispatcher
from .fallback import UNKNOWN_CALL_EVENT, DynamicFallbackRouter
from .models import Identity, Message, Options, SchemaViolation
from .plan import EventDefinition, TrackingPlan
from .transports import AnalyticsPythonTransport, RecordingTransport, Transport, TransportUnavailableError
from .validation import SchemaValidator
from .violations import SchemaViolationError, ViolationHandler, default_violation_handler

__version__ = LIBRARY_VERSION

__all__ = [
    "AnalyticsPythonTransport",
    "DynamicFallbackRouter",
    "EventDefinition",
    "EventDispatcher",
    "Identity",
    "LIBRARY_LANGUAGE",
    "LIBRARY_VERSION",
    "Message",
    "MissingTransportError",
    "Options",
    "RecordingTransport",
    "SchemaValidator",
    "SchemaViolation",
    "SchemaViolationError",
    "TrackingPlan",
    "Transport",
    "TransportBinding",
    "TransportUnavailableError",
    "TypewriterClient",
    "TypewriterOptions",
    "UNKNOWN_CALL_EVENT",
    "ViolationHandler",
    "decorate",
    "default_violation_handler",
]
