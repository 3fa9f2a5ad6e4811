"""Per-event entry points that build, validate, decorate and forward messages."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Mapping

from typewriter_runtime.binding import MissingTransportError, TransportBinding
from typewriter_runtime.context import decorate
from typewriter_runtime.models import Identity, Message, Options
from typewriter_runtime.plan import EventDefinition
from typewriter_runtime.transports import TrackCallback
from typewriter_runtime.validation import SchemaValidator

IDENTITY_KEYS = ("userId", "anonymousId")


class EventDispatcher:
    """Callable bound to one known event.

    ``validator`` is ``None`` in production builds; the rest of the dispatch path
    is the same with or without it.
    """

    def __init__(
        self,
        definition: EventDefinition,
        binding: TransportBinding,
        *,
        validator: SchemaValidator | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.definition = definition
        self._binding = binding
        self._validator = validator
        self._logger = logger or logging.getLogger("typewriter_runtime.dispatcher")

    @property
    def event(self) -> str:
        return self.definition.name

    def __call__(
        self,
        properties: Mapping[str, Any] | None = None,
        identity: Identity | Mapping[str, Any] | None = None,
        options: Options | Mapping[str, Any] | None = None,
        callback: TrackCallback | None = None,
        *,
        timestamp: datetime | str | None = None,
    ) -> None:
        self.dispatch(properties, identity, options, callback, timestamp=timestamp)

    def dispatch(
        self,
        properties: Mapping[str, Any] | None = None,
        identity: Identity | Mapping[str, Any] | None = None,
        options: Options | Mapping[str, Any] | None = None,
        callback: TrackCallback | None = None,
        *,
        timestamp: datetime | str | None = None,
    ) -> None:
        """Send one ``track`` call for this event to the configured transport."""
        bound = self._binding.options
        if bound.transport is None:
            raise MissingTransportError()

        message = self.build_message(properties, identity, options, timestamp=timestamp)

        if self._validator is not None:
            violations = self._validator.validate(message, self.definition.schema)
            if violations:
                bound.on_violation(message, violations)

        decorated = decorate(message)
        self._logger.debug("event_dispatched", extra={"event": decorated.event})
        bound.transport.track(decorated.to_payload(), callback)

    def build_message(
        self,
        properties: Mapping[str, Any] | None = None,
        identity: Identity | Mapping[str, Any] | None = None,
        options: Options | Mapping[str, Any] | None = None,
        *,
        timestamp: datetime | str | None = None,
    ) -> Message:
        """Build the undecorated message exactly as the schema sees it."""
        supplied = dict(properties or {})
        if identity is None:
            # merged call form: identity keys given alongside the properties
            identity = {key: supplied.pop(key) for key in IDENTITY_KEYS if key in supplied} or None

        return Message(
            event=self.definition.name,
            properties={**self.definition.defaults, **supplied},
            identity=Identity.coerce(identity),
            timestamp=timestamp,
            options=Options.coerce(options),
        )
