"""Explicit analytics client: one binding, one dispatcher per known event."""

from __future__ import annotations

import logging
from typing import Any, Callable

from typewriter_runtime.binding import UNSET, TransportBinding, TypewriterOptions, _Unset
from typewriter_runtime.config import Settings, settings as default_settings
from typewriter_runtime.dispatcher import EventDispatcher
from typewriter_runtime.fallback import DynamicFallbackRouter
from typewriter_runtime.plan import TrackingPlan
from typewriter_runtime.transports import Transport
from typewriter_runtime.validation import SchemaValidator
from typewriter_runtime.violations import ViolationHandler, default_violation_handler


class TypewriterClient:
    """Dispatches tracking-plan events to a transport.

    Known events are reachable as attributes named after their generated method
    (``client.order_completed(...)``) or through :meth:`track`. Any other public
    attribute resolves to the unknown-call fallback instead of ``AttributeError``.
    """

    def __init__(
        self,
        plan: TrackingPlan,
        *,
        transport: Transport | None = None,
        on_violation: ViolationHandler | None = None,
        strict_mode: bool | None = None,
        validate: bool | None = None,
        settings: Settings | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        config = settings or default_settings
        self._plan = plan
        self._logger = logger or logging.getLogger("typewriter_runtime.client")
        self.strict_mode = config.resolved_strict_mode() if strict_mode is None else strict_mode

        self._binding = TransportBinding(
            default_violation_handler(self.strict_mode, logger=logger),
            transport=transport,
        )
        if on_violation is not None:
            self._binding.configure(on_violation=on_violation)

        validate = config.validate_payloads if validate is None else validate
        self._validator = SchemaValidator() if validate else None
        self._dispatchers = {
            definition.name: EventDispatcher(definition, self._binding, validator=self._validator, logger=logger)
            for definition in plan
        }
        self._fallback = DynamicFallbackRouter(self._binding, logger=logger)
        self._logger.debug(
            "client_initialized",
            extra={"events": len(plan), "strict_mode": self.strict_mode, "validation": validate},
        )

    @property
    def plan(self) -> TrackingPlan:
        return self._plan

    @property
    def known_events(self) -> frozenset[str]:
        return self._plan.event_names

    @property
    def options(self) -> TypewriterOptions:
        return self._binding.options

    @property
    def validates(self) -> bool:
        return self._validator is not None

    def configure(
        self,
        transport: Transport | _Unset = UNSET,
        on_violation: ViolationHandler | None | _Unset = UNSET,
    ) -> TypewriterOptions:
        """Set or replace the transport and/or violation handler; omitted fields are kept."""
        options = self._binding.configure(transport=transport, on_violation=on_violation)
        self._logger.info(
            "client_configured",
            extra={
                "transport": type(options.transport).__name__ if options.transport is not None else None,
                "custom_violation_handler": not isinstance(on_violation, _Unset) and on_violation is not None,
            },
        )
        return options

    def dispatcher(self, name: str) -> EventDispatcher | None:
        """Return the dispatcher for an event name or method name, if the plan defines it."""
        definition = self._plan.get(name)
        if definition is None:
            return None
        return self._dispatchers[definition.name]

    def handler(self, name: str) -> Callable[..., None]:
        """Known name -> its dispatcher; anything else -> the fallback handler."""
        if name in self._plan:
            return self._dispatchers[self._plan.get(name).name]
        return self._fallback.handler_for(name)

    def track(self, name: str, *args: Any, **kwargs: Any) -> None:
        self.handler(name)(*args, **kwargs)

    def __getattr__(self, name: str) -> Callable[..., None]:
        # only reached for names not found through normal lookup
        if name.startswith("_"):
            raise AttributeError(name)
        definition = self._plan.by_method(name)
        if definition is not None:
            return self._dispatchers[definition.name]
        return self._fallback.handler_for(name)
