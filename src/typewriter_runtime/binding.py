"""Holder for the transport and violation policy used by a client."""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace

from typewriter_runtime.transports import Transport
from typewriter_runtime.violations import ViolationHandler


class MissingTransportError(RuntimeError):
    """Raised when an analytics call is made before a transport is configured."""

    def __init__(self) -> None:
        super().__init__(
            "You must configure an analytics transport before making analytics calls. "
            "Call client.configure(transport=...) with an object exposing "
            "track(message, callback), e.g. AnalyticsPythonTransport(write_key=...)."
        )


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


UNSET = _Unset()


@dataclass(frozen=True, slots=True)
class TypewriterOptions:
    """Immutable snapshot of the current binding."""

    transport: Transport | None
    on_violation: ViolationHandler


class TransportBinding:
    """Atomically swappable reference to the active :class:`TypewriterOptions`.

    Writers build a new snapshot under a lock and swap it in; readers take the
    current reference as-is, so a dispatch racing a reconfiguration sees either
    the old or the new options, never a mix.
    """

    def __init__(self, default_handler: ViolationHandler, transport: Transport | None = None) -> None:
        self._default_handler = default_handler
        self._lock = threading.Lock()
        self._options = TypewriterOptions(transport=transport, on_violation=default_handler)

    @property
    def options(self) -> TypewriterOptions:
        return self._options

    @property
    def transport(self) -> Transport | None:
        return self._options.transport

    @property
    def on_violation(self) -> ViolationHandler:
        return self._options.on_violation

    def configure(
        self,
        transport: Transport | _Unset = UNSET,
        on_violation: ViolationHandler | None | _Unset = UNSET,
    ) -> TypewriterOptions:
        """Replace the given fields; omitted ones keep their current values.

        Passing ``on_violation=None`` restores the default policy.
        """
        with self._lock:
            options = self._options
            if not isinstance(transport, _Unset):
                options = replace(options, transport=transport)
            if not isinstance(on_violation, _Unset):
                options = replace(options, on_violation=on_violation or self._default_handler)
            self._options = options
            return options

