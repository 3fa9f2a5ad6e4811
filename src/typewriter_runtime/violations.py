"""Policies applied when an outgoing message does not match its schema."""

from __future__ import annotations

import json
import logging
from typing import Callable

from typewriter_runtime.models import Message, SchemaViolation

ViolationHandler = Callable[[Message, list[SchemaViolation]], None]


class SchemaViolationError(ValueError):
    """Raised by the strict policy when a message fails validation."""

    def __init__(self, event: str, violations: list[SchemaViolation]) -> None:
        self.event = event
        self.violations = list(violations)
        details = "; ".join(f"{v.path or '/'} {v.message}" for v in self.violations)
        super().__init__(f"Event '{event}' failed schema validation: {details}")


def describe(message: Message) -> str:
    return f"You made an analytics call ({message.event}) that didn't match your Tracking Plan."


def default_violation_handler(strict: bool, logger: logging.Logger | None = None) -> ViolationHandler:
    """Build the default policy: raise when ``strict``, otherwise warn and continue."""
    log = logger or logging.getLogger("typewriter_runtime.violations")

    def _handle(message: Message, violations: list[SchemaViolation]) -> None:
        if strict:
            raise SchemaViolationError(message.event, violations)

        serialized = [violation.as_dict() for violation in violations]
        log.warning(
            "%s Validation errors: %s",
            describe(message),
            json.dumps(serialized, indent=2, default=str),
            extra={"event": message.event, "violations": serialized},
        )

    return _handle
