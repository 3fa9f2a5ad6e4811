from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping


@dataclass(slots=True)
class Identity:
    user_id: str | None = None
    anonymous_id: str | None = None

    @classmethod
    def coerce(cls, value: Identity | Mapping[str, Any] | None) -> Identity | None:
        """Accept an ``Identity`` or a mapping using wire or snake_case keys."""
        if value is None or isinstance(value, Identity):
            return value
        return cls(
            user_id=value.get("userId", value.get("user_id")),
            anonymous_id=value.get("anonymousId", value.get("anonymous_id")),
        )

    def as_payload(self) -> dict[str, str]:
        payload: dict[str, str] = {}
        if self.user_id is not None:
            payload["userId"] = self.user_id
        if self.anonymous_id is not None:
            payload["anonymousId"] = self.anonymous_id
        return payload


@dataclass(slots=True)
class Options:
    integrations: dict[str, Any] | None = None
    context: dict[str, Any] | None = None

    @classmethod
    def coerce(cls, value: Options | Mapping[str, Any] | None) -> Options:
        if value is None:
            return cls()
        if isinstance(value, Options):
            return cls(integrations=value.integrations, context=value.context)
        return cls(integrations=value.get("integrations"), context=value.get("context"))


@dataclass(slots=True)
class Message:
    """A single analytics call, as built by a dispatcher."""

    event: str
    properties: dict[str, Any] = field(default_factory=dict)
    identity: Identity | None = None
    timestamp: datetime | str | None = None
    options: Options = field(default_factory=Options)

    @property
    def context(self) -> dict[str, Any]:
        return self.options.context or {}

    def to_payload(self) -> dict[str, Any]:
        """Render the wire mapping handed to a transport."""
        payload: dict[str, Any] = {"event": self.event, "properties": self.properties}
        if self.identity is not None:
            payload.update(self.identity.as_payload())
        if self.timestamp is not None:
            payload["timestamp"] = (
                self.timestamp.isoformat() if isinstance(self.timestamp, datetime) else self.timestamp
            )
        if self.options.context is not None:
            payload["context"] = self.options.context
        if self.options.integrations is not None:
            payload["integrations"] = self.options.integrations
        return payload


@dataclass(frozen=True, slots=True)
class SchemaViolation:
    """One way a message fails its event schema."""

    path: str
    keyword: str
    message: str
    expected: Any = None
    value: Any = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "keyword": self.keyword,
            "message": self.message,
            "expected": self.expected,
            "value": self.value,
        }
