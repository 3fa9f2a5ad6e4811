"""Tracking plan: the static set of known events and their bundled schemas."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Mapping

from typewriter_runtime.validation import check_schema

_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_NON_IDENTIFIER = re.compile(r"[^0-9a-zA-Z]+")

# public members of TypewriterClient; an event method may not shadow them
RESERVED_METHOD_NAMES = frozenset(
    {"configure", "dispatcher", "handler", "known_events", "options", "plan", "strict_mode", "track", "validates"}
)


def method_name_for(event_name: str) -> str:
    """Return the generated method name for an event (``"Order Completed"`` -> ``order_completed``)."""
    spaced = _WORD_BOUNDARY.sub("_", event_name)
    name = _NON_IDENTIFIER.sub("_", spaced).strip("_").lower()
    if not name:
        raise ValueError(f"Cannot derive a method name from event {event_name!r}")
    if name[0].isdigit():
        name = f"event_{name}"
    if name in RESERVED_METHOD_NAMES:
        name = f"event_{name}"
    return name


@dataclass(slots=True)
class EventDefinition:
    """One event in the plan."""

    name: str
    method_name: str = ""
    schema: Mapping[str, Any] | bool | None = None
    defaults: dict[str, Any] = field(default_factory=dict)
    description: str | None = None

    def __post_init__(self) -> None:
        if not self.method_name:
            self.method_name = method_name_for(self.name)


class TrackingPlan:
    """Ordered, immutable collection of :class:`EventDefinition` objects."""

    def __init__(self, events: list[EventDefinition] | tuple[EventDefinition, ...]) -> None:
        self._events: dict[str, EventDefinition] = {}
        self._by_method: dict[str, EventDefinition] = {}
        for event in events:
            if event.method_name in RESERVED_METHOD_NAMES:
                raise ValueError(f"Event '{event.name}' uses reserved client method name '{event.method_name}'")
            if event.name in self._events:
                raise ValueError(f"Duplicate event in tracking plan: {event.name}")
            if event.method_name in self._by_method:
                raise ValueError(
                    f"Events '{self._by_method[event.method_name].name}' and '{event.name}' "
                    f"both map to method '{event.method_name}'"
                )
            if event.schema is not None:
                check_schema(event.schema)
            self._events[event.name] = event
            self._by_method[event.method_name] = event

        self.method_names: frozenset[str] = frozenset(self._by_method)
        self.event_names: frozenset[str] = frozenset(self._events)

    def __iter__(self) -> Iterator[EventDefinition]:
        return iter(self._events.values())

    def __len__(self) -> int:
        return len(self._events)

    def __contains__(self, name: object) -> bool:
        return name in self._events or name in self._by_method

    def get(self, name: str) -> EventDefinition | None:
        """Look up an event by event name or generated method name."""
        return self._events.get(name) or self._by_method.get(name)

    def by_method(self, method_name: str) -> EventDefinition | None:
        """Look up an event by its generated method name only."""
        return self._by_method.get(method_name)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TrackingPlan:
        events = []
        for entry in data.get("events", []):
            events.append(
                EventDefinition(
                    name=entry["name"],
                    method_name=entry.get("method", ""),
                    schema=entry.get("rules", entry.get("schema")),
                    defaults=dict(entry.get("defaults") or {}),
                    description=entry.get("description"),
                )
            )
        return cls(events)

    @classmethod
    def from_json(cls, path: str | Path) -> TrackingPlan:
        with Path(path).open("r", encoding="utf-8") as handle:
            return cls.from_dict(json.load(handle))
