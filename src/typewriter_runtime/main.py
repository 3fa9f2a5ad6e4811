"""CLI entrypoint for inspecting tracking plans and exercising the runtime."""

from __future__ import annotations

import json
import logging

import typer
from jsonschema.exceptions import SchemaError
from rich import print
from rich.logging import RichHandler

from typewriter_runtime.client import TypewriterClient
from typewriter_runtime.config import settings
from typewriter_runtime.generated import TRACKING_PLAN
from typewriter_runtime.models import Identity
from typewriter_runtime.plan import TrackingPlan
from typewriter_runtime.transports import (
    AnalyticsPythonTransport,
    RecordingTransport,
    Transport,
    TransportUnavailableError,
)
from typewriter_runtime.validation import SchemaValidator

app = typer.Typer(help="Typewriter runtime developer tools")


class _Tee:
    """Forwards each message to several transports."""

    def __init__(self, *transports: Transport) -> None:
        self._transports = transports

    def track(self, message: dict, callback=None) -> None:
        for transport in self._transports[:-1]:
            transport.track(message)
        self._transports[-1].track(message, callback)


@app.callback()
def _configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def _load_plan(plan: str | None) -> TrackingPlan:
    path = plan or settings.plan_path
    if not path:
        return TRACKING_PLAN
    try:
        return TrackingPlan.from_json(path)
    except FileNotFoundError:
        raise typer.BadParameter(f"Tracking plan not found: {path}")
    except SchemaError as exc:
        raise typer.BadParameter(f"Tracking plan {path} has an invalid schema: {exc.message}")
    except KeyError as exc:
        raise typer.BadParameter(f"Tracking plan {path} has an event without {exc}")
    except (AttributeError, TypeError, ValueError) as exc:
        raise typer.BadParameter(f"Tracking plan {path} is invalid: {exc}")


def _parse_properties(properties: str) -> dict:
    try:
        parsed = json.loads(properties)
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"PROPERTIES must be a JSON object: {exc}")
    if not isinstance(parsed, dict):
        raise typer.BadParameter("PROPERTIES must be a JSON object")
    return parsed


@app.command("settings")
def show_settings() -> None:
    """Print the effective runtime settings."""
    print(
        {
            "app_name": settings.app_name,
            "environment": settings.environment,
            "strict_mode": settings.resolved_strict_mode(),
            "validate_payloads": settings.validate_payloads,
            "plan_path": settings.plan_path,
        }
    )


@app.command("events")
def list_events(plan: str = typer.Option(None, help="Path to a tracking plan JSON file")) -> None:
    """List the events defined by the tracking plan."""
    tracking_plan = _load_plan(plan)
    print(
        [
            {"event": event.name, "method": event.method_name, "validated": event.schema is not None}
            for event in tracking_plan
        ]
    )


@app.command("validate")
def validate(
    event: str = typer.Argument(..., help="Event name or generated method name"),
    properties: str = typer.Argument("{}", help="Event properties as a JSON object"),
    plan: str = typer.Option(None, help="Path to a tracking plan JSON file"),
    user_id: str = typer.Option(None, help="userId to attach to the message"),
) -> None:
    """Check a payload against its event schema without sending it."""
    tracking_plan = _load_plan(plan)
    client = TypewriterClient(tracking_plan, validate=False)
    dispatcher = client.dispatcher(event)
    if dispatcher is None:
        print({"event": event, "error": "Event is not defined in the tracking plan"})
        raise typer.Exit(code=1)

    identity = Identity(user_id=user_id) if user_id else None
    message = dispatcher.build_message(_parse_properties(properties), identity)
    violations = SchemaValidator().validate(message, dispatcher.definition.schema)
    print({"event": dispatcher.event, "valid": not violations, "violations": [v.as_dict() for v in violations]})
    if violations:
        raise typer.Exit(code=1)


@app.command("track")
def track(
    event: str = typer.Argument(..., help="Event name or generated method name"),
    properties: str = typer.Argument("{}", help="Event properties as a JSON object"),
    plan: str = typer.Option(None, help="Path to a tracking plan JSON file"),
    user_id: str = typer.Option("cli", help="userId to attach to the message"),
    send: bool = typer.Option(False, "--send", help="Deliver through the Segment SDK using TYPEWRITER_WRITE_KEY"),
) -> None:
    """Dispatch an event and print the messages handed to the transport."""
    recorder = RecordingTransport()
    client = TypewriterClient(_load_plan(plan), transport=recorder, strict_mode=False)
    if send:
        if not settings.write_key:
            raise typer.BadParameter("Set TYPEWRITER_WRITE_KEY to send events")
        try:
            sdk = AnalyticsPythonTransport(write_key=settings.write_key)
        except TransportUnavailableError as exc:
            print({"error": str(exc)})
            raise typer.Exit(code=1)
        client.configure(transport=_Tee(recorder, sdk))

    client.track(event, _parse_properties(properties), Identity(user_id=user_id))
    print({"sent": recorder.messages})


if __name__ == "__main__":
    app()
