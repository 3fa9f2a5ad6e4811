import logging
from datetime import datetime, timezone

import pytest

from typewriter_runtime.binding import MissingTransportError
from typewriter_runtime.client import TypewriterClient
from typewriter_runtime.config import Settings
from typewriter_runtime.context import LIBRARY_VERSION
from typewriter_runtime.generated import AnalyticsClient
from typewriter_runtime.models import Identity, Options
from typewriter_runtime.plan import RESERVED_METHOD_NAMES, EventDefinition, TrackingPlan
from typewriter_runtime.transports import RecordingTransport
from typewriter_runtime.violations import SchemaViolationError


class FailingTransport:
    def track(self, message, callback=None) -> None:
        raise ConnectionError("backend down")


def test_order_completed_scenario() -> None:
    transport = RecordingTransport()
    client = AnalyticsClient(strict_mode=True)
    client.configure(transport=transport)

    client.order_completed({"orderId": "A1", "userId": "u1"})

    assert len(transport.messages) == 1
    sent = transport.messages[0]
    assert sent["event"] == "Order Completed"
    assert sent["properties"]["orderId"] == "A1"
    assert "userId" not in sent["properties"]
    assert sent["userId"] == "u1"
    assert sent["context"]["typewriter"] == {"language": "python", "version": LIBRARY_VERSION}


def test_dispatch_merges_defaults_with_caller_properties_winning() -> None:
    transport = RecordingTransport()
    client = AnalyticsClient(transport=transport, strict_mode=True)

    client.order_completed({"orderId": "A1"}, Identity(user_id="u1"))
    client.order_completed({"orderId": "A2", "currency": "EUR"}, {"anonymousId": "anon-1"})

    assert transport.messages[0]["properties"] == {"currency": "USD", "orderId": "A1"}
    assert transport.messages[1]["properties"] == {"currency": "EUR", "orderId": "A2"}
    assert transport.messages[1]["anonymousId"] == "anon-1"
    assert "userId" not in transport.messages[1]


def test_dispatch_passes_options_timestamp_and_callback_through() -> None:
    transport = RecordingTransport()
    client = AnalyticsClient(transport=transport, strict_mode=True)
    results: list[Exception | None] = []
    caller_context = {"locale": "de-DE", "typewriter": {"language": "other"}}

    client.product_viewed(
        {"product_id": "p1"},
        {"userId": "u1"},
        Options(integrations={"Mixpanel": False}, context=caller_context),
        results.append,
        timestamp=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
    )

    sent = transport.messages[0]
    assert results == [None]
    assert sent["integrations"] == {"Mixpanel": False}
    assert sent["timestamp"] == "2024-01-02T03:04:05+00:00"
    assert sent["context"]["locale"] == "de-DE"
    assert sent["context"]["typewriter"]["language"] == "python"
    assert caller_context["typewriter"] == {"language": "other"}


def test_dispatch_before_configuration_raises_and_sends_nothing() -> None:
    client = AnalyticsClient(strict_mode=True)

    with pytest.raises(MissingTransportError) as excinfo:
        client.order_completed({"orderId": "A1"}, {"userId": "u1"})

    assert "client.configure(transport=" in str(excinfo.value)


def test_strict_mode_raises_before_transport_call() -> None:
    transport = RecordingTransport()
    client = AnalyticsClient(transport=transport, strict_mode=True, validate=True)

    with pytest.raises(SchemaViolationError):
        client.order_completed({"total": "ten"}, {"userId": "u1"})

    assert transport.messages == []


def test_lenient_mode_warns_and_still_sends_once(caplog) -> None:
    transport = RecordingTransport()
    client = AnalyticsClient(transport=transport, strict_mode=False, validate=True)

    client.order_completed({"total": "ten"}, {"userId": "u1"})

    assert len(transport.messages) == 1
    assert any("Order Completed" in record.getMessage() for record in caplog.records if record.levelname == "WARNING")


def test_custom_handler_replaces_default_and_sees_undecorated_message() -> None:
    seen = []
    transport = RecordingTransport()
    client = AnalyticsClient(transport=transport, strict_mode=True, validate=True)
    client.configure(on_violation=lambda message, violations: seen.append((message, violations)))

    client.product_viewed({"product_id": 7}, {"userId": "u1"})

    message, violations = seen[0]
    assert message.event == "Product Viewed"
    assert message.options.context is None
    assert [v.path for v in violations] == ["/properties/product_id"]
    assert len(transport.messages) == 1


def test_custom_handler_can_abort_dispatch() -> None:
    transport = RecordingTransport()

    def _reject(message, violations) -> None:
        raise RuntimeError(f"rejected {message.event}")

    client = AnalyticsClient(transport=transport, on_violation=_reject, validate=True)

    with pytest.raises(RuntimeError, match="rejected Product Viewed"):
        client.product_viewed({}, {"userId": "u1"})
    assert transport.messages == []


def test_production_build_skips_validation() -> None:
    transport = RecordingTransport()
    client = AnalyticsClient(transport=transport, strict_mode=True, validate=False)

    client.order_completed({"total": "ten"}, {"userId": "u1"})

    assert client.validates is False
    assert transport.messages[0]["properties"]["total"] == "ten"


def test_transport_errors_propagate_unwrapped() -> None:
    client = AnalyticsClient(transport=FailingTransport(), strict_mode=True)

    with pytest.raises(ConnectionError):
        client.order_completed({"orderId": "A1"}, {"userId": "u1"})


def test_strict_mode_follows_environment_resolved_at_construction() -> None:
    transport = RecordingTransport()
    test_settings = Settings(environment="test", strict_mode=None)
    client = AnalyticsClient(transport=transport, settings=test_settings, validate=True)
    test_settings.environment = "production"

    assert client.strict_mode is True
    with pytest.raises(SchemaViolationError):
        client.order_completed({}, {"userId": "u1"})

    lenient = AnalyticsClient(transport=transport, settings=Settings(environment="development"), validate=True)
    lenient.order_completed({}, {"userId": "u1"})
    assert lenient.strict_mode is False
    assert len(transport.messages) == 1


def test_track_and_attribute_access_share_dispatchers() -> None:
    transport = RecordingTransport()
    plan = TrackingPlan([EventDefinition(name="Signed Up"), EventDefinition(name="Song Played")])
    client = TypewriterClient(plan, transport=transport, strict_mode=True)

    client.signed_up({"plan": "pro"}, {"userId": "u1"})
    client.track("Song Played", {"title": "x"}, {"userId": "u1"})
    client.track("signed_up", {}, {"userId": "u2"})

    assert transport.events == ["Signed Up", "Song Played", "Signed Up"]
    assert client.dispatcher("song_played") is client.dispatcher("Song Played")
    assert client.dispatcher("Nope") is None
    assert client.known_events == {"Signed Up", "Song Played"}


def test_private_names_are_not_routed_to_fallback() -> None:
    client = AnalyticsClient(strict_mode=True)

    with pytest.raises(AttributeError):
        client._missing


def test_attribute_access_matches_generated_method_names_only() -> None:
    transport = RecordingTransport()
    plan = TrackingPlan.from_dict(
        {
            "events": [
                {"name": "signup", "method": "register"},
                {"name": "Account Created", "method": "signup"},
            ]
        }
    )
    client = TypewriterClient(plan, transport=transport, strict_mode=True)

    client.signup({}, {"userId": "u1"})
    client.register({}, {"userId": "u1"})
    client.track("signup", {}, {"userId": "u1"})

    assert transport.events == ["Account Created", "signup", "signup"]


def test_attribute_named_after_event_without_method_uses_fallback() -> None:
    transport = RecordingTransport()
    plan = TrackingPlan([EventDefinition(name="opened", method_name="app_opened")])
    client = TypewriterClient(plan, transport=transport, strict_mode=True)

    client.opened({}, {"userId": "u1"})

    assert transport.events == ["Unknown Analytics Call Fired"]


def test_identity_checked_for_events_without_schema() -> None:
    seen = []
    transport = RecordingTransport()
    plan = TrackingPlan([EventDefinition(name="Signed Up")])
    client = TypewriterClient(
        plan,
        transport=transport,
        validate=True,
        on_violation=lambda message, violations: seen.append(violations),
    )

    client.signed_up({}, {"userId": "u1", "anonymousId": "a1"})
    client.signed_up({}, {"userId": "u1"})

    assert len(seen) == 1
    assert [v.keyword for v in seen[0]] == ["oneOf"]
    assert len(transport.messages) == 2


def test_reserved_names_cover_public_client_members() -> None:
    public = {name for name in dir(TypewriterClient) if not name.startswith("_")}
    public.add("strict_mode")

    assert public <= RESERVED_METHOD_NAMES


def test_injected_logger_is_used_for_dispatch_and_fallback(caplog) -> None:
    logger = logging.getLogger("shop.analytics")
    client = AnalyticsClient(transport=RecordingTransport(), strict_mode=False, validate=True, logger=logger)

    with caplog.at_level(logging.WARNING, logger="shop.analytics"):
        client.orderRefunded({"orderId": "A1"})
        client.order_completed({"total": "ten"}, {"userId": "u1"})

    assert [record.name for record in caplog.records] == ["shop.analytics", "shop.analytics"]
