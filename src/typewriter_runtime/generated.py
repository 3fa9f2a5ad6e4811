"""Example generated analytics client.

This module has the shape the client generator emits for a tracking plan: the
plan's events with their bundled JSON Schemas, and a client subclass with one
typed method per event.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, TypedDict

from typewriter_runtime.client import TypewriterClient
from typewriter_runtime.models import Identity, Options
from typewriter_runtime.plan import EventDefinition, TrackingPlan
from typewriter_runtime.transports import TrackCallback

_PRODUCT = {
    "type": "object",
    "properties": {
        "product_id": {"type": "string"},
        "sku": {"type": "string"},
        "name": {"type": "string"},
        "price": {"type": "number", "minimum": 0},
        "quantity": {"type": "integer", "minimum": 1},
    },
    "required": ["product_id"],
}

ORDER_COMPLETED_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-06/schema#",
    "type": "object",
    "properties": {
        "orderId": {"type": "string", "minLength": 1},
        "total": {"type": "number", "minimum": 0},
        "currency": {"type": "string", "pattern": "^[A-Z]{3}$"},
        "products": {"type": "array", "items": _PRODUCT},
    },
    "required": ["orderId"],
}

PRODUCT_VIEWED_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-04/schema#",
    "type": "object",
    "properties": {
        "product_id": {"type": "string"},
        "category": {"type": "string"},
        "price": {"type": "number", "minimum": 0, "exclusiveMinimum": True},
    },
    "required": ["product_id"],
    "additionalProperties": False,
}

CHECKOUT_STARTED_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-06/schema#",
    "type": "object",
    "properties": {
        "properties": {
            "type": "object",
            "properties": {
                "step": {"type": "integer", "minimum": 1},
                "payment_method": {"enum": ["card", "paypal", "invoice"]},
            },
            "required": ["step"],
        },
        "context": {"type": "object"},
    },
    "required": ["properties"],
}

TRACKING_PLAN = TrackingPlan(
    [
        EventDefinition(
            name="Order Completed",
            schema=ORDER_COMPLETED_SCHEMA,
            defaults={"currency": "USD"},
            description="Fired when a customer completes an order.",
        ),
        EventDefinition(
            name="Product Viewed",
            schema=PRODUCT_VIEWED_SCHEMA,
            description="Fired when a customer views a product detail page.",
        ),
        EventDefinition(
            name="Checkout Started",
            schema=CHECKOUT_STARTED_SCHEMA,
            description="Fired when a customer starts the checkout flow.",
        ),
    ]
)


class OrderCompleted(TypedDict, total=False):
    orderId: str
    total: float
    currency: str
    products: list[dict[str, Any]]


class ProductViewed(TypedDict, total=False):
    product_id: str
    category: str
    price: float


class CheckoutStarted(TypedDict, total=False):
    step: int
    payment_method: str


IdentityArg = Identity | Mapping[str, Any] | None
OptionsArg = Options | Mapping[str, Any] | None


class AnalyticsClient(TypewriterClient):
    """Client for the example tracking plan."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(TRACKING_PLAN, **kwargs)

    def order_completed(
        self,
        properties: OrderCompleted,
        identity: IdentityArg = None,
        options: OptionsArg = None,
        callback: TrackCallback | None = None,
        *,
        timestamp: datetime | str | None = None,
    ) -> None:
        """Fired when a customer completes an order."""
        self.dispatcher("Order Completed")(properties, identity, options, callback, timestamp=timestamp)

    def product_viewed(
        self,
        properties: ProductViewed,
        identity: IdentityArg = None,
        options: OptionsArg = None,
        callback: TrackCallback | None = None,
        *,
        timestamp: datetime | str | None = None,
    ) -> None:
        """Fired when a customer views a product detail page."""
        self.dispatcher("Product Viewed")(properties, identity, options, callback, timestamp=timestamp)

    def checkout_started(
        self,
        properties: CheckoutStarted,
        identity: IdentityArg = None,
        options: OptionsArg = None,
        callback: TrackCallback | None = None,
        *,
        timestamp: datetime | str | None = None,
    ) -> None:
        """Fired when a customer starts the checkout flow."""
        self.dispatcher("Checkout Started")(properties, identity, options, callback, timestamp=timestamp)
