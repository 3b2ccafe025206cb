"""Event record for the Amplitude HTTP API.

An event is one occurrence attributed to a user and/or device. See the
Amplitude HTTP API documentation for the meaning of each field.
"""

from datetime import datetime
from typing import Any

from amplitude_api.config.settings import AmplitudeConfig
from amplitude_api.records.base import RecordBase, drop_none, resolve_config

# Event names Amplitude generates itself and refuses from clients.
RESERVED_EVENT_TYPES = frozenset(
    {
        "[Amplitude] Start Session",
        "[Amplitude] End Session",
        "[Amplitude] Revenue",
        "[Amplitude] Revenue (Verified)",
        "[Amplitude] Revenue (Unverified)",
        "[Amplitude] Merged User",
    }
)

_OPTIONAL_FIELDS = (
    "time",
    "groups",
    "app_version",
    "platform",
    "os_name",
    "os_version",
    "device_brand",
    "device_manufacturer",
    "device_model",
    "carrier",
    "country",
    "region",
    "city",
    "dma",
    "language",
    "location_lat",
    "location_lng",
    "ip",
    "insert_id",
)

_REVENUE_FIELDS = ("price", "quantity", "revenue", "product_id", "revenue_type")


class Event(RecordBase):
    """A single analytics event.

    Unknown keyword arguments are ignored, so a loosely shaped mapping can
    be passed straight through with ``Event(**fields)``.
    """

    event_type: str | None = None
    time: datetime | int | float | None = None
    event_properties: dict[str, Any] | None = None

    app_version: str | None = None
    platform: str | None = None
    os_name: str | None = None
    os_version: str | None = None
    device_brand: str | None = None
    device_manufacturer: str | None = None
    device_model: str | None = None
    carrier: str | None = None

    country: str | None = None
    region: str | None = None
    city: str | None = None
    dma: str | None = None
    language: str | None = None
    location_lat: float | None = None
    location_lng: float | None = None
    ip: str | None = None

    insert_id: str | None = None

    price: float | None = None
    quantity: int | None = None
    revenue: float | None = None
    product_id: str | None = None
    revenue_type: str | None = None

    def _validate_record(self) -> None:
        super()._validate_record()
        if self.event_type is None:
            raise ValueError("You must provide event_type")
        if self.event_type in RESERVED_EVENT_TYPES:
            raise ValueError("Invalid event_type - cannot match a reserved event name")
        self._validate_revenue()

    def _validate_revenue(self) -> None:
        if self.price is not None:
            if self.quantity is None:
                self.quantity = 1
            return
        if self.product_id is not None:
            raise ValueError("You must provide a price in order to use the product_id")
        if self.revenue_type is not None:
            raise ValueError("You must provide a price in order to use the revenue_type")

    def to_hash(self, config: AmplitudeConfig | None = None) -> dict[str, Any]:
        """Serialize to the wire mapping, omitting keys whose value is None."""
        config = resolve_config(config)
        body = {
            "event_type": self.event_type,
            "event_properties": config.event_properties_formatter(self.event_properties),
            "user_properties": config.user_properties_formatter(self.user_properties),
            "user_id": self.user_id,
            "device_id": self.device_id,
        }
        for name in _OPTIONAL_FIELDS:
            value = getattr(self, name)
            if name == "time":
                value = config.time_formatter(value)
            body[name] = value
        for name in _REVENUE_FIELDS:
            body[name] = getattr(self, name)
        return drop_none(body)
