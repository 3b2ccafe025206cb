"""Identification records for the Amplitude HTTP API.

An identification updates the properties stored on a user without
recording an event. It shares the identity rules of every record.
"""

from typing import Any

from amplitude_api.config.settings import AmplitudeConfig
from amplitude_api.records.base import RecordBase, drop_none, resolve_config


class Identification(RecordBase):
    """User property update, sent independently of any event."""

    def to_hash(self, config: AmplitudeConfig | None = None) -> dict[str, Any]:
        config = resolve_config(config)
        return drop_none(
            {
                "user_id": self.user_id,
                "device_id": self.device_id,
                "user_properties": config.user_properties_formatter(self.user_properties),
                "groups": self.groups,
            }
        )
