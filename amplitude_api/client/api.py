"""Amplitude API façade.

Builds request bodies from Event/Identification records and sends them
with httpx. Every call is a single blocking request and returns the raw
``httpx.Response``; status codes are left for the caller to interpret and
transport errors propagate unchanged.
"""

import json
from datetime import date
from typing import Any, Iterable

import httpx

from amplitude_api.client.endpoints import DELETION_URI, SEGMENTATION_URI, TRACK_URI
from amplitude_api.client.segmentation import SegmentationOptions, build_segmentation_params
from amplitude_api.config.logger import configure_logging, get_logger
from amplitude_api.config.settings import AmplitudeConfig, get_config
from amplitude_api.records.base import RecordBase
from amplitude_api.records.event import Event
from amplitude_api.records.identification import Identification

logger = get_logger("client.api")


def _flatten(records: Iterable[Any]) -> list[RecordBase]:
    flat: list[RecordBase] = []
    for record in records:
        if isinstance(record, (list, tuple)):
            flat.extend(_flatten(record))
        else:
            flat.append(record)
    return flat


class AmplitudeAPI:
    """Client for the track, identify, segmentation and deletion endpoints.

    Example:
        config = AmplitudeConfig(api_key="...", secret_key="...")
        with AmplitudeAPI(config) as api:
            api.send_event("clicked on Home", user="u1", device=None)
    """

    def __init__(
        self,
        config: AmplitudeConfig | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.config = config or get_config()
        self._owns_client = client is None
        self.client = client or httpx.Client()
        configure_logging(self.config)

    def __enter__(self) -> "AmplitudeAPI":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying httpx client if this instance created it."""
        if self._owns_client:
            self.client.close()

    @property
    def _basic_auth(self) -> tuple[str, str]:
        return (self.config.api_key or "", self.config.secret_key or "")

    def _encode_records(self, records: Iterable[Any]) -> str:
        return json.dumps([r.to_hash(self.config) for r in _flatten(records)], default=str)

    # Event tracking

    def send_event(
        self,
        event_name: str,
        user: Any,
        device: str | None,
        event_properties: dict[str, Any] | None = None,
        user_properties: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Build a single Event and send it immediately."""
        event = Event(
            user_id=user,
            device_id=device,
            event_type=event_name,
            event_properties=event_properties or {},
            user_properties=user_properties or {},
        )
        return self.track(event)

    def track_body(self, *events: Event | list[Event]) -> dict[str, str | None]:
        return {"api_key": self.config.api_key, "event": self._encode_records(events)}

    def track(self, *events: Event | list[Event]) -> httpx.Response:
        """Send one or more events in a single request."""
        body = self.track_body(*events)
        logger.debug(
            "Sending track request",
            extra={"endpoint": TRACK_URI, "record_count": len(_flatten(events))},
        )
        return self.client.post(TRACK_URI, data=body)

    # Identification

    def send_identify(
        self,
        user_id: Any,
        device_id: str | None,
        user_properties: dict[str, Any] | None = None,
    ) -> httpx.Response:
        identification = Identification(
            user_id=user_id,
            device_id=device_id,
            user_properties=user_properties or {},
        )
        return self.identify(identification)

    def identify_body(
        self, *identifications: Identification | list[Identification]
    ) -> dict[str, str | None]:
        return {
            "api_key": self.config.api_key,
            "identification": self._encode_records(identifications),
        }

    def identify(
        self, *identifications: Identification | list[Identification]
    ) -> httpx.Response:
        """Send one or more identifications in a single request.

        Posts to TRACK_URI rather than IDENTIFY_URI, as existing integrations
        of this client expect.
        """
        body = self.identify_body(*identifications)
        logger.debug(
            "Sending identify request",
            extra={"endpoint": TRACK_URI, "record_count": len(_flatten(identifications))},
        )
        return self.client.post(TRACK_URI, data=body)

    # Event segmentation

    def segmentation_params(
        self,
        event_definition: dict[str, Any],
        start_time: date,
        end_time: date,
        **options: Any,
    ) -> dict[str, Any]:
        """Query parameters for ``segmentation``.

        Raises pydantic.ValidationError for unknown options, an unknown
        metric or interval, or a limit outside 1..1000.
        """
        return build_segmentation_params(
            event_definition,
            start_time,
            end_time,
            SegmentationOptions.model_validate(options),
        )

    def segmentation(
        self,
        event_definition: dict[str, Any],
        start_time: date,
        end_time: date,
        **options: Any,
    ) -> httpx.Response:
        """Get metrics for an event with segmentation."""
        params = self.segmentation_params(event_definition, start_time, end_time, **options)
        logger.debug(
            "Sending segmentation request",
            extra={"endpoint": SEGMENTATION_URI, "start": params["start"], "end": params["end"]},
        )
        return self.client.get(SEGMENTATION_URI, params=params, auth=self._basic_auth)

    # User deletion

    def delete(
        self,
        user_ids: list[str] | None = None,
        amplitude_ids: list[int] | None = None,
        requester: str | None = None,
    ) -> httpx.Response:
        """Request deletion of users' data.

        Pass user_ids (your identifiers) and/or amplitude_ids; requester is
        the email of whoever asked for the deletion, used for reporting.
        """
        params = {
            "amplitude_ids": amplitude_ids,
            "user_ids": user_ids,
            "requester": requester,
        }
        params = {k: v for k, v in params.items() if v is not None}
        logger.debug("Sending deletion request", extra={"endpoint": DELETION_URI})
        return self.client.post(DELETION_URI, data=params, auth=self._basic_auth)
