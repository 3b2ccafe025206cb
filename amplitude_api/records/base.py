"""Identity fields and rules shared by every record sent to Amplitude.

A record identifies its subject by ``user_id``, ``device_id`` or both.
``user_id`` may be given as a raw identifier or as any object exposing an
``id`` attribute (an ORM user, say), which is resolved to that id.
"""

from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from amplitude_api.client.endpoints import USER_WITH_NO_ACCOUNT
from amplitude_api.config.settings import AmplitudeConfig, get_config


@runtime_checkable
class HasId(Protocol):
    id: Any


class RecordBase(BaseModel):
    """Fields and checks common to events and identifications.

    Validation runs once, at construction. Attributes can be reassigned
    afterwards but are not re-checked.
    """

    model_config = ConfigDict(extra="ignore")

    user_id: str | int | None = None
    device_id: str | None = None
    user_properties: dict[str, Any] | None = None
    groups: dict[str, Any] | None = None

    @field_validator("user_id", mode="before")
    @classmethod
    def resolve_user_id(cls, v: Any) -> Any:
        # Only runs for values the caller actually passed, so an omitted
        # user_id stays None while an explicit None becomes the sentinel.
        if isinstance(v, HasId):
            # UUID and other non-JSON ids are sent as their string form.
            return v.id if v.id is None or isinstance(v.id, (str, int)) else str(v.id)
        if v is None:
            return USER_WITH_NO_ACCOUNT
        return v

    @model_validator(mode="after")
    def check_record(self):
        self._validate_record()
        return self

    def _validate_record(self) -> None:
        if self.user_id is None and self.device_id is None:
            raise ValueError("You must provide user_id or device_id (or both)")

    def to_hash(self, config: AmplitudeConfig | None = None) -> dict[str, Any]:
        raise NotImplementedError

    def to_dict(self, config: AmplitudeConfig | None = None) -> dict[str, Any]:
        return self.to_hash(config)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RecordBase):
            return NotImplemented
        return self.to_hash() == other.to_hash()


def drop_none(values: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in values.items() if v is not None}


def resolve_config(config: AmplitudeConfig | None) -> AmplitudeConfig:
    return config or get_config()
