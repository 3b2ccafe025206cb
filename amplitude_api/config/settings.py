"""Client configuration.

Credentials and the three value formatters applied during serialization.
Values come from keyword arguments or ``AMPLITUDE_*`` environment variables.
Build one instance at startup and hand it to the API façade; ``get_config()``
returns a lazily created process-wide default for callers that don't.
"""

from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Callable

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_FALSE_STRINGS = {"", "0", "false", "no", "off"}


def default_time_formatter(time: datetime | int | float | None) -> int | None:
    """Convert a datetime or epoch seconds to epoch milliseconds.

    Naive datetimes are treated as UTC.
    """
    if time is None:
        return None
    if isinstance(time, datetime):
        if time.tzinfo is None:
            time = time.replace(tzinfo=timezone.utc)
        time = time.timestamp()
    return int(time * 1000)


def default_properties_formatter(props: dict[str, Any] | None) -> dict[str, Any]:
    return props or {}


class AmplitudeConfig(BaseSettings):
    """Settings shared by the API façade and record serialization."""

    model_config = SettingsConfigDict(env_prefix="AMPLITUDE_", extra="ignore")

    api_key: str | None = None
    secret_key: str | None = None
    use_host_logger: bool = False
    log_level: str = "WARNING"

    time_formatter: Callable[[Any], int | None] = Field(
        default=default_time_formatter, exclude=True
    )
    event_properties_formatter: Callable[[Any], dict[str, Any]] = Field(
        default=default_properties_formatter, exclude=True
    )
    user_properties_formatter: Callable[[Any], dict[str, Any]] = Field(
        default=default_properties_formatter, exclude=True
    )

    @field_validator("use_host_logger", mode="before")
    @classmethod
    def coerce_flag(cls, v: Any) -> bool:
        if isinstance(v, str):
            return v.strip().lower() not in _FALSE_STRINGS
        return v is not None and v is not False


@lru_cache
def get_config() -> AmplitudeConfig:
    """Cached AmplitudeConfig built from the environment."""
    return AmplitudeConfig()
