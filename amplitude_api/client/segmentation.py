"""Query parameters for the Event Segmentation API.

The API uses single-letter parameter names; they are kept as-is so the
options read the same as Amplitude's documentation.
"""

import json
from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DATE_FORMAT = "%Y%m%d"


class SegmentationMetric(str, Enum):
    # Non-property metrics
    UNIQUES = "uniques"
    TOTALS = "totals"
    PCT_DAU = "pct_dau"
    AVERAGE = "average"
    # Property metrics, need a group_by in the event definition
    HISTOGRAM = "histogram"
    SUMS = "sums"
    VALUE_AVG = "value_avg"


class SegmentationInterval(int, Enum):
    """Bucket size. Realtime is capped at 2 days, hourly at 7, daily at 365."""

    REALTIME = -300000
    HOURLY = -3600000
    DAILY = 1
    WEEKLY = 7
    MONTHLY = 30


class SegmentationOptions(BaseModel):
    """Optional segmentation parameters.

    m: aggregate function (provider default "uniques").
    i: interval (provider default daily).
    s: segment definitions, each JSON-encoded separately.
    g: property to group by.
    limit: number of group-by values returned (provider default 100).
    """

    model_config = ConfigDict(extra="forbid")

    m: SegmentationMetric | None = None
    i: SegmentationInterval | None = None
    s: list[dict[str, Any]] = Field(default_factory=list)
    g: str | None = None
    limit: int | None = Field(default=None, ge=1, le=1000)


def build_segmentation_params(
    event_definition: dict[str, Any],
    start_time: date,
    end_time: date,
    options: SegmentationOptions,
) -> dict[str, Any]:
    """Assemble the query string mapping, omitting unset parameters.

    ``start_time``/``end_time`` may be dates or datetimes; only the day is sent.
    """
    params = {
        "e": json.dumps(event_definition),
        "m": options.m.value if options.m is not None else None,
        "start": start_time.strftime(DATE_FORMAT),
        "end": end_time.strftime(DATE_FORMAT),
        "i": options.i.value if options.i is not None else None,
        "s": [json.dumps(segment) for segment in options.s] or None,
        "g": options.g,
        "limit": options.limit,
    }
    return {k: v for k, v in params.items() if v is not None}
