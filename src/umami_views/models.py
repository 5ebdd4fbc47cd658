from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt


class UrlMetric(BaseModel):
    """One row of the ``type=url`` metrics endpoint: ``{"x": path, "y": views}``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    path: str = Field(alias="x")
    views: NonNegativeInt = Field(alias="y")


class StatValue(BaseModel):
    value: int = 0
    prev: int = 0


class WebsiteStats(BaseModel):
    pageviews: StatValue
    visitors: StatValue
    visits: StatValue
    bounces: StatValue
    totaltime: StatValue

    def rows(self) -> list[dict]:
        return [
            {"metric": name, "value": stat.value, "prev": stat.prev}
            for name, stat in (
                ("pageviews", self.pageviews),
                ("visitors", self.visitors),
                ("visits", self.visits),
                ("bounces", self.bounces),
                ("totaltime", self.totaltime),
            )
        ]


@dataclass(frozen=True)
class TimeRange:
    start_at: Optional[int] = None
    end_at: Optional[int] = None
