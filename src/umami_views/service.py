from __future__ import annotations

import asyncio
import logging
import time
from typing import Dict, List, Optional

from .aggregate import aggregate, merge_metrics
from .client import FetchFailure, UmamiClient
from .config import HISTORY_START_MS, ConnectionConfig, Settings, get_settings
from .models import TimeRange, UrlMetric, WebsiteStats
from .normalize import normalize_path
from .slugs import DEFAULT_POST_PREFIX, index_by_slug, post_path

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


class PageviewService:
    """Pageview lookups for one Umami website.

    Every public call does its own fetch. Nothing here raises on a missing
    configuration or a failed request: the caller gets ``[]``, ``0``, ``{}`` or
    ``None`` and the reason is logged.
    """

    def __init__(
        self,
        config: ConnectionConfig,
        client: UmamiClient | None = None,
        *,
        coalesce: bool = True,
        post_prefix: str = DEFAULT_POST_PREFIX,
    ) -> None:
        self.config = config
        self.client = client or UmamiClient(config)
        self.coalesce = coalesce
        self.post_prefix = post_prefix
        self._in_flight: dict[TimeRange, asyncio.Task[List[UrlMetric]]] = {}

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **kwargs) -> "PageviewService":
        settings = settings or get_settings()
        config = ConnectionConfig.from_settings(settings)
        client = UmamiClient(config, timeout=settings.timeout)
        return cls(config, client, post_prefix=settings.post_prefix, **kwargs)

    async def __aenter__(self) -> "PageviewService":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.client.aclose()

    def is_configured(self) -> bool:
        return self.config.is_complete

    def _bounds(self, time_range: Optional[TimeRange]) -> tuple[int, int]:
        time_range = time_range or TimeRange()
        start_at = time_range.start_at or HISTORY_START_MS
        end_at = time_range.end_at or now_ms()
        return start_at, end_at

    async def _fetch_merged(self, time_range: TimeRange) -> List[UrlMetric]:
        start_at, end_at = self._bounds(time_range)
        result = await self.client.fetch_url_metrics(start_at, end_at)
        if isinstance(result, FetchFailure):
            logger.error(
                "Umami url metrics request failed (%s, status=%s): %s",
                result.kind.value,
                result.status_code,
                result.detail,
            )
            return []
        return merge_metrics(result.payload)

    async def fetch_url_metrics(self, time_range: Optional[TimeRange] = None) -> List[UrlMetric]:
        """Url metrics for the range, merged by path without ``#fragment``.

        Defaults to everything from the start of tracked history up to now.
        """
        if not self.is_configured():
            logger.warning("Umami not configured, returning empty metrics")
            return []
        key = time_range or TimeRange()
        if not self.coalesce:
            return await self._fetch_merged(key)

        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._fetch_merged(key))
            self._in_flight[key] = task
            task.add_done_callback(lambda done: self._forget(key, done))
        # Shielded so one cancelled caller does not cancel the read for the others.
        return list(await asyncio.shield(task))

    def _forget(self, key: TimeRange, task: asyncio.Task) -> None:
        if not task.cancelled():
            # Collected here too in case every waiter was cancelled.
            task.exception()
        if self._in_flight.get(key) is task:
            del self._in_flight[key]

    async def pageviews_for_url(self, path: str) -> int:
        if not self.is_configured():
            return 0
        wanted = normalize_path(path)
        metrics = await self.fetch_url_metrics()
        return sum(metric.views for metric in metrics if normalize_path(metric.path) == wanted)

    async def pageviews_for_slug(self, slug: str) -> int:
        return await self.pageviews_for_url(post_path(slug, self.post_prefix))

    async def slug_view_map(self, time_range: Optional[TimeRange] = None) -> Dict[str, int]:
        """``{slug: views}`` for every post, from a single fetch."""
        metrics = await self.fetch_url_metrics(time_range)
        return index_by_slug(aggregate(metrics), self.post_prefix)

    async def website_stats(self, time_range: Optional[TimeRange] = None) -> Optional[WebsiteStats]:
        if not self.is_configured():
            logger.warning("Umami not configured, no website stats")
            return None
        start_at, end_at = self._bounds(time_range)
        result = await self.client.fetch_website_stats(start_at, end_at)
        if isinstance(result, FetchFailure):
            logger.error(
                "Umami stats request failed (%s, status=%s): %s",
                result.kind.value,
                result.status_code,
                result.detail,
            )
            return None
        return result.payload
