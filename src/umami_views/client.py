from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, List, Optional, TypeVar, Union

import httpx
from pydantic import TypeAdapter, ValidationError

from .config import METRICS_LIMIT, ConnectionConfig
from .models import UrlMetric, WebsiteStats

logger = logging.getLogger(__name__)

T = TypeVar("T")

_URL_METRICS = TypeAdapter(List[UrlMetric])


@dataclass(frozen=True)
class RequestSpec:
    method: str
    path: str
    query_params: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    body: dict[str, Any] = field(default_factory=dict)


class FailureKind(str, Enum):
    TRANSPORT = "transport"
    PARSE = "parse"


@dataclass(frozen=True)
class FetchOk(Generic[T]):
    payload: T


@dataclass(frozen=True)
class FetchFailure:
    kind: FailureKind
    detail: str
    status_code: Optional[int] = None


FetchResult = Union[FetchOk[T], FetchFailure]


class UmamiClient:
    """Thin async wrapper over the Umami REST API.

    Transport and decoding problems never raise out of :meth:`send`; they come
    back as a :class:`FetchFailure` so the caller decides what to do with them.
    """

    def __init__(
        self,
        config: ConnectionConfig,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 20,
    ) -> None:
        self.config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self) -> "UmamiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _default_headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.config.uses_api_key:
            headers["x-umami-api-key"] = self.config.token
        else:
            headers["Authorization"] = f"Bearer {self.config.token}"
        return headers

    def build_request(self, spec: RequestSpec) -> httpx.Request:
        headers = {**self._default_headers(), **spec.headers}
        return self._client.build_request(
            spec.method,
            f"{self.config.endpoint}{spec.path}",
            params=spec.query_params or None,
            headers=headers,
            json=spec.body or None,
        )

    async def send(self, spec: RequestSpec) -> FetchResult[Any]:
        try:
            request = self.build_request(spec)
        except (httpx.InvalidURL, ValueError) as exc:
            # e.g. a token that is not ASCII cannot go in a header
            return FetchFailure(FailureKind.TRANSPORT, f"cannot build request: {type(exc).__name__}: {exc}")
        try:
            resp = await self._client.send(request)
        except httpx.HTTPError as exc:
            return FetchFailure(FailureKind.TRANSPORT, f"{type(exc).__name__}: {exc}")
        if not resp.is_success:
            return FetchFailure(FailureKind.TRANSPORT, resp.text, status_code=resp.status_code)
        try:
            return FetchOk(resp.json())
        except ValueError as exc:
            return FetchFailure(FailureKind.PARSE, f"invalid JSON body: {exc}", status_code=resp.status_code)

    def _websites_path(self, suffix: str) -> str:
        return f"/websites/{self.config.site_id}/{suffix}"

    async def fetch_url_metrics(self, start_at: int, end_at: int) -> FetchResult[List[UrlMetric]]:
        spec = RequestSpec(
            method="GET",
            path=self._websites_path("metrics"),
            query_params={
                "startAt": str(start_at),
                "endAt": str(end_at),
                "type": "url",
                # No pagination: anything past this is dropped.
                "limit": str(METRICS_LIMIT),
            },
        )
        result = await self.send(spec)
        if isinstance(result, FetchFailure):
            return result
        try:
            metrics = _URL_METRICS.validate_python(result.payload)
        except ValidationError as exc:
            return FetchFailure(FailureKind.PARSE, f"unexpected metrics body: {exc.error_count()} error(s)")
        logger.info("Fetched %d url metric rows", len(metrics))
        return FetchOk(metrics)

    async def fetch_website_stats(self, start_at: int, end_at: int) -> FetchResult[WebsiteStats]:
        spec = RequestSpec(
            method="GET",
            path=self._websites_path("stats"),
            query_params={"startAt": str(start_at), "endAt": str(end_at)},
        )
        result = await self.send(spec)
        if isinstance(result, FetchFailure):
            return result
        try:
            return FetchOk(WebsiteStats.model_validate(result.payload))
        except ValidationError as exc:
            return FetchFailure(FailureKind.PARSE, f"unexpected stats body: {exc.error_count()} error(s)")
