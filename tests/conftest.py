from typing import Callable

import httpx
import pytest

from umami_views.client import UmamiClient
from umami_views.config import DEFAULT_HOST, ConnectionConfig
from umami_views.service import PageviewService

SAMPLE_ROWS = [
    {"x": "/post/a#intro", "y": 3},
    {"x": "/post/a#faq", "y": 2},
    {"x": "/post/b", "y": 5},
]


@pytest.fixture
def cloud_config() -> ConnectionConfig:
    return ConnectionConfig(endpoint=DEFAULT_HOST, site_id="site-1", token="secret")


@pytest.fixture
def self_hosted_config() -> ConnectionConfig:
    return ConnectionConfig(endpoint="https://stats.example.com/api", site_id="site-1", token="secret")


@pytest.fixture
def make_service(cloud_config) -> Callable[..., PageviewService]:
    def factory(handler, config: ConnectionConfig | None = None, **kwargs) -> PageviewService:
        config = config or cloud_config
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return PageviewService(config, UmamiClient(config, http_client=http_client), **kwargs)

    return factory


@pytest.fixture
def sample_handler():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=SAMPLE_ROWS)

    handler.seen = seen
    return handler


@pytest.fixture
def sample_rows() -> list[dict]:
    return [dict(row) for row in SAMPLE_ROWS]
