from .aggregate import aggregate, merge_metrics
from .client import FailureKind, FetchFailure, FetchOk, RequestSpec, UmamiClient
from .config import ConnectionConfig, Settings, get_settings
from .models import TimeRange, UrlMetric, WebsiteStats
from .normalize import normalize_path
from .service import PageviewService
from .slugs import index_by_slug

__all__ = [
    "ConnectionConfig",
    "FailureKind",
    "FetchFailure",
    "FetchOk",
    "PageviewService",
    "RequestSpec",
    "Settings",
    "TimeRange",
    "UmamiClient",
    "UrlMetric",
    "WebsiteStats",
    "aggregate",
    "get_settings",
    "index_by_slug",
    "merge_metrics",
    "normalize_path",
]
