"""Merge raw url metrics by canonical path.

    Example rows...
    [
        {"x": "/post/a#intro", "y": 3},
        {"x": "/post/a#faq", "y": 2},
        {"x": "/post/b", "y": 5},
    ]

    Result...
    {
        "/post/a": 5,
        "/post/b": 5,
    }
"""
from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List

from .models import UrlMetric
from .normalize import normalize_path


def aggregate(metrics: Iterable[UrlMetric]) -> Dict[str, int]:
    totals: dict[str, int] = defaultdict(int)
    for metric in metrics:
        totals[normalize_path(metric.path)] += metric.views
    return dict(totals)


def merge_metrics(metrics: Iterable[UrlMetric]) -> List[UrlMetric]:
    """Same as :func:`aggregate` but keeps the ``UrlMetric`` row shape."""
    return [UrlMetric(path=path, views=views) for path, views in aggregate(metrics).items()]
