from __future__ import annotations

import re
from typing import Dict, Mapping

DEFAULT_POST_PREFIX = "/post/"


def slug_pattern(prefix: str = DEFAULT_POST_PREFIX) -> re.Pattern[str]:
    return re.compile(re.escape(prefix) + r"([^/?]+)")


def post_path(slug: str, prefix: str = DEFAULT_POST_PREFIX) -> str:
    return f"{prefix}{slug}"


def index_by_slug(aggregated: Mapping[str, int], prefix: str = DEFAULT_POST_PREFIX) -> Dict[str, int]:
    """Map each ``<prefix><slug>`` path to its slug.

    Paths outside the prefix are skipped. Two paths resolving to the same slug
    (``/post/a`` and ``/post/a/``) do not add up: the last one seen wins.
    """
    pattern = slug_pattern(prefix)
    views_by_slug: dict[str, int] = {}
    for path, views in aggregated.items():
        match = pattern.search(path)
        if not match:
            continue
        views_by_slug[match.group(1)] = views
    return views_by_slug
