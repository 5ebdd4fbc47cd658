FRAGMENT_MARKER = "#"


def normalize_path(path: str) -> str:
    """Drop the ``#fragment`` part of a tracked path; anything else is kept as-is."""
    return path.split(FRAGMENT_MARKER, 1)[0]
