"""List limit handling shared by the list endpoints."""

DEFAULT_LIST_LIMIT = 100
MAX_LIST_LIMIT = 200


def clamp_limit(limit: int | None) -> int:
    """Non-positive or missing limits fall back to the default; large ones are capped."""
    if limit is None or limit <= 0:
        return DEFAULT_LIST_LIMIT
    return min(limit, MAX_LIST_LIMIT)
