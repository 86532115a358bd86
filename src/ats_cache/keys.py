"""Cache key names, TTL tiers and invalidation helpers shared by cache callers."""

import logging
from collections.abc import Callable
from enum import Enum
from typing import TypeVar

from ats_cache.cache import BoundedTTLCache

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING = object()


class CacheKey(str, Enum):
    """Logical resources whose lookups are cached."""

    DASHBOARD_METRICS = "dashboard_metrics"
    CANDIDATES_LIST = "candidates_list"
    JOBS_LIST = "jobs_list"
    APPLICATIONS_LIST = "applications_list"
    ANALYTICS_DATA = "analytics_data"
    SEARCH_RESULTS = "search_results"


class CacheTTL:
    """Suggested TTL presets in seconds. The cache accepts any duration."""

    SHORT = 60.0
    MEDIUM = 300.0
    LONG = 900.0
    VERY_LONG = 3600.0


# Checked in order; the first resource word found in a pattern wins.
_PATTERN_KEYS: tuple[tuple[str, CacheKey], ...] = (
    ("candidates", CacheKey.CANDIDATES_LIST),
    ("jobs", CacheKey.JOBS_LIST),
    ("applications", CacheKey.APPLICATIONS_LIST),
    ("dashboard", CacheKey.DASHBOARD_METRICS),
    ("analytics", CacheKey.ANALYTICS_DATA),
)


def invalidate_cache(cache: BoundedTTLCache, pattern: str) -> list[str]:
    """Drop cached entries matching ``pattern`` and return the keys removed.

    ``"all"`` clears everything. Otherwise the pattern is searched for a
    resource word (``candidates``, ``jobs``, ...) and the matching list key
    is deleted. Patterns naming no known resource remove nothing.
    """
    if pattern == "all":
        removed = cache.drain()
        logger.info(
            "Cleared cache (%d entries)",
            len(removed),
            extra={"extra_data": {"pattern": pattern, "removed": removed}},
        )
        return removed

    for word, key in _PATTERN_KEYS:
        if word in pattern:
            removed = [key.value] if cache.remove(key.value) else []
            logger.info(
                "Invalidated %s for pattern %r",
                key.value,
                pattern,
                extra={"extra_data": {"pattern": pattern, "key": key.value, "removed": removed}},
            )
            return removed

    logger.debug("No cache key matches pattern %r", pattern)
    return []


def get_or_set(cache: BoundedTTLCache, key: str, loader: Callable[[], T], ttl: float | None = None) -> T:
    """Return the cached value for ``key``, calling ``loader`` to fill it on a miss.

    The loader runs outside the cache lock, so concurrent misses may both load.
    A loaded value is only stored if no invalidation happened while it was
    loading; otherwise it is returned to this caller but not cached.
    """
    generation = cache.generation
    cached = cache.get(key, _MISSING)
    if cached is not _MISSING:
        logger.debug("Cache hit for %s", key, extra={"extra_data": {"key": key, "hit": True}})
        return cached  # type: ignore[no-any-return]
    logger.debug("Cache miss for %s", key, extra={"extra_data": {"key": key, "hit": False}})
    value = loader()
    if not cache.set_if_generation(key, value, generation, ttl):
        logger.debug(
            "Discarded %s loaded across an invalidation", key, extra={"extra_data": {"key": key, "stored": False}}
        )
    return value

