# lectern/utils/cache.py
"""
Process-local read cache with a fixed revalidation window and tag invalidation.

    @cached("getDailyUserCount", tags=["getDailyUserCount"], revalidate=1800)
    def get_daily_user_count(): ...

    revalidate_tag("getDailyUserCount")  # next call recomputes

Entries are keyed by the cache key plus the call arguments, so only decorate
functions whose arguments are plain hashable values (never a DB session).
Callers get a deep copy, so mutating a returned list leaves the cache intact.
A value computed while one of its tags was revalidated is returned but not
stored. No cross-process coordination: each worker keeps its own copy.
"""
from __future__ import annotations

import copy
import functools
import time
from typing import Any, Callable, Iterable, Optional

import structlog

logger = structlog.get_logger()

# cache key -> (value, expires_at or None)
_store: dict[tuple, tuple[Any, Optional[float]]] = {}
# tag -> cache keys carrying it
_tags: dict[str, set[tuple]] = {}
# tag -> number of times it was revalidated
_generations: dict[str, int] = {}


def _now() -> float:
    return time.monotonic()


def _snapshot(tags: tuple) -> tuple:
    return tuple(_generations.get(tag, 0) for tag in tags)


def cached(
    key: str,
    *,
    tags: Iterable[str] = (),
    revalidate: Optional[float] = None,
) -> Callable:
    """Cache the decorated function's result for `revalidate` seconds (forever if None)."""
    tag_list = tuple(tags)

    def decorator(fn: Callable) -> Callable:
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            cache_key = (key, args, tuple(sorted(kwargs.items())))
            hit = _store.get(cache_key)
            if hit is not None:
                value, expires_at = hit
                if expires_at is None or _now() < expires_at:
                    return copy.deepcopy(value)

            started = _snapshot(tag_list)
            value = fn(*args, **kwargs)
            if _snapshot(tag_list) != started:
                logger.debug("cache_store_skipped", key=key)
                return value

            expires_at = _now() + revalidate if revalidate is not None else None
            _store[cache_key] = (copy.deepcopy(value), expires_at)
            for tag in tag_list:
                _tags.setdefault(tag, set()).add(cache_key)
            logger.debug("cache_refreshed", key=key, revalidate=revalidate)
            return value

        return wrapper

    return decorator


def revalidate_tag(tag: str) -> int:
    """Drop every entry carrying `tag`. Returns how many entries were dropped."""
    _generations[tag] = _generations.get(tag, 0) + 1
    keys = _tags.pop(tag, set())
    dropped = 0
    for cache_key in keys:
        if _store.pop(cache_key, None) is not None:
            dropped += 1
    if dropped:
        logger.info("cache_tag_revalidated", tag=tag, entries=dropped)
    return dropped


def clear() -> None:
    _store.clear()
    _tags.clear()
    _generations.clear()
