"""
dashfs Redis Cache Layer — Namespace lookup cache.

Namespace rows are read on every authorization check under a namespace root,
so they are cached by alias in Redis with a TTL. All cached data is
reconstructible from the database; when Redis is disabled or unreachable the
cache reports misses and callers read through to the database.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger("dashfs.engine.cache")


class RedisCache:
    """
    Redis wrapper with a circuit breaker.

    After `failure_threshold` failures inside `failure_window` seconds the
    circuit opens and every call is a miss until the window elapses.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        prefix: str = "dashfs:",
        default_ttl: int = 600,
        db: int = 3,
    ):
        self._redis_url = redis_url
        self._prefix = prefix
        self._default_ttl = default_ttl
        self._db = db
        self._client = None
        self._available = False

        self._failure_count = 0
        self._failure_threshold = 5
        self._failure_window = 30
        self._first_failure_time = 0.0
        self._circuit_open = False

    def connect(self) -> bool:
        """Open the Redis client. Returns False (and stays in miss mode) on failure."""
        try:
            import redis
            self._client = redis.Redis.from_url(
                self._redis_url,
                db=self._db,
                decode_responses=True,
                socket_timeout=5,
                socket_connect_timeout=5,
            )
            self._client.ping()
            self._available = True
            self._circuit_open = False
            self._failure_count = 0
            logger.info(f"Redis connected: DB {self._db} ({self._prefix})")
            return True
        except Exception as e:
            logger.warning(f"Redis connection failed (DB {self._db}): {e}")
            self._available = False
            return False

    def _check_circuit(self) -> bool:
        if self._circuit_open:
            if time.time() - self._first_failure_time > self._failure_window:
                self._circuit_open = False
                self._failure_count = 0
                return self.connect()
            return False
        return self._available

    def _record_failure(self) -> None:
        now = time.time()
        if self._failure_count == 0:
            self._first_failure_time = now
        self._failure_count += 1
        if self._failure_count >= self._failure_threshold:
            elapsed = now - self._first_failure_time
            if elapsed <= self._failure_window:
                self._circuit_open = True
                logger.error(
                    f"Redis circuit breaker OPEN: {self._failure_count} failures in {elapsed:.1f}s"
                )

    def _make_key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def get(self, key: str) -> Optional[str]:
        if not self._check_circuit():
            return None
        try:
            return self._client.get(self._make_key(key))
        except Exception as e:
            self._record_failure()
            logger.debug(f"Redis GET failed: {e}")
            return None

    def set(self, key: str, value: str, ttl: Optional[int] = None) -> bool:
        if not self._check_circuit():
            return False
        try:
            self._client.set(self._make_key(key), value, ex=ttl or self._default_ttl)
            return True
        except Exception as e:
            self._record_failure()
            logger.debug(f"Redis SET failed: {e}")
            return False

    def delete(self, key: str) -> bool:
        if not self._check_circuit():
            return False
        try:
            self._client.delete(self._make_key(key))
            return True
        except Exception:
            self._record_failure()
            return False

    def get_json(self, key: str) -> Optional[Any]:
        raw = self.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            return None

    def set_json(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        try:
            return self.set(key, json.dumps(value, default=str), ttl=ttl)
        except (TypeError, ValueError):
            return False

    def close(self) -> None:
        if self._client is not None:
            try:
                self._client.close()
            except Exception as e:
                logger.debug(f"Redis close failed: {e}")
            self._client = None
        self._available = False
        self._circuit_open = False
        self._failure_count = 0

    @property
    def is_available(self) -> bool:
        return self._available and not self._circuit_open

    @property
    def is_circuit_open(self) -> bool:
        return self._circuit_open


# ---------------------------------------------------------------------------
# Namespace cache
# ---------------------------------------------------------------------------

class NamespaceCache:
    """
    Read-through cache of namespace records keyed by lower-cased alias.

    Key format: dashfs:ns:{alias}
    Value: JSON dict of the namespace columns, or absent.
    """

    def __init__(
        self,
        loader: Callable[[str], Optional[Dict[str, Any]]],
        cache: Optional[RedisCache] = None,
        ttl: int = 600,
    ):
        self._loader = loader
        self._cache = cache
        self._ttl = ttl

    def get_by_alias(self, alias: str) -> Optional[Dict[str, Any]]:
        key = f"ns:{alias.lower()}"
        if self._cache is not None:
            cached = self._cache.get_json(key)
            if cached is not None:
                return cached

        namespace = self._loader(alias.lower())
        logger.debug(f"Namespace cache miss for alias: {alias}")
        if namespace is not None and self._cache is not None:
            self._cache.set_json(key, namespace, ttl=self._ttl)
        return namespace

    def invalidate(self, alias: str) -> bool:
        if self._cache is None:
            return False
        return self._cache.delete(f"ns:{alias.lower()}")


def create_namespace_cache(
    loader: Callable[[str], Optional[Dict[str, Any]]],
    redis_url: Optional[str] = None,
    ttl: int = 600,
    db: int = 3,
) -> NamespaceCache:
    """Build a NamespaceCache; Redis is only contacted when a URL is given."""
    cache = None
    if redis_url:
        cache = RedisCache(redis_url=redis_url, prefix="dashfs:", default_ttl=ttl, db=db)
        cache.connect()
    return NamespaceCache(loader, cache=cache, ttl=ttl)
