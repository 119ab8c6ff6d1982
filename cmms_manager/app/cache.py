import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from urllib.parse import urlencode

from flask import current_app, session

logger = logging.getLogger(__name__)


def query_key(path, *parts, **params):
    """Stable cache key for a read: the resource path, extra path parts
    (e.g. an entity id) and sorted query parameters.

    query_key('/api/assets', 42, 'details') -> '/api/assets/42/details'
    """
    segments = [str(path).rstrip('/')] + [str(p).strip('/') for p in parts]
    key = '/'.join(segments)
    params = {k: v for k, v in params.items() if v is not None}
    if params:
        key = f'{key}?{urlencode(sorted(params.items()))}'
    return key


@dataclass
class CacheEntry:
    value: object = None
    stale: bool = True
    fetched_at: float = 0.0
    # bumped on every invalidation so in-flight fetches can tell they lost
    generation: int = 0


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    invalidations: int = 0
    fetches_by_key: dict = field(default_factory=dict)


class QueryCache:
    """Last-fetched results keyed by resource path.

    Reads are served from memory until a key is invalidated; the next
    read of an invalidated key goes back to the loader.
    """

    def __init__(self):
        self._entries = {}
        self._lock = threading.RLock()
        self.stats = CacheStats()

    def fetch(self, key, loader):
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and not entry.stale:
                self.stats.hits += 1
                return entry.value
            if entry is None:
                entry = self._entries[key] = CacheEntry()
            generation = entry.generation
            self.stats.misses += 1

        value = loader()

        with self._lock:
            entry = self._entries.setdefault(key, CacheEntry())
            entry.value = value
            entry.fetched_at = time.time()
            # an invalidation landed while we were loading
            entry.stale = entry.generation != generation
            self.stats.fetches_by_key[key] = self.stats.fetches_by_key.get(key, 0) + 1
        return value

    def peek(self, key, default=None):
        with self._lock:
            entry = self._entries.get(key)
            return default if entry is None else entry.value

    def is_stale(self, key):
        with self._lock:
            entry = self._entries.get(key)
            return entry is None or entry.stale

    def set(self, key, value):
        with self._lock:
            entry = self._entries.setdefault(key, CacheEntry())
            entry.value = value
            entry.stale = False
            entry.fetched_at = time.time()

    def invalidate(self, *keys):
        with self._lock:
            for key in keys:
                self._mark_stale(key)

    def invalidate_prefix(self, prefix):
        prefix = prefix.rstrip('/')
        with self._lock:
            for key in list(self._entries):
                if key == prefix or key.startswith(prefix + '/') or key.startswith(prefix + '?'):
                    self._mark_stale(key)

    def _mark_stale(self, key):
        entry = self._entries.setdefault(key, CacheEntry())
        entry.stale = True
        entry.generation += 1
        self.stats.invalidations += 1
        logger.debug("Invalidated %s", key)

    def clear(self):
        with self._lock:
            self._entries.clear()

    def keys(self):
        with self._lock:
            return list(self._entries)

    def __contains__(self, key):
        with self._lock:
            return key in self._entries

    def __len__(self):
        with self._lock:
            return len(self._entries)


class CacheRegistry:
    """One QueryCache per authenticated portal session."""

    def __init__(self, max_sessions=500):
        self.max_sessions = max_sessions
        self._caches = {}
        self._lock = threading.Lock()

    def for_session(self, session_id):
        with self._lock:
            cache = self._caches.pop(session_id, None)
            if cache is None:
                cache = QueryCache()
            # re-insert so the dict stays in least-recently-used order
            self._caches[session_id] = cache
            while len(self._caches) > self.max_sessions:
                oldest = next(iter(self._caches))
                del self._caches[oldest]
            return cache

    def discard(self, session_id):
        with self._lock:
            self._caches.pop(session_id, None)

    def __len__(self):
        with self._lock:
            return len(self._caches)


CACHE_ID_KEY = 'cache_id'


def get_cache():
    """The query cache of the current portal session."""
    cache_id = session.get(CACHE_ID_KEY)
    if cache_id is None:
        cache_id = session[CACHE_ID_KEY] = uuid.uuid4().hex
    return current_app.extensions['query_cache'].for_session(cache_id)


def drop_cache():
    cache_id = session.pop(CACHE_ID_KEY, None)
    if cache_id is not None:
        current_app.extensions['query_cache'].discard(cache_id)
