"""Pattern cache — capacity-bounded memo table for generated patterns.

Default eviction is insertion order: at capacity the oldest *inserted* key
goes, even if it was just read. LRU is available as an explicit policy.

Thread-safe for concurrent get/put. There is no per-key locking, so two
threads missing on the same key both compute; the second put overwrites an
equal value.
"""

import collections
import json
import logging
import threading
from enum import Enum

from engine.models import Identity, PatternConfig, WavePattern

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 100


class EvictionPolicy(Enum):
    INSERTION = "insertion"
    LRU = "lru"


def cache_key(identity: Identity, config: PatternConfig | None) -> str:
    """Deterministic serialization of (identity, config)."""
    config_token = config.cache_token() if config is not None else "default"
    return json.dumps([identity.key, config_token])


class PatternCache:
    """Memo table keyed by cache_key()."""

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        policy: EvictionPolicy = EvictionPolicy.INSERTION,
    ):
        if capacity < 1:
            raise ValueError(f"cache capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self.policy = policy
        self._entries: collections.OrderedDict[str, WavePattern] = (
            collections.OrderedDict()
        )
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def get(self, key: str) -> WavePattern | None:
        with self._lock:
            pattern = self._entries.get(key)
            if pattern is None:
                self.misses += 1
                return None
            self.hits += 1
            if self.policy is EvictionPolicy.LRU:
                self._entries.move_to_end(key)
            return pattern

    def put(self, key: str, pattern: WavePattern) -> None:
        with self._lock:
            if key in self._entries:
                # Re-put of a raced miss keeps its original insertion slot
                self._entries[key] = pattern
                return
            while len(self._entries) >= self.capacity:
                evicted, _ = self._entries.popitem(last=False)
                self.evictions += 1
                logger.debug("Evicted pattern cache entry %s", evicted)
            self._entries[key] = pattern

    def keys(self) -> list[str]:
        """Keys in eviction order (next to be evicted first)."""
        with self._lock:
            return list(self._entries.keys())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0
            self.evictions = 0

    def stats(self) -> dict:
        with self._lock:
            return {
                "size": len(self._entries),
                "capacity": self.capacity,
                "policy": self.policy.value,
                "hits": self.hits,
                "misses": self.misses,
                "evictions": self.evictions,
            }

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
