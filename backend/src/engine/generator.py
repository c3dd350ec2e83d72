"""Pattern generator — identity in, capped and cached WavePattern out.

identity -> seed -> (palette, algorithm) -> raw elements -> capped elements
-> cached pattern. Everything after the cache lookup is a pure function of
(identity, config); the cache is the only shared state.

Includes rolling per-algorithm timing stats and a slow-generation warning.
"""

import logging
import os
import threading
import time
from collections import defaultdict, deque

import sentry_sdk

from engine import palettes
from engine.cache import DEFAULT_CAPACITY, EvictionPolicy, PatternCache, cache_key
from engine.capper import cap_elements
from engine.determinism import hash_string, make_rng
from engine.models import Identity, PatternConfig, PatternMeta, WavePattern
from patterns import registry

logger = logging.getLogger(__name__)

# Generation time above which a warning is logged (milliseconds)
GENERATE_WARN_MS = 250

CACHE_SIZE_ENV = "TAPELABEL_CACHE_SIZE"
CACHE_POLICY_ENV = "TAPELABEL_CACHE_POLICY"


def _capture_with_context(e: Exception, pattern_id: str, extra: dict):
    """Capture exception to Sentry with pattern-level context and fingerprint dedup."""
    with sentry_sdk.new_scope() as scope:
        scope.set_tag("pattern_id", pattern_id)
        scope.fingerprint = ["pattern-crash", pattern_id, type(e).__name__]
        scope.set_context("pattern", extra)
        sentry_sdk.capture_exception(e, scope=scope)


def cache_from_env() -> PatternCache:
    """Build a PatternCache from TAPELABEL_CACHE_SIZE / TAPELABEL_CACHE_POLICY.

    Raises:
        ValueError: If either variable holds an unusable value.
    """
    size = os.environ.get(CACHE_SIZE_ENV)
    policy = os.environ.get(CACHE_POLICY_ENV)
    capacity = int(size) if size else DEFAULT_CAPACITY
    return PatternCache(
        capacity=capacity,
        policy=EvictionPolicy(policy.lower()) if policy else EvictionPolicy.INSERTION,
    )


class PatternGenerator:
    """Generates label patterns, memoized in an injected PatternCache."""

    def __init__(self, cache: PatternCache | None = None):
        self.cache = cache if cache is not None else PatternCache()
        self.computations = 0
        self._stats_lock = threading.Lock()
        self._timing: dict[str, deque] = defaultdict(lambda: deque(maxlen=100))

    def _select(self, identity: Identity):
        seed = hash_string(identity.key)
        scheme = palettes.select_scheme(seed)
        kind = registry.select_kind(seed, palettes.palette_count())
        return seed, scheme, registry.get(kind)

    def _compute(self, identity: Identity, config: PatternConfig) -> WavePattern:
        seed, scheme, entry = self._select(identity)
        rng = make_rng(seed)

        t0 = time.monotonic()
        try:
            elements, gradients = entry["fn"](rng, scheme, config)
        except Exception as e:
            # PII-safe: no identity strings, only what the algorithm saw
            _capture_with_context(
                e,
                entry["id"],
                {
                    "seed": seed,
                    "palette": scheme.name,
                    "config": config.to_dict(),
                    "registry_version": registry.REGISTRY_VERSION,
                },
            )
            logger.error("Pattern %s failed: %s", entry["id"], type(e).__name__)
            raise
        elapsed_ms = (time.monotonic() - t0) * 1000

        raw_count = len(elements)
        pattern = WavePattern(
            background_color=scheme.background_color,
            elements=tuple(cap_elements(elements, config.max_elements)),
            gradients=tuple(gradients),
        )

        with self._stats_lock:
            self.computations += 1
            self._timing[entry["id"]].append(elapsed_ms)

        if elapsed_ms > GENERATE_WARN_MS:
            logger.warning(
                "Pattern %s took %.0fms (>%dms warn threshold) for %d raw elements",
                entry["id"],
                elapsed_ms,
                GENERATE_WARN_MS,
                raw_count,
            )
        else:
            logger.debug(
                "Pattern %s generated %d/%d elements in %.1fms",
                entry["id"],
                len(pattern.elements),
                raw_count,
                elapsed_ms,
            )
        return pattern

    def generate_pattern(
        self,
        creator_name: str,
        item_title: str,
        year: str | None = None,
        config: PatternConfig | None = None,
    ) -> WavePattern:
        """Return the pattern for an identity, computing it on a cache miss.

        Two calls with equal arguments return equal patterns whether or not
        the cache was hit in between.
        """
        identity = Identity(creator_name, item_title, year)
        config = config if config is not None else PatternConfig()
        key = cache_key(identity, config)

        cached = self.cache.get(key)
        if cached is not None:
            return cached

        # Computed outside the cache lock; concurrent misses may both compute
        pattern = self._compute(identity, config)
        self.cache.put(key, pattern)
        return pattern

    def pattern_meta(
        self,
        creator_name: str,
        item_title: str,
        year: str | None = None,
        config: PatternConfig | None = None,
    ) -> PatternMeta:
        """Describe which palette and algorithm an identity maps to."""
        identity = Identity(creator_name, item_title, year)
        seed, scheme, entry = self._select(identity)
        pattern = self.generate_pattern(creator_name, item_title, year, config)
        return PatternMeta(
            algorithm_id=entry["id"],
            algorithm_name=entry["name"],
            algorithm_index=int(entry["kind"]),
            palette_name=scheme.name,
            element_count=len(pattern.elements),
            seed=seed,
        )

    def clear_cache(self) -> None:
        self.cache.clear()

    def generation_stats(self) -> dict[str, dict]:
        """Return p50/max/samples per algorithm."""
        with self._stats_lock:
            snapshot = {pid: sorted(s) for pid, s in self._timing.items()}
        return {
            pid: {
                "p50": s[len(s) // 2] if s else 0,
                "max": max(s) if s else 0,
                "samples": len(s),
            }
            for pid, s in snapshot.items()
        }

    def flush_timing(self) -> None:
        with self._stats_lock:
            self._timing.clear()


_default_generator: PatternGenerator | None = None
_default_lock = threading.Lock()


def get_default_generator() -> PatternGenerator:
    """Return the process-wide generator, building it on first use.

    Unusable cache settings in the environment fall back to the defaults
    with a logged warning.
    """
    global _default_generator
    with _default_lock:
        if _default_generator is None:
            try:
                cache = cache_from_env()
            except ValueError as e:
                logger.warning("Ignoring cache settings from environment: %s", e)
                cache = PatternCache()
            _default_generator = PatternGenerator(cache)
        return _default_generator


def generate_pattern(
    creator_name: str,
    item_title: str,
    year: str | None = None,
    config: PatternConfig | None = None,
) -> WavePattern:
    generator = get_default_generator()
    return generator.generate_pattern(creator_name, item_title, year, config)


def pattern_meta(
    creator_name: str,
    item_title: str,
    year: str | None = None,
    config: PatternConfig | None = None,
) -> PatternMeta:
    return get_default_generator().pattern_meta(creator_name, item_title, year, config)


def clear_cache() -> None:
    get_default_generator().clear_cache()
