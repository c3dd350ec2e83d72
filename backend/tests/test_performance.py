"""Performance gate tests — per-algorithm generation time.

All timing tests use time.perf_counter() for wall-clock measurement.

Gates:
  - Each algorithm must produce its raw element list in < GENERATE_WARN_MS.
  - A cache hit must cost well under a millisecond on average.

Marked with @pytest.mark.perf so CI can skip them with: pytest -m "not perf"
"""

import time

import numpy as np
import pytest

from engine import palettes
from engine.cache import PatternCache
from engine.determinism import make_rng
from engine.generator import GENERATE_WARN_MS, PatternGenerator
from engine.models import PatternConfig
from patterns.registry import get, list_all

pytestmark = pytest.mark.perf

RUNS = 5
CACHE_HITS = 2000


def _all_pattern_ids() -> list[str]:
    return [p["id"] for p in list_all()]


@pytest.mark.parametrize("pattern_id", _all_pattern_ids())
def test_algorithm_within_time_limit(pattern_id):
    fn = get(pattern_id)["fn"]
    scheme = palettes.COLOR_SCHEMES[0]
    config = PatternConfig(simplify_paths=False)

    timings = []
    for seed in range(RUNS):
        t0 = time.perf_counter()
        fn(make_rng(seed), scheme, config)
        timings.append((time.perf_counter() - t0) * 1000)

    median_ms = float(np.median(timings))
    assert median_ms < GENERATE_WARN_MS, (
        f"{pattern_id}: median {median_ms:.1f}ms exceeds {GENERATE_WARN_MS}ms"
    )


def test_cache_hit_is_cheap():
    generator = PatternGenerator(PatternCache())
    generator.generate_pattern("DJ Dan", "Housing Project", "1992")

    t0 = time.perf_counter()
    for _ in range(CACHE_HITS):
        generator.generate_pattern("DJ Dan", "Housing Project", "1992")
    avg_ms = (time.perf_counter() - t0) * 1000 / CACHE_HITS

    assert avg_ms < 1.0, f"cache hit averaged {avg_ms:.3f}ms"
    assert generator.computations == 1
