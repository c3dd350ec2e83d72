"""Tests for engine.generator — identity to capped, cached pattern."""

import logging
import re

import pytest

import engine.generator as generator_module
from engine import palettes
from engine.cache import EvictionPolicy, PatternCache
from engine.determinism import derive_seed
from engine.generator import PatternGenerator, cache_from_env
from engine.models import PatternConfig
from patterns import registry

pytestmark = pytest.mark.smoke

DJ_DAN = ("DJ Dan", "Housing Project", "1992")

IDENTITIES = [
    DJ_DAN,
    ("Doc Martin", "Live at Pagoda", "1996"),
    ("Jenö", "Sunset Sessions", None),
    ("", "", None),
    ("Moiré", "Ω", "∞"),
]


def test_same_identity_same_pattern(generator):
    first = generator.generate_pattern(*DJ_DAN)
    generator.clear_cache()
    second = generator.generate_pattern(*DJ_DAN)
    assert first == second
    assert first.to_json() == second.to_json()


def test_independent_generators_agree():
    a = PatternGenerator(PatternCache()).generate_pattern(*DJ_DAN)
    b = PatternGenerator(PatternCache()).generate_pattern(*DJ_DAN)
    assert a.to_json() == b.to_json()


def test_cache_hit_skips_computation(generator):
    first = generator.generate_pattern(*DJ_DAN)
    second = generator.generate_pattern(*DJ_DAN)
    assert generator.computations == 1
    assert second is first


def test_default_config_equals_explicit_default(generator):
    generator.generate_pattern(*DJ_DAN)
    generator.generate_pattern(*DJ_DAN, config=PatternConfig())
    assert generator.computations == 1


def test_different_config_is_separate_entry(generator):
    generator.generate_pattern(*DJ_DAN)
    generator.generate_pattern(*DJ_DAN, config=PatternConfig(max_elements=5))
    assert generator.computations == 2


@pytest.mark.parametrize("identity", IDENTITIES)
def test_element_count_capped_at_default(generator, identity):
    pattern = generator.generate_pattern(*identity)
    assert 0 < len(pattern.elements) <= 60


@pytest.mark.parametrize("max_elements", [1, 7, 200])
def test_custom_cap(generator, max_elements):
    pattern = generator.generate_pattern(
        *DJ_DAN, config=PatternConfig(max_elements=max_elements)
    )
    assert len(pattern.elements) <= max_elements


def test_zero_cap_gives_empty_pattern(generator):
    pattern = generator.generate_pattern(*DJ_DAN, config=PatternConfig(max_elements=0))
    assert pattern.elements == ()
    assert pattern.background_color == "#000000"


def test_capped_is_prefix_sample_of_uncapped(generator):
    full = generator.generate_pattern(*DJ_DAN, config=PatternConfig(max_elements=100000))
    capped = generator.generate_pattern(*DJ_DAN)
    full_paths = [e.path_data for e in full.elements]
    for element in capped.elements:
        assert element.path_data in full_paths
    assert capped.elements[0] == full.elements[0]


def test_no_gradients_by_default(generator, random_identities):
    for identity in IDENTITIES + random_identities(40):
        assert generator.generate_pattern(*identity).gradients == ()


def test_gradient_references_resolve(generator, random_identities):
    config = PatternConfig(enable_gradients=True)
    seen_gradient = False
    for identity in random_identities(200):
        pattern = generator.generate_pattern(*identity, config=config)
        ids = {g.id for g in pattern.gradients}
        seen_gradient = seen_gradient or bool(ids)
        for element in pattern.elements:
            for paint in (element.stroke, element.fill):
                match = re.fullmatch(r"url\(#(.+)\)", paint)
                if match:
                    assert match.group(1) in ids
    assert seen_gradient


def test_background_from_scheme(generator):
    seed = derive_seed(*DJ_DAN)
    pattern = generator.generate_pattern(*DJ_DAN)
    assert pattern.background_color == palettes.select_scheme(seed).background_color


def test_meta_matches_selection(generator):
    meta = generator.pattern_meta(*DJ_DAN)
    seed = derive_seed(*DJ_DAN)
    kind = registry.select_kind(seed, palettes.palette_count())
    assert meta.seed == seed
    assert meta.algorithm_index == int(kind)
    assert meta.algorithm_id == registry.get(kind)["id"]
    assert meta.palette_name == "gray-white"
    assert meta.element_count == len(generator.generate_pattern(*DJ_DAN).elements)


def test_many_identities_use_many_algorithms(generator, random_identities):
    used = {
        generator.pattern_meta(*identity).algorithm_id
        for identity in random_identities(80)
    }
    assert len(used) > 8


def test_algorithm_failure_is_reported_and_reraised(generator, monkeypatch):
    captured = []

    def boom(rng, scheme, config):
        raise ZeroDivisionError("boom")

    for entry in registry._REGISTRY:
        monkeypatch.setitem(entry, "fn", boom)
    monkeypatch.setattr(
        generator_module,
        "_capture_with_context",
        lambda e, pattern_id, extra: captured.append((pattern_id, extra)),
    )

    with pytest.raises(ZeroDivisionError):
        generator.generate_pattern(*DJ_DAN)

    assert len(captured) == 1
    pattern_id, extra = captured[0]
    assert pattern_id.startswith("pattern.")
    assert "DJ Dan" not in repr(extra)
    assert extra["registry_version"] == registry.REGISTRY_VERSION
    # Nothing cached for the failed identity
    assert len(generator.cache) == 0
    assert generator.computations == 0


def test_generation_stats(generator):
    for identity in IDENTITIES:
        generator.generate_pattern(*identity)
    stats = generator.generation_stats()
    assert sum(s["samples"] for s in stats.values()) == 5
    for s in stats.values():
        assert s["max"] >= s["p50"] >= 0
    generator.flush_timing()
    assert generator.generation_stats() == {}


class TestCacheFromEnv:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("TAPELABEL_CACHE_SIZE", raising=False)
        monkeypatch.delenv("TAPELABEL_CACHE_POLICY", raising=False)
        cache = cache_from_env()
        assert cache.capacity == 100
        assert cache.policy is EvictionPolicy.INSERTION

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("TAPELABEL_CACHE_SIZE", "7")
        monkeypatch.setenv("TAPELABEL_CACHE_POLICY", "LRU")
        cache = cache_from_env()
        assert cache.capacity == 7
        assert cache.policy is EvictionPolicy.LRU

    @pytest.mark.parametrize(
        "name,value",
        [
            ("TAPELABEL_CACHE_SIZE", "lots"),
            ("TAPELABEL_CACHE_SIZE", "0"),
            ("TAPELABEL_CACHE_POLICY", "random"),
        ],
    )
    def test_bad_values_raise(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)
        with pytest.raises(ValueError):
            cache_from_env()


def test_module_level_wrappers_use_default_generator():
    generator_module.clear_cache()
    pattern = generator_module.generate_pattern(*DJ_DAN)
    default = generator_module.get_default_generator()
    assert default is generator_module.get_default_generator()
    assert default.generate_pattern(*DJ_DAN) is pattern
    meta = generator_module.pattern_meta(*DJ_DAN)
    assert meta.element_count == len(pattern.elements)
    generator_module.clear_cache()
    assert len(default.cache) == 0


@pytest.mark.parametrize(
    "name,value",
    [("TAPELABEL_CACHE_SIZE", "lots"), ("TAPELABEL_CACHE_POLICY", "random")],
)
def test_default_generator_ignores_bad_env(monkeypatch, caplog, name, value):
    monkeypatch.setattr(generator_module, "_default_generator", None)
    monkeypatch.setenv(name, value)
    with caplog.at_level(logging.WARNING, logger="engine.generator"):
        default = generator_module.get_default_generator()
    assert default.cache.capacity == 100
    assert default.cache.policy is EvictionPolicy.INSERTION
    assert "Ignoring cache settings" in caplog.text


def test_default_generator_built_on_first_use(monkeypatch):
    monkeypatch.setattr(generator_module, "_default_generator", None)
    monkeypatch.setenv("TAPELABEL_CACHE_SIZE", "3")
    monkeypatch.setenv("TAPELABEL_CACHE_POLICY", "lru")
    default = generator_module.get_default_generator()
    assert default.cache.capacity == 3
    assert default.cache.policy is EvictionPolicy.LRU
