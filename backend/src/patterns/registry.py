"""Pattern registry — ordered table of the 16 label algorithms.

Selection is positional: an identity's seed picks an index into this table,
so the order is part of the output contract. Appending, removing or
reordering entries changes which pattern existing identities receive; bump
REGISTRY_VERSION whenever that happens so cached or exported output can be
invalidated.
"""

import hashlib
from enum import IntEnum
from typing import Callable

from engine.determinism import SeededRandom
from engine.models import ColorScheme, GradientDef, PatternConfig, PatternElement

PatternFn = Callable[
    [SeededRandom, ColorScheme, PatternConfig],
    tuple[list[PatternElement], list[GradientDef]],
]

REGISTRY_VERSION = 1


class PatternKind(IntEnum):
    RADIAL_CHECKERBOARD = 0
    ROTATING_SPIRAL = 1
    STARBURST = 2
    CONCENTRIC_RINGS = 3
    TWISTED_SPIRAL = 4
    POLYGON_MANDALA = 5
    ROTATING_RADIAL = 6
    FLOWER_MANDALA = 7
    WARPED_GRID = 8
    TUNNEL = 9
    WAVE_RINGS = 10
    DOUBLE_HELIX = 11
    DOTTED_SPIRAL = 12
    STAR_MANDALA = 13
    CURVED_RAYS = 14
    MOIRE_CIRCLES = 15


_REGISTRY: list[dict] = []
_BY_ID: dict[str, dict] = {}


def register(kind: PatternKind, module) -> None:
    """Register an algorithm module at its table position."""
    if kind != len(_REGISTRY):
        raise ValueError(
            f"{module.PATTERN_ID} registered at {kind.value}, expected {len(_REGISTRY)}"
        )
    if module.PATTERN_ID in _BY_ID:
        raise ValueError(f"Duplicate pattern id: {module.PATTERN_ID}")
    entry = {
        "kind": kind,
        "id": module.PATTERN_ID,
        "name": module.PATTERN_NAME,
        "fn": module.generate,
        "params": module.PARAMS,
        "supports_gradient": module.SUPPORTS_GRADIENT,
    }
    _REGISTRY.append(entry)
    _BY_ID[module.PATTERN_ID] = entry


def count() -> int:
    return len(_REGISTRY)


def get(key: PatternKind | int | str) -> dict | None:
    """Get an entry by kind, table index or pattern id."""
    if isinstance(key, str):
        return _BY_ID.get(key)
    index = int(key)
    if 0 <= index < len(_REGISTRY):
        return _REGISTRY[index]
    return None


def select_kind(seed: int, palette_count: int) -> PatternKind:
    """Table position for a seed; the palette index uses seed % palette_count."""
    return PatternKind((seed // palette_count) % len(_REGISTRY))


def list_all() -> list[dict]:
    """List all registered patterns with metadata, in table order."""
    return [
        {
            "index": int(entry["kind"]),
            "id": entry["id"],
            "name": entry["name"],
            "supports_gradient": entry["supports_gradient"],
            "params": entry["params"],
        }
        for entry in _REGISTRY
    ]


def registry_fingerprint() -> str:
    """sha256 over the ordered pattern ids; changes whenever the table does."""
    ordered = "\n".join(entry["id"] for entry in _REGISTRY)
    return hashlib.sha256(ordered.encode("utf-8")).hexdigest()


def _auto_register():
    """Import and register all built-in algorithms in table order."""
    from patterns.algorithms import (
        concentric_rings,
        curved_rays,
        dotted_spiral,
        double_helix,
        flower_mandala,
        moire_circles,
        polygon_mandala,
        radial_checkerboard,
        rotating_radial,
        rotating_spiral,
        star_mandala,
        starburst,
        tunnel,
        twisted_spiral,
        warped_grid,
        wave_rings,
    )

    for kind, mod in [
        (PatternKind.RADIAL_CHECKERBOARD, radial_checkerboard),
        (PatternKind.ROTATING_SPIRAL, rotating_spiral),
        (PatternKind.STARBURST, starburst),
        (PatternKind.CONCENTRIC_RINGS, concentric_rings),
        (PatternKind.TWISTED_SPIRAL, twisted_spiral),
        (PatternKind.POLYGON_MANDALA, polygon_mandala),
        (PatternKind.ROTATING_RADIAL, rotating_radial),
        (PatternKind.FLOWER_MANDALA, flower_mandala),
        (PatternKind.WARPED_GRID, warped_grid),
        (PatternKind.TUNNEL, tunnel),
        (PatternKind.WAVE_RINGS, wave_rings),
        (PatternKind.DOUBLE_HELIX, double_helix),
        (PatternKind.DOTTED_SPIRAL, dotted_spiral),
        (PatternKind.STAR_MANDALA, star_mandala),
        (PatternKind.CURVED_RAYS, curved_rays),
        (PatternKind.MOIRE_CIRCLES, moire_circles),
    ]:
        register(kind, mod)


_auto_register()
