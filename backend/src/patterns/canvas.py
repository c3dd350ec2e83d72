"""Shared label-space geometry for pattern algorithms.

All algorithms draw in the renderer's 337x161 label space and centre on the
same point; nothing here is randomized.
"""

import math

from engine.determinism import SeededRandom
from engine.gradients import create_gradient
from engine.models import ColorScheme, GradientDef, PatternConfig

LABEL_WIDTH = 337
LABEL_HEIGHT = 161
CENTER_X = 164.5
CENTER_Y = 80.5
MAX_RADIUS = 250

GRADIENT_TOGGLE_THRESHOLD = 0.5


def gradient_paint(
    rng: SeededRandom,
    scheme: ColorScheme,
    config: PatternConfig,
    gradient_id: str,
) -> tuple[str, list[GradientDef]]:
    """Resolve the paint for a gradient-capable algorithm.

    The toggle draw is always consumed so the rest of the sequence does not
    depend on whether it fires; the builder's own two draws only happen when
    gradients are enabled and the toggle fires.
    """
    toggle = rng.next() > GRADIENT_TOGGLE_THRESHOLD
    if toggle and config.enable_gradients:
        gradient, url = create_gradient(gradient_id, scheme.accent_color, rng)
        return url, [gradient]
    return scheme.accent_color, []


def draw(rng: SeededRandom, spec: dict):
    """Draw one value in [min, max) from a PARAMS entry; ints are floored."""
    value = rng.range(spec["min"], spec["max"])
    return int(value) if spec["type"] == "int" else value


def base_opacity(scheme: ColorScheme) -> float:
    return scheme.base_opacity or 1


def circle_points(cx: float, cy: float, radius: float, segments: int, phase=0.0):
    """Closed ring sampled at segments + 1 points (first == last)."""
    for j in range(segments + 1):
        angle = (j / segments) * math.pi * 2 + phase
        yield cx + math.cos(angle) * radius, cy + math.sin(angle) * radius


def polar(radius: float, angle: float) -> tuple[float, float]:
    """Point at (radius, angle) around the label centre."""
    return CENTER_X + math.cos(angle) * radius, CENTER_Y + math.sin(angle) * radius
