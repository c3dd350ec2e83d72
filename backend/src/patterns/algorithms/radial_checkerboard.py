"""Radial Checkerboard — mandala of annular sectors with alternating fills."""

import math

from engine.determinism import SeededRandom
from engine.models import ColorScheme, GradientDef, PatternConfig, PatternElement
from engine.pathdata import polyline
from patterns.canvas import MAX_RADIUS, base_opacity, draw, gradient_paint, polar

PATTERN_ID = "pattern.radial_checkerboard"
PATTERN_NAME = "Radial Checkerboard"
SUPPORTS_GRADIENT = True

PARAMS: dict = {
    "rings": {
        "type": "int",
        "min": 40,
        "max": 120,
        "label": "Rings",
        "description": "Concentric bands from centre to edge",
    },
    "segments": {
        "type": "int",
        "min": 16,
        "max": 64,
        "label": "Segments",
        "description": "Angular divisions per band",
    },
    "line_thickness": {
        "type": "float",
        "min": 0.3,
        "max": 2.5,
        "label": "Line Thickness",
        "description": "Sector outline stroke width",
    },
    "fill_pattern": {
        "type": "int",
        "min": 0,
        "max": 4,
        "label": "Fill Pattern",
        "description": "0 checker, 1 spokes, 2 bands, 3 sparse",
    },
}


def _is_filled(fill_pattern: int, ring: int, seg: int) -> bool:
    if fill_pattern == 0:
        return (ring + seg) % 2 == 0
    if fill_pattern == 1:
        return seg % 2 == 0
    if fill_pattern == 2:
        return ring % 2 == 0
    return ring % 3 == 0 and seg % 2 == 0


def generate(
    rng: SeededRandom, scheme: ColorScheme, config: PatternConfig
) -> tuple[list[PatternElement], list[GradientDef]]:
    accent = scheme.accent_color
    opacity = base_opacity(scheme)
    fill_paint, gradients = gradient_paint(rng, scheme, config, "radial-grad")

    rings = draw(rng, PARAMS["rings"])
    segments = draw(rng, PARAMS["segments"])
    line_thickness = draw(rng, PARAMS["line_thickness"])
    fill_pattern = draw(rng, PARAMS["fill_pattern"])

    elements = []
    for ring in range(rings):
        r1 = (ring / rings) * MAX_RADIUS
        r2 = ((ring + 1) / rings) * MAX_RADIUS

        for seg in range(segments):
            a1 = (seg / segments) * math.pi * 2
            a2 = ((seg + 1) / segments) * math.pi * 2
            corners = [polar(r1, a1), polar(r1, a2), polar(r2, a2), polar(r2, a1)]

            filled = _is_filled(fill_pattern, ring, seg)
            elements.append(
                PatternElement(
                    path_data=polyline(corners, config.simplify_paths, closed=True),
                    stroke=accent,
                    stroke_width=line_thickness,
                    fill=fill_paint if filled else "none",
                    opacity=(0.8 * opacity) if filled else (0.9 * opacity),
                )
            )

    return elements, gradients
