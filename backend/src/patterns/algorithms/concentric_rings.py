"""Concentric Rings — hypnotic circles, optionally with filled annuli.

Rings are emitted outermost first so inner fills paint over outer ones.
"""

from engine.determinism import SeededRandom
from engine.models import ColorScheme, GradientDef, PatternConfig, PatternElement
from engine.pathdata import polyline
from patterns.canvas import (
    CENTER_X,
    CENTER_Y,
    MAX_RADIUS,
    base_opacity,
    circle_points,
    draw,
    gradient_paint,
)

PATTERN_ID = "pattern.concentric_rings"
PATTERN_NAME = "Concentric Rings"
SUPPORTS_GRADIENT = True

RING_SEGMENTS = 64

PARAMS: dict = {
    "rings": {
        "type": "int",
        "min": 30,
        "max": 100,
        "label": "Rings",
        "description": "Number of circles",
    },
    "line_thickness": {
        "type": "float",
        "min": 0.5,
        "max": 4.0,
        "label": "Line Thickness",
        "description": "Circle stroke width",
    },
    "filled": {
        "type": "float",
        "min": 0.0,
        "max": 1.0,
        "label": "Filled",
        "description": "Alternate annuli are filled when > 0.5",
    },
}


def _annulus(r_outer: float, r_inner: float, simplify: bool) -> str:
    """Outer ring forward, inner ring reversed, so the hole stays open."""
    outer = circle_points(CENTER_X, CENTER_Y, r_outer, RING_SEGMENTS)
    inner = list(circle_points(CENTER_X, CENTER_Y, r_inner, RING_SEGMENTS))
    return " ".join(
        [
            polyline(outer, simplify, closed=True),
            polyline(reversed(inner), simplify, closed=True),
        ]
    )


def generate(
    rng: SeededRandom, scheme: ColorScheme, config: PatternConfig
) -> tuple[list[PatternElement], list[GradientDef]]:
    accent = scheme.accent_color
    opacity = base_opacity(scheme)
    fill_paint, gradients = gradient_paint(rng, scheme, config, "concentric-grad")

    rings = draw(rng, PARAMS["rings"])
    line_thickness = draw(rng, PARAMS["line_thickness"])
    filled = draw(rng, PARAMS["filled"]) > 0.5

    elements = []
    for i in range(rings - 1, -1, -1):
        radius_outer = ((i + 1) / rings) * MAX_RADIUS
        radius_inner = (i / rings) * MAX_RADIUS

        if filled and i % 2 == 0 and i < rings - 1:
            elements.append(
                PatternElement(
                    path_data=_annulus(radius_outer, radius_inner, config.simplify_paths),
                    stroke="none",
                    stroke_width=0,
                    fill=fill_paint,
                    opacity=0.9 * opacity,
                )
            )

        outline = circle_points(CENTER_X, CENTER_Y, radius_outer, RING_SEGMENTS)
        elements.append(
            PatternElement(
                path_data=polyline(outline, config.simplify_paths),
                stroke=accent,
                stroke_width=line_thickness,
                fill="none",
                opacity=0.85 * opacity,
            )
        )

    return elements, gradients
