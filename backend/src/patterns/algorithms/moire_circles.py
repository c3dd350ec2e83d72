"""Moiré Circles — two offset circle lattices interfering across the label.

Lattice coordinates accumulate by repeated addition of the spacing, so the
number of circles per row follows float stepping rather than a computed count.
"""

from engine.determinism import SeededRandom
from engine.models import ColorScheme, GradientDef, PatternConfig, PatternElement
from engine.pathdata import polyline
from patterns.canvas import LABEL_HEIGHT, LABEL_WIDTH, circle_points, draw

PATTERN_ID = "pattern.moire_circles"
PATTERN_NAME = "Moiré Circles"
SUPPORTS_GRADIENT = False

CIRCLE_SEGMENTS = 32

PARAMS: dict = {
    "spacing": {
        "type": "float",
        "min": 15.0,
        "max": 30.0,
        "label": "Spacing",
        "description": "Lattice pitch; the second lattice is offset by half",
    },
    "radius": {
        "type": "float",
        "min": 10.0,
        "max": 20.0,
        "label": "Radius",
        "description": "Circle radius",
    },
    "line_thickness": {
        "type": "float",
        "min": 0.6,
        "max": 2.0,
        "label": "Line Thickness",
        "description": "Circle stroke width",
    },
}


def _lattice(start: float, spacing: float, radius: float):
    """Yield circle centres covering the label plus one radius of margin."""
    y = start
    while y < LABEL_HEIGHT + radius:
        x = start
        while x < LABEL_WIDTH + radius:
            yield x, y
            x += spacing
        y += spacing


def generate(
    rng: SeededRandom, scheme: ColorScheme, config: PatternConfig
) -> tuple[list[PatternElement], list[GradientDef]]:
    spacing = draw(rng, PARAMS["spacing"])
    radius = draw(rng, PARAMS["radius"])
    line_thickness = draw(rng, PARAMS["line_thickness"])
    offset = spacing / 2

    elements = []
    for start in (-radius, -radius + offset):
        for x, y in _lattice(start, spacing, radius):
            ring = circle_points(x, y, radius, CIRCLE_SEGMENTS)
            elements.append(
                PatternElement(
                    path_data=polyline(ring, config.simplify_paths),
                    stroke=scheme.accent_color,
                    stroke_width=line_thickness,
                    fill="none",
                    opacity=0.5,
                )
            )

    return elements, []
