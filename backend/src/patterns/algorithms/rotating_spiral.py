"""Rotating Spiral — concentric rings, each rotated a little further."""

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

PATTERN_ID = "pattern.rotating_spiral"
PATTERN_NAME = "Rotating Spiral"
SUPPORTS_GRADIENT = True

RING_SEGMENTS = 64

PARAMS: dict = {
    "rings": {
        "type": "int",
        "min": 60,
        "max": 150,
        "label": "Rings",
        "description": "Number of rotated rings",
    },
    "rotation": {
        "type": "float",
        "min": 0.03,
        "max": 0.15,
        "label": "Rotation",
        "unit": "rad",
        "description": "Extra twist per ring",
    },
    "line_thickness": {
        "type": "float",
        "min": 0.4,
        "max": 3.0,
        "label": "Line Thickness",
        "description": "Ring stroke width",
    },
}


def generate(
    rng: SeededRandom, scheme: ColorScheme, config: PatternConfig
) -> tuple[list[PatternElement], list[GradientDef]]:
    opacity = base_opacity(scheme)
    stroke_paint, gradients = gradient_paint(rng, scheme, config, "spiral-grad")

    rings = draw(rng, PARAMS["rings"])
    rotation = draw(rng, PARAMS["rotation"])
    line_thickness = draw(rng, PARAMS["line_thickness"])

    elements = []
    for i in range(rings):
        radius = (i / rings) * MAX_RADIUS
        twist = i * rotation
        points = circle_points(CENTER_X, CENTER_Y, radius, RING_SEGMENTS, twist)
        elements.append(
            PatternElement(
                path_data=polyline(points, config.simplify_paths),
                stroke=stroke_paint,
                stroke_width=line_thickness,
                fill="none",
                opacity=0.8 * opacity,
            )
        )

    return elements, gradients
