"""Dotted Spiral — spiral arms traced by small filled discs.

Each dot draws its own turn rate, so arms jitter rather than follow a clean
Archimedean curve.
"""

import math

from engine.determinism import SeededRandom
from engine.models import ColorScheme, GradientDef, PatternConfig, PatternElement
from engine.pathdata import polyline
from patterns.canvas import circle_points, draw, polar

PATTERN_ID = "pattern.dotted_spiral"
PATTERN_NAME = "Dotted Spiral"
SUPPORTS_GRADIENT = False

SPIRAL_RADIUS = 260
DOT_SEGMENTS = 16

PARAMS: dict = {
    "spirals": {
        "type": "int",
        "min": 4,
        "max": 12,
        "label": "Spirals",
        "description": "Number of dotted arms",
    },
    "density": {
        "type": "int",
        "min": 60,
        "max": 120,
        "label": "Density",
        "description": "Dots per arm",
    },
    "dot_size": {
        "type": "float",
        "min": 1.5,
        "max": 5.0,
        "label": "Dot Size",
        "description": "Dot radius",
    },
    "turns": {
        "type": "float",
        "min": 4.0,
        "max": 8.0,
        "label": "Turns",
        "description": "Half-turns at the rim; drawn again for every dot",
    },
}


def generate(
    rng: SeededRandom, scheme: ColorScheme, config: PatternConfig
) -> tuple[list[PatternElement], list[GradientDef]]:
    spirals = draw(rng, PARAMS["spirals"])
    density = draw(rng, PARAMS["density"])
    dot_size = draw(rng, PARAMS["dot_size"])

    elements = []
    for s in range(spirals):
        start_angle = (s / spirals) * math.pi * 2

        for i in range(density):
            t = i / density
            radius = t * SPIRAL_RADIUS
            rotation = t * draw(rng, PARAMS["turns"]) * math.pi
            x, y = polar(radius, start_angle + rotation)

            dot = circle_points(x, y, dot_size, DOT_SEGMENTS)
            elements.append(
                PatternElement(
                    path_data=polyline(dot, config.simplify_paths),
                    stroke="none",
                    stroke_width=0,
                    fill=scheme.accent_color,
                    opacity=0.6,
                )
            )

    return elements, []
