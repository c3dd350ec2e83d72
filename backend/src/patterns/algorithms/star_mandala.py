"""Star Mandala — stacked star outlines joined into triangles, with fills."""

import math

from engine.determinism import SeededRandom
from engine.models import ColorScheme, GradientDef, PatternConfig, PatternElement
from engine.pathdata import polyline
from patterns.canvas import MAX_RADIUS, draw, polar

PATTERN_ID = "pattern.star_mandala"
PATTERN_NAME = "Star Mandala"
SUPPORTS_GRADIENT = False

INNER_RATIO = 0.6

PARAMS: dict = {
    "points": {
        "type": "int",
        "min": 6,
        "max": 20,
        "label": "Points",
        "description": "Star points per layer",
    },
    "layers": {
        "type": "int",
        "min": 30,
        "max": 70,
        "label": "Layers",
        "description": "Stacked stars",
    },
    "line_thickness": {
        "type": "float",
        "min": 0.4,
        "max": 2.0,
        "label": "Line Thickness",
        "description": "Triangle stroke width",
    },
}


def _star_radius(vertex: int, outer: float) -> float:
    """Even vertices sit on the outer radius, odd ones on the inner."""
    return outer if vertex % 2 == 0 else outer * INNER_RATIO


def generate(
    rng: SeededRandom, scheme: ColorScheme, config: PatternConfig
) -> tuple[list[PatternElement], list[GradientDef]]:
    accent = scheme.accent_color
    points = draw(rng, PARAMS["points"])
    layers = draw(rng, PARAMS["layers"])
    line_thickness = draw(rng, PARAMS["line_thickness"])

    vertices = points * 2
    elements = []
    # Layer 0 has no previous star to connect to
    for layer in range(1, layers):
        radius_outer = ((layer + 1) / layers) * MAX_RADIUS
        radius_prev = (layer / layers) * MAX_RADIUS

        for i in range(vertices):
            angle1 = (i / vertices) * math.pi * 2
            angle2 = ((i + 1) / vertices) * math.pi * 2
            triangle = [
                polar(_star_radius(i, radius_prev), angle1),
                polar(_star_radius(i, radius_outer), angle1),
                polar(_star_radius(i + 1, radius_outer), angle2),
            ]
            filled = i % 2 == 0 and layer % 2 == 0
            elements.append(
                PatternElement(
                    path_data=polyline(triangle, config.simplify_paths, closed=True),
                    stroke=accent,
                    stroke_width=line_thickness,
                    fill=accent if filled else "none",
                    opacity=0.4 if filled else 0.7,
                )
            )

    return elements, []
