"""Polygon Mandala — nested regular polygons, each rotated a step further."""

from engine.determinism import SeededRandom
from engine.models import ColorScheme, GradientDef, PatternConfig, PatternElement
from engine.pathdata import polyline
from patterns.canvas import CENTER_X, CENTER_Y, MAX_RADIUS, circle_points, draw

PATTERN_ID = "pattern.polygon_mandala"
PATTERN_NAME = "Polygon Mandala"
SUPPORTS_GRADIENT = False

PARAMS: dict = {
    "sides": {
        "type": "int",
        "min": 5,
        "max": 16,
        "label": "Sides",
        "description": "Polygon side count",
    },
    "layers": {
        "type": "int",
        "min": 40,
        "max": 100,
        "label": "Layers",
        "description": "Nested polygons",
    },
    "rotation": {
        "type": "float",
        "min": 0.02,
        "max": 0.12,
        "label": "Rotation",
        "unit": "rad",
        "description": "Extra twist per layer",
    },
    "line_thickness": {
        "type": "float",
        "min": 0.4,
        "max": 3.0,
        "label": "Line Thickness",
        "description": "Polygon stroke width",
    },
}


def generate(
    rng: SeededRandom, scheme: ColorScheme, config: PatternConfig
) -> tuple[list[PatternElement], list[GradientDef]]:
    sides = draw(rng, PARAMS["sides"])
    layers = draw(rng, PARAMS["layers"])
    rotation = draw(rng, PARAMS["rotation"])
    line_thickness = draw(rng, PARAMS["line_thickness"])

    elements = []
    for i in range(layers):
        radius = (i / layers) * MAX_RADIUS
        points = circle_points(CENTER_X, CENTER_Y, radius, sides, i * rotation)
        elements.append(
            PatternElement(
                path_data=polyline(points, config.simplify_paths),
                stroke=scheme.accent_color,
                stroke_width=line_thickness,
                fill="none",
                opacity=0.8,
            )
        )

    return elements, []
