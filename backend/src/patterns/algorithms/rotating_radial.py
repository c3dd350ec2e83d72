"""Rotating Radial — every other sector filled, each band twisted further."""

import math

from engine.determinism import SeededRandom
from engine.models import ColorScheme, GradientDef, PatternConfig, PatternElement
from engine.pathdata import polyline
from patterns.canvas import MAX_RADIUS, draw, polar

PATTERN_ID = "pattern.rotating_radial"
PATTERN_NAME = "Rotating Radial"
SUPPORTS_GRADIENT = False

PARAMS: dict = {
    "segments": {
        "type": "int",
        "min": 12,
        "max": 48,
        "label": "Segments",
        "description": "Angular divisions per band; odd ones are drawn",
    },
    "layers": {
        "type": "int",
        "min": 30,
        "max": 80,
        "label": "Layers",
        "description": "Concentric bands",
    },
    "rotation": {
        "type": "float",
        "min": 0.03,
        "max": 0.12,
        "label": "Rotation",
        "unit": "rad",
        "description": "Extra twist per band",
    },
    "line_thickness": {
        "type": "float",
        "min": 0.3,
        "max": 1.5,
        "label": "Line Thickness",
        "description": "Sector outline stroke width",
    },
}


def generate(
    rng: SeededRandom, scheme: ColorScheme, config: PatternConfig
) -> tuple[list[PatternElement], list[GradientDef]]:
    accent = scheme.accent_color
    segments = draw(rng, PARAMS["segments"])
    layers = draw(rng, PARAMS["layers"])
    rotation = draw(rng, PARAMS["rotation"])
    line_thickness = draw(rng, PARAMS["line_thickness"])

    elements = []
    for i in range(layers):
        radius_inner = (i / layers) * MAX_RADIUS
        radius_outer = ((i + 1) / layers) * MAX_RADIUS
        twist = i * rotation

        for seg in range(1, segments, 2):
            angle1 = (seg / segments) * math.pi * 2 + twist
            angle2 = ((seg + 1) / segments) * math.pi * 2 + twist
            corners = [
                polar(radius_inner, angle1),
                polar(radius_inner, angle2),
                polar(radius_outer, angle2),
                polar(radius_outer, angle1),
            ]
            elements.append(
                PatternElement(
                    path_data=polyline(corners, config.simplify_paths, closed=True),
                    stroke=accent,
                    stroke_width=line_thickness,
                    fill=accent,
                    opacity=0.6,
                )
            )

    return elements, []
