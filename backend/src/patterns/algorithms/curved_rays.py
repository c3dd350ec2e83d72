"""Curved Rays — quadratic rays sweeping out from near the centre."""

import math

from engine.determinism import SeededRandom
from engine.models import ColorScheme, GradientDef, PatternConfig, PatternElement
from engine.pathdata import PathBuilder
from patterns.canvas import draw, polar

PATTERN_ID = "pattern.curved_rays"
PATTERN_NAME = "Curved Rays"
SUPPORTS_GRADIENT = False

START_RADIUS = 10
END_RADIUS = 280

PARAMS: dict = {
    "ray_count": {
        "type": "int",
        "min": 20,
        "max": 60,
        "label": "Rays",
        "description": "Number of rays",
    },
    "curvature": {
        "type": "float",
        "min": 0.5,
        "max": 1.8,
        "label": "Curvature",
        "unit": "rad",
        "description": "Angular lead of the control point",
    },
    "line_thickness": {
        "type": "float",
        "min": 0.8,
        "max": 4.0,
        "label": "Line Thickness",
        "description": "Ray stroke width",
    },
    "control_distance": {
        "type": "float",
        "min": 100.0,
        "max": 180.0,
        "label": "Control Distance",
        "description": "Control point radius; drawn again for every ray",
    },
}


def generate(
    rng: SeededRandom, scheme: ColorScheme, config: PatternConfig
) -> tuple[list[PatternElement], list[GradientDef]]:
    ray_count = draw(rng, PARAMS["ray_count"])
    curvature = draw(rng, PARAMS["curvature"])
    line_thickness = draw(rng, PARAMS["line_thickness"])

    elements = []
    for i in range(ray_count):
        angle = (i / ray_count) * math.pi * 2
        control_distance = draw(rng, PARAMS["control_distance"])

        x1, y1 = polar(START_RADIUS, angle)
        cx, cy = polar(control_distance, angle + curvature)
        x2, y2 = polar(END_RADIUS, angle + curvature * 0.5)

        path = PathBuilder(config.simplify_paths).move(x1, y1).quad(cx, cy, x2, y2)
        elements.append(
            PatternElement(
                path_data=path.build(),
                stroke=scheme.accent_color,
                stroke_width=line_thickness,
                fill="none",
                opacity=0.6,
            )
        )

    return elements, []
