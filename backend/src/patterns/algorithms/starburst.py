"""Starburst — straight rays from the centre with per-ray opacity."""

import math

from engine.determinism import SeededRandom
from engine.models import ColorScheme, GradientDef, PatternConfig, PatternElement
from engine.pathdata import polyline
from patterns.canvas import CENTER_X, CENTER_Y, MAX_RADIUS, draw, polar

PATTERN_ID = "pattern.starburst"
PATTERN_NAME = "Starburst"
SUPPORTS_GRADIENT = False

PARAMS: dict = {
    "rays": {
        "type": "int",
        "min": 24,
        "max": 96,
        "label": "Rays",
        "description": "Number of rays",
    },
    "line_thickness": {
        "type": "float",
        "min": 0.5,
        "max": 4.0,
        "label": "Line Thickness",
        "description": "Ray stroke width",
    },
    "ray_opacity": {
        "type": "float",
        "min": 0.4,
        "max": 0.9,
        "label": "Ray Opacity",
        "description": "Drawn once per ray, after its geometry",
    },
}


def generate(
    rng: SeededRandom, scheme: ColorScheme, config: PatternConfig
) -> tuple[list[PatternElement], list[GradientDef]]:
    rays = draw(rng, PARAMS["rays"])
    line_thickness = draw(rng, PARAMS["line_thickness"])

    elements = []
    for i in range(rays):
        angle = (i / rays) * math.pi * 2
        tip = polar(MAX_RADIUS, angle)
        elements.append(
            PatternElement(
                path_data=polyline([(CENTER_X, CENTER_Y), tip], config.simplify_paths),
                stroke=scheme.accent_color,
                stroke_width=line_thickness,
                fill="none",
                opacity=draw(rng, PARAMS["ray_opacity"]),
            )
        )

    return elements, []
