"""Flower Mandala — quadratic petals from the centre, layered outward."""

import math

from engine.determinism import SeededRandom
from engine.models import ColorScheme, GradientDef, PatternConfig, PatternElement
from engine.pathdata import PathBuilder
from patterns.canvas import CENTER_X, CENTER_Y, MAX_RADIUS, draw, polar

PATTERN_ID = "pattern.flower_mandala"
PATTERN_NAME = "Flower Mandala"
SUPPORTS_GRADIENT = False

# Petal end points sit at this fraction of the layer radius
PETAL_BASE = 0.6

PARAMS: dict = {
    "petals": {
        "type": "int",
        "min": 6,
        "max": 24,
        "label": "Petals",
        "description": "Petals per layer",
    },
    "layers": {
        "type": "int",
        "min": 20,
        "max": 60,
        "label": "Layers",
        "description": "Petal layers",
    },
    "line_thickness": {
        "type": "float",
        "min": 0.5,
        "max": 3.0,
        "label": "Line Thickness",
        "description": "Petal stroke width",
    },
}


def generate(
    rng: SeededRandom, scheme: ColorScheme, config: PatternConfig
) -> tuple[list[PatternElement], list[GradientDef]]:
    petals = draw(rng, PARAMS["petals"])
    layers = draw(rng, PARAMS["layers"])
    line_thickness = draw(rng, PARAMS["line_thickness"])

    elements = []
    for layer in range(layers):
        radius = ((layer + 1) / layers) * MAX_RADIUS

        for p in range(petals):
            angle = (p / petals) * math.pi * 2
            next_angle = ((p + 1) / petals) * math.pi * 2
            mid_angle = (angle + next_angle) / 2

            tip_x, tip_y = polar(radius, mid_angle)
            end_x = CENTER_X + math.cos(next_angle) * radius * PETAL_BASE
            end_y = CENTER_Y + math.sin(next_angle) * radius * PETAL_BASE

            path = (
                PathBuilder(config.simplify_paths)
                .move(CENTER_X, CENTER_Y)
                .quad(tip_x, tip_y, end_x, end_y)
                .build()
            )
            elements.append(
                PatternElement(
                    path_data=path,
                    stroke=scheme.accent_color,
                    stroke_width=line_thickness,
                    fill="none",
                    opacity=0.5,
                )
            )

    return elements, []
