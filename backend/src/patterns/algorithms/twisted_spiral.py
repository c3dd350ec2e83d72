"""Twisted Spiral — Archimedean arms winding out from the centre."""

import math

from engine.determinism import SeededRandom
from engine.models import ColorScheme, GradientDef, PatternConfig, PatternElement
from engine.pathdata import polyline
from patterns.canvas import CENTER_X, CENTER_Y, base_opacity, draw, gradient_paint, polar

PATTERN_ID = "pattern.twisted_spiral"
PATTERN_NAME = "Twisted Spiral"
SUPPORTS_GRADIENT = True

ARM_RADIUS = 260
ARM_STEPS = 100

PARAMS: dict = {
    "arms": {
        "type": "int",
        "min": 3,
        "max": 12,
        "label": "Arms",
        "description": "Number of spiral arms",
    },
    "rotations": {
        "type": "float",
        "min": 4.0,
        "max": 12.0,
        "label": "Rotations",
        "description": "Full turns each arm makes",
    },
    "line_thickness": {
        "type": "float",
        "min": 1.0,
        "max": 5.0,
        "label": "Line Thickness",
        "description": "Arm stroke width",
    },
}


def spiral_arm(start_angle: float, rotations: float, wobble=None):
    """Points of one arm from the centre out to ARM_RADIUS."""
    points = [(CENTER_X, CENTER_Y)]
    for i in range(1, ARM_STEPS + 1):
        t = i / ARM_STEPS
        radius = t * ARM_RADIUS
        if wobble is not None:
            radius = radius + wobble(t)
        angle = start_angle + t * rotations * math.pi * 2
        points.append(polar(radius, angle))
    return points


def generate(
    rng: SeededRandom, scheme: ColorScheme, config: PatternConfig
) -> tuple[list[PatternElement], list[GradientDef]]:
    opacity = base_opacity(scheme)
    stroke_paint, gradients = gradient_paint(rng, scheme, config, "twisted-grad")

    arms = draw(rng, PARAMS["arms"])
    rotations = draw(rng, PARAMS["rotations"])
    line_thickness = draw(rng, PARAMS["line_thickness"])

    elements = []
    for arm in range(arms):
        start_angle = (arm / arms) * math.pi * 2
        elements.append(
            PatternElement(
                path_data=polyline(
                    spiral_arm(start_angle, rotations), config.simplify_paths
                ),
                stroke=stroke_paint,
                stroke_width=line_thickness,
                fill="none",
                opacity=0.7 * opacity,
            )
        )

    return elements, gradients
