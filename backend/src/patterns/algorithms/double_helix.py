"""Double Helix — paired spiral arms with a wobbling radius."""

import math

from engine.determinism import SeededRandom
from engine.models import ColorScheme, GradientDef, PatternConfig, PatternElement
from engine.pathdata import polyline
from patterns.algorithms.twisted_spiral import spiral_arm
from patterns.canvas import draw

PATTERN_ID = "pattern.double_helix"
PATTERN_NAME = "Double Helix"
SUPPORTS_GRADIENT = False

WOBBLE = 20

PARAMS: dict = {
    "arm_pairs": {
        "type": "int",
        "min": 2,
        "max": 6,
        "label": "Arm Pairs",
        "description": "Arms are drawn in pairs, so the count is always even",
    },
    "rotations": {
        "type": "float",
        "min": 6.0,
        "max": 15.0,
        "label": "Rotations",
        "description": "Full turns each arm makes",
    },
    "line_thickness": {
        "type": "float",
        "min": 1.5,
        "max": 5.0,
        "label": "Line Thickness",
        "description": "Arm stroke width",
    },
}


def _wobble(t: float) -> float:
    return math.sin(t * math.pi * 4) * WOBBLE


def generate(
    rng: SeededRandom, scheme: ColorScheme, config: PatternConfig
) -> tuple[list[PatternElement], list[GradientDef]]:
    arms = draw(rng, PARAMS["arm_pairs"]) * 2
    rotations = draw(rng, PARAMS["rotations"])
    line_thickness = draw(rng, PARAMS["line_thickness"])

    elements = []
    for arm in range(arms):
        start_angle = (arm / arms) * math.pi * 2
        points = spiral_arm(start_angle, rotations, wobble=_wobble)
        elements.append(
            PatternElement(
                path_data=polyline(points, config.simplify_paths),
                stroke=scheme.accent_color,
                stroke_width=line_thickness,
                fill="none",
                opacity=0.7,
            )
        )

    return elements, []
