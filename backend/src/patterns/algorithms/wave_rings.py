"""Wave Rings — concentric rings with a sinusoidal radius."""

import math

from engine.determinism import SeededRandom
from engine.models import ColorScheme, GradientDef, PatternConfig, PatternElement
from engine.pathdata import polyline
from patterns.canvas import MAX_RADIUS, draw, polar

PATTERN_ID = "pattern.wave_rings"
PATTERN_NAME = "Wave Rings"
SUPPORTS_GRADIENT = False

RING_SEGMENTS = 64

PARAMS: dict = {
    "rings": {
        "type": "int",
        "min": 40,
        "max": 100,
        "label": "Rings",
        "description": "Number of rings",
    },
    "wave_frequency": {
        "type": "float",
        "min": 6.0,
        "max": 18.0,
        "label": "Wave Frequency",
        "description": "Undulations per ring",
    },
    "wave_amplitude": {
        "type": "float",
        "min": 3.0,
        "max": 10.0,
        "label": "Wave Amplitude",
        "description": "Radial swing of each undulation",
    },
    "line_thickness": {
        "type": "float",
        "min": 0.4,
        "max": 2.5,
        "label": "Line Thickness",
        "description": "Ring stroke width",
    },
}


def generate(
    rng: SeededRandom, scheme: ColorScheme, config: PatternConfig
) -> tuple[list[PatternElement], list[GradientDef]]:
    rings = draw(rng, PARAMS["rings"])
    wave_frequency = draw(rng, PARAMS["wave_frequency"])
    wave_amplitude = draw(rng, PARAMS["wave_amplitude"])
    line_thickness = draw(rng, PARAMS["line_thickness"])

    elements = []
    for i in range(rings):
        base_radius = (i / rings) * MAX_RADIUS
        points = []
        for j in range(RING_SEGMENTS + 1):
            angle = (j / RING_SEGMENTS) * math.pi * 2
            wave = (
                math.sin(j / RING_SEGMENTS * wave_frequency * math.pi * 2)
                * wave_amplitude
            )
            points.append(polar(base_radius + wave, angle))

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
