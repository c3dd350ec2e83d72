"""Tunnel — nested rectangles shrinking toward the centre."""

from engine.determinism import SeededRandom
from engine.models import ColorScheme, GradientDef, PatternConfig, PatternElement
from engine.pathdata import polyline
from patterns.canvas import CENTER_X, CENTER_Y, draw

PATTERN_ID = "pattern.tunnel"
PATTERN_NAME = "Tunnel"
SUPPORTS_GRADIENT = False

TUNNEL_WIDTH = 250
TUNNEL_HEIGHT = 180

PARAMS: dict = {
    "layers": {
        "type": "int",
        "min": 40,
        "max": 80,
        "label": "Layers",
        "description": "Nested rectangles",
    },
    "line_thickness": {
        "type": "float",
        "min": 0.4,
        "max": 2.0,
        "label": "Line Thickness",
        "description": "Rectangle stroke width",
    },
    "filled": {
        "type": "float",
        "min": 0.0,
        "max": 1.0,
        "label": "Filled",
        "description": "Even layers are filled when > 0.5",
    },
}


def generate(
    rng: SeededRandom, scheme: ColorScheme, config: PatternConfig
) -> tuple[list[PatternElement], list[GradientDef]]:
    accent = scheme.accent_color
    layers = draw(rng, PARAMS["layers"])
    line_thickness = draw(rng, PARAMS["line_thickness"])
    filled = draw(rng, PARAMS["filled"]) > 0.5

    elements = []
    # Largest first; outlines get more opaque as they recede
    for i in range(layers, 0, -1):
        scale = i / layers
        width = TUNNEL_WIDTH * scale
        height = TUNNEL_HEIGHT * scale
        x = CENTER_X - width / 2
        y = CENTER_Y - height / 2
        rect = polyline(
            [(x, y), (x + width, y), (x + width, y + height), (x, y + height)],
            config.simplify_paths,
            closed=True,
        )

        if filled and i % 2 == 0:
            elements.append(
                PatternElement(
                    path_data=rect,
                    stroke="none",
                    stroke_width=0,
                    fill=accent,
                    opacity=0.5,
                )
            )

        elements.append(
            PatternElement(
                path_data=rect,
                stroke=accent,
                stroke_width=line_thickness,
                fill="none",
                opacity=0.7 + (1 - scale) * 0.3,
            )
        )

    return elements, []
