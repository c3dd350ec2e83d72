"""Warped Grid — a full-label grid bent by a radial sine field."""

import math

from engine.determinism import SeededRandom
from engine.models import ColorScheme, GradientDef, PatternConfig, PatternElement
from engine.pathdata import polyline
from patterns.canvas import CENTER_X, CENTER_Y, LABEL_HEIGHT, LABEL_WIDTH, draw

PATTERN_ID = "pattern.warped_grid"
PATTERN_NAME = "Warped Grid"
SUPPORTS_GRADIENT = False

HORIZONTAL_STEPS = 100
VERTICAL_STEPS = 60
WARP_FREQUENCY = 0.03

PARAMS: dict = {
    "grid_size": {
        "type": "int",
        "min": 12,
        "max": 24,
        "label": "Grid Size",
        "description": "Horizontal line count; vertical lines are doubled",
    },
    "warp_intensity": {
        "type": "float",
        "min": 30.0,
        "max": 80.0,
        "label": "Warp Intensity",
        "description": "Peak displacement of the sine field",
    },
    "line_thickness": {
        "type": "float",
        "min": 0.4,
        "max": 2.5,
        "label": "Line Thickness",
        "description": "Grid stroke width",
    },
}


def _warp(x: float, y: float, intensity: float) -> tuple[float, float]:
    """Return (warp, angle) for a point relative to the label centre."""
    dx = x - CENTER_X
    dy = y - CENTER_Y
    distance = math.sqrt(dx * dx + dy * dy)
    return math.sin(distance * WARP_FREQUENCY) * intensity, math.atan2(dy, dx)


def generate(
    rng: SeededRandom, scheme: ColorScheme, config: PatternConfig
) -> tuple[list[PatternElement], list[GradientDef]]:
    grid_size = draw(rng, PARAMS["grid_size"])
    warp_intensity = draw(rng, PARAMS["warp_intensity"])
    line_thickness = draw(rng, PARAMS["line_thickness"])

    def grid_line(points):
        return PatternElement(
            path_data=polyline(points, config.simplify_paths),
            stroke=scheme.accent_color,
            stroke_width=line_thickness,
            fill="none",
            opacity=0.8,
        )

    elements = []
    for i in range(grid_size + 1):
        base_y = (i / grid_size) * LABEL_HEIGHT
        points = []
        for j in range(HORIZONTAL_STEPS + 1):
            x = (j / HORIZONTAL_STEPS) * LABEL_WIDTH
            warp, angle = _warp(x, base_y, warp_intensity)
            points.append((x, base_y + math.sin(angle) * warp))
        elements.append(grid_line(points))

    columns = grid_size * 2
    for i in range(columns + 1):
        base_x = (i / columns) * LABEL_WIDTH
        points = []
        for j in range(VERTICAL_STEPS + 1):
            y = (j / VERTICAL_STEPS) * LABEL_HEIGHT
            warp, angle = _warp(base_x, y, warp_intensity)
            points.append((base_x + math.cos(angle) * warp, y))
        elements.append(grid_line(points))

    return elements, []
