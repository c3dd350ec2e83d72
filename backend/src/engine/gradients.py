"""Linear gradient builder for algorithms that opt into gradient paint."""

import math

from engine.determinism import SeededRandom
from engine.models import GradientDef, GradientStop
from engine.pathdata import format_number

# End-stop opacity range ("darken" factor)
DARKEN_MIN = 0.3
DARKEN_MAX = 0.7


def _percent(value: float) -> str:
    return f"{format_number(value)}%"


def create_gradient(
    gradient_id: str, color: str, rng: SeededRandom
) -> tuple[GradientDef, str]:
    """Build a randomly angled two-stop gradient.

    Draws exactly two values from rng: the angle, then the end-stop opacity.
    Returns (gradient, "url(#id)").
    """
    angle = rng.range(0, 360)
    x1 = math.cos((angle * math.pi) / 180) * 50 + 50
    y1 = math.sin((angle * math.pi) / 180) * 50 + 50
    x2 = math.cos(((angle + 180) * math.pi) / 180) * 50 + 50
    y2 = math.sin(((angle + 180) * math.pi) / 180) * 50 + 50

    darken = rng.range(DARKEN_MIN, DARKEN_MAX)

    gradient = GradientDef(
        id=gradient_id,
        x1=_percent(x1),
        y1=_percent(y1),
        x2=_percent(x2),
        y2=_percent(y2),
        stops=(
            GradientStop(offset="0%", color=color, opacity=1),
            GradientStop(offset="100%", color=color, opacity=darken),
        ),
    )
    return gradient, gradient.url
