"""Path-data string building.

Path strings are compared byte-for-byte by the determinism tests and by
downstream caches, so number formatting is fixed here rather than left to
str(float):

- full precision: shortest round-trip digits, integral values without a
  fraction, exponent form only below 1e-6 or from 1e21 up (e.g. ``1e-7``);
- simplified: one decimal, ties rounded away from zero on the exact binary
  value (0.25 -> "0.3", -0.25 -> "-0.3").
"""

from decimal import ROUND_HALF_UP, Decimal

_TENTH = Decimal("0.1")


def format_number(value: float) -> str:
    """Shortest round-trip text for a coordinate."""
    if value == 0:
        return "0"
    text = repr(float(value))
    if "e" not in text and "inf" not in text and "nan" not in text:
        return text[:-2] if text.endswith(".0") else text
    return _format_exponent_form(value)


def _format_exponent_form(value: float) -> str:
    sign, digits, exponent = Decimal(repr(float(value))).as_tuple()
    digits_text = "".join(str(d) for d in digits).rstrip("0") or "0"
    k = len(digits_text)
    n = exponent + len(digits)
    prefix = "-" if sign else ""
    if k <= n <= 21:
        return prefix + digits_text + "0" * (n - k)
    if 0 < n <= 21:
        return prefix + digits_text[:n] + "." + digits_text[n:]
    if -6 < n <= 0:
        return prefix + "0." + "0" * (-n) + digits_text
    e = n - 1
    mantissa = digits_text[0] + ("." + digits_text[1:] if k > 1 else "")
    return f"{prefix}{mantissa}e{'+' if e > 0 else '-'}{abs(e)}"


def format_fixed(value: float) -> str:
    """One-decimal text, half away from zero on the exact binary value."""
    if value == 0:
        return "0.0"
    return str(Decimal(float(value)).quantize(_TENTH, rounding=ROUND_HALF_UP))


class PathBuilder:
    """Accumulates move/line/quadratic commands into a path-data string."""

    def __init__(self, simplify: bool = True):
        self._fmt = format_fixed if simplify else format_number
        self._parts: list[str] = []

    def _pt(self, x: float, y: float) -> str:
        return f"{self._fmt(x)} {self._fmt(y)}"

    def move(self, x: float, y: float) -> "PathBuilder":
        self._parts.append(f"M {self._pt(x, y)}")
        return self

    def line(self, x: float, y: float) -> "PathBuilder":
        self._parts.append(f"L {self._pt(x, y)}")
        return self

    def quad(self, cx: float, cy: float, x: float, y: float) -> "PathBuilder":
        self._parts.append(f"Q {self._pt(cx, cy)} {self._pt(x, y)}")
        return self

    def close(self) -> "PathBuilder":
        self._parts.append("Z")
        return self

    def build(self) -> str:
        return " ".join(self._parts)


def polyline(points, simplify: bool = True, closed: bool = False) -> str:
    """M to the first point, L through the rest, optional Z."""
    builder = PathBuilder(simplify)
    for i, (x, y) in enumerate(points):
        if i == 0:
            builder.move(x, y)
        else:
            builder.line(x, y)
    if closed:
        builder.close()
    return builder.build()
