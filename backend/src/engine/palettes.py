"""Color schemes for tape labels.

Selection is seed % len(COLOR_SCHEMES) and never draws from the PRNG, so
appending a scheme does not shift any algorithm's random sequence. It does
change which scheme existing identities get once the count changes.
"""

from engine.models import ColorScheme

# Monochrome grayish white on black
COLOR_SCHEMES: tuple[ColorScheme, ...] = (
    ColorScheme(
        name="gray-white",
        background_color="#000000",
        accent_color="#d4d4d8",
        base_opacity=0.8,
    ),
)


def palette_count() -> int:
    return len(COLOR_SCHEMES)


def palette_index(seed: int) -> int:
    return seed % len(COLOR_SCHEMES)


def select_scheme(seed: int) -> ColorScheme:
    """Pick the color scheme for a seed."""
    return COLOR_SCHEMES[palette_index(seed)]
