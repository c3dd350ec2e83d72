"""Seeded determinism for pattern reproducibility.

The identity hash and the LCG below are the only entropy in the generator.
Both are pinned by oracle tests; any change here re-maps every tape.
"""

UNKNOWN_YEAR = "unknown"
KEY_DELIMITER = "::"

# LCG constants; seed stays below LCG_MODULUS after the first draw
LCG_MULTIPLIER = 9301
LCG_INCREMENT = 49297
LCG_MODULUS = 233280

_INT32_MASK = 0xFFFFFFFF
_INT32_SIGN = 0x80000000


def _to_int32(value: int) -> int:
    """Wrap an arbitrary int into signed 32-bit range."""
    value &= _INT32_MASK
    return value - 0x100000000 if value & _INT32_SIGN else value


def _utf16_units(text: str):
    """Yield UTF-16 code units, splitting astral characters into surrogates."""
    data = text.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(data), 2):
        yield data[i] | (data[i + 1] << 8)


def identity_key(creator_name: str, item_title: str, year: str | None = None) -> str:
    """Join the identity fields into the string that gets hashed."""
    return KEY_DELIMITER.join([creator_name, item_title, year or UNKNOWN_YEAR])


def hash_string(text: str) -> int:
    """32-bit rolling polynomial hash (h * 31 + c), returned as abs(h)."""
    h = 0
    for code in _utf16_units(text):
        h = _to_int32((h << 5) - h + code)
    return abs(h)


def derive_seed(creator_name: str, item_title: str, year: str | None = None) -> int:
    """Derive a deterministic seed from an identity. Same inputs = same output, always."""
    return hash_string(identity_key(creator_name, item_title, year))


class SeededRandom:
    """Linear-congruential stream. Output depends only on seed and call order."""

    def __init__(self, seed: int):
        self.seed = int(seed)

    def next(self) -> float:
        self.seed = (self.seed * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self.seed / LCG_MODULUS

    def range(self, lo: float, hi: float) -> float:
        return lo + self.next() * (hi - lo)

    def choice(self, items):
        return items[int(self.next() * len(items))]


def make_rng(seed: int) -> SeededRandom:
    """Create a seeded RNG from a derived seed."""
    return SeededRandom(seed)
