"""Complexity capper — systematic decimation of oversized element lists.

Even-coverage sampling, not random: keeps elements[floor(i * n / cap)] for
i in range(cap). Never touches the PRNG.
"""

from typing import Sequence, TypeVar

import numpy as np

T = TypeVar("T")


def decimation_indices(length: int, max_elements: int) -> np.ndarray:
    """Indices kept when capping a list of `length` down to `max_elements`."""
    if max_elements <= 0:
        return np.zeros(0, dtype=np.int64)
    if length <= max_elements:
        return np.arange(length, dtype=np.int64)
    step = length / max_elements
    # float64 products match scalar i * step exactly
    return np.floor(np.arange(max_elements, dtype=np.float64) * step).astype(np.int64)


def cap_elements(elements: Sequence[T], max_elements: int) -> list[T]:
    """Return at most max_elements items, evenly spread over the input."""
    if max_elements <= 0:
        return []
    if len(elements) <= max_elements:
        return list(elements)
    indices = decimation_indices(len(elements), max_elements)
    return [elements[i] for i in indices.tolist()]
