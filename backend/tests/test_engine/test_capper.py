"""Tests for the complexity capper."""

import math

import numpy as np
import pytest

from engine.capper import cap_elements, decimation_indices

pytestmark = pytest.mark.smoke


def test_short_list_unchanged():
    items = list(range(10))
    assert cap_elements(items, 60) == items


def test_exact_length_unchanged():
    items = list(range(60))
    assert cap_elements(items, 60) == items


def test_returns_copy():
    items = [1, 2, 3]
    out = cap_elements(items, 10)
    out.append(4)
    assert items == [1, 2, 3]


@pytest.mark.parametrize("max_elements", [0, -1, -60])
def test_non_positive_cap_is_empty(max_elements):
    assert cap_elements(list(range(100)), max_elements) == []


@pytest.mark.parametrize("length,cap", [(61, 60), (100, 60), (7680, 60), (1000, 7), (3, 2)])
def test_matches_scalar_floor(length, cap):
    items = list(range(length))
    expected = [items[math.floor(i * length / cap)] for i in range(cap)]
    assert cap_elements(items, cap) == expected


def test_first_element_always_kept():
    assert cap_elements(list("abcdefghij"), 3)[0] == "a"


def test_indices_strictly_increasing():
    idx = decimation_indices(7680, 60)
    assert idx.dtype == np.int64
    assert np.all(np.diff(idx) > 0)
    assert idx[-1] < 7680


def test_idempotent():
    once = cap_elements(list(range(5000)), 60)
    assert cap_elements(once, 60) == once


def test_python_ints_returned():
    out = cap_elements(list(range(100)), 10)
    assert all(type(v) is int for v in out)
