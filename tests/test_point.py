"""
Tests for the fixed-dimension point type.
"""

import math

import pytest
import numpy as np
from gisdeform.geometry import Point3dd, Point3df, Point3di


def test_scale_chains_in_place():
    """Test in-place scaling."""
    p = Point3dd([1.0, 2.0, 4.0])
    result = p.scale(0.5).scale(2.0).scale(0.25)

    assert result is p
    assert p.to_list() == [0.25, 0.5, 1.0]


def test_accumulate():
    """Test point accumulation."""
    p = Point3dd([1.0, 2.0, 3.0])
    p += Point3dd([0.5, -2.0, 1.0])

    assert p.to_list() == [1.5, 0.0, 4.0]
    assert (Point3dd([1, 1, 1]) + Point3dd([1, 2, 3])).to_list() == [2.0, 3.0, 4.0]


def test_indexed_access():
    """Test component access."""
    p = Point3dd([7.0, 8.0, 9.0])

    assert p[0] == 7.0
    assert p[2] == 9.0
    assert len(p) == 3
    assert list(p) == [7.0, 8.0, 9.0]


def test_is_nan_checks_every_component():
    """Test NaN detection."""
    assert not Point3dd([0.0, 1.0, 2.0]).is_nan()
    assert Point3dd([0.0, math.nan, 2.0]).is_nan()
    assert Point3dd([0.0, 1.0, math.nan]).is_nan()
    assert Point3dd.nan().is_nan()
    assert not Point3di([1, 2, 3]).is_nan()


def test_value_semantics():
    """Test that points do not share storage."""
    source = np.array([1.0, 2.0, 3.0])
    p = Point3dd(source)
    source[0] = 100.0
    q = p.copy()
    q.scale(2.0)

    assert p.to_list() == [1.0, 2.0, 3.0]
    assert q.to_list() == [2.0, 4.0, 6.0]


def test_wrong_dimension_rejected():
    """Test wrong component count."""
    with pytest.raises(ValueError):
        Point3dd([1.0, 2.0])
    with pytest.raises(ValueError):
        Point3dd([1.0, 2.0, 3.0, 4.0])


def test_float32_widening_is_exact():
    """Test float32 to float64 conversion."""
    stored = Point3df([0.1, 0.2, 0.3])
    widened = Point3dd(stored)

    assert widened[0] == float(np.float32(0.1))
    assert widened[0] != 0.1


def test_floor_to_cell_index():
    """Test floor to cell index."""
    cell = Point3dd([1.7, 0.0, -0.5]).floor()

    assert isinstance(cell, Point3di)
    assert cell.to_list() == [1, 0, -1]


if __name__ == '__main__':
    pytest.main([__file__])
