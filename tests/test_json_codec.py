"""
Tests for NaN-tolerant point JSON.
"""

import json
import math

import pytest
import numpy as np
from gisdeform.io import normalize_nan, nice_float, loads_points, dumps_points, load_points, save_points


def test_normalize_bare_nan():
    """Test quoting of bare NaN tokens."""
    text = '{"target_points": [[NaN, NaN, NaN], [1.0, 2.0, "NaN"]]}'

    normalized = normalize_nan(text)

    assert normalized == '{"target_points": [["NaN", "NaN", "NaN"], [1.0, 2.0, "NaN"]]}'
    json.loads(normalized)


@pytest.mark.parametrize('value,expected', [(1, 1.0), (2.5, 2.5), (-3, -3.0)])
def test_nice_float_numbers(value, expected):
    """Test number conversion."""
    assert nice_float(value) == expected


def test_nice_float_nan_string():
    """Test NaN string conversion."""
    assert math.isnan(nice_float('NaN'))


@pytest.mark.parametrize('value', ['nan', 'abc', None, True, [1.0]])
def test_nice_float_rejects(value):
    """Test rejected JSON values."""
    with pytest.raises(ValueError):
        nice_float(value)


def test_loads_reference_response():
    """Test parsing a reference response."""
    text = '{"target_points": [[1, 2, 3], [NaN, NaN, NaN]]}'

    points = loads_points(text, key='target_points')

    assert points.shape == (2, 3)
    assert points[0].tolist() == [1.0, 2.0, 3.0]
    assert np.isnan(points[1]).all()


def test_loads_requires_key_for_objects():
    """Test JSON objects without a key."""
    with pytest.raises(ValueError):
        loads_points('{"a": []}')


def test_dumps_is_strict_json():
    """Test strict JSON output."""
    text = dumps_points(np.array([[1.0, 2.0, 3.0], [np.nan, np.nan, np.nan]]), key='target_points')

    data = json.loads(text, parse_constant=lambda c: pytest.fail(f"non-standard constant {c}"))
    assert data == {'target_points': [[1.0, 2.0, 3.0], ['NaN', 'NaN', 'NaN']]}
    assert np.array_equal(loads_points(text, key='target_points'), [[1.0, 2.0, 3.0], [np.nan] * 3], equal_nan=True)


def test_point_files(tmp_path):
    """Test point file save and load."""
    points = np.array([[0.1, 0.2, 0.3], [np.nan, np.nan, np.nan], [1e-17, 5.0, -2.0]])

    save_points(str(tmp_path / 'out.json'), points)
    save_points(str(tmp_path / 'out.txt'), points)

    from_json = load_points(str(tmp_path / 'out.json'), key='target_points')
    from_text = load_points(str(tmp_path / 'out.txt'))

    assert np.array_equal(from_json, points, equal_nan=True)
    assert np.array_equal(from_text, points, equal_nan=True)


def test_load_points_wrong_columns(tmp_path):
    """Test point files with wrong column count."""
    path = tmp_path / 'points.txt'
    path.write_text("1 2\n3 4\n")

    with pytest.raises(ValueError):
        load_points(str(path))


if __name__ == '__main__':
    pytest.main([__file__])
