"""
JSON encoding of point lists with NaN support.

Bare ``NaN`` is not valid JSON. Reference services emit it anyway for points
outside a field, so incoming text has bare tokens quoted and the string
``"NaN"`` is accepted wherever a number is expected. Outgoing NaN values are
written as the string ``"NaN"``.
"""

import json
import math
import re
import numpy as np
from typing import Any, Optional

_BARE_NAN = re.compile(r'(?<!")\bNaN\b(?!")')


def normalize_nan(text: str) -> str:
    """Quote bare ``NaN`` tokens so the text is strict JSON."""
    return _BARE_NAN.sub('"NaN"', text)


def nice_float(value: Any) -> float:
    """
    Convert a decoded JSON value to float.

    Raises:
        ValueError: If ``value`` is neither a number nor the string ``"NaN"``
    """
    if isinstance(value, bool):
        raise ValueError(f"expected a float or the string \"NaN\", got {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    if value == 'NaN':
        return math.nan
    raise ValueError(f"expected a float or the string \"NaN\", got {value!r}")


def decode_points(obj: Any) -> np.ndarray:
    """Convert a decoded list of 3-element lists to an (N, 3) float64 array."""
    rows = []
    for row in obj:
        values = [nice_float(v) for v in row]
        if len(values) != 3:
            raise ValueError(f"expected 3 coordinates per point, got {len(values)}")
        rows.append(values)
    return np.array(rows, dtype=np.float64).reshape(-1, 3)


def loads_points(text: str, key: Optional[str] = None) -> np.ndarray:
    """
    Parse a JSON point list.

    Args:
        text: JSON text, either a list of points or an object holding one
        key: Object member holding the points (required if the top level
            is an object)

    Returns:
        (N, 3) float64 array
    """
    obj = json.loads(normalize_nan(text))
    if isinstance(obj, dict):
        if key is None:
            raise ValueError(f"JSON object given without a key; members: {sorted(obj)}")
        obj = obj[key]
    return decode_points(obj)


def encode_points(points: np.ndarray) -> list:
    """(N, 3) array to nested lists with NaN written as ``"NaN"``."""
    points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    return [['NaN' if math.isnan(v) else v for v in row] for row in points.tolist()]


def dumps_points(points: np.ndarray, key: Optional[str] = None, **kwargs) -> str:
    """
    Serialize points to strict JSON.

    Args:
        points: (N, 3) array
        key: Wrap the list in an object under this member
        **kwargs: Passed to ``json.dumps``
    """
    obj = encode_points(points)
    if key is not None:
        obj = {key: obj}
    return json.dumps(obj, allow_nan=False, **kwargs)
