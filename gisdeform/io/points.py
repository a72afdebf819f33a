"""
Point list files.

``.json`` files hold a list of ``[x, y, z]`` or an object with the list under
a key; any other suffix is read as whitespace separated text, one point per
row.
"""

import numpy as np
from pathlib import Path
from typing import Optional

from gisdeform.io.json_codec import dumps_points, loads_points


def load_points(path: str, key: Optional[str] = 'source_points') -> np.ndarray:
    """
    Load points in mm.

    Args:
        path: ``.json`` or text file
        key: Member to read when a JSON file holds an object

    Returns:
        (N, 3) float64 array
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    if path.suffix.lower() == '.json':
        return loads_points(path.read_text(encoding='utf-8'), key=key)

    points = np.loadtxt(path, dtype=np.float64, ndmin=2)
    if points.size and points.shape[1] != 3:
        raise ValueError(f"Expected 3 columns in {path}, got {points.shape[1]}")
    return points.reshape(-1, 3)


def save_points(path: str, points: np.ndarray, key: Optional[str] = 'target_points') -> None:
    """Save points as ``.json`` (NaN written as ``"NaN"``) or as text."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if path.suffix.lower() == '.json':
        path.write_text(dumps_points(points, key=key), encoding='utf-8')
    else:
        np.savetxt(path, np.asarray(points, dtype=np.float64).reshape(-1, 3), fmt='%.17g')
