"""Physical (mm) <-> grid coordinate conversion."""

import numpy as np
from typing import Sequence

from gisdeform.geometry import Point3dd


def mm_to_grid(p: Point3dd, spacing: Sequence[float]) -> Point3dd:
    """Divide each of the first three components by the axis spacing."""
    return Point3dd([
        p[0] / spacing[0],
        p[1] / spacing[1],
        p[2] / spacing[2],
    ])


def grid_to_mm(p: Point3dd, spacing: Sequence[float]) -> Point3dd:
    return Point3dd([
        p[0] * spacing[0],
        p[1] * spacing[1],
        p[2] * spacing[2],
    ])


def mm_to_grid_many(points: np.ndarray, spacing: Sequence[float]) -> np.ndarray:
    """
    Vectorized ``mm_to_grid``.

    Args:
        points: (N, 3) physical coordinates in mm
        spacing: Axis spacing, only the first three values are used

    Returns:
        (N, 3) float64 grid coordinates
    """
    points = np.asarray(points, dtype=np.float64)
    return points / np.asarray(spacing[:3], dtype=np.float64)
