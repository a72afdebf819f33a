"""
Multilinear interpolation of control point displacements.

Follows the free-form deformation evaluation of AIMS (aimsalgo ffd.cc):
trilinear inside the grid, collapsing to lower order along any axis that is
flat or sits on the last grid cell, NaN outside the grid. Control points are
stored as float32 and widened to float64 before any arithmetic.
"""

import numpy as np
from typing import Callable, List, Sequence, Tuple

from gisdeform.geometry import K, Point3dd, Point3di

CornerLookup = Callable[[int, int, int], Point3dd]


def is_inside(p_grid: Point3dd, dimensions: Sequence[int]) -> bool:
    """True if every axis lies in ``[0, dim)``. NaN coordinates are outside."""
    return all(0.0 <= p_grid[k] < float(dimensions[k]) for k in range(K))


def cell_weights(p_grid: Point3dd,
                 dimensions: Sequence[int],
                 flat: Sequence[bool],
                 ) -> Tuple[Point3di, Point3di, List[List[float]]]:
    """
    Locate the grid cell enclosing ``p_grid`` and its per-axis weights.

    Args:
        p_grid: In-range grid coordinate
        dimensions: Grid size, first three axes used
        flat: Per-axis flat flags

    Returns:
        lo: Lower corner index
        hi: Upper corner index (equal to ``lo`` on collapsed axes)
        weights: ``weights[k] == [w_lo, w_hi]`` for axis k
    """
    lo = p_grid.floor()
    hi = [lo[k] + 1 for k in range(K)]
    weights = [[0.0, 0.0] for _ in range(K)]

    for k in range(K):
        if flat[k] or hi[k] >= dimensions[k]:
            hi[k] = lo[k]
            weights[k][0] = 1.0
            weights[k][1] = 0.0
        else:
            weights[k][1] = p_grid[k] - float(lo[k])
            weights[k][0] = 1.0 - weights[k][1]

    return lo, Point3di(hi), weights


def interpolate_displacement(lookup: CornerLookup,
                             p_grid: Point3dd,
                             dimensions: Sequence[int],
                             flat: Sequence[bool],
                             ) -> Point3dd:
    """
    Blend the control points of the cell enclosing ``p_grid``.

    Args:
        lookup: Returns the control point at grid index (i, j, k)
        p_grid: Grid coordinate
        dimensions: Grid size
        flat: Per-axis flat flags

    Returns:
        Displacement in mm, all-NaN if ``p_grid`` is outside the grid
    """
    if not is_inside(p_grid, dimensions):
        return Point3dd.nan()

    lo, hi, bt = cell_weights(p_grid, dimensions, flat)

    deformation = Point3dd.zeros()
    for k in range(lo[2], hi[2] + 1):
        for j in range(lo[1], hi[1] + 1):
            for i in range(lo[0], hi[0] + 1):
                p = lookup(i, j, k)
                p.scale(bt[0][i - lo[0]]) \
                    .scale(bt[1][j - lo[1]]) \
                    .scale(bt[2][k - lo[2]])
                deformation += p

    return deformation


def interpolate_displacement_many(vectors: np.ndarray,
                                  points_grid: np.ndarray,
                                  dimensions: Sequence[int],
                                  flat: Sequence[bool],
                                  ) -> np.ndarray:
    """
    Vectorized ``interpolate_displacement``.

    Performs the same float64 operations in the same order as the scalar
    path, so results agree exactly. Corners on a collapsed axis are skipped
    rather than weighted by zero, which keeps NaN control points out of the
    sum just like the scalar loop.

    Args:
        vectors: (N, 3) float32 control points, axis 0 varying fastest
        points_grid: (M, 3) grid coordinates
        dimensions: Grid size
        flat: Per-axis flat flags

    Returns:
        (M, 3) float64 displacements, NaN rows outside the grid
    """
    p = np.asarray(points_grid, dtype=np.float64).reshape(-1, K)
    dims = np.asarray(dimensions[:K], dtype=np.int64)
    flat_arr = np.asarray(flat[:K], dtype=bool)

    result = np.full(p.shape, np.nan, dtype=np.float64)

    # NaN compares False, so NaN rows are excluded here
    inside = np.all((p >= 0.0) & (p < dims.astype(np.float64)), axis=1)
    if not inside.any():
        return result

    q = p[inside]
    lo = np.floor(q).astype(np.int64)
    collapsed = flat_arr | (lo + 1 >= dims)
    hi = np.where(collapsed, lo, lo + 1)

    w_hi = np.where(collapsed, 0.0, q - lo.astype(np.float64))
    w_lo = np.where(collapsed, 1.0, 1.0 - w_hi)
    weights = (w_lo, w_hi)

    strides = np.array([1, dims[0], dims[0] * dims[1]], dtype=np.int64)
    acc = np.zeros(q.shape, dtype=np.float64)

    for dk in (0, 1):
        for dj in (0, 1):
            for di in (0, 1):
                offsets = (di, dj, dk)
                visit = np.ones(len(q), dtype=bool)
                for axis, d in enumerate(offsets):
                    if d:
                        visit &= ~collapsed[:, axis]
                if not visit.any():
                    continue

                corner = np.where(np.array(offsets, dtype=bool), hi, lo)[visit]
                index = corner @ strides
                value = vectors[index].astype(np.float64)

                value = value * weights[di][visit, 0:1]
                value = value * weights[dj][visit, 1:2]
                value = value * weights[dk][visit, 2:3]
                acc[visit] += value

    result[inside] = acc
    return result
