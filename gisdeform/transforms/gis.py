"""
GIS deformation field transform.

Loads a ``<basename>.dim`` / ``<basename>.ima`` pair and maps physical
coordinates (mm) through the stored displacement field.
"""

import numpy as np
from typing import Sequence, Tuple, Union
import time

from gisdeform.core.errors import FormatError
from gisdeform.deformation.coordinates import mm_to_grid, mm_to_grid_many
from gisdeform.deformation.interpolation import interpolate_displacement, interpolate_displacement_many
from gisdeform.geometry import K, Point3dd
from gisdeform.io.header import GISHeader, read_header
from gisdeform.io.storage import GISArrayData

PointLike = Union[Point3dd, Sequence[float], np.ndarray]


class GISTransform:
    """
    Dense deformation field sampled on a regular grid.

    Immutable once constructed; concurrent read-only queries need no locking.
    Use as a context manager, or call ``close``, to release the memory map.
    """

    def __init__(self,
                 header: GISHeader,
                 data: GISArrayData,
                 flat: Sequence[bool] = (False, False, False),
                 ):
        """
        Args:
            header: Parsed ``.dim`` header
            data: Control point storage
            flat: Per spatial axis, treat the axis as having no extent

        Raises:
            FormatError: If the header declares fewer than 3 axes or the
                data size disagrees with the declared dimensions
        """
        if len(header.dimensions) < K:
            raise FormatError(
                f"deformation fields need at least {K} axes, got {len(header.dimensions)}", data.path
            )
        if len(flat) != K:
            raise ValueError(f"flat must have {K} entries, got {len(flat)}")

        expected = header.voxel_count
        if len(data) != expected:
            raise FormatError(
                f"holds {len(data)} vectors but dimensions {header.dimensions} require {expected}",
                data.path,
            )

        self.header = header
        self.flat = tuple(bool(f) for f in flat)
        self.timing = {}
        self._data = data

    @classmethod
    def load_file(cls, basename: str) -> 'GISTransform':
        """
        Load a field from ``<basename>.dim`` and ``<basename>.ima``.

        Raises:
            FileNotFoundError: If either file is missing
            OSError: If a file cannot be read or mapped
            FormatError: If the header or data is malformed
        """
        t0 = time.time()
        header = read_header(basename)
        data = GISArrayData.load_file(basename)

        try:
            transform = cls(header, data)
        except FormatError:
            data.close()
            raise

        transform.timing['load'] = time.time() - t0
        return transform

    def __enter__(self) -> 'GISTransform':
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def close(self) -> None:
        self._data.close()

    @property
    def closed(self) -> bool:
        return self._data.closed

    def __len__(self) -> int:
        return self.header.voxel_count

    def __repr__(self) -> str:
        return (
            f"GISTransform(dimensions={self.header.dimensions}, "
            f"spacing={self.header.spacing}, flat={self.flat})"
        )

    def dimensions(self) -> Tuple[int, ...]:
        return self.header.dimensions

    def spacing(self) -> Tuple[float, ...]:
        return self.header.spacing

    def physical_extent(self) -> Point3dd:
        """Size in mm of the first three axes."""
        dims = self.header.dimensions
        spacing = self.header.spacing
        return Point3dd([dims[k] * spacing[k] for k in range(K)])

    @property
    def vectors(self) -> np.ndarray:
        """Read-only (N, 3) float32 control points, axis 0 varying fastest."""
        return self._data.vectors

    def flat_index(self, position: Sequence[int]) -> int:
        """
        Row-major flat index of a grid position, axis 0 varying fastest.

        Raises:
            IndexError: If the position has too many axes or any coordinate
                is out of range
        """
        dims = self.header.dimensions
        if len(position) > len(dims):
            raise IndexError(f"position {tuple(position)} has more axes than dimensions {dims}")

        index = 0
        stride = 1
        for axis, v in enumerate(position):
            if not 0 <= v < dims[axis]:
                raise IndexError(f"position {tuple(position)} out of range for dimensions {dims}")
            index += stride * v
            stride *= dims[axis]

        return index

    def point3dd(self, position: Sequence[int]) -> Point3dd:
        """Control point at a grid position, as float64."""
        return self._data.vector_at(self.flat_index(position))

    def _ctrl_point_delta(self, i: int, j: int, k: int) -> Point3dd:
        return self.point3dd((i, j, k))

    def displacement(self, p: PointLike) -> Point3dd:
        """Interpolated displacement in mm at physical point ``p``."""
        p_grid = mm_to_grid(Point3dd(p), self.header.spacing)
        return interpolate_displacement(self._ctrl_point_delta, p_grid, self.header.dimensions, self.flat)

    def deformation(self, p: PointLike) -> Point3dd:
        """
        Map a physical point through the field.

        Args:
            p: Point in mm

        Returns:
            ``p`` plus the interpolated displacement. All components are NaN
            when ``p`` lies outside the field; check with ``is_nan()``.
        """
        t = Point3dd(p)
        t += self.displacement(t)
        return t

    def deformation_many(self, points: np.ndarray) -> np.ndarray:
        """
        Vectorized ``deformation``.

        Args:
            points: (N, 3) physical points in mm

        Returns:
            (N, 3) float64 deformed points, NaN rows outside the field
        """
        points = np.asarray(points, dtype=np.float64).reshape(-1, K)
        p_grid = mm_to_grid_many(points, self.header.spacing)
        displacement = interpolate_displacement_many(
            self._data.vectors, p_grid, self.header.dimensions, self.flat,
        )
        return points + displacement


def load_file(basename: str) -> GISTransform:
    """Load a GIS deformation field. See ``GISTransform.load_file``."""
    return GISTransform.load_file(basename)
