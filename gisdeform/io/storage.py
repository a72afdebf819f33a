"""
Memory-mapped storage for GIS ``.ima`` control point data.

The file is a flat array of little-endian float32 values, three per voxel.
"""

import numpy as np
from pathlib import Path
from typing import Optional

from gisdeform.core.errors import FormatError
from gisdeform.geometry import K, Point3dd

FLOAT_SIZE = np.dtype('<f4').itemsize


class GISArrayData:
    """
    Read-only view over the control point vectors of a field.

    The mapping is acquired once in ``load_file`` and released by ``close``.
    Every read goes through a bounds check.
    """

    def __init__(self, data: np.ndarray, path: Optional[str] = None):
        """
        Args:
            data: 1D float32 array of length 3 * N (a memmap or in-memory array)
            path: Source file, for error messages
        """
        if data.ndim != 1 or data.size % K:
            raise FormatError(f"expected a flat array of {K}-vectors, got shape {data.shape}", path)

        self.path = path
        self._data = data
        self._vectors = data.reshape(-1, K)
        self._vectors.flags.writeable = False

    @classmethod
    def load_file(cls, basename: str) -> 'GISArrayData':
        """
        Map ``<basename>.ima`` read-only.

        Raises:
            FileNotFoundError: If the data file does not exist
            OSError: If it cannot be read or mapped
            FormatError: If its size is not a whole number of float32 vectors
        """
        path = Path(f"{basename}.ima")
        size = path.stat().st_size

        if size == 0:
            raise FormatError("data file is empty", str(path))
        if size % FLOAT_SIZE:
            raise FormatError(f"size {size} is not a multiple of {FLOAT_SIZE} bytes", str(path))

        count = size // FLOAT_SIZE
        data = np.memmap(path, dtype='<f4', mode='r', shape=(count,))

        return cls(data, str(path))

    @property
    def closed(self) -> bool:
        return self._data is None

    def _check_open(self):
        if self._data is None:
            raise ValueError("I/O operation on closed field data")

    def __len__(self) -> int:
        """Number of stored vectors."""
        self._check_open()
        return self._vectors.shape[0]

    @property
    def nbytes(self) -> int:
        self._check_open()
        return self._data.nbytes

    @property
    def vectors(self) -> np.ndarray:
        """Read-only (N, 3) float32 view."""
        self._check_open()
        return self._vectors

    def vector_at(self, index: int) -> Point3dd:
        """
        Control point vector at a flat voxel index, widened to float64.

        Raises:
            IndexError: If ``index`` is outside ``[0, len(self))``
        """
        self._check_open()
        count = self._vectors.shape[0]
        if not 0 <= index < count:
            raise IndexError(f"voxel index {index} out of range [0, {count})")
        return Point3dd(self._vectors[index])

    def close(self) -> None:
        """Release the mapping. Safe to call more than once."""
        # numpy unmaps once the last reference to the memmap is dropped
        self._vectors = None
        self._data = None
