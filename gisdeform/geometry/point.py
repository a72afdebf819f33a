"""
Fixed-dimension numeric points.

One vector type parameterised over scalar dtype and dimension count.
Concrete aliases cover the three uses in the evaluator: float64 physical
and grid coordinates, float32 stored displacements and int32 cell indices.
"""

import numpy as np
from typing import Iterator, List, Sequence, Union

K = 3


class Point:
    """
    Fixed-length numeric vector with value semantics.

    Construction always copies its input, so two points never share
    storage. Subclasses pin ``dtype`` and ``dimensions``.
    """

    dtype = np.float64
    dimensions = K

    __slots__ = ('_values',)

    def __init__(self, values: Union['Point', Sequence[float], np.ndarray]):
        if isinstance(values, Point):
            values = values._values
        arr = np.array(values, dtype=self.dtype)
        if arr.shape != (self.dimensions,):
            raise ValueError(
                f"{type(self).__name__} expects {self.dimensions} components, got shape {arr.shape}"
            )
        self._values = arr

    @classmethod
    def zeros(cls) -> 'Point':
        return cls(np.zeros(cls.dimensions))

    @classmethod
    def nan(cls) -> 'Point':
        return cls(np.full(cls.dimensions, np.nan))

    def scale(self, factor: float) -> 'Point':
        """Multiply every component by ``factor`` in place; returns self for chaining."""
        self._values *= factor
        return self

    def is_nan(self) -> bool:
        """True if ANY component is NaN."""
        if not np.issubdtype(self._values.dtype, np.floating):
            return False
        return bool(np.isnan(self._values).any())

    def copy(self) -> 'Point':
        return type(self)(self._values)

    def to_list(self) -> List[float]:
        return self._values.tolist()

    def to_array(self) -> np.ndarray:
        return self._values.copy()

    def __iadd__(self, other: 'Point') -> 'Point':
        if not isinstance(other, Point) or other.dimensions != self.dimensions:
            return NotImplemented
        self._values += other._values.astype(self.dtype)
        return self

    def __add__(self, other: 'Point') -> 'Point':
        if not isinstance(other, Point) or other.dimensions != self.dimensions:
            return NotImplemented
        result = self.copy()
        result += other
        return result

    def __getitem__(self, index: int):
        return self._values[index].item()

    def __len__(self) -> int:
        return self.dimensions

    def __iter__(self) -> Iterator:
        return iter(self._values.tolist())

    def __eq__(self, other) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return bool(np.array_equal(self._values, other._values))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._values.tolist()})"


class Point3dd(Point):
    """Double-precision 3D point (mm or grid coordinates)."""

    dtype = np.float64
    __slots__ = ()

    def floor(self) -> 'Point3di':
        return Point3di(np.floor(self._values))


class Point3df(Point):
    """Single-precision 3D point, the storage type of GIS control points."""

    dtype = np.float32
    __slots__ = ()


class Point3di(Point):
    """Integer grid cell index."""

    dtype = np.int32
    __slots__ = ()
