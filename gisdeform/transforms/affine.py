"""
Linear transform: 3x3 matrix plus offsets in mm.

Text format: the first non-empty line holds the three offsets, the next
three non-empty lines hold the matrix rows.
"""

import numpy as np
from pathlib import Path
from typing import List, Optional, Sequence

from gisdeform.core.errors import FormatError
from gisdeform.geometry import K, Point3dd


class AffineTransform:
    """``p -> matrix @ p + offsets``."""

    def __init__(self, offsets: Sequence[float], matrix: Sequence[Sequence[float]]):
        offsets = np.array(offsets, dtype=np.float64)
        matrix = np.array(matrix, dtype=np.float64)

        if offsets.shape != (K,):
            raise ValueError(f"offsets must have {K} values, got shape {offsets.shape}")
        if matrix.shape != (K, K):
            raise ValueError(f"matrix must be {K}x{K}, got shape {matrix.shape}")

        offsets.flags.writeable = False
        matrix.flags.writeable = False
        self.offsets = offsets
        self.matrix = matrix

    @classmethod
    def identity(cls) -> 'AffineTransform':
        return cls(np.zeros(K), np.eye(K))

    @classmethod
    def load_file(cls, filename: str) -> 'AffineTransform':
        """
        Load offsets and matrix from a text file.

        Raises:
            FileNotFoundError: If the file does not exist
            FormatError: If there are fewer than 4 rows, a row does not hold
                exactly 3 values, or a value is not numeric
        """
        text = Path(filename).read_text(encoding='utf-8')
        return cls.parse(text, str(filename))

    @classmethod
    def parse(cls, text: str, path: Optional[str] = None) -> 'AffineTransform':
        rows: List[List[float]] = []
        for line in text.splitlines():
            tokens = line.split()
            if not tokens:
                continue
            try:
                row = [float(t) for t in tokens]
            except ValueError as e:
                raise FormatError(f"invalid number in {line!r}: {e}", path) from None
            if len(row) != K:
                raise FormatError(f"expected {K} values per row, got {len(row)} in {line!r}", path)
            rows.append(row)

        if len(rows) < K + 1:
            raise FormatError(f"expected {K + 1} rows (offsets then matrix), got {len(rows)}", path)

        return cls(rows[0], rows[1:K + 1])

    def transform(self, p) -> Point3dd:
        """Map a single point in mm."""
        v = Point3dd(p).to_array()
        return Point3dd(self.matrix @ v + self.offsets)

    def transform_many(self, points: np.ndarray) -> np.ndarray:
        """Map (N, 3) points in mm."""
        points = np.asarray(points, dtype=np.float64).reshape(-1, K)
        return points @ self.matrix.T + self.offsets

    def __repr__(self) -> str:
        return (
            f"AffineTransform(dimensions={K}x{K}, offsets={self.offsets.tolist()}, "
            f"matrix={self.matrix.tolist()})"
        )


def load_file(filename: str) -> AffineTransform:
    """Load a linear transform. See ``AffineTransform.load_file``."""
    return AffineTransform.load_file(filename)
