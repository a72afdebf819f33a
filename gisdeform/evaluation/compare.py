"""
Agreement checks against reference transformed points.

Reference results come from an external implementation and are read from
JSON files; nothing here performs network I/O.
"""

import json
import math
import numpy as np
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple
from tqdm import tqdm
import warnings

from gisdeform.io.json_codec import decode_points, encode_points, normalize_nan

# (x, y, z) ranges in mm
Block = Tuple[Tuple[float, float], Tuple[float, float], Tuple[float, float]]


def grid_values(start: float, end: float, step: float) -> List[float]:
    """
    Values from ``start`` by repeated addition of ``step``.

    The count is ``int((end - start) / step)``; values accumulate by
    addition rather than multiplication so they match the reference
    sampling bit for bit.
    """
    steps = int((end - start) / step)
    values = []
    v = float(start)
    for _ in range(steps):
        values.append(v)
        v += step
    return values


def block_points(x: Tuple[float, float],
                 y: Tuple[float, float],
                 z: Tuple[float, float],
                 step: float = 1.0,
                 ) -> np.ndarray:
    """
    Sample an axis-aligned block, z outermost and x innermost.

    Returns:
        (N, 3) float64 points in mm
    """
    points = [
        [xv, yv, zv]
        for zv in grid_values(z[0], z[1], step)
        for yv in grid_values(y[0], y[1], step)
        for xv in grid_values(x[0], x[1], step)
    ]
    return np.array(points, dtype=np.float64).reshape(-1, 3)


def diagonal_blocks(extent: Sequence[float], block_size: int = 10) -> List[Tuple[int, int]]:
    """
    Consecutive ``(start, end)`` ranges along the main diagonal.

    The diagonal cannot go further than the smallest axis extent.
    """
    limit = int(min(extent[:3]))
    blocks = []
    prev = 0
    for d in range(0, limit, block_size):
        if d > prev:
            blocks.append((prev, d))
        prev = d
    return blocks


def diagonal_cubes(extent: Sequence[float],
                   block_size: int = 10,
                   width: Optional[float] = None,
                   ) -> List[Block]:
    """
    Cubes along the main diagonal of a field.

    Args:
        extent: Field size in mm, first three axes used
        block_size: Distance in mm between consecutive cube origins
        width: Edge length of each cube; None spans the whole block, a
            small width samples just the corner of each block

    Returns:
        List of ``(x, y, z)`` ranges for ``block_points``
    """
    cubes = []
    for start, end in diagonal_blocks(extent, block_size):
        if width is not None:
            end = start + width
        cubes.append(((start, end), (start, end), (start, end)))
    return cubes


def build_request(blocks: Sequence[Block],
                  step: float = 1.0,
                  source_space: Optional[str] = None,
                  target_space: Optional[str] = None,
                  ) -> dict:
    """Request body asking a reference service to transform every block point."""
    sources = [block_points(x, y, z, step) for x, y, z in blocks]
    points = np.concatenate(sources) if sources else np.zeros((0, 3))
    return {
        'source_space': source_space,
        'target_space': target_space,
        'source_points': encode_points(points),
    }


def split_by_blocks(points: np.ndarray, blocks: Sequence[Block], step: float = 1.0) -> List[np.ndarray]:
    """Split a concatenated point list back into one array per block."""
    if not blocks:
        return []
    points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    sizes = [len(block_points(x, y, z, step)) for x, y, z in blocks]
    return np.split(points, np.cumsum(sizes)[:-1])


@dataclass
class ComparisonResult:
    """Outcome of comparing computed points against reference points."""
    total: int = 0
    nan_matches: int = 0
    mismatches: List[Tuple[int, List[float], List[float]]] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return len(self.mismatches) == 0

    @property
    def matches(self) -> int:
        return self.total - len(self.mismatches)

    def merge(self, other: 'ComparisonResult', offset: int = 0) -> None:
        self.total += other.total
        self.nan_matches += other.nan_matches
        self.mismatches.extend((i + offset, r, p) for i, r, p in other.mismatches)


def compare_points(mine: np.ndarray,
                   reference: np.ndarray,
                   precision: float = 1e-6,
                   ) -> ComparisonResult:
    """
    Compare two point lists component by component.

    A point mismatches if any component differs by more than ``precision``
    or exactly one side is NaN-tainted. Points NaN-tainted on both sides
    match and are counted in ``nan_matches``. Only the first
    ``min(len(mine), len(reference))`` points are compared.

    Args:
        mine: (N, 3) computed points
        reference: (M, 3) reference points
        precision: Max per-component absolute difference in mm

    Returns:
        ComparisonResult
    """
    mine = np.asarray(mine, dtype=np.float64).reshape(-1, 3)
    reference = np.asarray(reference, dtype=np.float64).reshape(-1, 3)

    if len(mine) != len(reference):
        warnings.warn(f"Comparing {len(mine)} points against {len(reference)} reference points")

    result = ComparisonResult()
    for i in range(min(len(mine), len(reference))):
        p = mine[i]
        r = reference[i]
        p_nan = bool(np.isnan(p).any())
        r_nan = bool(np.isnan(r).any())

        result.total += 1
        if p_nan and r_nan:
            result.nan_matches += 1
        elif p_nan != r_nan or bool((np.abs(r - p) > precision).any()):
            result.mismatches.append((i, r.tolist(), p.tolist()))

    return result


def load_reference(path: str,
                   source_key: str = 'source_points',
                   target_key: str = 'target_points',
                   ) -> Tuple[Optional[np.ndarray], np.ndarray]:
    """
    Load a reference file.

    The file is a JSON object with ``target_points`` and optionally the
    ``source_points`` they were computed from. Bare NaN tokens are accepted.

    Returns:
        source: (N, 3) array or None
        target: (N, 3) array
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    data = json.loads(normalize_nan(path.read_text(encoding='utf-8')))
    if target_key not in data:
        raise ValueError(f"Reference file {path} has no {target_key!r} member")

    source = decode_points(data[source_key]) if source_key in data else None
    target = decode_points(data[target_key])
    return source, target


class ReferenceComparison:
    """
    Check a transform against reference points.

    ``transform`` is anything with a ``deformation_many`` method.
    """

    def __init__(self, transform, precision: float = 1e-6, verbose: bool = False):
        self.transform = transform
        self.precision = precision
        self.verbose = verbose

    def compare(self, source: np.ndarray, reference: np.ndarray) -> ComparisonResult:
        """Transform ``source`` and compare with ``reference``."""
        mine = self.transform.deformation_many(source)
        result = compare_points(mine, reference, self.precision)

        if self.verbose:
            for i, r, p in result.mismatches:
                print(f"Mismatch #{i} r {r} p {p}")

        return result

    def compare_file(self,
                     path: str,
                     source_key: str = 'source_points',
                     target_key: str = 'target_points',
                     ) -> ComparisonResult:
        source, target = load_reference(path, source_key, target_key)
        if source is None:
            raise ValueError(f"Reference file {path} has no {source_key!r} member")
        return self.compare(source, target)

    def compare_blocks(self,
                       blocks: Sequence[Block],
                       references: Sequence[np.ndarray],
                       step: float = 1.0,
                       ) -> ComparisonResult:
        """
        Compare a series of sampled blocks, one reference array per block.

        Mismatch indices are offset so they index into the concatenation of
        all blocks.
        """
        if len(blocks) != len(references):
            raise ValueError(f"Got {len(blocks)} blocks but {len(references)} reference arrays")

        total = ComparisonResult()
        offset = 0
        iterator = zip(blocks, references)
        if self.verbose:
            iterator = tqdm(iterator, total=len(blocks), desc="Comparing blocks")

        for (x, y, z), reference in iterator:
            source = block_points(x, y, z, step)
            total.merge(self.compare(source, reference), offset)
            offset += len(source)

        return total

    def compare_concatenated(self,
                             blocks: Sequence[Block],
                             reference: np.ndarray,
                             step: float = 1.0,
                             ) -> ComparisonResult:
        """Compare blocks against one reference list covering all of them in order."""
        return self.compare_blocks(blocks, split_by_blocks(reference, blocks, step), step)


def summarize(result: ComparisonResult) -> str:
    """One-line summary."""
    status = 'OK' if result.success else 'FAILED'
    ratio = result.matches / result.total if result.total else math.nan
    return (
        f"{status}: {result.matches}/{result.total} points match ({ratio:.2%}), "
        f"{result.nan_matches} outside both fields, {len(result.mismatches)} mismatches"
    )
