"""
Write GIS fields and export them as displacement volumes.
"""

import numpy as np
import nibabel as nib
from pathlib import Path
from typing import Optional, Sequence

from gisdeform.io.header import GISHeader, format_header


def save_gis(basename: str,
             vectors: np.ndarray,
             dimensions: Sequence[int],
             spacing: Optional[Sequence[float]] = None,
             ) -> GISHeader:
    """
    Write a ``<basename>.dim`` / ``<basename>.ima`` pair.

    Args:
        basename: Output path without suffix
        vectors: (N, 3) displacements in mm, axis 0 varying fastest, or an
            array shaped (*dimensions, 3) indexed [x, y, z, ...]
        dimensions: Axis sizes
        spacing: mm per grid step (1.0 per axis if None)

    Returns:
        The header that was written
    """
    dimensions = tuple(int(d) for d in dimensions)
    if spacing is None:
        spacing = (1.0,) * len(dimensions)
    header = GISHeader(dimensions=dimensions, spacing=tuple(float(s) for s in spacing))

    vectors = np.asarray(vectors)
    if vectors.ndim > 2:
        # (x, y, z, ..., 3) -> x fastest on disk
        vectors = np.transpose(vectors, tuple(reversed(range(vectors.ndim - 1))) + (vectors.ndim - 1,))
    flat = np.ascontiguousarray(vectors, dtype='<f4').reshape(-1, 3)

    if flat.shape[0] != header.voxel_count:
        raise ValueError(f"Got {flat.shape[0]} vectors, dimensions {dimensions} require {header.voxel_count}")

    base = Path(basename)
    base.parent.mkdir(parents=True, exist_ok=True)
    Path(f"{basename}.dim").write_text(format_header(header), encoding='utf-8')
    flat.tofile(f"{basename}.ima")

    return header


def field_to_array(transform) -> np.ndarray:
    """
    Control points of a loaded field as a float32 array (*dimensions, 3)
    indexed [x, y, z, ...].
    """
    dims = transform.dimensions()
    grid = transform.vectors.reshape(tuple(reversed(dims)) + (3,))
    axes = tuple(reversed(range(len(dims)))) + (len(dims),)
    return np.array(np.transpose(grid, axes), dtype=np.float32)


def save_field(path: str, transform) -> None:
    """
    Export a loaded field as a displacement volume.

    NIfTI output (.nii, .nii.gz) carries the spacing in its affine; NPZ
    output stores ``dvf`` and ``spacing`` arrays.

    Args:
        path: Output file path
        transform: Loaded GISTransform
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    dvf = field_to_array(transform)
    spacing = transform.spacing()

    if path.suffix.lower() in ['.nii', '.gz']:
        affine = np.eye(4)
        affine[:3, :3] = np.diag(spacing[:3])
        img = nib.Nifti1Image(dvf, affine)
        nib.save(img, str(path))
    elif path.suffix.lower() == '.npz':
        np.savez(path, dvf=dvf, spacing=np.array(spacing))
    else:
        raise ValueError(f"Unsupported DVF format: {path.suffix}")


def load_field_array(path: str) -> np.ndarray:
    """
    Load an exported displacement volume.

    Returns:
        dvf: (*dimensions, 3) array
    """
    path = Path(path)

    if path.suffix.lower() in ['.nii', '.gz']:
        img = nib.load(str(path))
        dvf = np.asarray(img.dataobj)
    elif path.suffix == '.npz':
        with np.load(path) as data:
            dvf = data['dvf']
    else:
        raise ValueError(f"Unsupported DVF format: {path.suffix}")

    return dvf
