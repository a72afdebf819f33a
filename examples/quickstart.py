"""
gisdeform Quickstart Example

Writes a small synthetic GIS field, loads it, and maps a few points.
"""

import tempfile
from pathlib import Path

import numpy as np

from gisdeform import GISTransform
from gisdeform.io import save_gis


def main():
    print("="*60)
    print("gisdeform Quickstart Example")
    print("="*60)

    # 1. Create a synthetic field: a smooth shift along x, 2 mm voxels
    print("\n[1] Writing synthetic field...")
    dims = (16, 12, 10)
    spacing = (2.0, 2.0, 2.0)
    x = np.arange(dims[0], dtype=np.float32)
    field = np.zeros(dims + (3,), dtype=np.float32)
    field[..., 0] = 0.5 * np.sin(x / dims[0] * np.pi)[:, None, None]

    out_dir = Path(tempfile.mkdtemp())
    basename = str(out_dir / 'synthetic_field')
    save_gis(basename, field, dims, spacing)
    print(f"    {basename}.dim / .ima")

    # 2. Load
    print("\n[2] Loading field...")
    with GISTransform.load_file(basename) as gis:
        print(f"    {gis}")
        print(f"    Physical extent: {gis.physical_extent().to_list()} mm")

        # 3. Single point
        print("\n[3] Mapping single points...")
        for p in ([10.0, 5.0, 5.0], [10.5, 5.0, 5.0], [40.0, 5.0, 5.0]):
            q = gis.deformation(p)
            status = "outside field" if q.is_nan() else ""
            print(f"    {p} -> {q.to_list()} {status}")

        # 4. Batch
        print("\n[4] Mapping a batch...")
        points = np.random.uniform(0, 30, size=(1000, 3))
        mapped = gis.deformation_many(points)
        outside = np.isnan(mapped).any(axis=1).sum()
        print(f"    {len(points)} points, {outside} outside the field")

    print("\n" + "="*60)
    print("Quickstart complete!")
    print("="*60)


if __name__ == '__main__':
    main()
