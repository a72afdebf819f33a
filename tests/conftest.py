"""Shared fixtures: small GIS fields written to a temporary directory."""

import numpy as np
import pytest

from gisdeform.io import save_gis


@pytest.fixture
def field_factory(tmp_path):
    """Write a field and return its basename."""
    def make(vectors, dims, spacing=None, name='field'):
        basename = str(tmp_path / name)
        save_gis(basename, vectors, dims, spacing)
        return basename
    return make


@pytest.fixture
def constant_field(field_factory):
    """4x4x4 field, unit spacing, every displacement [1, 0, 0]."""
    vectors = np.tile([1.0, 0.0, 0.0], (64, 1))
    return field_factory(vectors, (4, 4, 4), name='constant')


@pytest.fixture
def linear_field(field_factory):
    """
    Displacement (0.25 x, 0.5 y, -0.125 z) at grid index (x, y, z).

    Anisotropic spacing with power-of-two values so mm <-> grid
    conversion is exact.
    """
    dims = (5, 6, 7)
    x, y, z = np.meshgrid(*(np.arange(d) for d in dims), indexing='ij')
    field = np.stack([0.25 * x, 0.5 * y, -0.125 * z], axis=-1)
    return field_factory(field, dims, spacing=(2.0, 1.0, 0.5), name='linear')


@pytest.fixture
def random_field(field_factory):
    """Random displacements on a 6x5x4 grid with spacing (0.5, 2.0, 1.0)."""
    rng = np.random.default_rng(1234)
    dims = (6, 5, 4)
    field = rng.normal(scale=3.0, size=dims + (3,)).astype(np.float32)
    return field_factory(field, dims, spacing=(0.5, 2.0, 1.0), name='random'), field
