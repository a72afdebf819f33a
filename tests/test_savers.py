"""
Tests for writing GIS fields and exporting displacement volumes.
"""

import pytest
import numpy as np
from gisdeform.core.errors import FormatError
from gisdeform.io import save_gis, save_field, load_field_array, field_to_array, read_header
from gisdeform.transforms import GISTransform


def test_save_gis_grid_layout(random_field):
    """Test on-disk voxel order."""
    basename, field = random_field

    with GISTransform.load_file(basename) as gis:
        for position in [(0, 0, 0), (5, 0, 0), (0, 4, 0), (1, 2, 3)]:
            assert gis.point3dd(position).to_list() == field[position].astype(np.float64).tolist()


def test_save_gis_writes_header(random_field):
    """Test written header."""
    basename, _ = random_field

    header = read_header(basename)

    assert header.dimensions == (6, 5, 4)
    assert header.spacing == (0.5, 2.0, 1.0)


def test_save_gis_size_checked(tmp_path):
    """Test vector count check."""
    with pytest.raises(ValueError):
        save_gis(str(tmp_path / 'f'), np.zeros((7, 3)), (2, 2, 2))


def test_save_gis_returns_reloaded_header(tmp_path):
    """Test that the returned header matches what a reload parses."""
    basename = str(tmp_path / 'f')

    header = save_gis(basename, np.zeros((27, 3)), (3, 3, 3), spacing=[2.0, 0.5, 1.0])

    assert header == read_header(basename)


@pytest.mark.parametrize('spacing', [(2.0,), (0.0, 1.0, 1.0)])
def test_save_gis_rejects_bad_spacing(tmp_path, spacing):
    """Test that an unloadable header is never written."""
    basename = tmp_path / 'f'

    with pytest.raises(FormatError):
        save_gis(str(basename), np.zeros((27, 3)), (3, 3, 3), spacing=spacing)

    assert not (tmp_path / 'f.dim').exists()
    assert not (tmp_path / 'f.ima').exists()


def test_field_to_array(random_field):
    """Test field to array conversion."""
    basename, field = random_field

    with GISTransform.load_file(basename) as gis:
        array = field_to_array(gis)

    assert array.shape == (6, 5, 4, 3)
    assert np.array_equal(array, field)


def test_export_npz(tmp_path, random_field):
    """Test NPZ export."""
    basename, field = random_field

    with GISTransform.load_file(basename) as gis:
        save_field(str(tmp_path / 'dvf.npz'), gis)

    assert np.array_equal(load_field_array(str(tmp_path / 'dvf.npz')), field)
    with np.load(tmp_path / 'dvf.npz') as data:
        assert data['spacing'].tolist() == [0.5, 2.0, 1.0]


def test_export_nifti(tmp_path, random_field):
    """Test NIfTI export."""
    basename, field = random_field
    path = tmp_path / 'dvf.nii.gz'

    with GISTransform.load_file(basename) as gis:
        save_field(str(path), gis)

    assert np.array_equal(load_field_array(str(path)), field)


def test_export_unsupported(tmp_path, constant_field):
    """Test unsupported export format."""
    with GISTransform.load_file(constant_field) as gis:
        with pytest.raises(ValueError):
            save_field(str(tmp_path / 'dvf.mha'), gis)


if __name__ == '__main__':
    pytest.main([__file__])
