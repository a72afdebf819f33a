"""
Tests for memory-mapped control point storage.
"""

import struct

import pytest
import numpy as np
from gisdeform.core.errors import FormatError
from gisdeform.io.storage import GISArrayData


def test_little_endian_decoding(tmp_path):
    """Test little-endian float decoding."""
    values = [1.5, -2.25, 3.0, 0.1, 1e-3, -7.0]
    (tmp_path / 'f.ima').write_bytes(struct.pack('<6f', *values))

    data = GISArrayData.load_file(str(tmp_path / 'f'))

    assert len(data) == 2
    assert data.vector_at(0).to_list() == [1.5, -2.25, 3.0]
    assert data.vector_at(1)[0] == struct.unpack('<f', struct.pack('<f', 0.1))[0]
    assert data.nbytes == 24


def test_vectors_are_read_only(tmp_path):
    """Test read-only storage."""
    (tmp_path / 'f.ima').write_bytes(struct.pack('<3f', 1.0, 2.0, 3.0))
    data = GISArrayData.load_file(str(tmp_path / 'f'))

    assert data.vectors.shape == (1, 3)
    with pytest.raises(ValueError):
        data.vectors[0, 0] = 5.0


@pytest.mark.parametrize('index', [-1, 2, 100])
def test_vector_at_bounds_checked(tmp_path, index):
    """Test vector bounds check."""
    (tmp_path / 'f.ima').write_bytes(struct.pack('<6f', *range(6)))
    data = GISArrayData.load_file(str(tmp_path / 'f'))

    with pytest.raises(IndexError):
        data.vector_at(index)


def test_missing_file(tmp_path):
    """Test missing data file."""
    with pytest.raises(FileNotFoundError):
        GISArrayData.load_file(str(tmp_path / 'absent'))


def test_empty_file(tmp_path):
    """Test empty data file."""
    (tmp_path / 'f.ima').write_bytes(b'')

    with pytest.raises(FormatError, match="empty"):
        GISArrayData.load_file(str(tmp_path / 'f'))


def test_partial_float(tmp_path):
    """Test data length not a multiple of 4 bytes."""
    (tmp_path / 'f.ima').write_bytes(b'\x00' * 14)

    with pytest.raises(FormatError, match="multiple of 4"):
        GISArrayData.load_file(str(tmp_path / 'f'))


def test_partial_vector(tmp_path):
    """Test data length not a multiple of 3 floats."""
    (tmp_path / 'f.ima').write_bytes(struct.pack('<4f', 1, 2, 3, 4))

    with pytest.raises(FormatError):
        GISArrayData.load_file(str(tmp_path / 'f'))


def test_in_memory_array():
    """Test storage over an in-memory array."""
    data = GISArrayData(np.arange(9, dtype=np.float32))

    assert len(data) == 3
    assert data.vector_at(2).to_list() == [6.0, 7.0, 8.0]


def test_close_is_idempotent(tmp_path):
    """Test closing storage twice."""
    (tmp_path / 'f.ima').write_bytes(struct.pack('<3f', 1.0, 2.0, 3.0))
    data = GISArrayData.load_file(str(tmp_path / 'f'))

    data.close()
    data.close()

    assert data.closed
    with pytest.raises(ValueError):
        data.vector_at(0)


if __name__ == '__main__':
    pytest.main([__file__])
