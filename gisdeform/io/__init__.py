"""I/O for GIS fields, point lists and exported displacement volumes."""

from gisdeform.io.header import GISHeader, parse_header, format_header, read_header
from gisdeform.io.storage import GISArrayData
from gisdeform.io.json_codec import normalize_nan, nice_float, loads_points, dumps_points
from gisdeform.io.points import load_points, save_points
from gisdeform.io.savers import save_gis, save_field, load_field_array, field_to_array

__all__ = [
    'GISHeader',
    'parse_header',
    'format_header',
    'read_header',
    'GISArrayData',
    'normalize_nan',
    'nice_float',
    'loads_points',
    'dumps_points',
    'load_points',
    'save_points',
    'save_gis',
    'save_field',
    'load_field_array',
    'field_to_array',
]
