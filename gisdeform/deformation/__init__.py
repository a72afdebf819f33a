"""Coordinate conversion and displacement interpolation."""

from gisdeform.deformation.coordinates import mm_to_grid, grid_to_mm, mm_to_grid_many
from gisdeform.deformation.interpolation import (
    is_inside,
    cell_weights,
    interpolate_displacement,
    interpolate_displacement_many,
)

__all__ = [
    'mm_to_grid',
    'grid_to_mm',
    'mm_to_grid_many',
    'is_inside',
    'cell_weights',
    'interpolate_displacement',
    'interpolate_displacement_many',
]
