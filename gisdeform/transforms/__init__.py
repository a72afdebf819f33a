"""Spatial transforms: GIS deformation fields and linear transforms."""

from gisdeform.transforms.gis import GISTransform
from gisdeform.transforms.affine import AffineTransform
from gisdeform.transforms import affine, gis

__all__ = [
    'GISTransform',
    'AffineTransform',
    'affine',
    'gis',
]
