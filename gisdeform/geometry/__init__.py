"""Fixed-dimension point types."""

from gisdeform.geometry.point import K, Point, Point3dd, Point3df, Point3di

__all__ = [
    'K',
    'Point',
    'Point3dd',
    'Point3df',
    'Point3di',
]
