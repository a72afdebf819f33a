"""
gisdeform: GIS deformation field evaluation

Maps physical coordinates (mm) between two registered spatial reference
frames through a dense displacement field stored in the GIS .dim/.ima format.
"""

__version__ = "0.1.0"

from gisdeform.core.errors import GISError, FormatError
from gisdeform.core.config import DeformationConfig
from gisdeform.geometry import Point3dd
from gisdeform.transforms.gis import GISTransform, load_file
from gisdeform.transforms.affine import AffineTransform

__all__ = [
    "GISError",
    "FormatError",
    "DeformationConfig",
    "Point3dd",
    "GISTransform",
    "AffineTransform",
    "load_file",
    "__version__",
]
