"""Core configuration and error types."""

from gisdeform.core.config import (
    DeformationConfig,
    FieldConfig,
    OutputConfig,
    ComparisonConfig,
    create_default_config,
)
from gisdeform.core.errors import GISError, FormatError

__all__ = [
    'DeformationConfig',
    'FieldConfig',
    'OutputConfig',
    'ComparisonConfig',
    'create_default_config',
    'GISError',
    'FormatError',
]
