"""Agreement checks against reference implementations."""

from gisdeform.evaluation.compare import (
    grid_values,
    block_points,
    diagonal_blocks,
    diagonal_cubes,
    build_request,
    split_by_blocks,
    compare_points,
    load_reference,
    summarize,
    ComparisonResult,
    ReferenceComparison,
)

__all__ = [
    'grid_values',
    'block_points',
    'diagonal_blocks',
    'diagonal_cubes',
    'build_request',
    'split_by_blocks',
    'compare_points',
    'load_reference',
    'summarize',
    'ComparisonResult',
    'ReferenceComparison',
]
