#!/usr/bin/env python3
"""
Command-line script for mapping points through a GIS deformation field.

Example usage:
    python transform_points.py \\
        --field data/displ_field \\
        --points points.json \\
        --output transformed.json
"""

import argparse
from pathlib import Path
import sys

import numpy as np

from gisdeform.core import DeformationConfig
from gisdeform.io import load_points, save_points, dumps_points
from gisdeform.transforms import GISTransform, AffineTransform


def main():
    parser = argparse.ArgumentParser(
        description='Map points (mm) through a GIS deformation field',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    parser.add_argument('--field', help='Field basename (without .dim/.ima)')
    parser.add_argument('--points', required=True, help='JSON or text file of source points')
    parser.add_argument('--points-key', default='source_points',
                        help='JSON member holding the points when the file is an object')
    parser.add_argument('--affine', help='Linear transform applied after the field')
    parser.add_argument('--output', help='Output file (.json or text); stdout if omitted')

    parser.add_argument('--config', default='configs/default.yaml',
                        help='Path to YAML configuration file')
    parser.add_argument('--quiet', action='store_true', help='Suppress progress output')

    args = parser.parse_args()

    # Load configuration
    if Path(args.config).exists():
        config = DeformationConfig.from_yaml(args.config)
    else:
        config = DeformationConfig()

    # Apply command-line overrides
    if args.field is not None:
        config.transform.basename = args.field
    if args.affine is not None:
        config.transform.affine = args.affine
    if args.output is not None:
        config.output.path = args.output
    if args.quiet:
        config.verbose = False

    if config.transform.basename is None:
        parser.error('--field is required when the config does not name one')

    # Progress goes to stderr so stdout stays valid JSON
    log = sys.stderr if config.output.path is None else sys.stdout

    if config.verbose:
        print(f"Loading field: {config.transform.basename}", file=log)

    with GISTransform.load_file(config.transform.basename) as gis:
        if config.verbose:
            print(f"  dimensions: {gis.dimensions()}, extent: {gis.physical_extent().to_list()} mm", file=log)
            print(f"  loaded in {gis.timing['load']:.2f}s", file=log)

        points = load_points(args.points, key=args.points_key)
        result = gis.deformation_many(points)

    if config.transform.affine is not None:
        affine = AffineTransform.load_file(config.transform.affine)
        result = affine.transform_many(result)

    outside = int(np.isnan(result).any(axis=1).sum())
    if config.verbose:
        print(f"Transformed {len(points)} points, {outside} outside the field", file=log)

    if config.output.path is None:
        print(dumps_points(result, key=config.output.key, indent=config.output.indent))
    else:
        save_points(config.output.path, result, key=config.output.key)
        if config.verbose:
            print(f"Saved: {config.output.path}", file=log)


if __name__ == '__main__':
    main()
