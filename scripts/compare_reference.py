#!/usr/bin/env python3
"""
Command-line script for checking a GIS field against reference results.

The reference file is a JSON object with ``target_points`` an external
implementation computed. In the default mode it also holds the
``source_points`` they were computed from.

With ``--diagonal`` the source points are generated instead: cubes sampled
every ``step`` mm along the main diagonal of the field, one cube per
``block_size`` mm. ``--request`` writes those points, together with the
source and target space identifiers, as a JSON request for the reference
service; its response is then passed back with ``--reference``.

Example usage:
    python compare_reference.py \\
        --field data/displ_field \\
        --reference reference.json \\
        --precision 1e-4

    python compare_reference.py --field data/displ_field --diagonal \\
        --request request.json
    python compare_reference.py --field data/displ_field --diagonal \\
        --reference response.json
"""

import argparse
import json
from pathlib import Path
import sys

from gisdeform.core import DeformationConfig
from gisdeform.evaluation import ReferenceComparison, build_request, diagonal_cubes, load_reference, summarize
from gisdeform.transforms import GISTransform


def main():
    parser = argparse.ArgumentParser(
        description='Compare GIS field results with reference points',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    parser.add_argument('--field', help='Field basename (without .dim/.ima)')
    parser.add_argument('--reference', help='Reference JSON file')
    parser.add_argument('--precision', type=float, help='Max per-component difference in mm')

    # Diagonal mode
    parser.add_argument('--diagonal', action='store_true',
                        help='Generate source points in cubes along the field diagonal')
    parser.add_argument('--corners', action='store_true',
                        help='With --diagonal, sample only a 1 mm cube at each block origin')
    parser.add_argument('--request', help='With --diagonal, write the request JSON here')
    parser.add_argument('--step', type=float, help='Sampling step in mm')
    parser.add_argument('--block-size', type=int, help='Block edge length in mm')
    parser.add_argument('--source-space', help='Source space identifier for the request')
    parser.add_argument('--target-space', help='Target space identifier for the request')

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
    if args.precision is not None:
        config.comparison.precision = args.precision
    if args.step is not None:
        config.comparison.step = args.step
    if args.block_size is not None:
        config.comparison.block_size = args.block_size
    if args.source_space is not None:
        config.comparison.source_space = args.source_space
    if args.target_space is not None:
        config.comparison.target_space = args.target_space
    if args.quiet:
        config.verbose = False

    if config.transform.basename is None:
        parser.error('--field is required when the config does not name one')
    if args.diagonal:
        if args.reference is None and args.request is None:
            parser.error('--diagonal needs --request, --reference or both')
    elif args.reference is None:
        parser.error('--reference is required unless --diagonal is given')

    cfg = config.comparison

    if config.verbose:
        print(f"Loading field: {config.transform.basename}")

    with GISTransform.load_file(config.transform.basename) as gis:
        if config.verbose:
            print(f"  dimensions: {gis.dimensions()}, extent: {gis.physical_extent().to_list()} mm")

        comparison = ReferenceComparison(gis, cfg.precision, verbose=config.verbose)

        if not args.diagonal:
            result = comparison.compare_file(
                args.reference,
                source_key=cfg.source_key,
                target_key=cfg.target_key,
            )
        else:
            blocks = diagonal_cubes(
                gis.physical_extent().to_list(),
                cfg.block_size,
                width=1.0 if args.corners else None,
            )

            if args.request is not None:
                request = build_request(blocks, cfg.step, cfg.source_space, cfg.target_space)
                Path(args.request).parent.mkdir(parents=True, exist_ok=True)
                Path(args.request).write_text(json.dumps(request, indent=2), encoding='utf-8')
                if config.verbose:
                    print(f"Wrote {len(request['source_points'])} source points in "
                          f"{len(blocks)} blocks to {args.request}")

            if args.reference is None:
                return

            _, target = load_reference(args.reference, cfg.source_key, cfg.target_key)
            result = comparison.compare_concatenated(blocks, target, cfg.step)

    print(summarize(result))
    sys.exit(0 if result.success else 1)


if __name__ == '__main__':
    main()
