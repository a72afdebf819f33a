#!/usr/bin/env python3
"""
Export a GIS deformation field as a NIfTI or NPZ displacement volume.

Example usage:
    python export_field.py data/displ_field displ_field.nii.gz
"""

import argparse

from gisdeform.io import save_field
from gisdeform.transforms import GISTransform


def main():
    parser = argparse.ArgumentParser(
        description='Export a GIS deformation field to NIfTI or NPZ',
    )
    parser.add_argument('field', help='Field basename (without .dim/.ima)')
    parser.add_argument('output', help='Output path (.nii, .nii.gz or .npz)')
    args = parser.parse_args()

    with GISTransform.load_file(args.field) as gis:
        print(f"Loaded {gis}")
        save_field(args.output, gis)

    print(f"Saved: {args.output}")


if __name__ == '__main__':
    main()
