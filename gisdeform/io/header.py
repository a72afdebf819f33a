"""
GIS ``.dim`` header parsing.

The first line lists the axis sizes; following lines hold whitespace
separated ``key value`` pairs. Only one dialect is accepted: 3-component
float vectors, little-endian, flat binary storage.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple
import warnings

from gisdeform.core.errors import FormatError

ELEMENT_TYPE = 'POINT3DF'
BYTE_ORDER = 'DCBA'
STORAGE_MODEL = 'binar'

# Spacing keys in axis order
SPACING_KEYS = ('-dx', '-dy', '-dz', '-dt', '-d4', '-d5', '-d6', '-d7')

# Keys whose value must match the supported dialect exactly
ASSERTED_KEYS = {
    '-type': ELEMENT_TYPE,
    '-bo': BYTE_ORDER,
    '-om': STORAGE_MODEL,
}


@dataclass(frozen=True)
class GISHeader:
    """Parsed contents of a ``.dim`` file."""
    dimensions: Tuple[int, ...]
    spacing: Tuple[float, ...]
    element_type: str = ELEMENT_TYPE
    byte_order: str = BYTE_ORDER
    storage_model: str = STORAGE_MODEL

    def __post_init__(self):
        object.__setattr__(self, 'dimensions', tuple(self.dimensions))
        object.__setattr__(self, 'spacing', tuple(self.spacing))

        if len(self.spacing) != len(self.dimensions):
            raise FormatError(
                f"{len(self.spacing)} spacing values for {len(self.dimensions)} dimensions"
            )
        for axis, spacing in enumerate(self.spacing):
            if not spacing > 0:
                raise FormatError(f"spacing for axis {axis} must be positive, got {spacing}")

    @property
    def voxel_count(self) -> int:
        count = 1
        for d in self.dimensions:
            count *= d
        return count


def _parse_dimensions(line: Optional[str], path: Optional[str]) -> Tuple[int, ...]:
    if line is None or not line.strip():
        raise FormatError("missing dimension line", path)

    dimensions = []
    for token in line.split():
        try:
            value = int(token)
        except ValueError:
            raise FormatError(f"invalid dimension {token!r}", path) from None
        if value <= 0:
            raise FormatError(f"dimension must be positive, got {value}", path)
        dimensions.append(value)

    return tuple(dimensions)


def _parse_spacing(key: str, value: str, path: Optional[str]) -> float:
    try:
        spacing = float(value)
    except ValueError:
        raise FormatError(f"invalid spacing for {key}: {value!r}", path) from None
    if not spacing > 0:
        raise FormatError(f"spacing for {key} must be positive, got {value}", path)
    return spacing


def parse_header(text: str, path: Optional[str] = None) -> GISHeader:
    """
    Parse the text of a ``.dim`` header.

    Args:
        text: Header contents
        path: Source file, used in error messages only

    Returns:
        GISHeader with spacing defaulted to 1.0 mm on unspecified axes

    Raises:
        FormatError: If the dimension line is missing or invalid, a spacing
            value is not a positive number, or an asserted key holds an
            unsupported value
    """
    # Only \n and \r\n end a line; other Unicode line breaks stay inside it
    lines = [line[:-1] if line.endswith('\r') else line for line in text.split('\n')]
    dimensions = _parse_dimensions(lines[0], path)

    spacing = [1.0] * len(dimensions)
    fields: Dict[str, str] = {}

    for line_number, line in enumerate(lines[1:], start=2):
        tokens = line.split()
        if len(tokens) % 2:
            warnings.warn(f"Ignoring dangling key {tokens[-1]!r} on line {line_number} of header")

        for i in range(len(tokens) // 2):
            key, value = tokens[i * 2], tokens[i * 2 + 1]

            if key in ASSERTED_KEYS:
                expected = ASSERTED_KEYS[key]
                if value != expected:
                    raise FormatError(f"unsupported {key} {value!r}, expected {expected!r}", path)
                fields[key] = value
            elif key in SPACING_KEYS:
                axis = SPACING_KEYS.index(key)
                if axis >= len(dimensions):
                    raise FormatError(
                        f"{key} given for axis {axis} but only {len(dimensions)} dimensions declared", path
                    )
                spacing[axis] = _parse_spacing(key, value, path)

    return GISHeader(
        dimensions=dimensions,
        spacing=tuple(spacing),
        element_type=fields.get('-type', ELEMENT_TYPE),
        byte_order=fields.get('-bo', BYTE_ORDER),
        storage_model=fields.get('-om', STORAGE_MODEL),
    )


def format_header(header: GISHeader) -> str:
    """Serialize a header so that ``parse_header(format_header(h)) == h``."""
    lines = [' '.join(str(d) for d in header.dimensions)]
    lines.append(f"-type {header.element_type}")

    pairs = [f"{key} {spacing!r}" for key, spacing in zip(SPACING_KEYS, header.spacing)]
    if pairs:
        lines.append(' '.join(pairs))

    lines.append(f"-bo {header.byte_order}")
    lines.append(f"-om {header.storage_model}")
    return '\n'.join(lines) + '\n'


def read_header(basename: str) -> GISHeader:
    """
    Read ``<basename>.dim``.

    Raises:
        FileNotFoundError: If the header file does not exist
        FormatError: If its contents are malformed
    """
    path = Path(f"{basename}.dim")
    text = path.read_text(encoding='utf-8')
    return parse_header(text, str(path))
