"""
Exception types for GIS field loading.

I/O failures are not wrapped: a missing or unreadable file surfaces as the
built-in OSError subclass raised by the operating system call.
"""

from typing import Optional


class GISError(Exception):
    """Base class for errors raised by gisdeform."""


class FormatError(GISError, ValueError):
    """
    A header or data file does not match the single supported GIS dialect.

    Raised for unparsable dimension lines, non-numeric spacing values,
    unsupported element type / byte order / storage model, and data files
    whose size disagrees with the declared dimensions.
    """

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)
