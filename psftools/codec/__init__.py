"""
PSF binary codec.

Modules:
    binary: Little-endian stream primitives
    bitmap: Glyph bitmap block I/O
    psf1: Version 1 header and 16-bit Unicode table
    psf2: Version 2 header and UTF-8 Unicode table
    loader: Version dispatch and file handling
"""
from .loader import load, load_from_stream, save, save_to_stream

__all__ = [
    "load",
    "load_from_stream",
    "save",
    "save_to_stream",
]
