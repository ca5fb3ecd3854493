"""
psftools
========
Read, write and edit PC Screen Font (PSF) console fonts, versions 1 and 2.

Architecture
------------
The library is organized into layers:

    text            Text font compiler/decompiler, templates, info, BDF import
       │
       └── codec         Binary load/save, version dispatch
              │
              ├── psf1        4-byte header, 16-bit Unicode table
              ├── psf2        32-byte header, UTF-8 Unicode table
              │
              └── model       PSFFont, Glyph, headers

Quick Start
-----------
    import psftools

    font = psftools.load("default8x16.psf")
    glyph = font.get(65)
    print(font.num_glyphs, font.width, font.height, font.has_unicode_table)

    font = psftools.PSFFont(2, 8, 16)
    glyph = font.add_or_reset(0)
    glyph.set_pixel(0, 0, True)
    font.add_annotation(glyph, 0x2588)
    psftools.save(font, "block.psf")

Pixel reads
-----------
Glyph.is_foreground() is True for a set bit. Glyph.is_background() (and
its alias get_pixel()) is True for a clear bit and False outside the glyph
or for a sparse glyph.

Module Structure
----------------
    psftools/
    ├── constants.py         Magic numbers, mode/flag bits, markers
    ├── errors.py            Exception hierarchy
    ├── model/
    │   ├── header.py        PSF1Header, PSF2Header
    │   ├── glyph.py         Glyph bitmap and annotations
    │   └── font.py          PSFFont and the glyph store
    ├── codec/
    │   ├── binary.py        Little-endian stream primitives
    │   ├── bitmap.py        Glyph bitmap blocks
    │   ├── psf1.py          Version 1 codec
    │   ├── psf2.py          Version 2 codec
    │   └── loader.py        Dispatch and file handling
    ├── text/
    │   ├── compiler.py      Text -> font
    │   ├── decompiler.py    Font -> text
    │   ├── template.py      Templates and renumbering
    │   ├── info.py          Font summary
    │   └── bdf.py           BDF import
    └── cli.py               Command line interface
"""

from .constants import STARTSEQ
from .errors import (
    PSFError,
    InvalidParameters,
    UnrecognizedFormat,
    TruncatedInput,
    InvalidEncoding,
    ValueTooLarge,
    OutOfRange,
    PSFIOError,
    AllocationFailure,
    TextFormatError,
)
from .model import Glyph, PSF1Header, PSF2Header, PSFFont
from .codec import load, load_from_stream, save, save_to_stream


def new(version: int, width: int, height: int) -> PSFFont:
    """Create an empty font. Same as PSFFont(version, width, height)."""
    return PSFFont(version, width, height)


__all__ = [
    # Model
    "PSFFont",
    "Glyph",
    "PSF1Header",
    "PSF2Header",
    "STARTSEQ",
    "new",
    # Codec
    "load",
    "load_from_stream",
    "save",
    "save_to_stream",
    # Errors
    "PSFError",
    "InvalidParameters",
    "UnrecognizedFormat",
    "TruncatedInput",
    "InvalidEncoding",
    "ValueTooLarge",
    "OutOfRange",
    "PSFIOError",
    "AllocationFailure",
    "TextFormatError",
]

__version__ = "1.0.0"
