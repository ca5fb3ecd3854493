"""
Glyph bitmap block I/O shared by both PSF revisions.
"""

from ..errors import AllocationFailure, TruncatedInput
from .binary import read_exact, write_bytes


def read_bitmaps(stream, count: int, charsize: int) -> bytes:
    """
    Read `count` consecutive bitmaps of `charsize` bytes each.

    Raises:
        TruncatedInput: If the stream holds fewer bytes, or the block is
            larger than any stream can hold
        AllocationFailure: If the block is too large to hold in memory
    """
    try:
        return read_exact(stream, count * charsize)
    except OverflowError as e:
        raise TruncatedInput(f"{count} glyphs of {charsize} bytes exceed the input") from e
    except MemoryError as e:
        raise AllocationFailure(f"cannot allocate {count} glyphs of {charsize} bytes") from e


def fill_glyphs(font, data: bytes) -> None:
    """Hand each glyph of `font` its slice of a bitmap block."""
    size = font.charsize
    for i, glyph in enumerate(font):
        glyph.data = bytearray(data[i * size:(i + 1) * size])


def write_bitmaps(stream, font) -> None:
    """Write every glyph's bitmap in order, zero-filled for sparse slots."""
    write_bytes(stream, b"".join(glyph.to_bytes() for glyph in font))
