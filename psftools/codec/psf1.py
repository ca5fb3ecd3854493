"""
PSF1 Codec
==========
Reads and writes version 1 PC Screen Fonts.

Format Layout:
    [Header: 4 bytes]
    [Bitmaps: N x charsize bytes]       N = 512 if mode & 0x01 else 256
    [Unicode table: N entries]          only if mode & (0x02 | 0x04)

Header Structure (4 bytes):
    - Magic: 0x36 0x04 (2 bytes)
    - Mode: 1 byte (bit 0=512 glyphs, bit 1=has table, bit 2=has sequences)
    - Charsize: 1 byte (bytes per glyph, equal to height; width is always 8)

Unicode table entry:
    16-bit little-endian words terminated by 0xFFFF. The word 0xFFFE starts
    a sequence; the words up to the next 0xFFFE or 0xFFFF belong to it.
"""

import logging
import struct

from .. import constants as C
from ..errors import UnrecognizedFormat, ValueTooLarge
from ..model import PSF1Header, PSFFont
from .binary import WORD, read_exact, read_word, write_bytes
from .bitmap import fill_glyphs, read_bitmaps, write_bitmaps

logger = logging.getLogger(__name__)

_HEADER = struct.Struct("<2sBB")


def load(stream, first: bytes = b"") -> PSFFont:
    """
    Decode a PSF1 font.

    Args:
        stream: Binary stream positioned at the font start, or just past
            `first` if the caller already consumed part of the magic
        first: Magic bytes already read from the stream

    Returns:
        The decoded font

    Raises:
        UnrecognizedFormat: Bad magic number
        TruncatedInput: Stream ends inside the header, bitmaps or table
    """
    hdr = first + read_exact(stream, _HEADER.size - len(first))
    magic, mode, charsize = _HEADER.unpack(hdr)
    if magic != C.PSF1_MAGIC:
        raise UnrecognizedFormat("invalid psf1 magic number")
    if mode > C.PSF1_MAXMODE:
        logger.warning("psf1 mode 0x%02x has unknown bits set", mode)

    header = PSF1Header(mode=mode, charsize=charsize)
    logger.debug("psf1 header: %r", header)
    font = PSFFont.from_header(header)
    try:
        fill_glyphs(font, read_bitmaps(stream, font.num_glyphs, charsize))
        if header.has_table:
            _read_table(stream, font)
    except Exception:
        font.close()
        raise
    return font


def _read_table(stream, font: PSFFont) -> None:
    for glyph in font:
        while True:
            ucval = read_word(stream)
            if ucval == C.PSF1_SEPARATOR:
                break
            glyph.annotations.append(ucval)


def save(font: PSFFont, stream) -> None:
    """
    Encode a PSF1 font.

    The Unicode table is written if the header mode announces one, with a
    bare separator for glyphs that have no annotations.

    Raises:
        ValueTooLarge: An annotation does not fit in 16 bits
        PSFIOError: Write failure
    """
    header = font.header
    write_bytes(stream, _HEADER.pack(C.PSF1_MAGIC, header.mode, header.charsize))
    write_bitmaps(stream, font)
    if header.has_table:
        write_bytes(stream, _encode_table(font))


def _encode_table(font: PSFFont) -> bytes:
    out = bytearray()
    for index, glyph in enumerate(font):
        for ucval in glyph.annotations:
            if ucval > C.PSF1_MAX_UCVAL:
                raise ValueTooLarge(f"glyph {index}: unicode value 0x{ucval:x} too big for psf1")
            out += WORD.pack(ucval)
        out += WORD.pack(C.PSF1_SEPARATOR)
    return bytes(out)
