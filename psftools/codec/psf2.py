"""
PSF2 Codec
==========
Reads and writes version 2 PC Screen Fonts.

Format Layout:
    [Header: headersize bytes, 32 for revision 0]
    [Bitmaps: length x charsize bytes]
    [Unicode table: length entries]     only if flags & 0x01

Header Structure (32 bytes):
    - Magic: 0x72 0xB5 0x4A 0x86 (4 bytes)
    - Version: 4 bytes (header revision, 0)
    - Header size: 4 bytes (offset of the bitmaps)
    - Flags: 4 bytes (bit 0=has Unicode table)
    - Length: 4 bytes (number of glyphs)
    - Charsize: 4 bytes (bytes per glyph)
    - Height: 4 bytes
    - Width: 4 bytes
    All fields little-endian.

Unicode table entry:
    UTF-8 encoded code points terminated by the byte 0xFF. The byte 0xFE
    starts a sequence and is stored in the glyph as STARTSEQ (0xFFFE).
"""

import logging
import struct

from .. import constants as C
from ..errors import InvalidEncoding, TruncatedInput, UnrecognizedFormat
from ..model import PSF2Header, PSFFont
from ..model.glyph import row_stride
from .binary import read_exact, read_ints, read_remaining, write_bytes
from .bitmap import fill_glyphs, read_bitmaps, write_bitmaps

logger = logging.getLogger(__name__)

_FIELDS = struct.Struct("<7I")


def _utf8_length(lead: int) -> int:
    """Sequence length announced by a UTF-8 lead byte, 0 if not a lead."""
    if lead < 0x80: return 1
    if 0xC0 <= lead < 0xE0: return 2
    if 0xE0 <= lead < 0xF0: return 3
    if 0xF0 <= lead < 0xF5: return 4
    return 0


def load(stream, first: bytes = b"") -> PSFFont:
    """
    Decode a PSF2 font.

    Args:
        stream: Binary stream positioned at the font start, or just past
            `first` if the caller already consumed part of the magic
        first: Magic bytes already read from the stream

    Returns:
        The decoded font

    Raises:
        UnrecognizedFormat: Bad magic number, header size or glyph geometry
        TruncatedInput: Stream ends inside the header, bitmaps or table
        InvalidEncoding: Malformed UTF-8 in the Unicode table
    """
    magic = first + read_exact(stream, len(C.PSF2_MAGIC) - len(first))
    if magic != C.PSF2_MAGIC:
        raise UnrecognizedFormat("invalid psf2 magic number")

    header = PSF2Header(*read_ints(stream, 7))
    logger.debug("psf2 header: %r", header)
    if header.headersize < C.PSF2_HEADER_SIZE:
        raise UnrecognizedFormat(f"psf2 header size {header.headersize} is too small")
    if header.width == 0 or header.height == 0:
        raise UnrecognizedFormat(f"psf2 glyph size {header.width}x{header.height} is empty")
    if header.charsize < header.height * row_stride(header.width):
        raise UnrecognizedFormat(
            f"psf2 charsize {header.charsize} too small for {header.width}x{header.height} glyphs")
    if header.version > C.PSF2_MAXVERSION:
        logger.warning("psf2 header revision %d is newer than %d", header.version, C.PSF2_MAXVERSION)
    if header.headersize > C.PSF2_HEADER_SIZE:
        logger.debug("skipping %d extra header bytes", header.headersize - C.PSF2_HEADER_SIZE)
        read_exact(stream, header.headersize - C.PSF2_HEADER_SIZE)

    # Read before allocating so a bogus length fails on the data, not the store
    data = read_bitmaps(stream, header.length, header.charsize)
    font = PSFFont.from_header(header)
    try:
        fill_glyphs(font, data)
        if header.has_table:
            table = read_remaining(stream)
            logger.debug("psf2 unicode table: %d bytes", len(table))
            decode_table(table, font)
    except Exception:
        font.close()
        raise
    return font


def decode_table(table: bytes, font: PSFFont) -> int:
    """
    Decode a PSF2 Unicode table into the glyphs of `font`.

    Args:
        table: Table bytes, from the end of the bitmaps to the end of file
        font: Font whose glyphs receive the annotations

    Returns:
        Number of table bytes consumed; trailing bytes are ignored

    Raises:
        TruncatedInput: Table ends before every glyph's separator
        InvalidEncoding: Malformed UTF-8 sequence
    """
    pos = 0
    end = len(table)
    for index, glyph in enumerate(font):
        while True:
            if pos >= end:
                raise TruncatedInput(f"unicode table ends before glyph {index}")
            byte = table[pos]
            if byte == C.PSF2_SEPARATOR:
                pos += 1
                break
            if byte == C.PSF2_STARTSEQ:
                pos += 1
                glyph.annotations.append(C.STARTSEQ)
                continue

            size = _utf8_length(byte)
            if size == 0:
                raise InvalidEncoding(f"glyph {index}: invalid utf8 lead byte 0x{byte:02x}")
            if pos + size > end:
                raise TruncatedInput(f"glyph {index}: unicode table ends inside a utf8 sequence")
            try:
                char = table[pos:pos + size].decode("utf-8")
            except UnicodeDecodeError as e:
                raise InvalidEncoding(f"glyph {index}: invalid utf8 char") from e
            glyph.annotations.append(ord(char))
            pos += size
    if pos < end:
        logger.debug("ignoring %d bytes after the unicode table", end - pos)
    return pos


def encode_table(font: PSFFont) -> bytes:
    """
    Encode the Unicode table of `font`.

    Raises:
        InvalidEncoding: An annotation is not a valid Unicode scalar
    """
    out = bytearray()
    for index, glyph in enumerate(font):
        for ucval in glyph.annotations:
            if ucval == C.STARTSEQ:
                out.append(C.PSF2_STARTSEQ)
                continue
            try:
                out += chr(ucval).encode("utf-8")
            except (ValueError, OverflowError) as e:
                # chr() rejects > 0x10FFFF, encode() rejects surrogates
                raise InvalidEncoding(f"glyph {index}: invalid unicode value 0x{ucval:x}") from e
        out.append(C.PSF2_SEPARATOR)
    return bytes(out)


def save(font: PSFFont, stream) -> None:
    """
    Encode a PSF2 font.

    Raises:
        InvalidEncoding: An annotation cannot be UTF-8 encoded
        PSFIOError: Write failure
    """
    header = font.header
    # Encode first so a bad value fails before anything is written
    table = encode_table(font) if header.has_table else b""

    write_bytes(stream, C.PSF2_MAGIC + _FIELDS.pack(*header.fields()))
    if header.headersize > C.PSF2_HEADER_SIZE:
        write_bytes(stream, bytes(header.headersize - C.PSF2_HEADER_SIZE))
    write_bitmaps(stream, font)
    write_bytes(stream, table)
