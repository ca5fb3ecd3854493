"""
BDF Import
==========
Builds a PSFFont from a BDF bitmap font using bdflib.

Glyphs are placed on a cell of FONT_ASCENT + FONT_DESCENT rows and the
widest advance in the font, aligned on the baseline. Two placements:

- by encoding (default): glyph N of the PSF font is the BDF glyph with
  ENCODING N; glyphs beyond the format's limit are skipped
- unicode: glyphs are packed in code point order and each one is tagged
  with its code point in the Unicode table
"""

import logging
from math import ceil

from bdflib import reader

from .. import constants as C
from ..errors import InvalidParameters
from ..model import PSFFont

logger = logging.getLogger(__name__)

DEFAULT_VERSION = 2


def _glyph_rows(glyph, font_ascent: int, font_height: int, bytes_per_row: int) -> bytes:
    """Render one BDF glyph into `font_height` packed MSB-first rows."""
    # BDF data is stored bottom-to-top
    glyph_data = list(reversed(glyph.data))
    baseline_row = font_ascent - 1
    glyph_bottom = baseline_row - glyph.bbY
    glyph_top = glyph_bottom - glyph.bbH + 1

    shift = (bytes_per_row * 8) - glyph.bbW
    row_mask = (1 << (bytes_per_row * 8)) - 1
    rows = []
    for y in range(font_height):
        row_bits = 0
        src_row = y - glyph_top
        if 0 <= src_row < len(glyph_data):
            src_bits = glyph_data[src_row]
            if shift > glyph.bbX:
                row_bits = src_bits << (shift - glyph.bbX)
            else:
                row_bits = src_bits >> (glyph.bbX - shift)
            row_bits &= row_mask
        rows.append(row_bits.to_bytes(bytes_per_row, "big"))
    return b"".join(rows)


def read_bdf(f, version: int = DEFAULT_VERSION, unicode: bool = False) -> PSFFont:
    """
    Convert a BDF font read from binary stream `f`.

    Args:
        f: Binary stream holding the BDF source
        version: PSF version of the result
        unicode: Pack glyphs and record code points instead of placing
            them by encoding

    Returns:
        The converted font

    Raises:
        InvalidParameters: Font too wide for PSF1, or empty
    """
    bdf = reader.read_bdf(f)
    props = bdf.properties
    font_ascent = props.get(b"FONT_ASCENT", 8)
    font_descent = props.get(b"FONT_DESCENT", 0)
    font_height = font_ascent + font_descent

    glyphs = sorted(
        (g for g in bdf.glyphs if g.codepoint is not None and g.codepoint >= 0),
        key=lambda g: g.codepoint,
    )
    if not glyphs:
        raise InvalidParameters("BDF font has no encoded glyphs")

    max_width = max(g.advance for g in glyphs)
    if version == 1:
        if max_width > C.PSF1_WIDTH:
            raise InvalidParameters(f"glyphs {max_width} pixels wide do not fit a version 1 font")
        max_width = C.PSF1_WIDTH
    bytes_per_row = ceil(max_width / 8)
    logger.info("BDF font: %d glyphs, %dx%d", len(glyphs), max_width, font_height)

    skipped = 0
    if unicode and version == 1:
        fitting = [g for g in glyphs if g.codepoint <= C.PSF1_MAX_UCVAL]
        skipped = len(glyphs) - len(fitting)
        glyphs = fitting

    font = PSFFont(version, max_width, font_height)
    limit = C.PSF1_MAX_GLYPHS if version == 1 else None
    for position, bdf_glyph in enumerate(glyphs):
        index = position if unicode else bdf_glyph.codepoint
        if limit is not None and index >= limit:
            skipped += 1
            continue
        glyph = font.add_or_reset(index)
        glyph.data[:] = _glyph_rows(bdf_glyph, font_ascent, font_height, bytes_per_row)
        if unicode:
            font.add_annotation(glyph, bdf_glyph.codepoint)
    if skipped:
        logger.warning("skipped %d glyphs that do not fit a version %d font", skipped, version)
    return font


def load_bdf(path, version: int = DEFAULT_VERSION, unicode: bool = False) -> PSFFont:
    """Convert the BDF font stored at `path`. See read_bdf()."""
    with open(path, "rb") as f:
        return read_bdf(f, version=version, unicode=unicode)
