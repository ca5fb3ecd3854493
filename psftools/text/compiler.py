"""
Text Font Compiler
==================
Builds a PSFFont from a text font description.

Format:
    @psf2                   version, @psf1 or @psf2
    Width: 8                optional for @psf1 (always 8)
    Height: 16
    Pixel: #                optional, character that marks a set pixel
    @0: U+0041 ; U+0061 U+0300
    ........                Height rows of Width characters
    ...

Header keys are case-insensitive. Blank lines and lines starting with '#'
are skipped in the header and between glyphs. In a glyph header, ';' or ','
starts a Unicode sequence. A bitmap row may be shorter than Width (missing
pixels are unset) but may not carry anything but whitespace past Width.
"""

import logging
import re

from .. import constants as C
from ..errors import OutOfRange, PSFError, TextFormatError, ValueTooLarge
from ..model import PSFFont

logger = logging.getLogger(__name__)

DEFAULT_PIXEL = "#"
MAX_CODEPOINT = 0x10FFFF

_VERSION_RE = re.compile(r"@psf(\S*)\s*(#.*)?$", re.IGNORECASE)
_SIZE_RE = re.compile(r"(width|height):\s*(\d*)\s*(#.*)?$", re.IGNORECASE)
_GLYPH_RE = re.compile(r"@(\d+)\s*(?::([^#]*))?(#.*)?$")
_UNICODE_RE = re.compile(r"u\+([0-9a-f]+)$", re.IGNORECASE)
_SEQUENCE_MARKS = (";", ",")


class _Lines:
    """Line source that tracks the 1-based number of the last line read."""

    def __init__(self, lines):
        self._it = iter(lines)
        self.lineno = 0

    def next(self):
        line = next(self._it, None)
        if line is not None:
            self.lineno += 1
            line = line.rstrip("\r\n")
        return line

    def next_content(self):
        """Next line that is neither blank nor a comment."""
        while True:
            line = self.next()
            if line is None:
                return None
            stripped = line.strip()
            if stripped and not stripped.startswith("#"):
                return line


def _parse_pixel(value: str, lineno: int) -> str:
    stripped = value.strip()
    if not stripped:
        # "Pixel: " with only blanks selects the space character
        if value:
            return " "
        raise TextFormatError(lineno, "invalid pixel spec")
    rest = stripped[1:].strip()
    if rest and not rest.startswith("#"):
        raise TextFormatError(lineno, "invalid pixel spec")
    return stripped[0]


def _parse_header(src: _Lines):
    """
    Read header fields up to the first glyph header.

    Returns:
        (version, width, height, pixel, first glyph line or None)
    """
    version = width = height = 0
    pixel = None
    line = src.next_content()
    while line is not None:
        text = line.strip()
        lineno = src.lineno

        if text[:4].lower() == "@psf":
            if version:
                raise TextFormatError(lineno, "duplicate @psf spec")
            m = _VERSION_RE.match(text)
            if not m or m.group(1) not in ("1", "2"):
                raise TextFormatError(lineno, "invalid version spec")
            version = int(m.group(1))
        elif text.lower().startswith(("width:", "height:")):
            m = _SIZE_RE.match(text)
            key = text.split(":", 1)[0].lower()
            if (key == "width" and width) or (key == "height" and height):
                raise TextFormatError(lineno, f"duplicate {key} spec")
            if not m or not m.group(2) or int(m.group(2)) == 0:
                raise TextFormatError(lineno, f"invalid {key} spec")
            if key == "width":
                width = int(m.group(2))
            else:
                height = int(m.group(2))
        elif text[:6].lower() == "pixel:":
            if pixel is not None:
                raise TextFormatError(lineno, "duplicate pixel spec")
            # Keep the raw value: the pixel character is case-sensitive
            value = line.lstrip()[6:]
            pixel = _parse_pixel(value, lineno)
        elif text.startswith("@") and text[1:2].isdigit():
            return version, width, height, pixel, line
        else:
            raise TextFormatError(lineno, "invalid header field")
        line = src.next_content()
    return version, width, height, pixel, None


def _parse_annotations(spec: str, lineno: int) -> list:
    values = []
    for mark in _SEQUENCE_MARKS:
        spec = spec.replace(mark, f" {mark} ")
    for token in spec.split():
        if token in _SEQUENCE_MARKS:
            values.append(C.STARTSEQ)
            continue
        m = _UNICODE_RE.match(token)
        if not m:
            raise TextFormatError(lineno, "invalid unicode spec")
        value = int(m.group(1), 16)
        if value > MAX_CODEPOINT:
            raise TextFormatError(lineno, "invalid unicode spec")
        values.append(value)
    return values


def _compile_glyph(font: PSFFont, pixel: str, spec: str, src: _Lines) -> None:
    lineno = src.lineno
    m = _GLYPH_RE.match(spec.strip())
    if not m:
        raise TextFormatError(lineno, "invalid char spec")
    index = int(m.group(1))

    try:
        glyph = font.add_or_reset(index)
        for value in _parse_annotations(m.group(2) or "", lineno):
            font.add_annotation(glyph, value)
    except (OutOfRange, ValueTooLarge) as e:
        raise TextFormatError(lineno, str(e)) from e

    width = font.width
    for y in range(font.height):
        row = src.next()
        if row is None:
            raise TextFormatError(src.lineno, "unexpected end of file")
        for x, ch in enumerate(row[:width]):
            glyph.set_pixel(x, y, ch == pixel)
        if row[width:].strip():
            raise TextFormatError(src.lineno, "invalid bitmap data")


def compile_lines(lines) -> PSFFont:
    """
    Compile a text font description.

    Args:
        lines: Iterable of text lines (an open text file works)

    Returns:
        The compiled font

    Raises:
        TextFormatError: Syntax error, with the offending line number
        InvalidParameters: Header describes an impossible font
    """
    src = _Lines(lines)
    version, width, height, pixel, line = _parse_header(src)

    if version == 1 and width == 0:
        width = C.PSF1_WIDTH
    if version == 0 or width == 0 or height == 0:
        raise TextFormatError(0, "incomplete header")
    if pixel is None:
        pixel = DEFAULT_PIXEL

    font = PSFFont(version, width, height)
    logger.debug("compiling psf%d font %dx%d, pixel %r", version, width, height, pixel)
    try:
        while line is not None:
            _compile_glyph(font, pixel, line, src)
            line = src.next_content()
    except PSFError:
        font.close()
        raise
    return font


def compile_text(text: str) -> PSFFont:
    """Compile a text font description held in a string."""
    return compile_lines(text.splitlines())


def compile_file(path) -> PSFFont:
    """Compile the text font description stored at `path`."""
    with open(path, "r", encoding="utf-8") as f:
        return compile_lines(f)
