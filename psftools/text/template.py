"""
Text Font Templates
===================
Generates blank text font descriptions and renumbers glyph headers in
existing ones.
"""

from .. import constants as C
from ..errors import InvalidParameters, TextFormatError

DEFAULT_WIDTH = 8
DEFAULT_HEIGHT = 8
DEFAULT_COUNT = 256


def generate(
    out,
    version: int,
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    count: int = DEFAULT_COUNT,
    unicode: bool = False,
) -> None:
    """
    Write a blank font template.

    Args:
        out: Text stream to write to
        version: PSF version, 1 or 2
        width: Glyph width (must be 8 for version 1)
        height: Glyph height
        count: Number of glyphs (256 or 512 for version 1)
        unicode: Give glyph N the sample annotation U+N

    Raises:
        InvalidParameters: For an impossible combination of the above
    """
    if version not in (1, 2):
        raise InvalidParameters(f"invalid version number: {version}")
    if (version == 1 and width != C.PSF1_WIDTH) or width <= 0:
        suffix = " for version 1 files" if width > 0 else ""
        raise InvalidParameters(f"invalid width{suffix}: {width}")
    if height <= 0:
        raise InvalidParameters(f"invalid height: {height}")
    if version == 1 and count not in (C.PSF1_BASE_GLYPHS, C.PSF1_MAX_GLYPHS):
        raise InvalidParameters("glyph count must be either 256 or 512 for version 1 psf files")
    if count <= 0:
        raise InvalidParameters(f"invalid glyph count: {count}")

    out.write(f"@psf{version}\nWidth: {width}\nHeight: {height}\nPixel: #\n")
    blank_row = "." * width + "\n"
    for ch in range(count):
        out.write(f"@{ch}: U+{ch:04x}\n" if unicode else f"@{ch}\n")
        out.write(blank_row * height)


def renumber(lines, out) -> int:
    """
    Copy a text font description, renumbering glyph headers from 0.

    A glyph header is '@' followed by digits, whitespace or ':'. Anything
    after the old number (annotations, comments) is kept.

    Args:
        lines: Iterable of text lines, line endings included
        out: Text stream to write to

    Returns:
        Number of glyph headers renumbered

    Raises:
        TextFormatError: A line starts with '@' but is neither a glyph
            header nor the @psf version line
    """
    count = 0
    for lineno, line in enumerate(lines, 1):
        stripped = line.lstrip()
        if stripped.startswith("@"):
            after = stripped[1:2]
            if after and (after.isdigit() or after.isspace() or after == ":"):
                indent = line[:len(line) - len(stripped)]
                rest = stripped[1:].lstrip("0123456789")
                line = f"{indent}@{count}{rest}"
                count += 1
            elif stripped[:4].lower() != "@psf":
                raise TextFormatError(lineno, "invalid glyph header")
        out.write(line)
    return count
