"""
Text Font Decompiler
====================
Writes a PSFFont as a text font description that compile_lines() reads
back.

Set pixels are written as '#', unset pixels as '.'. Sequence starts are
written as ',' in the glyph header.
"""

from .. import constants as C
from ..model import Glyph, PSFFont

SET_PIXEL = "#"
UNSET_PIXEL = "."


def format_header(font: PSFFont) -> str:
    return (
        f"@psf{font.version}\n"
        f"Width: {font.width}\n"
        f"Height: {font.height}\n"
        f"Pixel: {SET_PIXEL}\n"
    )


def format_annotations(values) -> str:
    """Glyph header suffix for a list of annotations, '' if empty."""
    if not values:
        return ""
    parts = [":"]
    for value in values:
        if value == C.STARTSEQ:
            parts.append(",")
        else:
            parts.append(f" U+{value:04x}")
    return "".join(parts)


def format_glyph(index: int, glyph: Glyph) -> str:
    lines = [f"@{index}{format_annotations(glyph.annotations)}"]
    for row in glyph.rows():
        lines.append("".join(SET_PIXEL if bit else UNSET_PIXEL for bit in row))
    return "\n".join(lines) + "\n"


def decompile(font: PSFFont, out) -> None:
    """
    Write `font` as text.

    Args:
        font: Font to describe
        out: Text stream to write to
    """
    out.write(format_header(font))
    for index, glyph in enumerate(font):
        out.write(format_glyph(index, glyph))


def decompile_text(font: PSFFont) -> str:
    """Return the text description of `font` as a string."""
    parts = [format_header(font)]
    parts.extend(format_glyph(i, g) for i, g in enumerate(font))
    return "".join(parts)
