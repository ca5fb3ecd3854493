"""
Font information summary, in the format of the psfid tool:

    " v:2 w:8 h:16 n:512 u:1"
"""

from .. import constants as C
from ..model import PSFFont

DEFAULT_FIELDS = "vwhnu"


def field_value(font: PSFFont, field: str) -> int:
    if field == "v": return font.version
    if field == "w": return font.width
    if field == "h": return font.height
    if field == "n": return font.num_glyphs
    if field == "u": return int(font.has_unicode_table)
    raise KeyError(field)


def encoded_chars(font: PSFFont) -> list:
    """
    Sorted list of the code points the font encodes.

    Glyphs without annotations count as encoding their own index.
    Sequence markers are not code points and are left out.
    """
    values = []
    for index, glyph in enumerate(font):
        if glyph.annotations:
            values.extend(v for v in glyph.annotations if v != C.STARTSEQ)
        else:
            values.append(index)
    values.sort()
    return values


def format_table(font: PSFFont) -> str:
    values = encoded_chars(font)
    lines = [f"{len(values)} chars encoded:"]
    lines.extend(f"U+{v:05x}" for v in values)
    return "\n".join(lines) + "\n"


def describe(font: PSFFont, fields: str = DEFAULT_FIELDS) -> str:
    """
    Summarise `font`.

    Args:
        font: Font to describe
        fields: Characters from "vwhnul" in output order: version, width,
            height, glyph count, Unicode table present, encoded char list

    Returns:
        The summary, newline terminated
    """
    out = []
    pending = []
    for field in fields:
        if field == "l":
            if pending:
                out.append("".join(pending) + "\n")
                pending = []
            out.append(format_table(font))
        else:
            pending.append(f" {field}:{field_value(font, field)}")
    if pending:
        out.append("".join(pending) + "\n")
    return "".join(out)
