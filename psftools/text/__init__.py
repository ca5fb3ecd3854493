"""
Text tools built on the font model.

Modules:
    compiler: Text font description -> PSFFont
    decompiler: PSFFont -> text font description
    template: Blank templates and glyph renumbering
    info: Font summary and encoded character listing
    bdf: BDF font import (bdflib)
"""
from .compiler import compile_file, compile_lines, compile_text
from .decompiler import decompile, decompile_text
from .template import generate, renumber
from .info import describe, encoded_chars

__all__ = [
    "compile_file",
    "compile_lines",
    "compile_text",
    "decompile",
    "decompile_text",
    "generate",
    "renumber",
    "describe",
    "encoded_chars",
]
