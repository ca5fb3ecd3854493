"""
In-memory font model.

Modules:
    header: PSF1 and PSF2 header payloads
    glyph: Glyph bitmap with pixel access and Unicode annotations
    font: Font assembler and glyph store
"""
from .header import PSF1Header, PSF2Header
from .glyph import Glyph
from .font import PSFFont

__all__ = [
    "PSF1Header",
    "PSF2Header",
    "Glyph",
    "PSFFont",
]
