"""
PSF Headers
===========
Header payloads for the two PSF revisions.

A font carries exactly one of these, selected by its version tag. The two
shapes share no base class: codec and model code switch on the version
once and then use the matching header's fields directly.
"""

from .. import constants as C


class PSF1Header:
    """
    PSF version 1 header.

    Attributes:
        mode: Bitmask of PSF1_MODE512 / PSF1_MODEHASTAB / PSF1_MODEHASSEQ
        charsize: Bytes per glyph, equal to the glyph height
    """

    def __init__(self, mode: int = 0, charsize: int = 0):
        self.mode = mode
        self.charsize = charsize

    @property
    def width(self) -> int:
        return C.PSF1_WIDTH

    @property
    def height(self) -> int:
        return self.charsize

    @property
    def length(self) -> int:
        return C.PSF1_MAX_GLYPHS if self.mode & C.PSF1_MODE512 else C.PSF1_BASE_GLYPHS

    @property
    def has_table(self) -> bool:
        return bool(self.mode & (C.PSF1_MODEHASTAB | C.PSF1_MODEHASSEQ))

    def __eq__(self, other) -> bool:
        if not isinstance(other, PSF1Header):
            return NotImplemented
        return (self.mode, self.charsize) == (other.mode, other.charsize)

    def __repr__(self) -> str:
        return f"PSF1Header(mode=0x{self.mode:02x}, charsize={self.charsize})"


class PSF2Header:
    """
    PSF version 2 header.

    Attributes:
        version: Header format revision (0 is the only one defined)
        headersize: Offset of the bitmaps in the file
        flags: Bitmask, PSF2_HAS_UNICODE_TABLE is the only defined bit
        length: Number of glyphs
        charsize: Bytes per glyph, height * ceil(width / 8)
        height: Glyph height in pixels
        width: Glyph width in pixels
    """

    def __init__(
        self,
        version: int = 0,
        headersize: int = C.PSF2_HEADER_SIZE,
        flags: int = 0,
        length: int = 0,
        charsize: int = 0,
        height: int = 0,
        width: int = 0,
    ):
        self.version = version
        self.headersize = headersize
        self.flags = flags
        self.length = length
        self.charsize = charsize
        self.height = height
        self.width = width

    @property
    def has_table(self) -> bool:
        return bool(self.flags & C.PSF2_HAS_UNICODE_TABLE)

    def fields(self) -> tuple:
        """Header fields in on-disk order (after the magic)."""
        return (self.version, self.headersize, self.flags, self.length,
                self.charsize, self.height, self.width)

    def __eq__(self, other) -> bool:
        if not isinstance(other, PSF2Header):
            return NotImplemented
        return self.fields() == other.fields()

    def __repr__(self) -> str:
        return (
            f"PSF2Header("
            f"version={self.version}, "
            f"headersize={self.headersize}, "
            f"flags=0x{self.flags:x}, "
            f"length={self.length}, "
            f"charsize={self.charsize}, "
            f"{self.width}x{self.height})"
        )
