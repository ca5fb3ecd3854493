"""
PSFFont - In-Memory PSF Font
============================
Version-tagged header plus an index-addressed glyph store.

Glyph store growth:
- PSF1 holds exactly 256 or 512 glyphs. Adding a glyph at index 256..511
  grows the store to 512 and sets PSF1_MODE512; index 512 and up is
  rejected.
- PSF2 holds header.length glyphs. Adding a glyph past the end grows the
  store to exactly index + 1 slots.

New slots are sparse (no bitmap) until add_or_reset() initialises them.
Growth builds a new slot list, so glyph handles obtained before a growing
call must be fetched again afterwards.

Usage:
    from psftools import PSFFont, STARTSEQ

    font = PSFFont(2, 8, 16)
    glyph = font.add_or_reset(65)
    glyph.set_pixel(3, 4, True)
    font.add_annotation(glyph, ord("A"))
    font.save("out.psf")
"""

import io
import logging

from .. import constants as C
from ..errors import AllocationFailure, InvalidParameters, OutOfRange, ValueTooLarge
from .glyph import Glyph, row_stride
from .header import PSF1Header, PSF2Header

logger = logging.getLogger(__name__)


class PSFFont:
    """
    A PSF font of either revision.

    Args:
        version: PSF revision, 1 or 2
        width: Glyph width in pixels (must be 8 for version 1)
        height: Glyph height in pixels

    Raises:
        InvalidParameters: For any other version, or a zero/illegal size

    Attributes:
        version: 1 or 2
        header: PSF1Header or PSF2Header, matching version
    """

    def __init__(self, version: int, width: int, height: int):
        if version not in (1, 2):
            raise InvalidParameters(f"invalid version: {version}")
        if (version == 1 and width != C.PSF1_WIDTH) or width <= 0 or height <= 0:
            raise InvalidParameters(f"invalid char size: {width}x{height} for version {version}")

        self.version = version
        self._glyphs = []
        self._closed = False

        if version == 1:
            if height > 0xFF:
                raise InvalidParameters(f"invalid char size: height {height} exceeds 255 for version 1")
            self.header = PSF1Header(mode=0, charsize=height)
            self._realloc(C.PSF1_BASE_GLYPHS)
        else:
            self.header = PSF2Header(
                version=0,
                headersize=C.PSF2_HEADER_SIZE,
                flags=0,
                length=0,
                charsize=row_stride(width) * height,
                height=height,
                width=width,
            )

    @classmethod
    def from_header(cls, header) -> "PSFFont":
        """
        Build an empty font around a header decoded from a file.

        The store is sized from the header and all slots are sparse. Header
        fields are taken as-is, including a charsize that disagrees with
        width and height.
        """
        if isinstance(header, PSF1Header):
            font = cls(1, C.PSF1_WIDTH, header.charsize)
            font.header.mode = header.mode
            font._realloc(header.length)
        elif isinstance(header, PSF2Header):
            font = cls(2, header.width, header.height)
            font.header = header
            length, header.length = header.length, 0
            font._realloc(length)
        else:
            raise TypeError(f"not a PSF header: {header!r}")
        return font

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def width(self) -> int: return self.header.width

    @property
    def height(self) -> int: return self.header.height

    @property
    def charsize(self) -> int: return self.header.charsize

    @property
    def num_glyphs(self) -> int: return self.header.length

    @property
    def has_unicode_table(self) -> bool:
        if self.version == 1:
            return bool(self.header.mode & C.PSF1_MODEHASTAB)
        return bool(self.header.flags & C.PSF2_HAS_UNICODE_TABLE)

    @property
    def glyphs(self) -> list:
        """The glyph store. Do not keep across store-growing calls."""
        return self._glyphs

    # =========================================================================
    # Glyph Store
    # =========================================================================

    def _new_slot(self) -> Glyph:
        return Glyph(self.width, self.height, self.charsize)

    def _realloc(self, num: int) -> bool:
        """
        Grow the store to hold at least `num` glyphs.

        Returns:
            True if the store grew, False if it was already big enough

        Raises:
            OutOfRange: PSF1 font asked for more than 512 glyphs
            AllocationFailure: Out of memory
        """
        have = len(self._glyphs)
        if self.version == 1:
            if num > C.PSF1_MAX_GLYPHS:
                raise OutOfRange(f"no more than {C.PSF1_MAX_GLYPHS} chars for a version 1 psf font")
            want = C.PSF1_BASE_GLYPHS if num <= C.PSF1_BASE_GLYPHS else C.PSF1_MAX_GLYPHS
        else:
            want = num
        if want <= have:
            return False

        try:
            self._glyphs = self._glyphs + [self._new_slot() for _ in range(want - have)]
        except MemoryError as e:
            raise AllocationFailure(f"cannot allocate {want} glyph slots") from e

        if self.version == 1:
            if want == C.PSF1_MAX_GLYPHS:
                self.header.mode |= C.PSF1_MODE512
        else:
            self.header.length = want
        logger.debug("glyph store grown from %d to %d slots", have, want)
        return True

    def get(self, index: int) -> Glyph:
        """
        Return the glyph at `index`.

        Raises:
            OutOfRange: If index >= num_glyphs
        """
        if not 0 <= index < min(self.num_glyphs, len(self._glyphs)):
            raise OutOfRange(f"glyph {index} out of range (font has {self.num_glyphs})")
        return self._glyphs[index]

    def add_or_reset(self, index: int) -> Glyph:
        """
        Make glyph `index` exist and return it freshly initialised.

        Grows the store if needed. Any bitmap or annotations previously held
        at that slot are discarded.

        Raises:
            OutOfRange: Negative index, or beyond 511 for a PSF1 font
        """
        if index < 0:
            raise OutOfRange(f"invalid glyph number: {index}")
        if index >= self.num_glyphs:
            self._realloc(index + 1)
        glyph = self._glyphs[index]
        glyph.reset()
        return glyph

    def __len__(self) -> int:
        return self.num_glyphs

    def __getitem__(self, index: int) -> Glyph:
        return self.get(index)

    def __iter__(self):
        return iter(self._glyphs[:self.num_glyphs])

    # =========================================================================
    # Unicode Table
    # =========================================================================

    def add_annotation(self, glyph: Glyph, value: int) -> None:
        """
        Append a Unicode value to a glyph's table entry.

        For a sequence, add STARTSEQ and then the code points that make it
        up. Also marks the font as having a Unicode table (and, for PSF1,
        sequences if `value` is STARTSEQ).

        Raises:
            ValueTooLarge: PSF1 font and value > 0xFFFF; glyph is unchanged
        """
        if self.version == 1 and value > C.PSF1_MAX_UCVAL:
            raise ValueTooLarge(f"unicode value 0x{value:x} too big for psf1")
        if not 0 <= value <= 0xFFFFFFFF:
            raise ValueTooLarge(f"unicode value {value} out of range")

        glyph.annotations.append(value)
        if self.version == 1:
            self.header.mode |= C.PSF1_MODEHASTAB
            if value == C.STARTSEQ:
                self.header.mode |= C.PSF1_MODEHASSEQ
        else:
            self.header.flags |= C.PSF2_HAS_UNICODE_TABLE

    # =========================================================================
    # Load / Save
    # =========================================================================

    @classmethod
    def load(cls, path) -> "PSFFont":
        """Load a PSF1 or PSF2 font from a file path."""
        from ..codec import load
        return load(path)

    @classmethod
    def from_bytes(cls, data: bytes) -> "PSFFont":
        """Decode a PSF1 or PSF2 font from an in-memory byte string."""
        from ..codec import load_from_stream
        return load_from_stream(io.BytesIO(data))

    def save(self, path) -> None:
        """Write the font to a file path."""
        from ..codec import save
        save(self, path)

    def to_bytes(self) -> bytes:
        """Encode the font to a byte string."""
        from ..codec import save_to_stream
        buf = io.BytesIO()
        save_to_stream(self, buf)
        return buf.getvalue()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self) -> None:
        """Release every glyph's buffer and annotations and the store."""
        for glyph in self._glyphs:
            glyph.release()
        self._glyphs = []
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
        return False

    def __repr__(self) -> str:
        return (
            f"PSFFont("
            f"version={self.version}, "
            f"{self.width}x{self.height}, "
            f"glyphs={self.num_glyphs}, "
            f"unicode={self.has_unicode_table})"
        )
