"""
Glyph - Bitmap and Unicode Annotations
======================================
A single PSF glyph: a packed 1-bit bitmap plus the Unicode values it maps.

Bitmap layout (same for both PSF revisions):
- Rows are stored top to bottom, ceil(width / 8) bytes per row
- Within a row, pixels are packed MSB first (x=0 is bit 0x80)
- Trailing bits of the last byte in a row are padding

A glyph may be sparse: its slot exists in the font but it was never
initialised, so it has no buffer. Sparse glyphs read as all-unset and are
written out as zero bytes.
"""

from ..errors import AllocationFailure

# =============================================================================
# Bit Manipulation Constants
# =============================================================================

_BITS_PER_BYTE = 8
_BYTE_MASK = 0xFF

_BIT_MASKS = tuple(1 << (7 - i) for i in range(_BITS_PER_BYTE))
_INV_MASKS = tuple(~(1 << (7 - i)) & _BYTE_MASK for i in range(_BITS_PER_BYTE))


def row_stride(width: int) -> int:
    """Bytes per bitmap row for a glyph `width` pixels wide."""
    return (width + 7) >> 3


class Glyph:
    """
    One glyph slot of a PSF font.

    Glyphs are created and handed out by PSFFont. A glyph object obtained
    from the font may be invalidated by any call that grows the font's
    glyph store; fetch it again after such a call.

    Attributes:
        data: Bitmap buffer of exactly charsize bytes, or None if sparse
        annotations: Unicode values in table order; STARTSEQ opens a sequence
    """

    __slots__ = ("data", "annotations", "_width", "_height", "_stride", "_charsize")

    def __init__(self, width: int, height: int, charsize: int, data=None):
        self._width = width
        self._height = height
        self._stride = row_stride(width)
        self._charsize = charsize
        self.data = data
        self.annotations = []

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def width(self) -> int: return self._width

    @property
    def height(self) -> int: return self._height

    @property
    def charsize(self) -> int: return self._charsize

    @property
    def is_sparse(self) -> bool: return self.data is None

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def reset(self) -> None:
        """Drop bitmap and annotations and allocate a fresh zeroed buffer."""
        self.data = None
        self.annotations = []
        try:
            self.data = bytearray(self._charsize)
        except MemoryError as e:
            raise AllocationFailure(f"cannot allocate {self._charsize} byte glyph") from e

    def release(self) -> None:
        """Free the bitmap and annotations, leaving a sparse slot."""
        self.data = None
        self.annotations = []

    def to_bytes(self) -> bytes:
        """Bitmap as written to a file: zero-filled if sparse."""
        if self.data is None:
            return bytes(self._charsize)
        return bytes(self.data)

    # =========================================================================
    # Pixel Ops
    # =========================================================================

    def _locate(self, x: int, y: int):
        """Byte index and bit for (x, y), or None if not addressable."""
        if self.data is None:
            return None
        if not (0 <= x < self._width and 0 <= y < self._height):
            return None
        idx = y * self._stride + (x >> 3)
        if idx >= len(self.data):
            return None
        return idx, x & 7

    def set_pixel(self, x: int, y: int, on: bool) -> bool:
        """
        Set or clear one pixel.

        Args:
            x: Column, 0 is leftmost
            y: Row, 0 is topmost
            on: True sets the bit, False clears it

        Returns:
            False (without changing anything) if (x, y) is out of bounds or
            the glyph is sparse, True otherwise
        """
        loc = self._locate(x, y)
        if loc is None:
            return False
        idx, bit = loc
        if on: self.data[idx] |= _BIT_MASKS[bit]
        else: self.data[idx] &= _INV_MASKS[bit]
        return True

    def is_background(self, x: int, y: int) -> bool:
        """
        True if the pixel's bit is clear.

        Out-of-bounds reads and reads from a sparse glyph return False, not
        True. Use is_foreground() for the conventional reading.
        """
        loc = self._locate(x, y)
        if loc is None:
            return False
        idx, bit = loc
        return not (self.data[idx] & _BIT_MASKS[bit])

    # Older name, same polarity as is_background()
    get_pixel = is_background

    def is_foreground(self, x: int, y: int) -> bool:
        """True if the pixel's bit is set; False when out of bounds or sparse."""
        loc = self._locate(x, y)
        if loc is None:
            return False
        idx, bit = loc
        return bool(self.data[idx] & _BIT_MASKS[bit])

    def rows(self):
        """Yield each row as a list of booleans, True where the bit is set."""
        for y in range(self._height):
            yield [self.is_foreground(x, y) for x in range(self._width)]

    # =========================================================================
    # Comparison
    # =========================================================================

    def __eq__(self, other) -> bool:
        if not isinstance(other, Glyph):
            return NotImplemented
        return (
            (self._width, self._height, self._charsize) ==
            (other._width, other._height, other._charsize) and
            self.to_bytes() == other.to_bytes() and
            self.annotations == other.annotations
        )

    def __repr__(self) -> str:
        state = "sparse" if self.data is None else self.data.hex()
        return f"Glyph({self._width}x{self._height}, {state}, annotations={self.annotations!r})"
