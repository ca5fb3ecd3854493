import io

import pytest

import psftools


class ShortWriter(io.RawIOBase):
    """Binary sink that accepts at most `limit` bytes per write."""

    def __init__(self, limit):
        self.limit = limit
        self.data = bytearray()

    def writable(self):
        return True

    def write(self, b):
        chunk = bytes(b[:self.limit])
        self.data += chunk
        return len(chunk)


class FailingReader(io.RawIOBase):
    def readable(self):
        return True

    def read(self, size=-1):
        raise OSError("device gone")


@pytest.fixture
def psf2_font():
    """8x8 PSF2 font with two drawn glyphs and a Unicode table."""
    font = psftools.PSFFont(2, 8, 8)
    glyph = font.add_or_reset(0)
    glyph.set_pixel(0, 0, True)
    font.add_annotation(glyph, 0x41)
    glyph = font.add_or_reset(1)
    glyph.set_pixel(7, 7, True)
    font.add_annotation(glyph, 0xE9)
    font.add_annotation(glyph, psftools.STARTSEQ)
    font.add_annotation(glyph, 0x65)
    font.add_annotation(glyph, 0x301)
    yield font
    font.close()


@pytest.fixture
def psf1_font():
    """Plain 256 glyph PSF1 font, 8x16, no Unicode table."""
    font = psftools.PSFFont(1, 8, 16)
    for index in range(font.num_glyphs):
        glyph = font.add_or_reset(index)
        glyph.set_pixel(index % 8, index % 16, True)
    yield font
    font.close()
