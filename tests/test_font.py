import pytest

import psftools
from psftools import (
    STARTSEQ,
    InvalidParameters,
    OutOfRange,
    PSF1Header,
    PSF2Header,
    PSFFont,
    ValueTooLarge,
)
from psftools import constants as C


# =============================================================================
# Create
# =============================================================================

def test_new_psf1():
    font = psftools.new(1, 8, 16)
    assert font.version == 1
    assert font.num_glyphs == 256
    assert len(font.glyphs) == 256
    assert font.charsize == 16
    assert font.header == PSF1Header(mode=0, charsize=16)
    assert not font.has_unicode_table
    assert all(g.is_sparse for g in font)


def test_new_psf2():
    font = PSFFont(2, 12, 20)
    assert font.num_glyphs == 0
    assert font.charsize == 40
    assert font.header.headersize == 32
    assert font.header.version == 0
    assert font.header.flags == 0


@pytest.mark.parametrize("version,width,height", [
    (0, 8, 8),
    (3, 8, 8),
    (1, 9, 16),
    (1, 7, 16),
    (1, 8, 0),
    (2, 0, 8),
    (2, 8, 0),
    (1, 8, 256),
])
def test_invalid_parameters(version, width, height):
    with pytest.raises(InvalidParameters):
        PSFFont(version, width, height)


def test_invalid_parameters_is_value_error():
    with pytest.raises(ValueError):
        PSFFont(1, 16, 16)


# =============================================================================
# Glyph Store
# =============================================================================

def test_psf1_grows_to_512():
    font = PSFFont(1, 8, 8)
    glyph = font.add_or_reset(300)
    assert font.num_glyphs == 512
    assert font.header.mode & C.PSF1_MODE512
    assert font.get(300) is glyph
    assert not glyph.is_sparse
    assert font.get(299).is_sparse


def test_psf1_stays_256_below_limit():
    font = PSFFont(1, 8, 8)
    font.add_or_reset(255)
    assert font.num_glyphs == 256
    assert font.header.mode == 0


def test_psf1_rejects_index_512():
    font = PSFFont(1, 8, 8)
    with pytest.raises(OutOfRange):
        font.add_or_reset(512)
    assert font.num_glyphs == 256


def test_psf2_grows_to_index_plus_one():
    font = PSFFont(2, 8, 8)
    font.add_or_reset(4)
    assert font.num_glyphs == 5
    assert font.header.length == 5
    font.add_or_reset(2)
    assert font.num_glyphs == 5
    font.add_or_reset(1000)
    assert font.num_glyphs == 1001


def test_negative_index():
    font = PSFFont(2, 8, 8)
    with pytest.raises(OutOfRange):
        font.add_or_reset(-1)


def test_get_out_of_range():
    font = PSFFont(2, 8, 8)
    with pytest.raises(OutOfRange):
        font.get(0)
    font.add_or_reset(0)
    assert font[0] is font.get(0)
    with pytest.raises(IndexError):
        font[1]


def test_add_or_reset_discards_previous_glyph():
    font = PSFFont(2, 8, 8)
    glyph = font.add_or_reset(3)
    glyph.set_pixel(1, 1, True)
    font.add_annotation(glyph, 0x41)
    glyph = font.add_or_reset(3)
    assert glyph.data == bytearray(8)
    assert glyph.annotations == []


def test_iteration_and_len():
    font = PSFFont(2, 8, 8)
    font.add_or_reset(2)
    assert len(font) == 3
    assert [g.is_sparse for g in font] == [True, True, False]


def test_from_header_keeps_fields():
    header = PSF2Header(version=0, headersize=32, flags=1, length=3, charsize=16, height=8, width=16)
    font = PSFFont.from_header(header)
    assert font.num_glyphs == 3
    assert font.has_unicode_table
    assert font.width == 16

    font = PSFFont.from_header(PSF1Header(mode=C.PSF1_MODE512 | C.PSF1_MODEHASTAB, charsize=14))
    assert font.num_glyphs == 512
    assert font.height == 14
    assert font.has_unicode_table


# =============================================================================
# Unicode Annotations
# =============================================================================

def test_psf1_annotation_flags():
    font = PSFFont(1, 8, 8)
    glyph = font.add_or_reset(0)
    font.add_annotation(glyph, 0x41)
    assert font.header.mode == C.PSF1_MODEHASTAB
    font.add_annotation(glyph, STARTSEQ)
    assert font.header.mode == C.PSF1_MODEHASTAB | C.PSF1_MODEHASSEQ
    assert glyph.annotations == [0x41, STARTSEQ]


def test_psf1_annotation_too_large():
    font = PSFFont(1, 8, 8)
    glyph = font.add_or_reset(0)
    with pytest.raises(ValueTooLarge):
        font.add_annotation(glyph, 0x10000)
    assert glyph.annotations == []
    assert font.header.mode == 0


def test_psf2_annotation_flag():
    font = PSFFont(2, 8, 8)
    glyph = font.add_or_reset(0)
    font.add_annotation(glyph, 0x1F600)
    assert font.header.flags & C.PSF2_HAS_UNICODE_TABLE
    assert glyph.annotations == [0x1F600]


def test_annotation_outside_u32():
    font = PSFFont(2, 8, 8)
    glyph = font.add_or_reset(0)
    with pytest.raises(ValueTooLarge):
        font.add_annotation(glyph, 1 << 32)
    assert glyph.annotations == []


# =============================================================================
# Lifecycle
# =============================================================================

def test_close_releases_store():
    font = PSFFont(1, 8, 8)
    glyph = font.add_or_reset(0)
    font.close()
    assert font.closed
    assert font.glyphs == []
    assert glyph.is_sparse


def test_context_manager_closes():
    with PSFFont(2, 8, 8) as font:
        font.add_or_reset(0)
    assert font.closed
