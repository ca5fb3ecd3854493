import io
import logging
import struct

import pytest

import psftools
from psftools import (
    STARTSEQ,
    InvalidEncoding,
    PSFFont,
    PSFIOError,
    TruncatedInput,
    UnrecognizedFormat,
    ValueTooLarge,
)
from psftools import constants as C
from psftools.codec import load, load_from_stream, save, save_to_stream
from psftools.codec.psf2 import decode_table, encode_table

from .conftest import ShortWriter


def psf2_bytes(glyphs, charsize=8, height=8, width=8, flags=1, headersize=32, version=0, extra=b""):
    """Hand-built PSF2 file: header, `glyphs` bitmaps, then `extra`."""
    header = C.PSF2_MAGIC + struct.pack(
        "<7I", version, headersize, flags, len(glyphs), charsize, height, width)
    header += bytes(headersize - 32)
    return header + b"".join(glyphs) + extra


def encode(font):
    out = io.BytesIO()
    save_to_stream(font, out)
    return out.getvalue()


def decode(data):
    return load_from_stream(io.BytesIO(data))


# =============================================================================
# Dispatch
# =============================================================================

@pytest.mark.parametrize("data", [b"", b"\x00", b"BM\x00\x00", b"\x37\x04\x00\x08"])
def test_unrecognized_magic(data):
    with pytest.raises(UnrecognizedFormat):
        decode(data)


def test_bad_second_magic_byte():
    with pytest.raises(UnrecognizedFormat):
        decode(b"\x36\x05\x00\x08" + bytes(256 * 8))
    with pytest.raises(UnrecognizedFormat):
        decode(b"\x72\xb5\x4a\x87" + bytes(28))


# =============================================================================
# PSF1
# =============================================================================

def test_psf1_layout():
    font = PSFFont(1, 8, 8)
    glyph = font.add_or_reset(65)
    glyph.set_pixel(0, 0, True)
    data = encode(font)
    assert data[:4] == b"\x36\x04\x00\x08"
    assert len(data) == 4 + 256 * 8
    assert data[4 + 65 * 8] == 0x80


def test_psf1_roundtrip(psf1_font):
    data = encode(psf1_font)
    with decode(data) as font:
        assert font.version == 1
        assert font.header == psf1_font.header
        assert list(font) == list(psf1_font)
        assert encode(font) == data


def test_psf1_table_layout():
    font = PSFFont(1, 8, 8)
    glyph = font.add_or_reset(0)
    font.add_annotation(glyph, 0x41)
    font.add_annotation(glyph, STARTSEQ)
    font.add_annotation(glyph, 0x1234)
    data = encode(font)
    assert data[2] == C.PSF1_MODEHASTAB | C.PSF1_MODEHASSEQ
    table = data[4 + 256 * 8:]
    assert table[:8] == b"\x41\x00\xfe\xff\x34\x12\xff\xff"
    # Every other glyph gets a bare separator
    assert table[8:] == b"\xff\xff" * 255

    with decode(data) as back:
        assert back.get(0).annotations == [0x41, STARTSEQ, 0x1234]
        assert back.get(1).annotations == []


def test_psf1_512_roundtrip():
    font = PSFFont(1, 8, 4)
    glyph = font.add_or_reset(511)
    glyph.set_pixel(7, 3, True)
    data = encode(font)
    assert data[2] == C.PSF1_MODE512
    with decode(data) as back:
        assert back.num_glyphs == 512
        assert back.get(511).is_foreground(7, 3)


def test_psf1_truncated_bitmaps():
    with pytest.raises(TruncatedInput):
        decode(b"\x36\x04\x00\x08" + bytes(100))


def test_psf1_truncated_table():
    data = b"\x36\x04\x02\x08" + bytes(256 * 8) + b"\xff\xff" * 10
    with pytest.raises(TruncatedInput):
        decode(data)


def test_psf1_save_value_too_large():
    font = PSFFont(1, 8, 8)
    glyph = font.add_or_reset(0)
    font.add_annotation(glyph, 0x41)
    glyph.annotations.append(0x10000)
    with pytest.raises(ValueTooLarge):
        encode(font)


# =============================================================================
# PSF2
# =============================================================================

def test_psf2_header_layout(psf2_font):
    data = encode(psf2_font)
    assert data[:4] == b"\x72\xb5\x4a\x86"
    assert struct.unpack("<7I", data[4:32]) == (0, 32, 1, 2, 8, 8, 8)


def test_psf2_roundtrip(psf2_font):
    data = encode(psf2_font)
    with decode(data) as font:
        assert font.version == 2
        assert font.header == psf2_font.header
        assert list(font) == list(psf2_font)
        assert font.get(1).annotations == [0xE9, STARTSEQ, 0x65, 0x301]
        assert encode(font) == data


def test_psf2_wide_glyph_roundtrip():
    font = PSFFont(2, 12, 3)
    glyph = font.add_or_reset(0)
    glyph.set_pixel(11, 2, True)
    data = encode(font)
    assert len(data) == 32 + 6
    assert data[-1] == 0x10
    with decode(data) as back:
        assert back.get(0).is_foreground(11, 2)
        assert back.charsize == 6


def test_psf2_sparse_glyph_written_as_zeros():
    font = PSFFont(2, 8, 8)
    glyph = font.add_or_reset(7)
    glyph.set_pixel(0, 0, True)
    assert font.get(5).is_sparse
    data = encode(font)
    assert len(data) == 32 + 8 * 8
    assert data[32 + 5 * 8:32 + 6 * 8] == bytes(8)
    assert data[32 + 7 * 8] == 0x80


def test_psf2_sequence_decoding():
    data = psf2_bytes([bytes(8)], extra=b"\xfe\x41\x42\xfe\xf0\x9f\x98\x80\xff")
    with decode(data) as font:
        assert font.get(0).annotations == [STARTSEQ, 0x41, 0x42, STARTSEQ, 0x1F600]


def test_psf2_sequence_encoding():
    font = PSFFont(2, 8, 8)
    glyph = font.add_or_reset(0)
    for value in (0x41, STARTSEQ, 0x41, 0x30A):
        font.add_annotation(glyph, value)
    assert encode_table(font) == b"\x41\xfe\x41\xcc\x8a\xff"


def test_psf2_sequence_table_roundtrip():
    table = b"\xfe\x41\x42\xfe\xf0\x9f\x98\x80\xff"
    font = PSFFont(2, 8, 8)
    glyph = font.add_or_reset(0)
    for value in (STARTSEQ, 0x41, 0x42, STARTSEQ, 0x1F600):
        font.add_annotation(glyph, value)
    assert encode_table(font) == table
    with decode(psf2_bytes([bytes(8)], extra=table)) as back:
        assert back.get(0).annotations == glyph.annotations


def test_psf2_no_table_flag_ignores_trailing_bytes():
    data = psf2_bytes([bytes(8)], flags=0, extra=b"\x41\xff")
    with decode(data) as font:
        assert not font.has_unicode_table
        assert font.get(0).annotations == []


def test_psf2_truncated_bitmaps():
    data = psf2_bytes([bytes(8)])[:-3]
    with pytest.raises(TruncatedInput):
        decode(data)


def test_psf2_truncated_header():
    with pytest.raises(TruncatedInput):
        decode(C.PSF2_MAGIC + bytes(10))


def test_psf2_table_missing_separator():
    data = psf2_bytes([bytes(8), bytes(8)], extra=b"\x41\xff\x42")
    with pytest.raises(TruncatedInput):
        decode(data)


def test_psf2_table_cut_inside_utf8():
    data = psf2_bytes([bytes(8)], extra=b"\xe2\x82")
    with pytest.raises(TruncatedInput):
        decode(data)


@pytest.mark.parametrize("table", [
    b"\x80\xff",
    b"\xc3\x41\xff",
    b"\xf5\x80\x80\x80\xff",
    b"\xf8\x80\x80\x80\x80\xff",
])
def test_psf2_invalid_utf8(table):
    with pytest.raises(InvalidEncoding):
        decode(psf2_bytes([bytes(8)], extra=table))


def test_decode_table_ignores_trailing_bytes():
    font = PSFFont(2, 8, 8)
    font.add_or_reset(0)
    assert decode_table(b"\x41\xff\x42\x43", font) == 2
    assert font.get(0).annotations == [0x41]


def test_psf2_surrogate_cannot_be_saved():
    font = PSFFont(2, 8, 8)
    glyph = font.add_or_reset(0)
    font.add_annotation(glyph, 0xD800)
    with pytest.raises(InvalidEncoding):
        encode(font)


def test_psf2_save_writes_nothing_on_bad_table():
    font = PSFFont(2, 8, 8)
    glyph = font.add_or_reset(0)
    font.add_annotation(glyph, 0x110000)
    out = io.BytesIO()
    with pytest.raises(InvalidEncoding):
        save_to_stream(font, out)
    assert out.getvalue() == b""


def test_psf2_large_header_is_skipped(caplog):
    glyph = b"\x80" + bytes(7)
    data = psf2_bytes([glyph], headersize=40, flags=0)
    with caplog.at_level(logging.DEBUG, logger="psftools.codec.psf2"):
        font = decode(data)
    assert font.get(0).data == bytearray(glyph)
    assert font.header.headersize == 40
    assert encode(font) == data
    assert "extra header bytes" in caplog.text


def test_psf2_small_header_rejected():
    with pytest.raises(UnrecognizedFormat):
        decode(psf2_bytes([bytes(8)], headersize=32)[:8] + struct.pack("<I", 16) + bytes(20))


def psf2_header(length, charsize, height=8, width=8):
    """Bare 32-byte PSF2 header with no bitmaps behind it."""
    return C.PSF2_MAGIC + struct.pack("<7I", 0, 32, 0, length, charsize, height, width)


@pytest.mark.parametrize("length,charsize,height,width", [
    (3_000_000, 0, 8, 8),
    (0xFFFFFFFF, 0, 8, 8),
    (1, 4, 8, 8),
    (1, 15, 8, 9),
    (1, 8, 0, 8),
    (1, 8, 8, 0),
])
def test_psf2_bad_glyph_geometry_rejected(length, charsize, height, width):
    with pytest.raises(UnrecognizedFormat):
        decode(psf2_header(length, charsize, height, width))


def test_psf2_oversized_charsize_accepted():
    glyph = b"\x80" + bytes(9)
    data = psf2_header(1, 10) + glyph
    with decode(data) as font:
        assert font.charsize == 10
        assert font.get(0).is_foreground(0, 0)
        assert font.to_bytes() == data


def test_psf2_huge_bitmap_block_from_file(tmp_path):
    path = tmp_path / "huge.psf"
    path.write_bytes(psf2_header(0xFFFFFFFF, 0xFFFFFFFF))
    with pytest.raises(TruncatedInput):
        load(path)


def test_psf2_newer_revision_warns(caplog):
    data = psf2_bytes([bytes(8)], version=1, flags=0)
    with caplog.at_level(logging.WARNING):
        font = decode(data)
    assert font.header.version == 1
    assert "revision" in caplog.text


# =============================================================================
# Files
# =============================================================================

def test_save_and_load_file(tmp_path, psf2_font):
    path = tmp_path / "font.psf"
    save(psf2_font, path)
    with load(path) as font:
        assert list(font) == list(psf2_font)
    with PSFFont.load(path) as font:
        assert font.num_glyphs == 2


def test_load_missing_file(tmp_path):
    with pytest.raises(PSFIOError):
        load(tmp_path / "missing.psf")


def test_load_missing_file_is_os_error(tmp_path):
    with pytest.raises(OSError):
        psftools.load(tmp_path / "missing.psf")


def test_save_into_missing_directory(tmp_path, psf1_font):
    with pytest.raises(PSFIOError):
        save(psf1_font, tmp_path / "no" / "such" / "dir.psf")


def test_short_write(psf1_font):
    with pytest.raises(PSFIOError):
        save_to_stream(psf1_font, ShortWriter(limit=2))


def test_bytes_helpers(psf2_font):
    data = psf2_font.to_bytes()
    with PSFFont.from_bytes(data) as font:
        assert font.to_bytes() == data


def test_save_closed_font():
    font = PSFFont(2, 8, 8)
    font.close()
    with pytest.raises(psftools.InvalidParameters):
        font.to_bytes()
