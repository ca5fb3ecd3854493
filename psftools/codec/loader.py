"""
PSF Load/Save Dispatch
======================
Sniffs the first byte to pick the PSF1 or PSF2 codec, and wraps the codecs
with file open/close handling.
"""

import logging

from .. import constants as C
from ..errors import InvalidParameters, PSFIOError, UnrecognizedFormat
from ..model import PSFFont
from . import psf1, psf2

logger = logging.getLogger(__name__)


def load_from_stream(stream) -> PSFFont:
    """
    Load a PSF1 or PSF2 font from a binary stream.

    Args:
        stream: Binary stream positioned at the start of the font

    Returns:
        The decoded font

    Raises:
        UnrecognizedFormat: Neither magic number matches; no font is built
        TruncatedInput: The stream ends early
        InvalidEncoding: The PSF2 Unicode table is malformed
        PSFIOError: Read failure
    """
    try:
        first = stream.read(1)
    except OSError as e:
        raise PSFIOError(f"read failed: {e}") from e

    if first == bytes((C.PSF1_MAGIC0,)):
        return psf1.load(stream, first)
    if first == bytes((C.PSF2_MAGIC0,)):
        return psf2.load(stream, first)
    raise UnrecognizedFormat("invalid magic number")


def load(path) -> PSFFont:
    """
    Load a PSF1 or PSF2 font from a file.

    Raises:
        PSFIOError: The file cannot be opened or read
        (and everything load_from_stream() raises)
    """
    try:
        f = open(path, "rb")
    except OSError as e:
        raise PSFIOError(f"cannot open {path}: {e}") from e
    with f:
        font = load_from_stream(f)
    logger.debug("loaded %s: %r", path, font)
    return font


def save_to_stream(font: PSFFont, stream) -> None:
    """
    Write a font to a binary stream in its own PSF revision.

    Raises:
        InvalidParameters: The font has been closed
        ValueTooLarge: PSF1 annotation does not fit in 16 bits
        InvalidEncoding: PSF2 annotation cannot be UTF-8 encoded
        PSFIOError: Write failure
    """
    if font.closed:
        raise InvalidParameters("cannot save a closed font")
    if font.version == 1:
        psf1.save(font, stream)
    else:
        psf2.save(font, stream)


def save(font: PSFFont, path) -> None:
    """
    Write a font to a file.

    Raises:
        PSFIOError: The file cannot be opened or written
        (and everything save_to_stream() raises)
    """
    try:
        f = open(path, "wb")
    except OSError as e:
        raise PSFIOError(f"cannot open {path}: {e}") from e
    with f:
        save_to_stream(font, f)
    logger.debug("saved %s: %r", path, font)
