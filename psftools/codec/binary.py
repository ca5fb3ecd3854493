"""
Binary Stream Primitives
========================
Exact reads, little-endian word and int decoding, and checked writes over a
sequential binary stream.

Reads raise TruncatedInput when the stream ends early; writes raise
PSFIOError when the stream accepts fewer bytes than given or fails.
"""

import struct

from ..errors import PSFIOError, TruncatedInput

WORD = struct.Struct("<H")


def _wrap_os_error(op: str, err: OSError) -> PSFIOError:
    return PSFIOError(f"{op} failed: {err}")


def read_exact(stream, size: int) -> bytes:
    """
    Read exactly `size` bytes.

    Args:
        stream: Binary stream opened for reading
        size: Number of bytes to read

    Returns:
        The bytes read

    Raises:
        TruncatedInput: If the stream ends before `size` bytes
        PSFIOError: If the underlying read fails
    """
    if size == 0:
        return b""
    try:
        data = stream.read(size)
    except OSError as e:
        raise _wrap_os_error("read", e) from e
    if data is None or len(data) != size:
        got = 0 if data is None else len(data)
        raise TruncatedInput(f"unexpected end of input: wanted {size} bytes, got {got}")
    return data


def read_remaining(stream) -> bytes:
    """Read everything left in the stream."""
    try:
        data = stream.read()
    except OSError as e:
        raise _wrap_os_error("read", e) from e
    return data or b""


def read_word(stream) -> int:
    return WORD.unpack(read_exact(stream, 2))[0]


def read_ints(stream, count: int) -> tuple:
    """Read `count` consecutive u32 little-endian values."""
    return struct.unpack(f"<{count}I", read_exact(stream, 4 * count))


def write_bytes(stream, data) -> None:
    """
    Write all of `data`.

    Raises:
        PSFIOError: On a failed or short write
    """
    try:
        written = stream.write(data)
    except OSError as e:
        raise _wrap_os_error("write", e) from e
    # Raw streams report a short count instead of raising
    if written is not None and written != len(data):
        raise PSFIOError(f"short write: {written} of {len(data)} bytes")
