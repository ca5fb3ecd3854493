"""
PSF Error Types
===============
Exception hierarchy raised by the codec, the font model and the text tools.

Every error derives from PSFError, and additionally from the closest
builtin exception so callers can catch either:

    PSFError
    ├── InvalidParameters   (ValueError)   bad version/width/height
    ├── UnrecognizedFormat  (ValueError)   bad magic or header
    ├── TruncatedInput      (EOFError)     stream ended early
    ├── InvalidEncoding     (ValueError)   malformed or unencodable UTF-8
    ├── ValueTooLarge       (ValueError)   annotation too big for PSF1
    ├── OutOfRange          (IndexError)   glyph index beyond the store
    ├── PSFIOError          (OSError)      open/read/write failure
    ├── AllocationFailure   (MemoryError)  buffer allocation failed
    └── TextFormatError     (ValueError)   text font description errors
"""


class PSFError(Exception):
    """Base class for all psftools errors."""


class InvalidParameters(PSFError, ValueError):
    """Font constructed with an unsupported version, width or height."""


class UnrecognizedFormat(PSFError, ValueError):
    """Input does not start with a PSF1 or PSF2 magic number."""


class TruncatedInput(PSFError, EOFError):
    """Input ended before all expected data was read."""


class InvalidEncoding(PSFError, ValueError):
    """A Unicode table entry could not be decoded or encoded as UTF-8."""


class ValueTooLarge(PSFError, ValueError):
    """Annotation value does not fit the font's Unicode table."""


class OutOfRange(PSFError, IndexError):
    """Glyph index is beyond what the font holds or can hold."""


class PSFIOError(PSFError, OSError):
    """Storage-level failure while opening, reading or writing."""


class AllocationFailure(PSFError, MemoryError):
    """Glyph store or bitmap buffer could not be allocated."""


class TextFormatError(PSFError, ValueError):
    """
    Error in a text font description.

    Attributes:
        lineno: 1-based line number the error was found on (0 if unknown)
    """

    def __init__(self, lineno: int, message: str):
        self.lineno = lineno
        if lineno:
            message = f"{message} in line {lineno}"
        super().__init__(message)
