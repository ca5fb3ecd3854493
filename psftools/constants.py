"""
PSF Format Constants
====================
Magic numbers, header bits and Unicode table markers for both PSF revisions.

Reference: https://www.win.tue.nl/~aeb/linux/kbd/font-formats-1.html
"""

# =============================================================================
# PSF1
# =============================================================================

PSF1_MAGIC = b"\x36\x04"
PSF1_MAGIC0 = PSF1_MAGIC[0]   # Enough to tell the revisions apart

PSF1_MODE512 = 0x01           # 512 glyphs instead of 256
PSF1_MODEHASTAB = 0x02        # Unicode table follows the bitmaps
PSF1_MODEHASSEQ = 0x04        # Unicode table contains sequences
PSF1_MAXMODE = 0x05

PSF1_SEPARATOR = 0xFFFF       # Ends one glyph's table entry
PSF1_STARTSEQ = 0xFFFE        # Starts a multi-code-point sequence

PSF1_WIDTH = 8                # PSF1 glyphs are always one byte wide
PSF1_BASE_GLYPHS = 256
PSF1_MAX_GLYPHS = 512
PSF1_MAX_UCVAL = 0xFFFF

# =============================================================================
# PSF2
# =============================================================================

PSF2_MAGIC = b"\x72\xb5\x4a\x86"
PSF2_MAGIC0 = PSF2_MAGIC[0]

PSF2_HAS_UNICODE_TABLE = 0x01

PSF2_MAXVERSION = 0           # Newest header revision known
PSF2_HEADER_SIZE = 32         # magic + seven u32 fields

PSF2_SEPARATOR = 0xFF         # Ends one glyph's table entry
PSF2_STARTSEQ = 0xFE          # Starts a sequence, maps to PSF1_STARTSEQ

# =============================================================================
# Shared
# =============================================================================

# Internal sentinel for "start of sequence" in a glyph's annotation list,
# regardless of the font version.
STARTSEQ = PSF1_STARTSEQ
