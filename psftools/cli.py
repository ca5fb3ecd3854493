"""
psftools Command Line
=====================
Text based PSF font editing tools.

Usage:
    # Binary font to editable text and back
    psftools decompile default8x16.psf font.txt
    psftools compile font.txt font.psf

    # New blank template with sample Unicode values
    psftools generate 2 -W 8 -H 16 -n 512 -u template.txt

    # Renumber glyphs after inserting or deleting some
    psftools renumber font.txt renumbered.txt

    # Font summary
    psftools info font.psf
    psftools info -n -u -l font.psf

    # BDF import
    psftools bdf spleen-8x16.bdf spleen.psf --unicode

A file argument of '-' (or an omitted one) means stdin/stdout.
"""

import argparse
import logging
import sys
from contextlib import contextmanager

from . import __version__
from .codec import load, load_from_stream, save, save_to_stream
from .errors import PSFError
from .text import compiler, decompiler, info, template

logger = logging.getLogger(__name__)


@contextmanager
def _open_in(path, binary: bool):
    if path is None or path == "-":
        yield sys.stdin.buffer if binary else sys.stdin
        return
    f = open(path, "rb") if binary else open(path, "r", encoding="utf-8")
    with f:
        yield f


@contextmanager
def _open_out(path, binary: bool):
    if path is None or path == "-":
        stream = sys.stdout.buffer if binary else sys.stdout
        yield stream
        stream.flush()
        return
    f = open(path, "wb") if binary else open(path, "w", encoding="utf-8")
    with f:
        yield f


def _is_file(path) -> bool:
    return path is not None and path != "-"


# =============================================================================
# Commands
# =============================================================================

def cmd_compile(args) -> None:
    with _open_in(args.infile, binary=False) as f:
        font = compiler.compile_lines(f)
    with font:
        if _is_file(args.outfile):
            save(font, args.outfile)
            print(f"Created: {args.outfile} ({font.num_glyphs} glyphs, {font.width}x{font.height})")
        else:
            with _open_out(None, binary=True) as out:
                save_to_stream(font, out)


def cmd_decompile(args) -> None:
    with _open_in(args.infile, binary=True) as f:
        font = load_from_stream(f)
    with font:
        with _open_out(args.outfile, binary=False) as out:
            decompiler.decompile(font, out)


def cmd_generate(args) -> None:
    with _open_out(args.outfile, binary=False) as out:
        template.generate(
            out,
            args.version,
            width=args.width,
            height=args.height,
            count=args.count,
            unicode=args.unicode,
        )


def cmd_renumber(args) -> None:
    with _open_in(args.infile, binary=False) as f:
        with _open_out(args.outfile, binary=False) as out:
            count = template.renumber(f, out)
    logger.info("renumbered %d glyphs", count)


def cmd_info(args) -> None:
    fields = "".join(dict.fromkeys(args.fields or info.DEFAULT_FIELDS))
    with load(args.font) as font:
        sys.stdout.write(info.describe(font, fields))


def cmd_bdf(args) -> None:
    from .text import bdf

    print(f"Loading BDF: {args.input}")
    with bdf.load_bdf(args.input, version=args.psf_version, unicode=args.unicode) as font:
        save(font, args.output)
        print(f"Created: {args.output} (psf{font.version}, {font.num_glyphs} glyphs, "
              f"{font.width}x{font.height})")


# =============================================================================
# Main
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="psftools",
        description="Text based PC Screen Font (PSF) editing tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  psftools decompile default8x16.psf font.txt
  psftools compile font.txt font.psf
  psftools generate 1 -H 16 -n 512 template.txt
  psftools renumber font.txt renumbered.txt
  psftools info -v -n -u font.psf
  psftools bdf spleen-8x16.bdf spleen.psf --unicode
        """
    )
    parser.add_argument('--version', action='version', version=f"psftools {__version__}")
    parser.add_argument('--log-level', default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level (default: WARNING)')
    sub = parser.add_subparsers(dest='command', metavar='command')
    sub.required = True

    p = sub.add_parser('compile', help='Compile a text font into a psf file')
    p.add_argument('infile', nargs='?', help='Text font (default: stdin)')
    p.add_argument('outfile', nargs='?', help='PSF output (default: stdout)')
    p.set_defaults(func=cmd_compile)

    p = sub.add_parser('decompile', help='Decompile a psf file into a text font')
    p.add_argument('infile', nargs='?', help='PSF font (default: stdin)')
    p.add_argument('outfile', nargs='?', help='Text output (default: stdout)')
    p.set_defaults(func=cmd_decompile)

    p = sub.add_parser('generate', aliases=['gen'], help='Generate a blank text font template')
    p.add_argument('version', type=int, choices=[1, 2], help='PSF version')
    p.add_argument('-W', '--width', type=int, default=template.DEFAULT_WIDTH,
                   help=f'Glyph width (default: {template.DEFAULT_WIDTH})')
    p.add_argument('-H', '--height', type=int, default=template.DEFAULT_HEIGHT,
                   help=f'Glyph height (default: {template.DEFAULT_HEIGHT})')
    p.add_argument('-n', '--count', type=int, default=template.DEFAULT_COUNT,
                   help=f'Number of glyphs (default: {template.DEFAULT_COUNT})')
    p.add_argument('-u', '--unicode', action='store_true',
                   help='Add sample unicode values to the template')
    p.add_argument('outfile', nargs='?', help='Text output (default: stdout)')
    p.set_defaults(func=cmd_generate)

    p = sub.add_parser('renumber', aliases=['ren'], help='Renumber glyphs in a text font')
    p.add_argument('infile', nargs='?', help='Text font (default: stdin)')
    p.add_argument('outfile', nargs='?', help='Text output (default: stdout)')
    p.set_defaults(func=cmd_renumber)

    p = sub.add_parser('info', help='Print information about a psf font')
    for flag, field, text in (
        ('-v', 'v', 'psf version'),
        ('-w', 'w', 'font width'),
        ('-H', 'h', 'font height'),
        ('-n', 'n', 'number of chars in font'),
        ('-u', 'u', 'presence of unicode table (1 for yes, 0 for no)'),
        ('-l', 'l', 'list table of encoded chars'),
    ):
        p.add_argument(flag, dest='fields', action='append_const', const=field, help=text)
    p.add_argument('font', help='PSF font file')
    p.set_defaults(func=cmd_info)

    p = sub.add_parser('bdf', help='Convert a BDF font to psf')
    p.add_argument('input', help='BDF font file')
    p.add_argument('output', help='PSF output file')
    p.add_argument('--psf-version', type=int, choices=[1, 2], default=2,
                   help='PSF version to write (default: 2)')
    p.add_argument('--unicode', action='store_true',
                   help='Pack glyphs and record their code points in the unicode table')
    p.set_defaults(func=cmd_bdf)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format='%(levelname)s: %(name)s: %(message)s')
    try:
        args.func(args)
    except (PSFError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
