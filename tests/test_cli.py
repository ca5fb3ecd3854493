import struct

from psftools import constants as C
from psftools import load
from psftools.cli import main

from .test_bdf import BDF


def test_generate_compile_decompile(tmp_path, capsys):
    template = tmp_path / "template.txt"
    psf = tmp_path / "font.psf"
    back = tmp_path / "back.txt"

    assert main(["generate", "2", "-W", "4", "-H", "2", "-n", "3", str(template)]) == 0
    assert main(["compile", str(template), str(psf)]) == 0
    assert "Created:" in capsys.readouterr().out
    assert main(["decompile", str(psf), str(back)]) == 0
    assert back.read_text(encoding="utf-8") == template.read_text(encoding="utf-8")

    with load(psf) as font:
        assert (font.width, font.height, font.num_glyphs) == (4, 2, 3)


def test_info(tmp_path, capsys):
    template = tmp_path / "template.txt"
    psf = tmp_path / "font.psf"
    main(["gen", "1", "-u", str(template)])
    main(["compile", str(template), str(psf)])
    capsys.readouterr()

    assert main(["info", str(psf)]) == 0
    assert capsys.readouterr().out == " v:1 w:8 h:8 n:256 u:1\n"

    assert main(["info", "-n", "-u", "-n", str(psf)]) == 0
    assert capsys.readouterr().out == " n:256 u:1\n"


def test_renumber(tmp_path):
    src = tmp_path / "in.txt"
    dst = tmp_path / "out.txt"
    src.write_text("@psf2\nWidth: 1\nHeight: 1\n@5\n#\n@9\n.\n", encoding="utf-8")
    assert main(["ren", str(src), str(dst)]) == 0
    assert dst.read_text(encoding="utf-8") == "@psf2\nWidth: 1\nHeight: 1\n@0\n#\n@1\n.\n"


def test_bdf(tmp_path):
    bdf = tmp_path / "test.bdf"
    psf = tmp_path / "test.psf"
    bdf.write_bytes(BDF)
    assert main(["bdf", str(bdf), str(psf), "--psf-version", "1", "--unicode"]) == 0
    with load(psf) as font:
        assert font.version == 1
        assert font.get(1).annotations == [233]


def test_missing_file_reports_error(tmp_path, capsys):
    assert main(["info", str(tmp_path / "missing.psf")]) == 1
    assert capsys.readouterr().err.startswith("Error:")


def test_bad_text_reports_line(tmp_path, capsys):
    src = tmp_path / "bad.txt"
    src.write_text("@psf2\nWidth: 8\nHeight: 1\n@0: U+zz\n........\n", encoding="utf-8")
    assert main(["compile", str(src), str(tmp_path / "out.psf")]) == 1
    assert "in line 4" in capsys.readouterr().err


def test_malformed_header_reports_error(tmp_path, capsys):
    path = tmp_path / "huge.psf"
    path.write_bytes(C.PSF2_MAGIC + struct.pack("<7I", 0, 32, 0, 0xFFFFFFFF, 0xFFFFFFFF, 8, 8))
    assert main(["info", str(path)]) == 1
    assert capsys.readouterr().err.startswith("Error:")
