"""Tests for the command-line driver."""

import io

import pytest

from shapecomplete.cli import build_parser, main
from tests.conftest import DIAMOND, L_SHAPE, MIXED, SINGLE_CELL


@pytest.fixture
def grid_file(tmp_path):
    def write(rows):
        path = tmp_path / "grid.txt"
        path.write_text("\n".join(rows) + "\n", encoding="utf-8")
        return str(path)
    return write


def test_text_output(grid_file, capsys):
    assert main([grid_file(L_SHAPE), "--tolerance", "0"]) == 0
    out = capsys.readouterr().out
    assert out.splitlines() == [
        ".....",
        ".#...",
        ".##..",
        ".###.",
        ".....",
    ]


def test_growth_options(grid_file, capsys):
    path = grid_file(SINGLE_CELL)
    assert main([path, "--tolerance", "1.5", "--connectivity", "8", "--max-iterations", "1"]) == 0
    assert capsys.readouterr().out.count("#") == 9


def test_hex_output(grid_file, capsys):
    assert main([grid_file(["#..", ".#.", "..#"]), "--format", "hex"]) == 0
    assert capsys.readouterr().out.strip() == "03000000030000008880"


def test_no_fill_enclosed(grid_file, capsys):
    path = grid_file(DIAMOND)
    assert main([path, "--tolerance", "0"]) == 0
    assert capsys.readouterr().out.splitlines()[1] == "###"
    assert main([path, "--tolerance", "0", "--no-fill-enclosed"]) == 0
    assert capsys.readouterr().out.splitlines()[1] == "#.#"


def test_reads_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("\n".join(MIXED)))
    assert main(["-"]) == 0
    assert "?" not in capsys.readouterr().out


def test_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "nope.txt")]) == 1
    assert capsys.readouterr().err.startswith("ERROR:")


def test_bad_glyph(grid_file, capsys):
    assert main([grid_file(["#x"])]) == 1
    assert "ERROR" in capsys.readouterr().err


def test_empty_file_reports_kind(grid_file, capsys):
    assert main([grid_file([])]) == 2
    assert capsys.readouterr().err.startswith("ERROR [InvalidDimensions]")


def test_parser_rejects_bad_connectivity():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["grid.txt", "--connectivity", "6"])


def test_invalid_tolerance_is_usage_error(grid_file, capsys):
    assert main([grid_file(MIXED), "--tolerance", "-1"]) == 1
    assert "tolerance" in capsys.readouterr().err
