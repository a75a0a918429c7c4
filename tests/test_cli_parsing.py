"""Tests for CLI argument parsing and commands."""

import argparse
import os

import pikepdf
import pytest
from PIL import Image

from bigredact.cli import _parse_redaction, _parse_rotation, build_parser, main


class TestParseRotation:
    def test_valid(self):
        assert _parse_rotation("2:90") == (2, 90)

    def test_negative_angle(self):
        assert _parse_rotation(" 3 : -90 ") == (3, -90)

    def test_not_quarter_turn(self):
        with pytest.raises(argparse.ArgumentTypeError, match="multiple of 90"):
            _parse_rotation("1:45")

    def test_invalid_page(self):
        with pytest.raises(argparse.ArgumentTypeError):
            _parse_rotation("0:90")

    def test_garbage(self):
        with pytest.raises(argparse.ArgumentTypeError, match="Invalid rotation"):
            _parse_rotation("abc")


class TestParseRedaction:
    def test_valid(self):
        assert _parse_redaction("1:50,60,200,40") == (1, (50.0, 60.0, 200.0, 40.0))

    def test_decimal_values(self):
        assert _parse_redaction("2:1.5,2.5,3,4")[1] == (1.5, 2.5, 3.0, 4.0)

    def test_wrong_number_of_values(self):
        with pytest.raises(argparse.ArgumentTypeError, match="Invalid redaction"):
            _parse_redaction("1:50,60,200")

    def test_zero_size(self):
        with pytest.raises(argparse.ArgumentTypeError, match="positive"):
            _parse_redaction("1:50,60,0,40")


class TestBuildParser:
    def test_export_defaults(self):
        args = build_parser().parse_args(["export", "a.png", "-o", "out"])
        assert args.command == "export"
        assert args.rotate == []
        assert args.redact == []
        assert args.long_edge is None

    def test_repeatable_options(self):
        args = build_parser().parse_args(
            ["export", "a.png", "-o", "out", "--rotate", "1:90", "--rotate", "1:90",
             "--redact", "1:1,2,3,4"]
        )
        assert args.rotate == [(1, 90), (1, 90)]
        assert args.redact == [(1, (1.0, 2.0, 3.0, 4.0))]

    def test_info_takes_several_inputs(self):
        args = build_parser().parse_args(["info", "a.pdf", "b.png"])
        assert len(args.inputs) == 2


class TestMain:
    @pytest.fixture
    def photo(self, tmp_path):
        path = tmp_path / "photo.png"
        Image.new("RGB", (120, 80), (10, 200, 10)).save(path)
        return str(path)

    def _run(self, tmp_path, *argv):
        return main(["--config", str(tmp_path / "settings.json"), *argv])

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out

    def test_missing_input(self, tmp_path, capsys):
        assert self._run(tmp_path, "export", str(tmp_path / "nope.png"), "-o", "out") == 1
        assert "not found" in capsys.readouterr().err

    def test_export_png(self, tmp_path, photo):
        out = tmp_path / "out"
        assert self._run(tmp_path, "export", photo, "-o", str(out), "--long-edge", "300") == 0
        with Image.open(out / "page-1.png") as img:
            assert img.size == (232, 300)

    def test_export_with_rotation_and_redaction(self, tmp_path, photo):
        out = tmp_path / "out"
        pdf_path = tmp_path / "out.pdf"
        code = self._run(
            tmp_path,
            "export",
            photo,
            "-o",
            str(out),
            "--long-edge",
            "300",
            "--redact",
            "1:0,0,100,100",
            "--rotate",
            "1:90",
            "--pdf",
            str(pdf_path),
        )
        assert code == 0
        with Image.open(out / "page-1.png") as img:
            assert img.size == (300, 232)
        with pikepdf.open(pdf_path) as pdf:
            assert len(pdf.pages) == 1

    def test_page_out_of_range(self, tmp_path, photo, capsys):
        code = self._run(tmp_path, "export", photo, "-o", str(tmp_path), "--rotate", "3:90")
        assert code == 1
        assert "out of range" in capsys.readouterr().err

    def test_corrupt_pdf_reports_error(self, tmp_path, capsys):
        broken = tmp_path / "broken.pdf"
        broken.write_bytes(b"this is not a pdf")
        assert self._run(tmp_path, "export", str(broken), "-o", str(tmp_path / "out")) == 1
        assert "Error:" in capsys.readouterr().err
        assert self._run(tmp_path, "info", str(broken)) == 1
        assert "Error:" in capsys.readouterr().err

    def test_info(self, tmp_path, photo, capsys):
        pdf_path = tmp_path / "doc.pdf"
        pdf = pikepdf.Pdf.new()
        pdf.add_blank_page(page_size=(300, 400))
        pdf.save(pdf_path)

        assert self._run(tmp_path, "info", str(pdf_path), photo) == 0
        out = capsys.readouterr().out
        assert "300 x 400 pt" in out
        assert "120 x 80 px" in out
        assert os.path.basename(photo) in out
