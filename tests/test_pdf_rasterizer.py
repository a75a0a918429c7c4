"""Tests for PDF page geometry and pdftoppm rasterization."""

import os
import subprocess
from unittest import mock

import pikepdf
import pytest

from bigredact.services import pdf_rasterizer
from bigredact.utils.exceptions import ConversionError, InvalidArgumentError


@pytest.fixture
def sample_pdf(tmp_path):
    path = tmp_path / "sample.pdf"
    pdf = pikepdf.Pdf.new()
    pdf.add_blank_page(page_size=(612, 792))
    pdf.add_blank_page(page_size=(612, 792))
    pdf.pages[1].Rotate = 90
    pdf.add_blank_page(page_size=(200, 100))
    pdf.save(path)
    return str(path)


class TestFileTypes:
    def test_is_pdf_file(self):
        assert pdf_rasterizer.is_pdf_file("scan.PDF")
        assert not pdf_rasterizer.is_pdf_file("scan.png")

    def test_is_image_file(self):
        assert pdf_rasterizer.is_image_file("photo.JPG")
        assert pdf_rasterizer.is_image_file("photo.webp")
        assert not pdf_rasterizer.is_image_file("doc.pdf")


class TestPageSizes:
    def test_sizes_follow_page_rotation(self, sample_pdf):
        sizes = pdf_rasterizer.get_page_sizes(sample_pdf)
        assert sizes == [(612, 792), (792, 612), (200, 100)]

    def test_inherited_rotation(self, tmp_path):
        path = tmp_path / "inherited.pdf"
        pdf = pikepdf.Pdf.new()
        pdf.add_blank_page(page_size=(300, 400))
        pdf.Root.Pages.Rotate = 270
        pdf.save(path)
        assert pdf_rasterizer.get_page_sizes(path) == [(400, 300)]

    def test_page_count(self, sample_pdf):
        assert pdf_rasterizer.get_page_count(sample_pdf) == 3

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            pdf_rasterizer.get_page_sizes(tmp_path / "nope.pdf")

    def test_corrupt_file_raises_conversion_error(self, tmp_path):
        path = tmp_path / "broken.pdf"
        path.write_bytes(b"this is not a pdf")
        with pytest.raises(ConversionError, match="broken.pdf"):
            pdf_rasterizer.get_page_sizes(path)
        with pytest.raises(ConversionError):
            pdf_rasterizer.get_page_count(path)


class TestConvert:
    def test_missing_pdftoppm(self, tmp_path):
        with mock.patch("bigredact.services.pdf_rasterizer.shutil.which", return_value=None):
            with pytest.raises(ConversionError, match="pdftoppm not found"):
                pdf_rasterizer.convert_pdf_to_png("doc.pdf", 2.0, tmp_path)

    def test_invalid_scale(self, tmp_path):
        with pytest.raises(InvalidArgumentError):
            pdf_rasterizer.convert_pdf_to_png("doc.pdf", 0, tmp_path)

    def test_command_and_page_order(self, tmp_path):
        def fake_run(cmd, **kwargs):
            prefix = cmd[-1]
            for number in (1, 2, 10):
                with open(f"{prefix}-{number:02d}.png", "wb") as f:
                    f.write(b"png")
            return subprocess.CompletedProcess(cmd, 0, b"", b"")

        with (
            mock.patch(
                "bigredact.services.pdf_rasterizer.shutil.which", return_value="/usr/bin/pdftoppm"
            ),
            mock.patch(
                "bigredact.services.pdf_rasterizer.subprocess.run", side_effect=fake_run
            ) as run,
        ):
            paths = pdf_rasterizer.convert_pdf_to_png("doc.pdf", 2.0, tmp_path)

        cmd = run.call_args[0][0]
        assert cmd[:4] == ["pdftoppm", "-png", "-r", "144"]
        assert [os.path.basename(p) for p in paths] == [
            "page-01.png",
            "page-02.png",
            "page-10.png",
        ]

    def test_failure_reports_exit_code(self, tmp_path):
        failed = subprocess.CompletedProcess([], 1, b"", b"Syntax Error: broken file")
        with (
            mock.patch(
                "bigredact.services.pdf_rasterizer.shutil.which", return_value="/usr/bin/pdftoppm"
            ),
            mock.patch("bigredact.services.pdf_rasterizer.subprocess.run", return_value=failed),
        ):
            with pytest.raises(ConversionError) as exc_info:
                pdf_rasterizer.convert_pdf_to_png("doc.pdf", 1.0, tmp_path)
        assert exc_info.value.exit_code == 1
        assert "broken file" in str(exc_info.value)

    def test_timeout(self, tmp_path):
        with (
            mock.patch(
                "bigredact.services.pdf_rasterizer.shutil.which", return_value="/usr/bin/pdftoppm"
            ),
            mock.patch(
                "bigredact.services.pdf_rasterizer.subprocess.run",
                side_effect=subprocess.TimeoutExpired("pdftoppm", 300),
            ),
        ):
            with pytest.raises(ConversionError, match="timed out"):
                pdf_rasterizer.convert_pdf_to_png("doc.pdf", 1.0, tmp_path)

    def test_no_output(self, tmp_path):
        done = subprocess.CompletedProcess([], 0, b"", b"")
        with (
            mock.patch(
                "bigredact.services.pdf_rasterizer.shutil.which", return_value="/usr/bin/pdftoppm"
            ),
            mock.patch("bigredact.services.pdf_rasterizer.subprocess.run", return_value=done),
        ):
            with pytest.raises(ConversionError, match="no pages"):
                pdf_rasterizer.convert_pdf_to_png("doc.pdf", 1.0, tmp_path)
