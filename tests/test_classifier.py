"""Unit tests for file classification."""

import pytest

from document_image_extraction.core.classifier import FileKind, classify
from document_image_extraction.core.constants import MIME_DOCX, MIME_XLSX, MIME_PDF


class TestClassify:
    """Tests for classify()."""

    @pytest.mark.parametrize("media_type,expected", [
        (MIME_DOCX, FileKind.DOCX),
        (MIME_XLSX, FileKind.XLSX),
        (MIME_PDF, FileKind.PDF),
        ("application/pdf; charset=binary", FileKind.PDF),
    ])
    def test_declared_media_type_wins(self, media_type, expected):
        assert classify(media_type, "upload.bin") is expected

    def test_media_type_checked_before_suffix(self):
        assert classify(MIME_PDF, "report.docx") is FileKind.PDF

    @pytest.mark.parametrize("file_name,expected", [
        ("report.docx", FileKind.DOCX),
        ("budget.xlsx", FileKind.XLSX),
        ("paper.pdf", FileKind.PDF),
        ("PAPER.PDF", FileKind.PDF),
    ])
    def test_suffix_fallback(self, file_name, expected):
        assert classify("", file_name) is expected

    @pytest.mark.parametrize("media_type,file_name", [
        ("image/png", "photo.png"),
        ("", ""),
        (None, None),
        (None, "notes.doc"),
        (42, ["report.pdf"]),
        ("application/msword", "docx"),
    ])
    def test_unknown_never_raises(self, media_type, file_name):
        assert classify(media_type, file_name) is FileKind.UNKNOWN

    def test_office_kinds(self):
        assert FileKind.DOCX.is_office
        assert FileKind.XLSX.is_office
        assert not FileKind.PDF.is_office
        assert not FileKind.UNKNOWN.is_office
