"""Tests for the file-system service wrapper."""

import pytest

from document_image_extraction.core.errors import DocumentImageError
from document_image_extraction_service import ImageExtractorService

from conftest import make_pdf, png_bytes


class TestImageExtractorService:

    def test_extract_images(self, documents):
        in_dir, out_dir = documents
        service = ImageExtractorService()

        paths = service.extract_images(str(in_dir / "report.docx"), str(out_dir))

        assert [p.rsplit("/", 1)[-1] for p in paths] == ["image1.png", "image2.jpeg", "image3.wmf"]

    def test_extract_images_failure_raises(self, tmp_path):
        bad = tmp_path / "bad.pdf"
        bad.write_bytes(b"garbage")

        with pytest.raises(DocumentImageError):
            ImageExtractorService().extract_images(str(bad), str(tmp_path))

    def test_batch_maps_failures_to_empty(self, documents, tmp_path):
        in_dir, out_dir = documents
        bad = tmp_path / "bad.xlsx"
        bad.write_bytes(b"garbage")
        docs = [str(in_dir / "paper.pdf"), str(bad)]

        results = ImageExtractorService(max_workers=2).extract_images_batch(docs, str(out_dir))

        assert len(results[docs[0]]) == 3
        assert results[docs[1]] == []

    @pytest.mark.parametrize("max_workers", [1, 2])
    def test_same_base_name_kept_apart(self, tmp_path, max_workers):
        docs = []
        for folder, count in (("a", 1), ("b", 2)):
            (tmp_path / folder).mkdir()
            path = tmp_path / folder / "report.pdf"
            path.write_bytes(make_pdf([[png_bytes(color=(40 * i, 0, 0)) for i in range(count)]]))
            docs.append(str(path))
        out_dir = tmp_path / "out"
        out_dir.mkdir()

        service = ImageExtractorService(max_workers=max_workers)
        results = service.extract_images_batch(docs, str(out_dir))

        assert {path: len(paths) for path, paths in results.items()} == {docs[0]: 1, docs[1]: 2}
        assert all("/report/" in p for p in results[docs[0]])
        assert all("/report-2/" in p for p in results[docs[1]])

    def test_missing_document(self, tmp_path):
        with pytest.raises(IOError):
            ImageExtractorService().extract_images(str(tmp_path / "none.pdf"), str(tmp_path))

    def test_invalid_workers(self):
        with pytest.raises(ValueError):
            ImageExtractorService(max_workers=0)
