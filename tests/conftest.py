"""Pytest configuration and fixtures."""

import io
import zipfile

import fitz
import pytest
from PIL import Image

from document_image_extraction.core.constants import OP_PAINT_IMAGE
from document_image_extraction.core.errors import UnreadablePdfError
from document_image_extraction.core.pdf_parser import DecodedImage, Instruction


def png_bytes(size=(16, 12), color=(200, 30, 60), mode='RGB'):
    """Encode a solid-color PNG."""
    img = Image.new(mode, size, color)
    buffer = io.BytesIO()
    img.save(buffer, format='PNG')
    return buffer.getvalue()


def make_zip(entries, compression=zipfile.ZIP_DEFLATED):
    """Build a zip archive from an ordered mapping of entry name -> bytes."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, 'w', compression=compression) as zf:
        for name, data in entries.items():
            zf.writestr(name, data)
    return buffer.getvalue()


def make_pdf(pages):
    """
    Build a PDF with PyMuPDF.

    ``pages`` is a list with one list of PNG payloads per page; the images are
    placed side by side on the page.
    """
    doc = fitz.open()
    for images in pages:
        page = doc.new_page(width=600, height=400)
        for index, data in enumerate(images):
            rect = fitz.Rect(20 + index * 140, 20, 140 + index * 140, 120)
            page.insert_image(rect, stream=data)
    if not pages:
        doc.new_page()
    data = doc.tobytes()
    doc.close()
    return data


class FakePage:
    """Page with a scripted instruction list and object table."""

    def __init__(self, order, objects, extra_ops=()):
        self.order = order
        self.objects = objects
        self.extra_ops = extra_ops

    def get_instructions(self):
        instructions = [Instruction(op, ()) for op in self.extra_ops]
        for name in self.order:
            instructions.append(Instruction('setFillRGBColor', (0, 0, 0)))
            instructions.append(Instruction(OP_PAINT_IMAGE, (name,)))
        return instructions

    def resolve_object(self, name):
        obj = self.objects[name]
        if isinstance(obj, Exception):
            raise obj
        return obj


class FakeDocument:
    def __init__(self, pages):
        self.pages = pages
        self.closed = False

    @property
    def page_count(self):
        return len(self.pages)

    def get_page(self, number):
        return self.pages[number - 1]

    def close(self):
        self.closed = True


class FakeParser:
    """Parser returning a prepared document; ``b'broken'`` is unreadable."""

    def __init__(self, pages):
        self.document = FakeDocument(pages)

    def parse(self, data, source_file='document.pdf'):
        if data == b'broken':
            raise UnreadablePdfError(f"Cannot read {source_file} as a PDF document")
        return self.document


def decoded(width, height, channels, value=128):
    """DecodedImage filled with ``value``."""
    return DecodedImage(width, height, bytes([value]) * (width * height * channels))


@pytest.fixture
def red_png():
    return png_bytes(color=(255, 0, 0))


@pytest.fixture
def docx_bytes(red_png):
    """Minimal DOCX container with a PNG, a JPEG and a WMF."""
    return make_zip({
        '[Content_Types].xml': b'<?xml version="1.0"?><Types/>',
        'word/document.xml': b'<?xml version="1.0"?><w:document/>',
        'word/media/image1.png': red_png,
        'word/media/image2.jpeg': b'\xff\xd8\xff\xe0fake-jpeg',
        'word/media/image3.wmf': b'\xd7\xcd\xc6\x9a' + b'\x00' * 60,
        'word/theme/theme1.xml': b'<a:theme/>',
    })


@pytest.fixture
def xlsx_bytes(red_png):
    """Minimal XLSX container with one GIF and one PNG."""
    return make_zip({
        'xl/workbook.xml': b'<workbook/>',
        'xl/media/image1.gif': b'GIF89a' + b'\x00' * 20,
        'xl/media/image2.png': red_png,
    })


@pytest.fixture
def pdf_bytes():
    """Two-page PDF: one image on page 1, two on page 2."""
    return make_pdf([
        [png_bytes(color=(255, 0, 0))],
        [png_bytes(color=(0, 255, 0)), png_bytes(size=(8, 8), color=128, mode='L')],
    ])


@pytest.fixture
def documents(tmp_path, docx_bytes, pdf_bytes):
    """Input folder with a DOCX, a PDF and a text file, plus an empty output folder."""
    in_dir = tmp_path / "in"
    in_dir.mkdir()
    (in_dir / "report.docx").write_bytes(docx_bytes)
    (in_dir / "paper.pdf").write_bytes(pdf_bytes)
    (in_dir / "notes.txt").write_text("not a document")
    out_dir = tmp_path / "out"
    out_dir.mkdir()
    return in_dir, out_dir
