"""
PDF parsing collaborator backed by PyMuPDF (fitz).

Exposes a PDF as pages carrying a list of image-painting instructions and an
object table resolving image names to decoded pixel buffers. Nothing here
changes PyMuPDF's process-wide settings; all limits come from ``ParserConfig``.

Requires: PyMuPDF >= 1.26.6
"""

import logging
from collections import namedtuple
from dataclasses import dataclass
from typing import Optional

import fitz

from .constants import OP_PAINT_IMAGE, MAX_IMAGE_PIXELS, COLORSPACE_CMYK
from .errors import UnreadablePdfError, ImageDecodeWarning

logger = logging.getLogger(__name__)


Instruction = namedtuple('Instruction', ['opcode', 'args'])
DecodedImage = namedtuple('DecodedImage', ['width', 'height', 'pixel_data'])


@dataclass(frozen=True)
class ParserConfig:
    """
    Resource limits for one parser instance.

    Attributes
    ----------
    max_pages : int, optional
        Only the first ``max_pages`` pages are exposed. ``None`` means all.
    max_image_pixels : int
        Images with more pixels than this are refused by ``resolve_object``.
    """

    max_pages: Optional[int] = None
    max_image_pixels: int = MAX_IMAGE_PIXELS


class PdfPage:
    """One page of a parsed document."""

    def __init__(self, doc, page, number, config):
        self.number = number
        self._doc = doc
        self._page = page
        self._config = config
        self._objects = {}
        self._smasks = {}

        for item in page.get_images(full=True):
            xref, smask, name = item[0], item[1], item[7]
            self._objects.setdefault(name, xref)
            if smask:
                self._smasks[xref] = smask

    def _name_for(self, xref):
        for name, obj_xref in self._objects.items():
            if obj_xref == xref:
                return name
        name = f"X{xref}"
        self._objects[name] = xref
        return name

    def get_instructions(self):
        """
        Image-painting instructions of the page, in paint order.

        Inline images have no object name and are not reported.

        Returns
        -------
        list of Instruction
        """
        instructions = []
        for info in self._page.get_image_info(xrefs=True):
            xref = info.get('xref', 0)
            if not xref:
                continue
            instructions.append(Instruction(OP_PAINT_IMAGE, (self._name_for(xref),)))
        return instructions

    def resolve_object(self, name):
        """
        Decode the image object registered under ``name``.

        CMYK and other multi-component colorspaces are converted to RGB, a soft
        mask becomes the alpha channel, and gray images with alpha are widened
        to RGBA, so the buffer is always RGBA, RGB or single-channel.

        Parameters
        ----------
        name : str
            Resource name of the image on this page, e.g. ``Im1``.

        Returns
        -------
        DecodedImage

        Raises
        ------
        KeyError
            If the page has no image object called ``name``.
        ImageDecodeWarning
            If the image exceeds the configured pixel limit.
        """
        xref = self._objects[name]
        pix = fitz.Pixmap(self._doc, xref)

        if pix.width * pix.height > self._config.max_image_pixels:
            raise ImageDecodeWarning(
                f"Image {name} on page {self.number} is {pix.width}x{pix.height}, "
                f"above the limit of {self._config.max_image_pixels} pixels", name
            )

        if pix.colorspace and (pix.colorspace.name == COLORSPACE_CMYK or pix.colorspace.n not in (1, 3)):
            pix = fitz.Pixmap(fitz.csRGB, pix)

        smask = self._smasks.get(xref)
        if smask and not pix.alpha:
            try:
                pix = fitz.Pixmap(pix, fitz.Pixmap(self._doc, smask))
            except (ValueError, RuntimeError) as exc:
                logger.debug("Soft mask of %s on page %d not applied: %s", name, self.number, exc)

        if pix.colorspace and pix.colorspace.n == 1 and pix.alpha:
            pix = fitz.Pixmap(fitz.csRGB, pix)

        return DecodedImage(pix.width, pix.height, pix.samples)


class PdfDocument:
    """Parsed document handed out by ``PdfParser.parse``; close it when done."""

    def __init__(self, doc, config):
        self._doc = doc
        self._config = config

    @property
    def page_count(self):
        count = len(self._doc)
        if self._config.max_pages is not None:
            count = min(count, self._config.max_pages)
        return count

    def get_page(self, number):
        """Return page ``number``, counting from 1."""
        if not 1 <= number <= self.page_count:
            raise IndexError(f"Page {number} out of range 1..{self.page_count}")
        return PdfPage(self._doc, self._doc[number - 1], number, self._config)

    def close(self):
        self._doc.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class PdfParser:
    """Opens PDF bytes with PyMuPDF under a fixed ``ParserConfig``."""

    def __init__(self, config=None):
        self.config = config or ParserConfig()

    def parse(self, data, source_file='document.pdf'):
        """
        Parse PDF bytes.

        Raises
        ------
        UnreadablePdfError
            If the bytes are not a PDF PyMuPDF can open, or it is encrypted.
        """
        try:
            doc = fitz.open(stream=data, filetype='pdf')
        except KeyboardInterrupt:
            raise
        except Exception as exc:
            raise UnreadablePdfError(f"Cannot read {source_file} as a PDF document ({exc})") from exc

        if doc.needs_pass:
            doc.close()
            raise UnreadablePdfError(f"{source_file} is password protected")

        # repaired garbage opens without pages
        if len(doc) == 0:
            doc.close()
            raise UnreadablePdfError(f"{source_file} has no readable pages")

        return PdfDocument(doc, self.config)
