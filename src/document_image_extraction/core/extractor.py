"""
PDF image reconstruction module.

This module provides the PDFExtractor class, which walks the image-painting
instructions of every page of a PDF, rebuilds an RGBA raster from each decoded
pixel buffer and re-encodes it as PNG.

Decoded buffers come in three layouts, told apart by length alone:
RGBA (4 bytes per pixel), RGB (3) and grayscale (1). Anything else is skipped.
"""

import io
import logging

import numpy as np
from PIL import Image

from .constants import (
    OP_PAINT_IMAGE, PDF_IMAGE_NAME, MIME_PNG, PNG_COMPRESS_LEVEL,
    CHANNELS_RGBA, CHANNELS_RGB, CHANNELS_GRAY, OPAQUE_ALPHA
)
from .errors import ExtractionCancelled, ImageDecodeWarning, UnsupportedLayoutError
from .extracted_image import ExtractedImage
from .pdf_parser import PdfParser

logger = logging.getLogger(__name__)


def _as_uint8(pixel_data):
    if isinstance(pixel_data, (bytes, bytearray, memoryview)):
        return np.frombuffer(pixel_data, dtype=np.uint8)
    return np.asarray(pixel_data, dtype=np.uint8).ravel()


def reconstruct_rgba(width, height, pixel_data):
    """
    Rebuild an RGBA canvas from a decoded pixel buffer.

    Parameters
    ----------
    width : int
        Image width in pixels.
    height : int
        Image height in pixels.
    pixel_data : bytes-like or sequence of int
        Decoded samples, row-major, without padding.

    Returns
    -------
    numpy.ndarray
        ``uint8`` array of shape ``(height, width, 4)``.

    Raises
    ------
    UnsupportedLayoutError
        If the buffer length is not ``width*height`` times 4, 3 or 1.
    """
    if width <= 0 or height <= 0:
        raise UnsupportedLayoutError(f"Invalid image size {width}x{height}")

    samples = _as_uint8(pixel_data)
    pixels = width * height

    if samples.size == pixels * CHANNELS_RGBA:
        return samples.reshape(height, width, CHANNELS_RGBA).copy()

    rgba = np.empty((height, width, CHANNELS_RGBA), dtype=np.uint8)
    rgba[..., 3] = OPAQUE_ALPHA

    if samples.size == pixels * CHANNELS_RGB:
        rgba[..., :3] = samples.reshape(height, width, CHANNELS_RGB)
    elif samples.size == pixels * CHANNELS_GRAY:
        rgba[..., :3] = samples.reshape(height, width, 1)
    else:
        raise UnsupportedLayoutError(
            f"Buffer of {samples.size} bytes does not match a {width}x{height} "
            f"RGBA, RGB or grayscale layout"
        )

    return rgba


def encode_png(rgba):
    """
    Encode an RGBA array as PNG.

    Parameters
    ----------
    rgba : numpy.ndarray
        ``uint8`` array of shape ``(height, width, 4)``.

    Returns
    -------
    bytes
        PNG file contents.
    """
    img = Image.fromarray(rgba)
    buffer = io.BytesIO()
    img.save(buffer, format='PNG', compress_level=PNG_COMPRESS_LEVEL)
    return buffer.getvalue()


def pdf_image_name(page_number, object_name):
    """Output name of an image painted on ``page_number``."""
    return PDF_IMAGE_NAME.format(page=page_number, name=object_name)


class PDFExtractor:
    """
    Extracts the images painted on the pages of a PDF document.

    The PDF itself is parsed by a collaborator (``PdfParser`` by default);
    this class only decides which images to take and how to rebuild them.
    A failure on one image never stops the page, and a failure on one page
    never stops the document.
    """

    def __init__(self, parser=None, config=None):
        """
        Initialize PDFExtractor.

        Parameters
        ----------
        parser : object, optional
            Object with ``parse(data, source_file)`` returning a document with
            ``page_count``, ``get_page(n)`` and ``close()``. Defaults to a
            PyMuPDF-backed ``PdfParser`` built from ``config``.
        config : ParserConfig, optional
            Parser limits, used only when ``parser`` is not given.
        """
        self.parser = parser or PdfParser(config)

    def extract_images(self, data, source_file, on_warning=None, cancel_event=None):
        """
        Extract every painted image of a PDF.

        Parameters
        ----------
        data : bytes
            Raw PDF bytes.
        source_file : str
            Name of the document, recorded on every image.
        on_warning : callable, optional
            Called with an ``ImageDecodeWarning`` for every skipped image.
        cancel_event : threading.Event, optional
            Checked before every page.

        Returns
        -------
        list of ExtractedImage
            Ordered by page, then by paint order within the page.

        Raises
        ------
        UnreadablePdfError
            If the parser cannot open the document.
        ExtractionCancelled
            If ``cancel_event`` is set before the last page was read.
        """
        doc = self.parser.parse(data, source_file)
        images = []

        try:
            for page_number in range(1, doc.page_count + 1):
                if cancel_event is not None and cancel_event.is_set():
                    raise ExtractionCancelled(
                        f"Extraction of {source_file} cancelled before page {page_number}"
                    )
                try:
                    page = doc.get_page(page_number)
                    instructions = page.get_instructions()
                except KeyboardInterrupt:
                    raise
                except Exception as exc:
                    self._skip(ImageDecodeWarning(
                        f"Page {page_number} of {source_file} could not be read: {exc}"
                    ), on_warning)
                    continue

                images.extend(self.extract_page_images(page, page_number, instructions,
                                                       source_file, on_warning))
        finally:
            doc.close()

        logger.debug("Reconstructed %d images from %s", len(images), source_file)
        return images

    def extract_page_images(self, page, page_number, instructions, source_file, on_warning=None):
        """
        Rebuild the images painted by ``instructions`` on one page.

        Returns
        -------
        list of ExtractedImage
        """
        images = []
        for instruction in instructions:
            if instruction.opcode != OP_PAINT_IMAGE or not instruction.args:
                continue

            object_name = instruction.args[0]
            name = pdf_image_name(page_number, object_name)
            try:
                decoded = page.resolve_object(object_name)
                rgba = reconstruct_rgba(decoded.width, decoded.height, decoded.pixel_data)
                png_bytes = encode_png(rgba)
            except KeyboardInterrupt:
                raise
            except ImageDecodeWarning as warning:
                warning.image_name = warning.image_name or name
                self._skip(warning, on_warning,
                           prefix=f"Skipping {name} from {source_file}: ")
                continue
            except Exception as exc:
                self._skip(ImageDecodeWarning(
                    f"Failed to extract image {object_name} from page {page_number} "
                    f"of {source_file}: {exc}", name
                ), on_warning)
                continue

            images.append(ExtractedImage(name, png_bytes, MIME_PNG, source_file))

        return images

    @staticmethod
    def _skip(warning, on_warning, prefix=''):
        logger.warning("%s%s", prefix, warning)
        if on_warning is not None:
            on_warning(warning)
