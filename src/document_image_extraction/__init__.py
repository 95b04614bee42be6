"""
Document Image Extraction Package

Extracts the embedded raster images of Word (DOCX), Excel (XLSX) and PDF
documents, including public Google Docs/Sheets links, with optional AI captions.
Office containers give up their stored media parts; PDF images are rebuilt from
their decoded pixel buffers and re-encoded as PNG.
"""

__version__ = "1.0.0"

from .core.classifier import FileKind, classify
from .core.errors import (
    DocumentImageError, CorruptArchiveError, UnreadablePdfError,
    UnsupportedFormatError, ImageDecodeWarning, ExtractionCancelled
)
from .core.extracted_image import ExtractedImage
from .core.extractor import PDFExtractor
from .core.orchestrator import BatchResult, InputFile, extract_batch, extract_images
from .core.pdf_parser import ParserConfig

__all__ = [
    "FileKind",
    "classify",
    "DocumentImageError",
    "CorruptArchiveError",
    "UnreadablePdfError",
    "UnsupportedFormatError",
    "ImageDecodeWarning",
    "ExtractionCancelled",
    "ExtractedImage",
    "PDFExtractor",
    "BatchResult",
    "InputFile",
    "extract_batch",
    "extract_images",
    "ParserConfig",
]
