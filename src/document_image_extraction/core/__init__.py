"""Core image extraction utilities."""

from .classifier import FileKind, classify
from .extracted_image import ExtractedImage, save_images
from .extractor import PDFExtractor, reconstruct_rgba, encode_png
from .office import unpack_images
from .orchestrator import BatchResult, InputFile, extract_batch, extract_images
from .pdf_parser import PdfParser, ParserConfig

__all__ = [
    "FileKind",
    "classify",
    "ExtractedImage",
    "save_images",
    "PDFExtractor",
    "reconstruct_rgba",
    "encode_png",
    "unpack_images",
    "BatchResult",
    "InputFile",
    "extract_batch",
    "extract_images",
    "PdfParser",
    "ParserConfig",
]
