"""Service wrapper around document_image_extraction."""

from .image_extractor_service import ImageExtractorService

__all__ = ["ImageExtractorService"]
