"""Error kinds raised by the extraction core and its collaborators."""


class DocumentImageError(Exception):
    """Base class for every error reported against a single input file."""


class CorruptArchiveError(DocumentImageError):
    """Office container cannot be opened (truncated, not a zip, encrypted)."""


class UnreadablePdfError(DocumentImageError):
    """PDF document cannot be parsed."""


class UnsupportedFormatError(DocumentImageError):
    """File kind is not DOCX, XLSX or PDF."""


class ImageDecodeWarning(DocumentImageError):
    """
    A single embedded image could not be reconstructed.

    Raised inside an extractor and handled there: the image is logged and
    skipped while the rest of the document is still extracted.
    """

    def __init__(self, message, image_name=None):
        super().__init__(message)
        self.image_name = image_name


class UnsupportedLayoutError(ImageDecodeWarning):
    """Decoded pixel buffer length matches none of RGBA, RGB or grayscale."""


class InvalidUrlError(DocumentImageError):
    """URL is not a Google Docs or Google Sheets document link."""


class AccessDeniedError(DocumentImageError):
    """Remote document is not shared publicly."""


class NotFoundError(DocumentImageError):
    """Remote document does not exist."""


class RemoteFetchError(DocumentImageError):
    """Remote document could not be downloaded for another reason."""


class CaptionError(DocumentImageError):
    """Captioning service could not describe an image."""


class ExtractionCancelled(DocumentImageError):
    """Batch was cancelled while a document was still being extracted."""
