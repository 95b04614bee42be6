"""Routing of submitted files to an extraction path."""

from enum import Enum

from .constants import MIME_DOCX, MIME_XLSX, MIME_PDF


class FileKind(Enum):
    """Closed set of document kinds; values are the canonical media types."""

    DOCX = MIME_DOCX
    XLSX = MIME_XLSX
    PDF = MIME_PDF
    UNKNOWN = 'unknown'

    @property
    def is_office(self):
        return self in (FileKind.DOCX, FileKind.XLSX)


_SUFFIXES = (
    ('.docx', FileKind.DOCX),
    ('.xlsx', FileKind.XLSX),
    ('.pdf', FileKind.PDF),
)


def classify(media_type, file_name):
    """
    Classify a file from its declared media type, then its name suffix.

    Parameters
    ----------
    media_type : str or None
        Media type declared by the submitter.
    file_name : str or None
        Name of the submitted file.

    Returns
    -------
    FileKind
        Never raises; anything unrecognized is ``FileKind.UNKNOWN``.
    """
    if isinstance(media_type, str):
        declared = media_type.split(';', 1)[0].strip().lower()
        for kind in (FileKind.DOCX, FileKind.XLSX, FileKind.PDF):
            if declared == kind.value:
                return kind

    if isinstance(file_name, str):
        lowered = file_name.lower()
        for suffix, kind in _SUFFIXES:
            if lowered.endswith(suffix):
                return kind

    return FileKind.UNKNOWN
