"""
Embedded media extraction from Office Open XML containers (DOCX, XLSX).

DOCX and XLSX files are zip archives; pictures inserted in the document are
stored as parts under ``word/media/`` or ``xl/media/``. The parts are returned
as they are stored, without decoding.
"""

import io
import logging
import time
import zipfile

from .constants import MEDIA_SEGMENT, MEDIA_SUFFIX_TYPES
from .errors import CorruptArchiveError, ImageDecodeWarning
from .extracted_image import ExtractedImage

logger = logging.getLogger(__name__)


def media_suffix(entry_name):
    """Return the lowercase suffix of ``entry_name`` if it is a media suffix we keep."""
    if '.' not in entry_name:
        return None
    suffix = entry_name.rsplit('.', 1)[1].lower()
    return suffix if suffix in MEDIA_SUFFIX_TYPES else None


def is_media_entry(entry_name):
    """Check whether an archive entry is a stored image part."""
    if entry_name.endswith('/'):
        return False
    return MEDIA_SEGMENT in entry_name and media_suffix(entry_name) is not None


def entry_display_name(entry_name):
    """Final path segment of an entry, or a timestamped name when it is empty."""
    name = entry_name.rsplit('/', 1)[-1]
    return name or f"image-{int(time.time() * 1000)}"


def unpack_images(data, source_file, on_warning=None):
    """
    Extract the embedded media parts of an Office container.

    Parameters
    ----------
    data : bytes
        Raw DOCX/XLSX bytes.
    source_file : str
        Name of the document, recorded on every image.
    on_warning : callable, optional
        Called with an ``ImageDecodeWarning`` for every entry that is skipped.

    Returns
    -------
    list of ExtractedImage
        One record per media entry, in archive order.

    Raises
    ------
    CorruptArchiveError
        If the bytes cannot be opened as a zip archive.
    """
    try:
        archive = zipfile.ZipFile(io.BytesIO(data))
    except (zipfile.BadZipFile, zipfile.LargeZipFile, ValueError, OSError) as exc:
        raise CorruptArchiveError(
            f"Cannot open {source_file} as an Office document. "
            f"The file may be damaged or password protected ({exc})"
        ) from exc

    images = []
    with archive:
        for info in archive.infolist():
            if not is_media_entry(info.filename):
                continue

            name = entry_display_name(info.filename)
            try:
                payload = archive.read(info)
            except KeyboardInterrupt:
                raise
            except Exception as exc:
                warning = ImageDecodeWarning(
                    f"Failed to read {info.filename} from {source_file}: {exc}", name
                )
                logger.warning("%s", warning)
                if on_warning is not None:
                    on_warning(warning)
                continue

            media_type = MEDIA_SUFFIX_TYPES[media_suffix(info.filename)]
            images.append(ExtractedImage(name, payload, media_type, source_file))

    logger.debug("Unpacked %d media entries from %s", len(images), source_file)
    return images
