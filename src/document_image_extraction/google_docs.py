"""
Download of publicly shared Google Docs and Google Sheets documents.

Google exports a document as DOCX and a spreadsheet as XLSX, so a shared link
can be fed to the same extraction path as an uploaded Office file.
"""

import logging
import re
from collections import namedtuple
from urllib.parse import urlparse

import requests

from .core.classifier import FileKind
from .core.constants import GOOGLE_DOCS_EXPORT, GOOGLE_SHEETS_EXPORT, HTTP_TIMEOUT
from .core.errors import InvalidUrlError, AccessDeniedError, NotFoundError, RemoteFetchError
from .core.orchestrator import InputFile

logger = logging.getLogger(__name__)

GoogleExport = namedtuple('GoogleExport', ['kind', 'export_url', 'file_name'])

_DOC_PATH = re.compile(r'/document/d/([a-zA-Z0-9_-]+)')
_SHEET_PATH = re.compile(r'/spreadsheets/d/([a-zA-Z0-9_-]+)')


def parse_google_url(url):
    """
    Recognize a Google Docs or Sheets link.

    Parameters
    ----------
    url : str
        Link copied from the browser or the share dialog.

    Returns
    -------
    GoogleExport or None
        Export location and file name, or None for any other URL.
    """
    try:
        parsed = urlparse(url.strip())
    except (AttributeError, ValueError):
        return None

    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        return None

    match = _DOC_PATH.search(parsed.path)
    if match:
        doc_id = match.group(1)
        return GoogleExport(FileKind.DOCX, GOOGLE_DOCS_EXPORT.format(id=doc_id),
                            f"google-doc-{doc_id}.docx")

    match = _SHEET_PATH.search(parsed.path)
    if match:
        sheet_id = match.group(1)
        return GoogleExport(FileKind.XLSX, GOOGLE_SHEETS_EXPORT.format(id=sheet_id),
                            f"google-sheet-{sheet_id}.xlsx")

    return None


def fetch_google_file(url, session=None, timeout=HTTP_TIMEOUT):
    """
    Download the exported Office file behind a Google Docs/Sheets link.

    Parameters
    ----------
    url : str
        Public Google Docs or Google Sheets link.
    session : requests.Session, optional
        Session to issue the request with.
    timeout : float, optional
        Request timeout in seconds.

    Returns
    -------
    InputFile
        Export bytes with the synthesized file name and Office media type.

    Raises
    ------
    InvalidUrlError
        If the link is not a Google Docs or Sheets document.
    AccessDeniedError
        If the document is not shared with "Anyone with the link".
    NotFoundError
        If the document does not exist.
    RemoteFetchError
        For any other download failure.
    """
    export = parse_google_url(url)
    if export is None:
        raise InvalidUrlError(f"Invalid URL {url!r}. Only public Google Docs and Google Sheets links are supported")

    http = session or requests
    logger.info("Downloading %s", export.export_url)

    try:
        response = http.get(export.export_url, timeout=timeout, allow_redirects=True)
    except requests.RequestException as exc:
        raise RemoteFetchError(f"Could not download {url}: {exc}") from exc

    if response.status_code == 404:
        raise NotFoundError(f"Document not found: {url}")
    if response.status_code in (401, 403):
        raise AccessDeniedError(
            f"Access denied to {url}. Share the document with 'Anyone with the link'"
        )
    if not response.ok:
        raise RemoteFetchError(f"Could not download {url} (HTTP {response.status_code})")

    # private documents redirect to the sign-in page instead of failing
    content_type = response.headers.get('Content-Type', '')
    if content_type.startswith('text/html'):
        raise AccessDeniedError(
            f"Access denied to {url}. Share the document with 'Anyone with the link'"
        )

    return InputFile(response.content, export.file_name, export.kind.value)
