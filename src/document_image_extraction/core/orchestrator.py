"""
Batch extraction entry point.

Classifies every submitted file, dispatches it to the Office unpacker or the
PDF reconstructor, and gathers the images. Failures are recorded against the
file they belong to; a batch never aborts because of one file.
"""

import logging
from collections import namedtuple
from concurrent.futures import ThreadPoolExecutor

from .classifier import FileKind, classify
from .errors import DocumentImageError, ExtractionCancelled, UnsupportedFormatError
from .extractor import PDFExtractor
from .naming import unique_names
from .office import unpack_images

logger = logging.getLogger(__name__)


InputFile = namedtuple('InputFile', ['data', 'name', 'media_type'])
InputFile.__new__.__defaults__ = (None,)


class BatchResult:
    """
    Outcome of a batch: the images found and the files that failed.

    Attributes
    ----------
    images : list of ExtractedImage
        Input-file order, then extraction order within each file.
    errors : dict
        File name -> human readable failure message.
    warnings : list of str
        Images skipped inside otherwise readable files.
    processed : list of str
        Names of the files that ran to completion, failed ones included.
    cancelled : bool
        True when the batch stopped before every file was processed.
    """

    def __init__(self):
        self.images = []
        self.errors = {}
        self.warnings = []
        self.processed = []
        self.cancelled = False

    @property
    def ok(self):
        return not self.errors

    @property
    def succeeded(self):
        """Names of the processed files that did not fail."""
        return [name for name in self.processed if name not in self.errors]

    def images_for(self, file_name):
        """Images extracted from ``file_name``."""
        return [img for img in self.images if img.source_file == file_name]

    def __repr__(self):
        return (f"BatchResult(images={len(self.images)}, errors={len(self.errors)}, "
                f"warnings={len(self.warnings)}, cancelled={self.cancelled})")


class _FileOutcome:
    """Result of one file, merged into the batch in input order."""

    def __init__(self, name):
        self.name = name
        self.images = []
        self.error = None
        self.warnings = []


class _CancelState:
    """Caller's cancel event combined with an interrupt seen by any worker."""

    def __init__(self, event=None):
        self.event = event
        self.interrupted = False

    def set(self):
        self.interrupted = True

    def is_set(self):
        return self.interrupted or (self.event is not None and self.event.is_set())


def extract_images(data, file_name, media_type=None, pdf_extractor=None, on_warning=None,
                   cancel_event=None):
    """
    Extract the images of a single document.

    Parameters
    ----------
    data : bytes
        Raw document bytes.
    file_name : str
        Name of the document.
    media_type : str, optional
        Declared media type.
    pdf_extractor : PDFExtractor, optional
        Extractor used for PDFs. A default one is created when omitted.
    on_warning : callable, optional
        Receives an ``ImageDecodeWarning`` for every skipped image.
    cancel_event : threading.Event, optional
        Stops a PDF between pages.

    Returns
    -------
    list of ExtractedImage

    Raises
    ------
    CorruptArchiveError, UnreadablePdfError, UnsupportedFormatError, ExtractionCancelled
    """
    kind = classify(media_type, file_name)

    if kind.is_office:
        return unpack_images(data, file_name, on_warning=on_warning)

    if kind is FileKind.PDF:
        extractor = pdf_extractor or PDFExtractor()
        return extractor.extract_images(data, file_name, on_warning=on_warning,
                                        cancel_event=cancel_event)

    raise UnsupportedFormatError(
        f"Unsupported file format ({file_name}). Only .docx, .xlsx and .pdf are supported"
    )


def _process(input_file, pdf_extractor, state):
    """Extract one file; ``None`` when the batch was cancelled first."""
    if state.is_set():
        return None

    outcome = _FileOutcome(input_file.name)

    def record(warning):
        outcome.warnings.append(f"{input_file.name}: {warning}")

    try:
        outcome.images = extract_images(input_file.data, input_file.name, input_file.media_type,
                                        pdf_extractor=pdf_extractor, on_warning=record,
                                        cancel_event=state)
    except ExtractionCancelled as exc:
        logger.info("%s", exc)
        return None
    except DocumentImageError as exc:
        outcome.error = str(exc)
    except KeyboardInterrupt:
        state.set()
        raise
    except Exception as exc:
        logger.exception("Unexpected failure extracting %s", input_file.name)
        outcome.error = f"Unexpected error while extracting {input_file.name}: {exc}"

    return outcome


def _merge(result, outcome):
    if outcome.error is not None:
        logger.error("%s: %s", outcome.name, outcome.error)
        result.errors[outcome.name] = outcome.error
    else:
        logger.info("%s: %d images", outcome.name, len(outcome.images))
    result.processed.append(outcome.name)
    result.images.extend(outcome.images)
    result.warnings.extend(outcome.warnings)


def extract_batch(files, max_workers=1, pdf_extractor=None, cancel_event=None):
    """
    Extract images from a batch of files.

    Repeated file names are made unique (``report.pdf``, ``report-2.pdf``)
    so that every image and error can be traced back to one input.

    Parameters
    ----------
    files : iterable of InputFile or (data, name, media_type) tuples
        Documents to process.
    max_workers : int, optional
        Files processed at the same time. ``1`` (default) runs sequentially.
    pdf_extractor : PDFExtractor, optional
        Shared extractor for PDFs.
    cancel_event : threading.Event, optional
        When set, files not yet started are skipped, a PDF being read stops
        before its next page, and the partial result is returned.

    Returns
    -------
    BatchResult
    """
    inputs = [InputFile(*f) for f in files]
    names = unique_names([f.name for f in inputs])
    inputs = [f._replace(name=name) for f, name in zip(inputs, names)]

    pdf_extractor = pdf_extractor or PDFExtractor()
    state = _CancelState(cancel_event)
    result = BatchResult()

    try:
        if max_workers <= 1 or len(inputs) <= 1:
            for input_file in inputs:
                logger.info("Processing: %s", input_file.name)
                outcome = _process(input_file, pdf_extractor, state)
                if outcome is None:
                    result.cancelled = True
                    break
                _merge(result, outcome)
        else:
            _run_parallel(inputs, max_workers, pdf_extractor, state, result)
    except KeyboardInterrupt:
        state.set()
        logger.warning("Extraction interrupted, returning partial results")
        result.cancelled = True

    return result


def _run_parallel(inputs, max_workers, pdf_extractor, state, result):
    pool = ThreadPoolExecutor(max_workers=max_workers)
    try:
        futures = [pool.submit(_process, f, pdf_extractor, state) for f in inputs]
        for future in futures:
            outcome = future.result()
            if outcome is None:
                result.cancelled = True
                break
            _merge(result, outcome)
    except KeyboardInterrupt:
        state.set()
        raise
    finally:
        pool.shutdown(wait=not state.is_set(), cancel_futures=True)
