"""
Service layer for document image extraction.

Provides a file-system oriented API for integration with Docker and other services.
"""

import logging
import mimetypes
import os

from document_image_extraction.captioning import caption_images
from document_image_extraction.core import InputFile, PDFExtractor, extract_batch
from document_image_extraction.core.errors import DocumentImageError
from document_image_extraction.core.extracted_image import save_images
from document_image_extraction.core.naming import unique_names

logger = logging.getLogger(__name__)


class ImageExtractorService:
    """
    Service wrapper for document image extraction.

    Reads documents from disk, extracts their images and writes them to an
    output folder, one sub-folder per document.
    """

    def __init__(self, max_workers=1, parser_config=None, captioner=None):
        """
        Initialize the service.

        Parameters
        ----------
        max_workers : int, optional
            Documents processed in parallel by ``extract_images_batch``.
        parser_config : ParserConfig, optional
            Limits for the PDF parser.
        captioner : object, optional
            Object with ``describe(data, media_type)``. When set, captions are
            attached to the returned images.
        """
        if max_workers < 1:
            raise ValueError(f"Invalid max_workers: {max_workers}")

        self.max_workers = max_workers
        self.pdf_extractor = PDFExtractor(config=parser_config)
        self.captioner = captioner
        self.last_images = []

    def extract_images(self, doc_path, output_folder):
        """
        Extract images from a single document.

        Parameters
        ----------
        doc_path : str
            Path to the DOCX, XLSX or PDF file.
        output_folder : str
            Output folder where extracted images will be saved.

        Returns
        -------
        list
            Sorted paths of the written images.

        Raises
        ------
        IOError
            If the document or the output folder is not found.
        DocumentImageError
            If the document cannot be extracted.
        """
        results = self._run([doc_path], output_folder)
        paths, error = results[doc_path]
        if error:
            raise DocumentImageError(error)
        return paths

    def extract_images_batch(self, doc_list, output_folder):
        """
        Extract images from multiple documents.

        Parameters
        ----------
        doc_list : list
            List of document paths.
        output_folder : str
            Output folder where extracted images will be saved.

        Returns
        -------
        dict
            Dictionary mapping document paths to lists of extracted image paths.
            Documents that failed map to an empty list.
        """
        results = self._run(doc_list, output_folder)
        return {path: paths for path, (paths, _) in results.items()}

    def _run(self, doc_list, output_folder):
        if not os.path.isdir(output_folder):
            raise IOError(f"Output folder not found: {output_folder}")

        # Same base name in different folders -> report.pdf, report-2.pdf
        names = unique_names([os.path.basename(p) for p in doc_list])
        inputs = []
        by_name = {}
        for doc_path, name in zip(doc_list, names):
            if not os.path.isfile(doc_path):
                raise IOError(f"Document not found: {doc_path}")
            with open(doc_path, 'rb') as fh:
                data = fh.read()
            media_type, _ = mimetypes.guess_type(doc_path)
            inputs.append(InputFile(data, name, media_type))
            by_name[name] = doc_path

        batch = extract_batch(inputs, max_workers=self.max_workers, pdf_extractor=self.pdf_extractor)

        images = batch.images
        if self.captioner is not None:
            images = caption_images(images, self.captioner)

        results = {doc_path: ([], None) for doc_path in doc_list}
        for image, path in zip(images, save_images(images, output_folder)):
            results[by_name[image.source_file]][0].append(os.path.abspath(path))

        for name, message in batch.errors.items():
            logger.error("Error processing %s: %s", by_name[name], message)
            results[by_name[name]] = ([], message)

        self.last_images = images
        return {path: (sorted(paths), error) for path, (paths, error) in results.items()}
