"""
Command-line interface for document image extraction.

Provides the main entry point for extracting images from DOCX, XLSX and PDF
files and public Google Docs/Sheets links. Environment variables are
supported for Docker deployment.
"""

import argparse
import json
import logging
import os
import sys

from document_image_extraction.captioning import OpenAICaptioner, caption_images
from document_image_extraction.core import InputFile, extract_batch, PDFExtractor, ParserConfig
from document_image_extraction.core.classifier import FileKind, classify
from document_image_extraction.core.errors import DocumentImageError
from document_image_extraction.core.extracted_image import save_images
from document_image_extraction.google_docs import fetch_google_file


def create_parser():
    """
    Create and return the argument parser for the CLI.

    Returns
    -------
    argparse.ArgumentParser
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog='extract-images',
        description='Extract embedded images from Word, Excel and PDF documents',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s -i report.docx -o ./output
  %(prog)s -i /path/to/documents -o ./output --workers 4
  %(prog)s -u https://docs.google.com/document/d/<id>/edit -o ./output --caption

  # Using environment variables (Docker)
  export INPUT_PATH=/path/to/document.pdf
  export OUTPUT_PATH=/path/to/output
  %(prog)s --env
        """
    )

    parser.add_argument(
        '--input-path', '-i',
        nargs='+',
        default=[],
        help='Document file(s) or directories containing documents'
    )

    parser.add_argument(
        '--url', '-u',
        nargs='+',
        default=[],
        help='Public Google Docs or Google Sheets link(s)'
    )

    parser.add_argument(
        '--output-path', '-o',
        type=str,
        default='.',
        help='Output directory for extracted images (default: current directory)'
    )

    parser.add_argument(
        '--workers', '-w',
        type=int,
        default=1,
        help='Documents processed in parallel (default: 1)'
    )

    parser.add_argument(
        '--max-pages',
        type=int,
        default=None,
        help='Only read the first N pages of each PDF'
    )

    parser.add_argument(
        '--caption',
        action='store_true',
        help='Caption every image with an OpenAI vision model (needs OPENAI_API_KEY)'
    )

    parser.add_argument(
        '--env',
        action='store_true',
        help='Use environment variables (INPUT_PATH, OUTPUT_PATH, MAX_WORKERS)'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose output'
    )

    return parser


def collect_documents(paths):
    """
    Expand files and directories into the supported document paths.

    Directory contents are sorted case-insensitively; unsupported files found
    inside a directory are ignored, while explicitly named files are kept so
    that they are reported as unsupported.
    """
    documents = []
    for path in paths:
        if os.path.isdir(path):
            names = sorted(os.listdir(path), key=str.lower)
            documents.extend(
                os.path.join(path, name) for name in names
                if classify(None, name) is not FileKind.UNKNOWN
            )
        else:
            documents.append(path)
    return documents


def read_input_file(path):
    """Read a document from disk as an InputFile."""
    with open(path, 'rb') as fh:
        return InputFile(fh.read(), os.path.basename(path), None)


def write_captions(images, written, out_dir):
    """Write ``captions.json`` mapping each saved image path to its caption."""
    captions = {
        os.path.relpath(path, out_dir).replace(os.sep, '/'): img.caption
        for img, path in zip(images, written)
    }
    file_name = os.path.join(out_dir, 'captions.json')
    with open(file_name, 'w', encoding='utf-8') as fh:
        json.dump(captions, fh, ensure_ascii=False, indent=2)
    return file_name


def run(input_paths, urls, out_dir, workers=1, max_pages=None, caption=False):
    """
    Extract images from local documents and Google links into ``out_dir``.

    Returns
    -------
    int
        0 when at least one input succeeded or nothing was given, 1 otherwise.
    """
    if not os.path.isdir(out_dir):
        raise IOError(f"Output {out_dir} is not a directory")

    inputs = []
    load_errors = {}

    for path in collect_documents(input_paths):
        try:
            inputs.append(read_input_file(path))
        except OSError as exc:
            load_errors[path] = f"Cannot read {path}: {exc}"

    for url in urls:
        try:
            inputs.append(fetch_google_file(url))
        except DocumentImageError as exc:
            load_errors[url] = str(exc)

    extractor = PDFExtractor(config=ParserConfig(max_pages=max_pages))
    result = extract_batch(inputs, max_workers=workers, pdf_extractor=extractor)
    errors = dict(load_errors)
    errors.update(result.errors)

    images = result.images
    if caption and images:
        images = caption_images(images, OpenAICaptioner())

    written = save_images(images, out_dir)
    if caption and images:
        write_captions(images, written, out_dir)

    print(f"Extracted {len(written)} images from {len(result.succeeded)} documents")
    for name, message in errors.items():
        print(f"Failed: {name}: {message}", file=sys.stderr)
    if result.cancelled:
        print("Extraction cancelled, partial results were written", file=sys.stderr)

    attempted = len(inputs) + len(load_errors)
    if attempted and len(errors) == attempted:
        return 1
    return 0


def extract_with_env():
    """
    Extract images using environment variables.

    Supports Docker environment variables:
    - INPUT_PATH: document file or directory (required)
    - OUTPUT_PATH: output directory (default: /OUTPUT)
    - MAX_WORKERS: documents processed in parallel (default: 1)
    """
    input_path = os.environ.get('INPUT_PATH')
    output_path = os.environ.get('OUTPUT_PATH', '/OUTPUT')

    if not input_path:
        print("Error: INPUT_PATH environment variable not set", file=sys.stderr)
        return 1

    if not os.path.exists(input_path):
        print(f"Error: input not found: {input_path}", file=sys.stderr)
        return 1

    try:
        workers = int(os.environ.get('MAX_WORKERS', '1'))
    except ValueError:
        print("Error: MAX_WORKERS must be an integer", file=sys.stderr)
        return 1

    os.makedirs(output_path, exist_ok=True)
    return run([input_path], [], output_path, workers=workers)


def main(argv=None):
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(levelname)s %(name)s: %(message)s'
    )

    if args.env:
        sys.exit(extract_with_env())

    if not args.input_path and not args.url:
        parser.print_help()
        sys.exit(1)

    try:
        sys.exit(run(args.input_path, args.url, args.output_path,
                     workers=args.workers, max_pages=args.max_pages, caption=args.caption))
    except IOError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except DocumentImageError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
