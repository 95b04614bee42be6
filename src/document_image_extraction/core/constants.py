"""Constants for document image extraction."""

# Declared media types of the supported documents
MIME_DOCX = 'application/vnd.openxmlformats-officedocument.wordprocessingml.document'
MIME_XLSX = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
MIME_PDF = 'application/pdf'

# Media types of extracted payloads
MIME_PNG = 'image/png'
MIME_JPEG = 'image/jpeg'
MIME_GIF = 'image/gif'
MIME_BINARY = 'application/octet-stream'

# Office containers keep embedded parts under word/media/, xl/media/, ...
MEDIA_SEGMENT = 'media/'

# Entry suffix -> payload media type. Vector formats are kept as opaque binary.
MEDIA_SUFFIX_TYPES = {
    'png': MIME_PNG,
    'gif': MIME_GIF,
    'jpg': MIME_JPEG,
    'jpeg': MIME_JPEG,
    'emf': MIME_BINARY,
    'wmf': MIME_BINARY,
}

MEDIA_TYPE_EXTENSIONS = {
    MIME_PNG: '.png',
    MIME_JPEG: '.jpg',
    MIME_GIF: '.gif',
    MIME_BINARY: '.bin',
}

# PDF output naming
PDF_IMAGE_NAME = 'pdf-image-p{page}-{name}.png'

# Instruction opcode understood by the PDF reconstructor
OP_PAINT_IMAGE = 'paintImageXObject'

# Channel counts of the decoded pixel layouts
CHANNELS_RGBA = 4
CHANNELS_RGB = 3
CHANNELS_GRAY = 1
OPAQUE_ALPHA = 255

# PNG zlib level (0-9)
PNG_COMPRESS_LEVEL = 6

# Decoded images above this many pixels are skipped (about 16k x 16k)
MAX_IMAGE_PIXELS = 268_435_456

# Colorspace converted to RGB before reconstruction
COLORSPACE_CMYK = 'DeviceCMYK'

# Google export endpoints
GOOGLE_DOCS_EXPORT = 'https://docs.google.com/document/d/{id}/export?format=docx'
GOOGLE_SHEETS_EXPORT = 'https://docs.google.com/spreadsheets/d/{id}/export?format=xlsx'
HTTP_TIMEOUT = 60

# Captioning
DEFAULT_CAPTION_MODEL = 'gpt-4o-mini'
CAPTION_PROMPT = (
    "Describe this image briefly (under 30 words) so the text can be used "
    "as an image caption."
)
CAPTION_MAX_TOKENS = 120
NO_CAPTION = 'No caption available'
