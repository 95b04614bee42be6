"""
ExtractedImage class holding one image pulled out of a document.
"""

import os
import uuid

from .constants import MEDIA_TYPE_EXTENSIONS, MIME_BINARY
from .naming import unique_name


class ExtractedImage:
    """
    One embedded image extracted from a document, together with its provenance.

    The encoded payload is owned by the record and cannot be replaced after
    construction. A caption is attached by building a new record with
    ``with_caption`` so that records handed out earlier never change.
    """

    __slots__ = ('_id', '_name', '_data', '_media_type', '_source_file', '_caption')

    def __init__(self, name, data, media_type, source_file, caption=None, image_id=None):
        """
        Initialize ExtractedImage object.

        Parameters
        ----------
        name : str
            Display file name of the image.
        data : bytes
            Encoded image payload. Mutable buffers are copied.
        media_type : str
            MIME type describing the encoding of ``data``.
        source_file : str
            Name of the document the image came from.
        caption : str, optional
            Caption text, absent until requested.
        image_id : str, optional
            Identifier to reuse. A fresh uuid4 is assigned when omitted.
        """
        self._id = image_id or str(uuid.uuid4())
        self._name = name
        self._data = bytes(data)
        self._media_type = media_type
        self._source_file = source_file
        self._caption = caption

    @property
    def id(self):
        return self._id

    @property
    def name(self):
        return self._name

    @property
    def data(self):
        return self._data

    @property
    def media_type(self):
        return self._media_type

    @property
    def source_file(self):
        return self._source_file

    @property
    def caption(self):
        return self._caption

    @property
    def size(self):
        """Payload length in bytes."""
        return len(self._data)

    @property
    def extension(self):
        """File extension matching the media type, including the dot."""
        return MEDIA_TYPE_EXTENSIONS.get(self._media_type, '.bin')

    def is_raster(self):
        """Return True unless the payload is an undecoded vector format."""
        return self._media_type != MIME_BINARY

    def with_caption(self, caption):
        """
        Return a copy of this record carrying ``caption``.

        The copy keeps the same identifier and shares the immutable payload.
        """
        return ExtractedImage(self._name, self._data, self._media_type, self._source_file,
                              caption=caption, image_id=self._id)

    def save(self, dir_path, file_name=None):
        """
        Write the payload into ``dir_path``.

        Parameters
        ----------
        dir_path : str
            Existing output directory.
        file_name : str, optional
            Name of the written file. Defaults to the record name.

        Returns
        -------
        str
            Path of the written file.
        """
        file_name = os.path.join(dir_path, file_name or self._name)
        with open(file_name, 'wb') as fh:
            fh.write(self._data)
        return file_name

    def __eq__(self, other):
        if not isinstance(other, ExtractedImage):
            return NotImplemented
        return self._id == other._id and self._caption == other._caption

    def __hash__(self):
        return hash(self._id)

    def __repr__(self):
        """String representation of ExtractedImage object."""
        return (f"ExtractedImage(name={self._name!r}, "
                f"media_type={self._media_type!r}, "
                f"size={len(self._data)}, "
                f"source_file={self._source_file!r})")


def save_images(images, out_dir):
    """
    Save images under ``out_dir/<document stem>/``.

    A name already written to the same folder during this call gets a
    ``-2``, ``-3``, ... suffix, so an object painted twice on one PDF page
    yields two files.

    Returns
    -------
    list of str
        Written file paths, in the order of ``images``.
    """
    written = []
    taken = {}
    for image in images:
        stem = os.path.splitext(image.source_file)[0]
        dir_path = os.path.join(out_dir, stem)
        os.makedirs(dir_path, exist_ok=True)
        used = taken.setdefault(stem, set())
        file_name = unique_name(image.name, used)
        used.add(file_name)
        written.append(image.save(dir_path, file_name))
    return written
