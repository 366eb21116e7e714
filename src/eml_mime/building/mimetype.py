"""
MIME type constants and guessing helpers.
"""

import mimetypes
from pathlib import Path
from typing import Union

from ..models.headers import split_params
from ..models.octet_stream import TransferEncoding

TEXT = "text/plain"
HTML = "text/html"
PDF = "application/pdf"
JPG = "image/jpeg"
PNG = "image/png"
OCTET_STREAM = "application/x-octet-stream"

MULTIPART_MIXED = "multipart/mixed"
MULTIPART_ALTERNATIVE = "multipart/alternative"
MULTIPART_RELATED = "multipart/related"


def from_extension(ext: str) -> str:
    """MIME type for a file extension (with or without the leading dot)."""
    return from_filename(f"file.{ext.lstrip('.')}")


def from_filename(filename: Union[str, Path]) -> str:
    """MIME type guessed from a filename, ``application/x-octet-stream`` if unknown."""
    guessed, _ = mimetypes.guess_type(str(filename), strict=False)
    return guessed or OCTET_STREAM


def guess_encoding(content_type: str) -> TransferEncoding:
    """Quoted-printable for plain text and HTML, base64 for everything else."""
    parsed = split_params(content_type)
    primary = parsed[0].lower() if parsed else ""
    if primary in (TEXT, HTML):
        return TransferEncoding.QUOTED_PRINTABLE
    return TransferEncoding.BASE64
