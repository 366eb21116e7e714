"""
eml_mime - build and decompose MIME email messages.

Messages are immutable ``Email`` trees. The ``building`` package assembles
them; the ``parsing`` package classifies and extracts their parts.
"""

from .attachment import Attachment, summarize_attachment
from .building import (
    ProcessIdentity,
    alternatives,
    create,
    create_envelope,
    create_envelope_raw,
    create_multipart,
    create_related,
    html,
    mimetype,
    mixed,
    of_file,
    text,
)
from .exceptions import (
    AmbiguousPayloadError,
    ConfigurationError,
    DecodeError,
    EmlMimeError,
    ParseError,
)
from .models import Email, Headers, TransferEncoding
from .parsing import (
    KEEP,
    Keep,
    Replace,
    all_attachments,
    all_related_parts,
    alternative_parts,
    content_disposition,
    content_type,
    find_attachment,
    find_related,
    inline_parts,
    map_file_attachments,
    parse_eml_bytes,
    parse_eml_file,
    parts,
)
from .version import __version__

__all__ = [
    "__version__",
    "Email",
    "Headers",
    "TransferEncoding",
    "Attachment",
    "summarize_attachment",
    "ProcessIdentity",
    "mimetype",
    "create",
    "text",
    "html",
    "of_file",
    "create_multipart",
    "alternatives",
    "mixed",
    "create_related",
    "create_envelope",
    "create_envelope_raw",
    "parse_eml_bytes",
    "parse_eml_file",
    "content_type",
    "content_disposition",
    "parts",
    "inline_parts",
    "alternative_parts",
    "all_related_parts",
    "find_related",
    "all_attachments",
    "find_attachment",
    "map_file_attachments",
    "KEEP",
    "Keep",
    "Replace",
    "EmlMimeError",
    "ConfigurationError",
    "ParseError",
    "DecodeError",
    "AmbiguousPayloadError",
]
