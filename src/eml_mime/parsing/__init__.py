# Email parsing and decomposition module

from .eml_parser import (
    extract_envelope,
    get_cc,
    get_from,
    get_message_id,
    get_subject,
    get_to,
    parse_eml_bytes,
    parse_eml_file,
)
from .mime_utils import (
    INLINE,
    AttachmentDisposition,
    InlineDisposition,
    attachment_name,
    content_disposition,
    content_type,
    is_attachment,
    parse_last_header,
    related_part_cid,
)
from .traversal import (
    KEEP,
    Keep,
    Replace,
    all_attachments,
    all_related_parts,
    alternative_parts,
    find_attachment,
    find_related,
    inline_parts,
    map_file_attachments,
    parse_attachment,
    parts,
)

__all__ = [
    "parse_eml_bytes",
    "parse_eml_file",
    "extract_envelope",
    "get_from",
    "get_to",
    "get_cc",
    "get_subject",
    "get_message_id",
    "INLINE",
    "InlineDisposition",
    "AttachmentDisposition",
    "parse_last_header",
    "content_type",
    "content_disposition",
    "attachment_name",
    "is_attachment",
    "related_part_cid",
    "KEEP",
    "Keep",
    "Replace",
    "parts",
    "inline_parts",
    "alternative_parts",
    "all_related_parts",
    "find_related",
    "parse_attachment",
    "all_attachments",
    "find_attachment",
    "map_file_attachments",
]
