"""
MIME header introspection for message nodes.

This module answers questions about a single node from its headers:
its content type, whether it is inline or an attachment (and under which
name), and the Content-Id it can be referenced by.
"""

from dataclasses import dataclass
from email.utils import quote as _escape
from typing import List, Optional, Tuple, Union

from ..config import settings
from ..models.email import Email
from ..models.headers import find_param, split_params

DEFAULT_CONTENT_TYPE = "application/x-octet-stream"
MULTIPART_ALTERNATIVE = "multipart/alternative"

HeaderArgs = List[Tuple[str, Optional[str]]]


@dataclass(frozen=True)
class InlineDisposition:
    """Part meant to be presented directly."""


@dataclass(frozen=True)
class AttachmentDisposition:
    """Part meant to be saved under ``filename``."""

    filename: str


Disposition = Union[InlineDisposition, AttachmentDisposition]

INLINE = InlineDisposition()


def parse_last_header(email: Email, name: str) -> Optional[Tuple[str, HeaderArgs]]:
    """
    Parse the last occurrence of a structured header.

    Args:
        email: Node to inspect
        name: Header name (case-insensitive)

    Returns:
        ``(primary_value, [(key, value_or_None), ...])``, or None if the header
        is absent or blank
    """
    value = email.headers.last(name)
    if value is None:
        return None
    return split_params(value)


def content_type(email: Email) -> str:
    """Primary Content-Type value, ``application/x-octet-stream`` if absent."""
    parsed = parse_last_header(email, "Content-Type")
    if parsed is None:
        return DEFAULT_CONTENT_TYPE
    return parsed[0]


def is_content_type(email: Email, mimetype: str) -> bool:
    return content_type(email).lower() == mimetype.lower()


def attachment_name(email: Email) -> Optional[str]:
    """
    Name a node would be saved under.

    The ``filename`` parameter of an ``attachment`` Content-Disposition wins;
    otherwise the ``name`` parameter of Content-Type is used.

    Args:
        email: Node to inspect

    Returns:
        Unquoted name, or None if neither header names the part
    """
    disposition = parse_last_header(email, "Content-Disposition")
    if disposition is not None:
        disp, args = disposition
        if disp.lower() == "attachment":
            filename = find_param(args, "filename")
            if filename is not None:
                return filename
    return _content_type_name(email)


def content_disposition(email: Email) -> Disposition:
    """
    Classify a node as inline or attachment.

    An explicit ``inline`` or ``attachment`` Content-Disposition decides;
    any other (or no) disposition falls back to the Content-Type ``name``
    parameter.

    Args:
        email: Node to inspect

    Returns:
        INLINE or AttachmentDisposition(filename)
    """
    disposition = parse_last_header(email, "Content-Disposition")
    if disposition is not None:
        disp = disposition[0].lower()
        if disp == "inline":
            return INLINE
        if disp == "attachment":
            return AttachmentDisposition(
                filename=attachment_name(email) or settings.default_attachment_name
            )
    name = _content_type_name(email)
    if name is None:
        return INLINE
    return AttachmentDisposition(filename=name)


def is_attachment(email: Email) -> bool:
    return isinstance(content_disposition(email), AttachmentDisposition)


def related_part_cid(email: Email) -> Optional[str]:
    """Content-Id with one pair of surrounding angle brackets removed."""
    value = email.headers.last("Content-Id")
    if value is None:
        return None
    value = value.strip()
    if value.startswith("<") and value.endswith(">") and len(value) >= 2:
        return value[1:-1]
    return value


def quote(value: str) -> str:
    """Render ``value`` as a quoted-string header parameter."""
    return f'"{_escape(value)}"'


def _content_type_name(email: Email) -> Optional[str]:
    parsed = parse_last_header(email, "Content-Type")
    if parsed is None:
        return None
    return find_param(parsed[1], "name")
