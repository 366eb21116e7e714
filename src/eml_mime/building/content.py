"""
Body content builders.

Convenience constructors for leaf parts (text, HTML, files) and the
multipart containers that combine them.
"""

import asyncio
from pathlib import Path
from typing import List, Optional, Sequence, Union

import structlog

from ..exceptions import ConfigurationError
from ..models.email import Email
from ..models.headers import HeaderPair
from ..models.octet_stream import TransferEncoding
from .builder import NamedContent, create_data_part, create_multipart_raw
from .mimetype import (
    HTML,
    MULTIPART_ALTERNATIVE,
    MULTIPART_MIXED,
    MULTIPART_RELATED,
    TEXT,
    from_filename,
    guess_encoding,
)

logger = structlog.get_logger(__name__)

TextContent = Union[str, bytes]


def create(
    data: bytes,
    content_type: str,
    encoding: Optional[TransferEncoding] = None,
    extra_headers: Optional[Sequence[HeaderPair]] = None,
) -> Email:
    """
    Build a leaf part of the given type.

    Args:
        data: Raw payload bytes
        content_type: Content-Type header value
        encoding: Transfer encoding (guessed from the type if omitted)
        extra_headers: Additional headers, placed before Content-Type

    Returns:
        Leaf Email
    """
    if encoding is None:
        encoding = guess_encoding(content_type)
    return create_data_part(
        data,
        encoding=encoding,
        extra_headers=list(extra_headers or []) + [("Content-Type", content_type)],
    )


def _text_part(
    content: TextContent,
    mimetype: str,
    encoding: TransferEncoding,
    extra_headers: Optional[Sequence[HeaderPair]],
) -> Email:
    if isinstance(content, str):
        return create(
            content.encode("utf-8"),
            content_type=f"{mimetype}; charset=utf-8",
            encoding=encoding,
            extra_headers=extra_headers,
        )
    return create(content, content_type=mimetype, encoding=encoding, extra_headers=extra_headers)


def text(
    content: TextContent,
    encoding: TransferEncoding = TransferEncoding.QUOTED_PRINTABLE,
    extra_headers: Optional[Sequence[HeaderPair]] = None,
) -> Email:
    """Plain-text part; ``str`` content is encoded as UTF-8."""
    return _text_part(content, TEXT, encoding, extra_headers)


def html(
    content: TextContent,
    encoding: TransferEncoding = TransferEncoding.QUOTED_PRINTABLE,
    extra_headers: Optional[Sequence[HeaderPair]] = None,
) -> Email:
    """HTML part; ``str`` content is encoded as UTF-8."""
    return _text_part(content, HTML, encoding, extra_headers)


async def of_file(
    path: Union[str, Path],
    content_type: Optional[str] = None,
    encoding: Optional[TransferEncoding] = None,
    extra_headers: Optional[Sequence[HeaderPair]] = None,
) -> Email:
    """
    Build a leaf part from a file's contents.

    Args:
        path: File to read
        content_type: Content-Type (guessed from the filename if omitted)
        encoding: Transfer encoding (guessed from the type if omitted)
        extra_headers: Additional headers

    Returns:
        Leaf Email

    Raises:
        OSError: If the file cannot be read
    """
    data = await asyncio.to_thread(Path(path).read_bytes)
    return create(
        data,
        content_type=content_type or from_filename(path),
        encoding=encoding,
        extra_headers=extra_headers,
    )


def create_multipart(
    parts: Sequence[Email],
    content_type: str,
    extra_headers: Optional[Sequence[HeaderPair]] = None,
) -> Email:
    """
    Combine parts under a multipart node.

    A single part is returned as-is with ``extra_headers`` appended, without a
    multipart wrapper.

    Raises:
        ConfigurationError: If ``parts`` is empty
    """
    if not parts:
        raise ConfigurationError("At least one part is required", {"content_type": content_type})
    if len(parts) == 1:
        logger.debug("singleton_multipart_collapsed", content_type=content_type)
        return parts[0].add_headers(list(extra_headers or []))
    return create_multipart_raw(parts, content_type=content_type, extra_headers=extra_headers)


def alternatives(
    parts: Sequence[Email], extra_headers: Optional[Sequence[HeaderPair]] = None
) -> Email:
    """Equivalent representations of the same content, e.g. text then HTML."""
    return create_multipart(parts, MULTIPART_ALTERNATIVE, extra_headers=extra_headers)


def mixed(parts: Sequence[Email], extra_headers: Optional[Sequence[HeaderPair]] = None) -> Email:
    return create_multipart(parts, MULTIPART_MIXED, extra_headers=extra_headers)


def create_related(
    content: Email,
    resources: Sequence[NamedContent],
    extra_headers: Optional[Sequence[HeaderPair]] = None,
) -> Email:
    """
    Bundle a body with the resources it references by Content-Id.

    The body is marked inline; each resource gets ``Content-Id: <name>``.
    The result is always a ``multipart/related`` node.
    """
    parts: List[Email] = [content.add_headers([("Content-Disposition", "inline")])]
    parts.extend(
        resource.add_headers([("Content-Id", f"<{name}>")]) for name, resource in resources
    )
    return create_multipart_raw(parts, MULTIPART_RELATED, extra_headers=extra_headers)
