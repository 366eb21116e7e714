"""
Direct payload extraction from a single leaf node.

Unlike ``Attachment``, these helpers work on any node regardless of its
disposition, and fail loudly when the node has no single payload.
"""

import asyncio
from pathlib import Path
from typing import Optional, Union

import charset_normalizer
import structlog

from .exceptions import AmbiguousPayloadError, DecodeError, ParseError
from .models.content import Data, parse
from .models.email import Email
from .models.headers import Headers, find_param, split_params
from .models.octet_stream import OctetStream, encoding_to_string

logger = structlog.get_logger(__name__)


def content(email: Email, container_headers: Optional[Headers] = None) -> Optional[OctetStream]:
    """Encoded payload of a leaf node; None for multiparts, messages and unparsable nodes."""
    try:
        parsed = parse(email, container_headers)
    except ParseError:
        return None
    if isinstance(parsed, Data):
        return parsed.octet_stream
    return None


def decoded_content(email: Email, container_headers: Optional[Headers] = None) -> bytes:
    """
    Decoded payload bytes of a leaf node.

    Raises:
        ParseError: If the node cannot be parsed
        AmbiguousPayloadError: If the node holds sub-parts or an embedded message
        DecodeError: If the transfer encoding is unknown or malformed
    """
    parsed = parse(email, container_headers)
    if not isinstance(parsed, Data):
        raise AmbiguousPayloadError(
            "The payload of this email is ambiguous; decompose the email further",
            {"variant": type(parsed).__name__},
        )
    data = parsed.octet_stream.decode()
    if data is None:
        raise DecodeError(
            "The message payload used an unknown or malformed encoding",
            {"encoding": encoding_to_string(parsed.octet_stream.encoding)},
        )
    return data


def decoded_text(email: Email, container_headers: Optional[Headers] = None) -> str:
    """
    Decode a leaf node's payload to text.

    Tries the declared charset first, then charset detection, then UTF-8
    with replacement characters.

    Raises:
        Same as ``decoded_content``
    """
    payload = decoded_content(email, container_headers)
    if not payload:
        return ""

    parsed = split_params(email.headers.last("Content-Type") or "")
    charset = find_param(parsed[1], "charset") if parsed else None
    if charset:
        try:
            return payload.decode(charset)
        except (UnicodeDecodeError, LookupError):
            pass

    detected = charset_normalizer.from_bytes(payload).best()
    if detected:
        return str(detected)

    return payload.decode("utf-8", errors="replace")


async def to_file(email: Email, path: Union[str, Path]) -> None:
    """
    Write a leaf node's decoded payload to ``path``.

    Nothing is written if the payload cannot be extracted.

    Raises:
        Same as ``decoded_content``, plus OSError on write failure
    """
    data = decoded_content(email)
    await asyncio.to_thread(Path(path).write_bytes, data)
    logger.info("payload_written", path=str(path), bytes=len(data))
