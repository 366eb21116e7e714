"""
Low-level message builders.

These functions take preformatted header strings and assemble nodes without
any convenience defaults beyond the envelope's own (From, Message-Id, Date).
``building.content`` and ``building.envelope`` wrap them with friendlier
signatures.
"""

from datetime import datetime
from typing import List, Optional, Sequence, Tuple

import structlog

from ..config import settings
from ..exceptions import ConfigurationError
from ..models.content import Data, Multipart, generate_boundary, to_email
from ..models.email import Email
from ..models.headers import HeaderPair, Headers, WhitespacePolicy
from ..models.octet_stream import OctetStream, TransferEncoding, encoding_to_string
from ..parsing.mime_utils import parse_last_header, quote
from .identity import ProcessIdentity, make_message_id, rfc822_date
from .mimetype import MULTIPART_MIXED, OCTET_STREAM

logger = structlog.get_logger(__name__)

NamedContent = Tuple[str, Email]

ADDRESS_SEPARATOR = ",\n\t"


def create_data_part(
    data: bytes,
    encoding: TransferEncoding,
    extra_headers: Optional[Sequence[HeaderPair]] = None,
    whitespace: WhitespacePolicy = WhitespacePolicy.NORMALIZE,
) -> Email:
    """
    Build a leaf part.

    Args:
        data: Raw payload bytes
        encoding: Transfer encoding to apply
        extra_headers: Headers to add after Content-Transfer-Encoding
        whitespace: Header whitespace policy

    Returns:
        Leaf Email with the encoded payload as body
    """
    headers = Headers.of_list(
        [("Content-Transfer-Encoding", encoding_to_string(encoding))] + list(extra_headers or []),
        whitespace=whitespace,
    )
    return to_email(headers, Data(octet_stream=OctetStream.encode(data, encoding)))


def create_multipart_raw(
    parts: Sequence[Email],
    content_type: str,
    extra_headers: Optional[Sequence[HeaderPair]] = None,
    whitespace: WhitespacePolicy = WhitespacePolicy.NORMALIZE,
) -> Email:
    """
    Wrap ``parts`` in a multipart node with a fresh boundary.

    Unlike ``building.content.create_multipart``, a single part is still
    wrapped.

    Raises:
        ConfigurationError: If ``parts`` is empty
    """
    if not parts:
        raise ConfigurationError("At least one part is required", {"content_type": content_type})
    boundary = generate_boundary()
    headers = Headers.of_list(
        [("Content-Type", f'{content_type}; boundary="{boundary}"')] + list(extra_headers or []),
        whitespace=whitespace,
    )
    multipart = Multipart(boundary=boundary, parts=tuple(parts))
    logger.debug(
        "multipart_created", content_type=content_type, boundary=boundary, parts=len(parts)
    )
    return to_email(headers, multipart)


def attachment_content_type(content: Email, name: str) -> str:
    """Content-Type for an attachment: existing type (default octet-stream) plus ``name``."""
    parsed = parse_last_header(content, "Content-Type")
    if parsed is None:
        segments = [OCTET_STREAM]
    else:
        primary, args = parsed
        segments = [primary] + [
            key if value is None else f"{key}={value}"
            for key, value in args
            if key.lower() != "name"
        ]
    segments.append(f"name={quote(name)}")
    return "; ".join(segments)


def _mark_attachment(name: str, content: Email) -> Email:
    return content.set_header_at_bottom(
        "Content-Type", attachment_content_type(content, name)
    ).set_header_at_bottom("Content-Disposition", f"attachment; filename={quote(name)}")


def create_envelope_raw(
    content: Email,
    *,
    to: Sequence[str],
    subject: str,
    from_: Optional[str] = None,
    cc: Optional[Sequence[str]] = None,
    reply_to: Optional[Sequence[str]] = None,
    message_id: Optional[str] = None,
    in_reply_to: Optional[str] = None,
    date: Optional[str] = None,
    auto_generated: bool = False,
    extra_headers: Optional[Sequence[HeaderPair]] = None,
    attachments: Optional[Sequence[NamedContent]] = None,
    identity: Optional[ProcessIdentity] = None,
    now: Optional[datetime] = None,
) -> Email:
    """
    Assemble a complete message from preformatted header values.

    Headers appear in this order: ``extra_headers``, From, To, Cc, Reply-To,
    Subject, Message-Id, In-Reply-To, Auto-Submitted/Precedence, Date.
    Address lists are omitted when empty. ``message_id`` and ``date`` are
    passed through unvalidated.

    With attachments, ``content`` becomes the inline first part of a
    ``multipart/mixed`` message; without, the headers go straight onto it.

    Args:
        content: Message body node
        to: Recipient addresses
        subject: Subject line
        from_: Sender (defaults to settings or the identity's local address)
        cc: Carbon-copy addresses
        reply_to: Reply-To addresses
        message_id: Message-Id (generated from ``identity`` if omitted)
        in_reply_to: In-Reply-To value
        date: Date header value (rendered from ``now`` if omitted)
        auto_generated: Mark as an automatic, bulk message
        extra_headers: Headers placed before the envelope headers
        attachments: ``(filename, content)`` pairs
        identity: Process identity for defaults (read from the process if omitted)
        now: Timestamp for the default Date (current local time if omitted)

    Returns:
        The assembled message
    """
    if identity is None and (from_ is None or message_id is None):
        identity = ProcessIdentity.from_environment()

    if from_ is None:
        from_ = settings.default_from or identity.local_address()
    if message_id is None:
        message_id = make_message_id(identity)
    if date is None:
        date = rfc822_date(now or datetime.now().astimezone())

    headers: List[HeaderPair] = list(extra_headers or [])
    headers.append(("From", from_))
    for name, addresses in (("To", to), ("Cc", cc), ("Reply-To", reply_to)):
        if addresses:
            headers.append((name, ADDRESS_SEPARATOR.join(addresses)))
    headers.append(("Subject", subject))
    headers.append(("Message-Id", message_id))
    if in_reply_to is not None:
        headers.append(("In-Reply-To", in_reply_to))
    if auto_generated:
        headers.append(("Auto-Submitted", "auto-generated"))
        headers.append(("Precedence", "bulk"))
    headers.append(("Date", date))

    if not attachments:
        return content.add_headers(headers)

    return create_multipart_raw(
        [content.set_header_at_bottom("Content-Disposition", "inline")]
        + [_mark_attachment(name, attachment) for name, attachment in attachments],
        content_type=MULTIPART_MIXED,
        extra_headers=headers,
    )
