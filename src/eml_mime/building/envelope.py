"""
Typed envelope construction.

``create_envelope`` accepts addresses as plain strings or
``(display_name, address)`` pairs and the date as a ``datetime``, then
delegates to ``builder.create_envelope_raw``.
"""

from datetime import datetime
from email.utils import formataddr
from typing import List, Optional, Sequence, Tuple, Union

from ..models.email import Email
from ..models.headers import HeaderPair
from .builder import NamedContent, create_envelope_raw
from .identity import ProcessIdentity, rfc822_date

AddressLike = Union[str, Tuple[str, str]]


def format_address(address: AddressLike) -> str:
    """Render an address; pairs become ``"Name" <addr>``."""
    if isinstance(address, tuple):
        return formataddr(address)
    return address


def _format_list(addresses: Optional[Sequence[AddressLike]]) -> Optional[List[str]]:
    if addresses is None:
        return None
    return [format_address(address) for address in addresses]


def create_envelope(
    content: Email,
    *,
    to: Sequence[AddressLike],
    subject: str,
    from_: Optional[AddressLike] = None,
    cc: Optional[Sequence[AddressLike]] = None,
    reply_to: Optional[Sequence[AddressLike]] = None,
    message_id: Optional[str] = None,
    in_reply_to: Optional[str] = None,
    date: Optional[datetime] = None,
    auto_generated: bool = False,
    extra_headers: Optional[Sequence[HeaderPair]] = None,
    attachments: Optional[Sequence[NamedContent]] = None,
    identity: Optional[ProcessIdentity] = None,
) -> Email:
    """
    Assemble a complete message.

    See ``builder.create_envelope_raw`` for header order and attachment handling.

    Args:
        content: Message body node
        to: Recipients
        subject: Subject line
        from_: Sender (defaults to the local address)
        cc: Carbon-copy recipients
        reply_to: Reply-To addresses
        message_id: Message-Id (generated if omitted)
        in_reply_to: In-Reply-To value
        date: Message date (now if omitted)
        auto_generated: Mark as an automatic, bulk message
        extra_headers: Headers placed before the envelope headers
        attachments: ``(filename, content)`` pairs
        identity: Process identity for defaults

    Returns:
        The assembled message
    """
    return create_envelope_raw(
        content,
        to=[format_address(address) for address in to],
        subject=subject,
        from_=format_address(from_) if from_ is not None else None,
        cc=_format_list(cc),
        reply_to=_format_list(reply_to),
        message_id=message_id,
        in_reply_to=in_reply_to,
        date=rfc822_date(date) if date is not None else None,
        auto_generated=auto_generated,
        extra_headers=extra_headers,
        attachments=attachments,
        identity=identity,
    )
