"""
Email parser for .eml files (RFC5322/MIME format).

Reads raw message bytes into an ``Email`` tree node and decodes the common
envelope headers. Each getter returns None rather than raising when the header
is missing or cannot be decoded.
"""

import re
from email.errors import HeaderParseError
from email.header import decode_header, make_header
from email.utils import getaddresses, parseaddr
from pathlib import Path
from typing import Callable, List, Optional, Tuple, TypeVar, Union

from ..models.email import Email
from ..models.summaries import EnvelopeSummary
from .mime_utils import content_type

T = TypeVar("T")

Address = Tuple[str, str]

_FOLDING = re.compile(r"\r?\n[ \t]+")


def parse_eml_bytes(eml_bytes: bytes) -> Email:
    """
    Parse .eml bytes into an Email node.

    Args:
        eml_bytes: Raw .eml file bytes

    Returns:
        Email with headers split from the raw body
    """
    return Email.of_bytes(eml_bytes)


def parse_eml_file(eml_path: Union[str, Path]) -> Email:
    """
    Parse .eml file into an Email node.

    Args:
        eml_path: Path to .eml file

    Returns:
        Parsed Email

    Raises:
        FileNotFoundError: If file doesn't exist
    """
    with open(eml_path, "rb") as f:
        eml_bytes = f.read()
    return parse_eml_bytes(eml_bytes)


def unfold(value: str) -> str:
    """Join folded header lines with single spaces."""
    return _FOLDING.sub(" ", value)


def decode_last_header(email: Email, name: str, f: Callable[[str], T]) -> Optional[T]:
    """
    Apply ``f`` to the last ``name`` header.

    Returns:
        ``f(value)``, or None if the header is absent or ``f`` rejects it
    """
    value = email.headers.last(name)
    if value is None:
        return None
    try:
        return f(unfold(value))
    except (ValueError, HeaderParseError, LookupError):
        return None


def _single_address(value: str) -> Address:
    name, addr = parseaddr(value)
    if not addr:
        raise ValueError(f"No address in {value!r}")
    return name, addr


def _address_list(value: str) -> List[Address]:
    addresses = [(name, addr) for name, addr in getaddresses([value]) if addr]
    if not addresses:
        raise ValueError(f"No addresses in {value!r}")
    return addresses


def _decoded_text(value: str) -> str:
    return str(make_header(decode_header(value)))


def get_from(email: Email) -> Optional[Address]:
    """``(display_name, address)`` of the From header."""
    return decode_last_header(email, "From", _single_address)


def get_to(email: Email) -> Optional[List[Address]]:
    return decode_last_header(email, "To", _address_list)


def get_cc(email: Email) -> Optional[List[Address]]:
    return decode_last_header(email, "Cc", _address_list)


def get_subject(email: Email) -> Optional[str]:
    """Subject with RFC 2047 encoded words decoded."""
    return decode_last_header(email, "Subject", _decoded_text)


def get_message_id(email: Email) -> Optional[str]:
    return decode_last_header(email, "Message-Id", str.strip)


def extract_envelope(email: Email) -> EnvelopeSummary:
    """
    Extract the envelope headers into a structured summary.

    Args:
        email: Parsed Email

    Returns:
        EnvelopeSummary with decoded header information
    """
    sender = get_from(email)
    return EnvelopeSummary(
        from_address=sender[1] if sender else None,
        to_addresses=[addr for _, addr in get_to(email) or []],
        cc_addresses=[addr for _, addr in get_cc(email) or []],
        subject=get_subject(email),
        message_id=get_message_id(email),
        date=decode_last_header(email, "Date", str.strip),
        content_type=content_type(email),
    )
