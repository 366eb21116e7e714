"""
Transfer-encoded byte payloads.

An ``OctetStream`` is the body of a leaf part exactly as it appears on the
wire together with the Content-Transfer-Encoding it was declared with.
"""

import base64
import binascii
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .headers import Headers


class TransferEncoding(str, Enum):
    """Known Content-Transfer-Encoding tokens."""

    SEVEN_BIT = "7bit"
    EIGHT_BIT = "8bit"
    BINARY = "binary"
    QUOTED_PRINTABLE = "quoted-printable"
    BASE64 = "base64"

    @classmethod
    def parse(cls, token: str) -> Union["TransferEncoding", str]:
        """
        Map a header token onto a known encoding.

        Args:
            token: Raw Content-Transfer-Encoding value

        Returns:
            Matching TransferEncoding, or the lowercased token if unknown
        """
        token = token.strip().lower()
        try:
            return cls(token)
        except ValueError:
            return token

    @classmethod
    def of_headers_or_default(cls, headers: Headers) -> Union["TransferEncoding", str]:
        """Encoding declared in ``headers``, 7bit when absent."""
        declared = headers.last("Content-Transfer-Encoding")
        if not declared:
            return cls.SEVEN_BIT
        return cls.parse(declared)


Encoding = Union[TransferEncoding, str]

_IDENTITY = (TransferEncoding.SEVEN_BIT, TransferEncoding.EIGHT_BIT, TransferEncoding.BINARY)


def encoding_to_string(encoding: Encoding) -> str:
    """Canonical header token for ``encoding``."""
    if isinstance(encoding, TransferEncoding):
        return encoding.value
    return encoding


@dataclass(frozen=True)
class OctetStream:
    """Encoded payload bytes plus the encoding they are stored in."""

    encoding: Encoding
    data: bytes

    @classmethod
    def encode(cls, raw: bytes, encoding: TransferEncoding) -> "OctetStream":
        """
        Encode raw bytes for transport.

        Args:
            raw: Decoded payload
            encoding: Known transfer encoding to apply

        Returns:
            OctetStream holding the encoded bytes
        """
        if encoding == TransferEncoding.BASE64:
            data = base64.encodebytes(raw)
        elif encoding == TransferEncoding.QUOTED_PRINTABLE:
            # Text mode rewrites CR/LF line endings, so payloads containing CR
            # are encoded in binary mode where every CR and LF is escaped.
            data = binascii.b2a_qp(raw, quotetabs=False, istext=b"\r" not in raw, header=False)
        else:
            data = raw
        return cls(encoding=encoding, data=data)

    def decode(self) -> Optional[bytes]:
        """
        Decode the payload.

        Returns:
            Decoded bytes, or None if the encoding is unknown or the data is malformed
        """
        if self.encoding in _IDENTITY:
            return self.data
        try:
            if self.encoding == TransferEncoding.BASE64:
                return base64.b64decode(self.data)
            if self.encoding == TransferEncoding.QUOTED_PRINTABLE:
                return binascii.a2b_qp(self.data)
        except (binascii.Error, ValueError):
            return None
        return None

    @property
    def is_known_encoding(self) -> bool:
        return isinstance(self.encoding, TransferEncoding)
