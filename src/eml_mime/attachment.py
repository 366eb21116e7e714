"""
Attachment values extracted from a message tree.

Decoding a payload and hashing it are expensive, so both are computed lazily,
at most once per Attachment, and memoized - including a decode failure, which
is re-raised on every later access without retrying.
"""

import asyncio
import hashlib
import threading
from pathlib import Path
from typing import Callable, Generic, Optional, TypeVar, Union

import structlog

from .exceptions import DecodeError
from .models.email import Email
from .models.headers import Headers, split_params
from .models.octet_stream import OctetStream, TransferEncoding, encoding_to_string
from .models.summaries import AttachmentSummary

logger = structlog.get_logger(__name__)

T = TypeVar("T")

DEFAULT_CONTENT_TYPE = "application/x-octet-stream"


class _Once(Generic[T]):
    """Single-assignment cache; the first access computes, later ones reuse."""

    def __init__(self, compute: Callable[[], T]):
        self._compute = compute
        self._lock = threading.Lock()
        self._done = False
        self._value: Optional[T] = None
        self._error: Optional[DecodeError] = None

    def get(self) -> T:
        if not self._done:
            with self._lock:
                if not self._done:
                    try:
                        self._value = self._compute()
                    except DecodeError as e:
                        self._error = e
                    self._done = True
        if self._error is not None:
            raise self._error
        return self._value  # type: ignore[return-value]


class Attachment:
    """
    Lazily decoded view of a part classified as an attachment.

    Attributes:
        headers: Headers of the attachment part
        filename: Resolved filename
        embedded_email: The nested message, when the part is ``message/rfc822``
    """

    def __init__(
        self,
        headers: Headers,
        filename: str,
        payload: Callable[[], OctetStream],
        embedded_email: Optional[Email] = None,
    ):
        self.headers = headers
        self.filename = filename
        self.embedded_email = embedded_email
        self._payload = payload
        self._raw_data: _Once[bytes] = _Once(self._decode)
        self._md5: _Once[str] = _Once(self._hash)

    @classmethod
    def of_content(cls, headers: Headers, filename: str, content: OctetStream) -> "Attachment":
        """Attachment whose payload is a leaf octet stream."""
        return cls(headers=headers, filename=filename, payload=lambda: content)

    @classmethod
    def of_embedded_email(cls, headers: Headers, filename: str, email: Email) -> "Attachment":
        """
        Attachment whose payload is a nested message.

        The raw data is the nested message serialized and passed through the
        part's declared (or default) transfer encoding.
        """

        def payload() -> OctetStream:
            encoding = TransferEncoding.of_headers_or_default(headers)
            raw = email.to_bytes()
            if isinstance(encoding, TransferEncoding):
                return OctetStream.encode(raw, encoding)
            return OctetStream(encoding=encoding, data=raw)

        return cls(headers=headers, filename=filename, payload=payload, embedded_email=email)

    # ------------------------------------------------------------------
    # Lazy fields
    # ------------------------------------------------------------------

    @property
    def raw_data(self) -> bytes:
        """
        Decoded payload bytes.

        Raises:
            DecodeError: If the payload's transfer encoding is unknown or malformed
        """
        return self._raw_data.get()

    @property
    def md5(self) -> str:
        """
        Uppercase hex MD5 of the decoded payload.

        Raises:
            DecodeError: The same error as ``raw_data`` if decoding failed
        """
        return self._md5.get()

    def _decode(self) -> bytes:
        stream = self._payload()
        data = stream.decode()
        if data is None:
            encoding = encoding_to_string(stream.encoding)
            logger.warning("attachment_decode_failed", filename=self.filename, encoding=encoding)
            raise DecodeError(
                "The attachment payload used an unknown or malformed encoding",
                {"filename": self.filename, "encoding": encoding},
            )
        return data

    def _hash(self) -> str:
        data = self.raw_data
        return hashlib.md5(data, usedforsecurity=False).hexdigest().upper()

    # ------------------------------------------------------------------
    # Convenience accessors
    # ------------------------------------------------------------------

    @property
    def content_type(self) -> str:
        parsed = split_params(self.headers.last("Content-Type") or "")
        return parsed[0] if parsed else DEFAULT_CONTENT_TYPE

    @property
    def content_id(self) -> Optional[str]:
        value = self.headers.last("Content-Id")
        if value and value.startswith("<") and value.endswith(">"):
            return value[1:-1]
        return value

    async def to_file(self, path: Union[str, Path]) -> None:
        """
        Write the decoded payload to ``path``.

        Raises:
            DecodeError: Before touching the filesystem, if decoding failed
            OSError: If the file cannot be written
        """
        data = self.raw_data
        await asyncio.to_thread(Path(path).write_bytes, data)
        logger.info("attachment_written", filename=self.filename, path=str(path), bytes=len(data))

    def __repr__(self) -> str:
        return f"Attachment(filename={self.filename!r}, content_type={self.content_type!r})"


def summarize_attachment(attachment: Attachment) -> AttachmentSummary:
    """
    Build a reporting summary, forcing the lazy fields.

    A decode failure is reported in ``error`` rather than raised.
    """
    size: Optional[int] = None
    md5: Optional[str] = None
    error: Optional[str] = None
    try:
        size = len(attachment.raw_data)
        md5 = attachment.md5
    except DecodeError as e:
        error = str(e)
    return AttachmentSummary(
        filename=attachment.filename,
        content_type=attachment.content_type,
        size_bytes=size,
        md5=md5,
        content_id=attachment.content_id,
        embedded_email=attachment.embedded_email is not None,
        error=error,
    )
