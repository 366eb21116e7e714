"""
Content codec - interprets an Email body as one of three variants.

- ``Data``: a leaf payload (transfer-encoded octet stream)
- ``Message``: an embedded ``message/rfc822`` email
- ``Multipart``: boundary-delimited sub-parts

``parse`` goes from a node to its variant and ``set_content`` goes back,
serializing the variant into the node's raw body.
"""

import secrets
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

from ..exceptions import ParseError
from .email import Email
from .headers import Headers, HeaderParams, find_param, split_params
from .octet_stream import OctetStream, TransferEncoding

DIGEST = "multipart/digest"
RFC822 = "message/rfc822"
DEFAULT_CONTENT_TYPE = "text/plain"


@dataclass(frozen=True)
class Data:
    """Leaf payload."""

    octet_stream: OctetStream


@dataclass(frozen=True)
class Message:
    """Embedded email (``message/rfc822``)."""

    email: Email


@dataclass(frozen=True)
class Multipart:
    """
    Boundary-delimited sequence of parts.

    ``container_headers`` are the headers of the node that holds this
    multipart; they decide the default Content-Type of each part.
    """

    boundary: str
    parts: Tuple[Email, ...]
    prologue: Optional[bytes] = None
    epilogue: Optional[bytes] = None
    container_headers: Headers = field(default_factory=Headers)

    def with_parts(self, parts: Sequence[Email]) -> "Multipart":
        return Multipart(
            boundary=self.boundary,
            parts=tuple(parts),
            prologue=self.prologue,
            epilogue=self.epilogue,
            container_headers=self.container_headers,
        )


Content = Union[Data, Message, Multipart]


def generate_boundary() -> str:
    """Fresh random multipart boundary token."""
    return f"=_{secrets.token_hex(16)}"


def effective_content_type(
    headers: Headers, container_headers: Optional[Headers] = None
) -> Tuple[str, HeaderParams]:
    """
    Content-Type of a node, falling back to the container's default.

    Parts of a ``multipart/digest`` default to ``message/rfc822``; everything
    else defaults to ``text/plain``.

    Args:
        headers: The node's own headers
        container_headers: Headers of the enclosing multipart node, if any

    Returns:
        Lowercased primary type and its parameters
    """
    parsed = split_params(headers.last("Content-Type") or "")
    if parsed is not None:
        primary, params = parsed
        return primary.lower(), params
    if container_headers is not None:
        container = split_params(container_headers.last("Content-Type") or "")
        if container is not None and container[0].lower() == DIGEST:
            return RFC822, []
    return DEFAULT_CONTENT_TYPE, []


def parse(email: Email, container_headers: Optional[Headers] = None) -> Content:
    """
    Interpret an email's body.

    Args:
        email: Node to interpret
        container_headers: Headers of the enclosing multipart, for defaults

    Returns:
        Data, Message, or Multipart variant

    Raises:
        ParseError: If a multipart has no usable boundary or an embedded
            message cannot be decoded
    """
    content_type, params = effective_content_type(email.headers, container_headers)
    encoding = TransferEncoding.of_headers_or_default(email.headers)

    if content_type.startswith("multipart/"):
        boundary = find_param(params, "boundary")
        if not boundary:
            raise ParseError(
                "Multipart content has no boundary parameter",
                {"content_type": content_type},
            )
        return _parse_multipart(email, boundary)

    if content_type == RFC822:
        decoded = OctetStream(encoding=encoding, data=email.body).decode()
        if decoded is None:
            raise ParseError(
                "Embedded message uses an undecodable transfer encoding",
                {"encoding": str(encoding)},
            )
        return Message(email=Email.of_bytes(decoded))

    return Data(octet_stream=OctetStream(encoding=encoding, data=email.body))


def set_content(email: Email, content: Content) -> Email:
    """Replace the node's body with the serialization of ``content``."""
    if isinstance(content, Data):
        return email.with_body(content.octet_stream.data)
    if isinstance(content, Message):
        raw = content.email.to_bytes()
        encoding = TransferEncoding.of_headers_or_default(email.headers)
        if isinstance(encoding, TransferEncoding):
            raw = OctetStream.encode(raw, encoding).data
        return email.with_body(raw)
    if isinstance(content, Multipart):
        return email.with_body(_serialize_multipart(content))
    raise TypeError(f"Unknown content variant: {type(content).__name__}")


def to_email(headers: Headers, content: Content) -> Email:
    """Build a new node from headers and a content variant."""
    return set_content(Email(headers=headers), content)


# ============================================================================
# MULTIPART WIRE FORMAT
# ============================================================================


def _parse_multipart(email: Email, boundary: str) -> Multipart:
    dash = b"--" + boundary.encode("utf-8", "surrogateescape")
    close = dash + b"--"
    lines = _split_lines(email.body)

    delimiters: List[int] = []
    close_index: Optional[int] = None
    for index, line in enumerate(lines):
        stripped = line.rstrip(b"\r\n").rstrip(b" \t")
        if stripped == dash:
            delimiters.append(index)
        elif stripped == close and delimiters:
            close_index = index
            break

    if not delimiters:
        raise ParseError(
            "Multipart body has no opening boundary delimiter",
            {"boundary": boundary},
        )

    first = delimiters[0]
    crlf = lines[first].endswith(b"\r\n")
    prologue = _chomp(b"".join(lines[:first]), crlf) if first > 0 else None

    bounds = delimiters + [close_index if close_index is not None else len(lines)]
    parts = tuple(
        Email.of_bytes(_chomp(b"".join(lines[start + 1:end]), crlf))
        for start, end in zip(bounds, bounds[1:])
    )

    epilogue = None
    if close_index is not None:
        epilogue = b"".join(lines[close_index + 1:]) or None

    return Multipart(
        boundary=boundary,
        parts=parts,
        prologue=prologue,
        epilogue=epilogue,
        container_headers=email.headers,
    )


def _serialize_multipart(multipart: Multipart) -> bytes:
    dash = b"--" + multipart.boundary.encode("utf-8", "surrogateescape")
    chunks: List[bytes] = []
    if multipart.prologue is not None:
        chunks.append(multipart.prologue + b"\n")
    for part in multipart.parts:
        chunks.extend([dash, b"\n", part.to_bytes(), b"\n"])
    chunks.append(dash + b"--")
    if multipart.epilogue is not None:
        chunks.append(b"\n" + multipart.epilogue)
    else:
        chunks.append(b"\n")
    return b"".join(chunks)


def _split_lines(data: bytes) -> List[bytes]:
    """Split on LF only, keeping terminators; a lone CR is body content."""
    lines = data.split(b"\n")
    result = [line + b"\n" for line in lines[:-1]]
    if lines[-1]:
        result.append(lines[-1])
    return result


def _chomp(data: bytes, crlf: bool) -> bytes:
    """
    Drop one trailing line terminator; it belongs to the next delimiter.

    The terminator style follows the opening delimiter line, so a part body
    ending in CR keeps it when delimiters are LF-terminated.
    """
    if crlf and data.endswith(b"\r\n"):
        return data[:-2]
    if data.endswith(b"\n"):
        return data[:-1]
    return data
