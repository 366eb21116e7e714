"""
Email node - headers plus a raw body.

An ``Email`` is any message or message part. The body is kept as raw wire
bytes; interpreting it as a leaf payload, an embedded message, or a list of
parts is the job of ``models.content``.
"""

from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional

from .headers import HeaderPair, Headers, WhitespacePolicy


@dataclass(frozen=True)
class Email:
    """Immutable message node: ordered headers and raw body bytes."""

    headers: Headers = field(default_factory=Headers)
    body: bytes = b""

    @classmethod
    def of_bytes(cls, data: bytes) -> "Email":
        """
        Split raw message bytes into headers and body.

        Accepts LF or CRLF line endings. Continuation lines (starting with a
        space or tab) are folded into the preceding header value verbatim.
        A line that is neither a header nor a continuation ends the header
        block and becomes the first line of the body.

        Args:
            data: Raw message bytes

        Returns:
            Parsed Email
        """
        pairs: List[HeaderPair] = []
        lines = data.splitlines(keepends=True)
        offset = 0
        for line in lines:
            content = line.rstrip(b"\r\n")
            if not content:
                offset += len(line)
                break
            if content[:1] in (b" ", b"\t") and pairs:
                name, value = pairs[-1]
                pairs[-1] = (name, value + "\n" + _text(content))
            elif b":" in content:
                name, _, value = content.partition(b":")
                if not name or any(c in name for c in b" \t"):
                    break
                pairs.append((_text(name), _text(value)))
            else:
                break
            offset += len(line)
        return cls(headers=Headers(pairs), body=data[offset:])

    @classmethod
    def of_string(cls, text: str) -> "Email":
        return cls.of_bytes(text.encode("utf-8", "surrogateescape"))

    def to_bytes(self) -> bytes:
        """Serialize headers, a blank line, then the body."""
        return self.headers.to_bytes() + b"\n" + self.body

    def to_string(self) -> str:
        return self.to_bytes().decode("utf-8", "surrogateescape")

    def last_header(self, name: str) -> Optional[str]:
        return self.headers.last(name)

    def with_headers(self, headers: Headers) -> "Email":
        return replace(self, headers=headers)

    def with_body(self, body: bytes) -> "Email":
        return replace(self, body=body)

    def modify_headers(self, f: Callable[[Headers], Headers]) -> "Email":
        return replace(self, headers=f(self.headers))

    def add_headers(
        self,
        pairs: List[HeaderPair],
        whitespace: WhitespacePolicy = WhitespacePolicy.NORMALIZE,
    ) -> "Email":
        """Append ``pairs`` after the node's existing headers."""
        return self.modify_headers(lambda headers: headers.add_all(pairs, whitespace=whitespace))

    def set_header_at_bottom(self, name: str, value: str) -> "Email":
        """Replace every ``name`` header with a single value at the end."""
        return self.modify_headers(lambda headers: headers.set_at_bottom(name, value))


def _text(raw: bytes) -> str:
    return raw.decode("utf-8", "surrogateescape")
