"""
Unit tests for the content codec (models/content.py).

Tests cover:
- Classifying nodes as Data, Message or Multipart
- Container defaults (multipart/digest children)
- Prologue and epilogue preservation
- Serialization back into a node body
- Parse errors for malformed multiparts
"""

import pytest

from eml_mime.exceptions import ParseError
from eml_mime.models.content import (
    Data,
    Message,
    Multipart,
    effective_content_type,
    generate_boundary,
    parse,
    set_content,
    to_email,
)
from eml_mime.models.email import Email
from eml_mime.models.headers import Headers
from eml_mime.models.octet_stream import OctetStream, TransferEncoding
from tests.fixtures.emails import SAMPLE_EMAILS


class TestParse:
    """Tests for parse()."""

    @pytest.mark.unit
    def test_leaf_is_data(self, sample_eml_bytes):
        """Test that a text part parses as Data with its declared encoding."""
        content = parse(Email.of_bytes(sample_eml_bytes))
        assert isinstance(content, Data)
        assert content.octet_stream.encoding is TransferEncoding.SEVEN_BIT
        assert content.octet_stream.data.startswith(b"Hello, this is")

    @pytest.mark.unit
    def test_multipart_parts_prologue_epilogue(self, mixed_email):
        """Test splitting a multipart body."""
        content = parse(mixed_email)
        assert isinstance(content, Multipart)
        assert content.boundary == "outer"
        assert len(content.parts) == 3
        assert content.prologue == b"This is a multi-part message in MIME format."
        assert content.epilogue == b"Trailing epilogue text.\n"
        assert content.container_headers == mixed_email.headers
        assert content.parts[1].last_header("Content-Disposition") == 'attachment; filename="a.txt"'
        assert content.parts[1].body == b"hello"

    @pytest.mark.unit
    def test_multipart_without_prologue_or_epilogue(self):
        """Test that absent prologue and epilogue are None."""
        email = Email.of_bytes(SAMPLE_EMAILS["multipart_alternative"])
        content = parse(email)
        assert content.prologue is None
        assert content.epilogue is None
        assert [p.body for p in content.parts] == [
            b"Plain newsletter",
            b"<h1>HTML newsletter</h1>",
        ]

    @pytest.mark.unit
    def test_message_rfc822(self, forwarded_email):
        """Test that message/rfc822 parts parse as embedded messages."""
        attached = parse(forwarded_email).parts[1]
        content = parse(attached)
        assert isinstance(content, Message)
        assert content.email.last_header("Subject") == "Original"

    @pytest.mark.unit
    def test_digest_children_default_to_message(self, digest_email):
        """Test the multipart/digest container default."""
        multipart = parse(digest_email)
        first = multipart.parts[0]
        assert len(first.headers) == 0
        assert isinstance(parse(first, multipart.container_headers), Message)
        assert isinstance(parse(first), Data)

    @pytest.mark.unit
    def test_missing_boundary_raises(self):
        """Test that a multipart without a boundary parameter is rejected."""
        with pytest.raises(ParseError):
            parse(Email.of_bytes(SAMPLE_EMAILS["malformed_multipart"]))

    @pytest.mark.unit
    def test_missing_opening_delimiter_raises(self):
        """Test that a body without any delimiter line is rejected."""
        email = Email.of_bytes(b'Content-Type: multipart/mixed; boundary="b"\n\nno parts here\n')
        with pytest.raises(ParseError):
            parse(email)

    @pytest.mark.unit
    def test_undecodable_embedded_message_raises(self):
        """Test message/rfc822 with an unknown transfer encoding."""
        email = Email.of_bytes(
            b"Content-Type: message/rfc822\nContent-Transfer-Encoding: x-gzip\n\n\x1f\x8b"
        )
        with pytest.raises(ParseError):
            parse(email)

    @pytest.mark.unit
    def test_delimiter_with_trailing_whitespace(self):
        """Test that delimiter lines tolerate trailing blanks and CRLF."""
        email = Email.of_bytes(
            b'Content-Type: multipart/mixed; boundary="b"\r\n\r\n'
            b"--b  \r\nContent-Type: text/plain\r\n\r\none\r\n--b--\t\r\n"
        )
        content = parse(email)
        assert len(content.parts) == 1
        assert content.parts[0].body == b"one"


class TestEffectiveContentType:
    """Tests for effective_content_type()."""

    @pytest.mark.unit
    def test_declared_type_is_lowercased(self):
        """Test normalization of the declared type."""
        headers = Headers([("Content-Type", " Text/HTML; charset=utf-8")])
        assert effective_content_type(headers) == ("text/html", [("charset", "utf-8")])

    @pytest.mark.unit
    def test_defaults(self):
        """Test the container-dependent defaults."""
        digest = Headers([("Content-Type", ' multipart/digest; boundary="d"')])
        assert effective_content_type(Headers())[0] == "text/plain"
        assert effective_content_type(Headers(), digest)[0] == "message/rfc822"


class TestSetContent:
    """Tests for set_content() / to_email()."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "name", ["mixed_with_attachments", "multipart_alternative", "related", "digest"]
    )
    def test_multipart_round_trip_is_exact(self, name):
        """Test that re-serializing a parsed multipart reproduces its bytes."""
        email = Email.of_bytes(SAMPLE_EMAILS[name])
        assert set_content(email, parse(email)).to_bytes() == SAMPLE_EMAILS[name]

    @pytest.mark.unit
    def test_serialized_parts_parse_back(self):
        """Test that a built multipart parses back into the same parts."""
        first = Email(headers=Headers.of_list([("Content-Type", "text/plain")]), body=b"one")
        second = Email(headers=Headers.of_list([("Content-Type", "text/html")]), body=b"<b>two</b>\n")
        boundary = generate_boundary()
        headers = Headers.of_list([("Content-Type", f'multipart/mixed; boundary="{boundary}"')])
        email = to_email(headers, Multipart(boundary=boundary, parts=(first, second)))

        content = parse(email)
        assert content.parts == (first, second)
        assert f"--{boundary}\n".encode() in email.body
        assert email.body.endswith(f"--{boundary}--\n".encode())

    @pytest.mark.unit
    def test_trailing_carriage_return_survives_reparse(self):
        """Test that a part body ending in a bare CR keeps it after serialization."""
        first = Email(
            headers=Headers.of_list([("Content-Transfer-Encoding", "binary")]), body=b"abc\r"
        )
        second = Email(headers=Headers.of_list([("Content-Type", "text/plain")]), body=b"two")
        boundary = generate_boundary()
        headers = Headers.of_list([("Content-Type", f'multipart/mixed; boundary="{boundary}"')])
        email = to_email(headers, Multipart(boundary=boundary, parts=(first, second)))

        reparsed = parse(Email.of_bytes(email.to_bytes()))
        assert reparsed.parts[0].body == b"abc\r"
        assert parse(reparsed.parts[0]).octet_stream.decode() == b"abc\r"
        assert reparsed.parts[1].body == b"two"

    @pytest.mark.unit
    def test_data_sets_encoded_body(self):
        """Test that a Data variant becomes the body verbatim."""
        stream = OctetStream.encode(b"hello", TransferEncoding.BASE64)
        email = to_email(Headers.of_list([("Content-Transfer-Encoding", "base64")]), Data(stream))
        assert email.body == b"aGVsbG8=\n"

    @pytest.mark.unit
    def test_message_uses_node_encoding(self):
        """Test that an embedded message is encoded with the node's declared encoding."""
        inner = Email.of_bytes(b"Subject: inner\n\nbody")
        headers = Headers.of_list(
            [("Content-Type", "message/rfc822"), ("Content-Transfer-Encoding", "base64")]
        )
        email = to_email(headers, Message(inner))
        assert parse(email) == Message(inner)

    @pytest.mark.unit
    def test_boundaries_are_unique(self):
        """Test that generated boundaries differ."""
        assert generate_boundary() != generate_boundary()
