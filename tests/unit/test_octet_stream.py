"""
Unit tests for transfer encodings (models/octet_stream.py).
"""

import pytest

from eml_mime.models.headers import Headers
from eml_mime.models.octet_stream import OctetStream, TransferEncoding, encoding_to_string

PAYLOADS = [
    b"",
    b"hello",
    "héllo wörld\n".encode("utf-8"),
    b"trailing space \nand tab\t\n",
    b"line1\r\nline2\r\n",
    b"x" * 200,
    bytes(range(256)),
]


class TestTransferEncodingParse:
    """Tests for header token parsing."""

    @pytest.mark.unit
    def test_known_tokens_any_case(self):
        """Test that known tokens are recognized case-insensitively."""
        assert TransferEncoding.parse("BASE64") is TransferEncoding.BASE64
        assert TransferEncoding.parse(" Quoted-Printable ") is TransferEncoding.QUOTED_PRINTABLE
        assert TransferEncoding.parse("8bit") is TransferEncoding.EIGHT_BIT

    @pytest.mark.unit
    def test_unknown_token_kept_lowercased(self):
        """Test that unknown tokens survive as plain strings."""
        assert TransferEncoding.parse("X-UUEncode") == "x-uuencode"
        assert encoding_to_string(TransferEncoding.parse("X-UUEncode")) == "x-uuencode"

    @pytest.mark.unit
    def test_default_is_7bit(self):
        """Test the default when Content-Transfer-Encoding is absent."""
        assert TransferEncoding.of_headers_or_default(Headers()) is TransferEncoding.SEVEN_BIT
        headers = Headers([("Content-Transfer-Encoding", " base64")])
        assert TransferEncoding.of_headers_or_default(headers) is TransferEncoding.BASE64


class TestEncodeDecode:
    """Tests for OctetStream.encode() / decode()."""

    @pytest.mark.unit
    @pytest.mark.parametrize("encoding", list(TransferEncoding))
    @pytest.mark.parametrize("payload", PAYLOADS)
    def test_decode_inverts_encode(self, encoding, payload):
        """Test that decoding recovers the exact original bytes."""
        assert OctetStream.encode(payload, encoding).decode() == payload

    @pytest.mark.unit
    def test_base64_output(self):
        """Test base64 wire form."""
        assert OctetStream.encode(b"hello", TransferEncoding.BASE64).data == b"aGVsbG8=\n"

    @pytest.mark.unit
    def test_quoted_printable_escapes_non_ascii(self):
        """Test quoted-printable wire form."""
        stream = OctetStream.encode("café".encode("utf-8"), TransferEncoding.QUOTED_PRINTABLE)
        assert stream.data == b"caf=C3=A9"

    @pytest.mark.unit
    def test_identity_encodings_pass_through(self):
        """Test that 7bit/8bit/binary store bytes unchanged."""
        for encoding in (TransferEncoding.SEVEN_BIT, TransferEncoding.EIGHT_BIT, TransferEncoding.BINARY):
            assert OctetStream.encode(b"\x00raw\xff", encoding).data == b"\x00raw\xff"

    @pytest.mark.unit
    def test_unknown_encoding_does_not_decode(self):
        """Test that unknown encodings yield None."""
        stream = OctetStream(encoding="x-uuencode", data=b"begin 644 data")
        assert stream.decode() is None
        assert not stream.is_known_encoding

    @pytest.mark.unit
    def test_malformed_base64_does_not_decode(self):
        """Test that invalid base64 padding yields None."""
        assert OctetStream(encoding=TransferEncoding.BASE64, data=b"abc").decode() is None
