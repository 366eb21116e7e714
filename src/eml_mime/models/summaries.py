"""
Read-only summaries of decomposed messages.

These are reporting views (e.g. for the CLI's JSON output); the message tree
itself is modelled by ``Email`` and the content variants.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class AttachmentSummary(BaseModel):
    """Metadata for one attachment, with its decoded size and checksum."""

    filename: str = Field(description="Resolved attachment filename")
    content_type: str = Field(description="MIME type")
    size_bytes: Optional[int] = Field(None, description="Decoded size in bytes")
    md5: Optional[str] = Field(None, description="Uppercase hex MD5 of decoded bytes")
    content_id: Optional[str] = Field(None, description="Content-ID without angle brackets")
    embedded_email: bool = Field(False, description="Whether the payload is a nested message")
    error: Optional[str] = Field(None, description="Decode error, if the payload is unreadable")


class EnvelopeSummary(BaseModel):
    """Decoded envelope headers of a message."""

    from_address: Optional[str] = Field(None, description="From address")
    to_addresses: List[str] = Field(default_factory=list, description="To addresses")
    cc_addresses: List[str] = Field(default_factory=list, description="Cc addresses")
    subject: Optional[str] = Field(None, description="Email subject")
    message_id: Optional[str] = Field(None, description="Message-Id header")
    date: Optional[str] = Field(None, description="Date header as written")
    content_type: str = Field(description="Top-level content type")

    model_config = {
        "json_schema_extra": {
            "example": {
                "from_address": "sender@example.com",
                "to_addresses": ["recipient@example.com"],
                "cc_addresses": [],
                "subject": "Quarterly report",
                "message_id": "<abc123@example.com>",
                "date": "Thu, 12 Feb 2026 10:30:00 +0100",
                "content_type": "multipart/mixed",
            }
        }
    }
