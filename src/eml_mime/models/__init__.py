# Message tree model and wire codecs

from .headers import Headers, WhitespacePolicy
from .octet_stream import OctetStream, TransferEncoding
from .email import Email
from .content import Data, Message, Multipart, parse, set_content, to_email
from .summaries import AttachmentSummary, EnvelopeSummary

__all__ = [
    "Headers",
    "WhitespacePolicy",
    "OctetStream",
    "TransferEncoding",
    "Email",
    "Data",
    "Message",
    "Multipart",
    "parse",
    "set_content",
    "to_email",
    "AttachmentSummary",
    "EnvelopeSummary",
]
