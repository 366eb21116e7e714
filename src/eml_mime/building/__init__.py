# Message construction module

from . import mimetype
from .builder import create_data_part, create_envelope_raw, create_multipart_raw
from .content import (
    alternatives,
    create,
    create_multipart,
    create_related,
    html,
    mixed,
    of_file,
    text,
)
from .envelope import create_envelope, format_address
from .identity import ProcessIdentity, make_message_id, rfc822_date

__all__ = [
    "mimetype",
    "create_data_part",
    "create_multipart_raw",
    "create_envelope_raw",
    "create",
    "text",
    "html",
    "of_file",
    "create_multipart",
    "alternatives",
    "mixed",
    "create_related",
    "create_envelope",
    "format_address",
    "ProcessIdentity",
    "make_message_id",
    "rfc822_date",
]
