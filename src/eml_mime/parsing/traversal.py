"""
Recursive traversals over a message tree.

Each function walks the tree through ``models.content.parse``. A node whose
body cannot be parsed is treated as an opaque leaf: traversal never fails
because one subtree is malformed. When descending into a multipart, its
container headers are passed down so each child is parsed with the right
defaults (e.g. ``multipart/digest`` children default to ``message/rfc822``).
"""

import asyncio
import inspect
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Tuple, Union

import structlog

from ..attachment import Attachment
from ..exceptions import ParseError
from ..models.content import Content, Data, Message, Multipart, parse, set_content
from ..models.email import Email
from ..models.headers import Headers
from .mime_utils import (
    MULTIPART_ALTERNATIVE,
    AttachmentDisposition,
    content_disposition,
    is_content_type,
    related_part_cid,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Keep:
    """Leave the attachment part untouched."""


@dataclass(frozen=True)
class Replace:
    """Substitute the attachment part with ``email`` verbatim."""

    email: Email


KEEP = Keep()

AttachmentDecision = Union[Keep, Replace]
AttachmentCallback = Callable[
    [Attachment], Union[AttachmentDecision, Awaitable[AttachmentDecision]]
]


def _safe_parse(email: Email, container_headers: Optional[Headers] = None) -> Optional[Content]:
    try:
        return parse(email, container_headers)
    except ParseError as e:
        logger.debug("unparsable_part_treated_as_leaf", error=str(e))
        return None


# ============================================================================
# STRUCTURE
# ============================================================================


def parts(email: Email, container_headers: Optional[Headers] = None) -> Optional[List[Email]]:
    """Children of a multipart node, or None for leaves and embedded messages."""
    content = _safe_parse(email, container_headers)
    if isinstance(content, Multipart):
        return list(content.parts)
    return None


def _children(
    email: Email, container_headers: Optional[Headers]
) -> Optional[Tuple[Multipart, List[Email]]]:
    content = _safe_parse(email, container_headers)
    if isinstance(content, Multipart):
        return content, list(content.parts)
    return None


def inline_parts(email: Email, container_headers: Optional[Headers] = None) -> List[Email]:
    """
    Flatten the tree into the parts meant for direct presentation.

    ``multipart/alternative`` nodes are returned whole: choosing between the
    alternatives is left to the caller (see ``alternative_parts``).
    """
    children = _children(email, container_headers)
    if children is not None:
        multipart, nodes = children
        if is_content_type(email, MULTIPART_ALTERNATIVE):
            return [email]
        result: List[Email] = []
        for child in nodes:
            result.extend(inline_parts(child, multipart.container_headers))
        return result
    if isinstance(content_disposition(email), AttachmentDisposition):
        return []
    return [email]


def alternative_parts(email: Email, container_headers: Optional[Headers] = None) -> List[Email]:
    """
    Candidate representations of a node, in preference order.

    Nested ``multipart/alternative`` nodes are flattened; anything else is
    its own single candidate.
    """
    children = _children(email, container_headers)
    if children is None or not is_content_type(email, MULTIPART_ALTERNATIVE):
        return [email]
    multipart, nodes = children
    result: List[Email] = []
    for child in nodes:
        result.extend(alternative_parts(child, multipart.container_headers))
    return result


def all_related_parts(
    email: Email, container_headers: Optional[Headers] = None
) -> List[Tuple[str, Email]]:
    """Every ``(content_id, node)`` in the tree, depth-first, parents first."""
    result: List[Tuple[str, Email]] = []
    cid = related_part_cid(email)
    if cid is not None:
        result.append((cid, email))
    children = _children(email, container_headers)
    if children is not None:
        multipart, nodes = children
        for child in nodes:
            result.extend(all_related_parts(child, multipart.container_headers))
    return result


def find_related(email: Email, cid: str) -> Optional[Email]:
    """First node whose Content-Id is exactly ``cid``."""
    for part_cid, part in all_related_parts(email):
        if part_cid == cid:
            return part
    return None


# ============================================================================
# ATTACHMENTS
# ============================================================================


def parse_attachment(
    email: Email, container_headers: Optional[Headers] = None
) -> Optional[Attachment]:
    """
    View a node as an attachment.

    Returns:
        None for inline nodes, multipart nodes (they must be decomposed
        further) and unparsable nodes; otherwise a lazily decoded Attachment
    """
    disposition = content_disposition(email)
    if not isinstance(disposition, AttachmentDisposition):
        return None
    content = _safe_parse(email, container_headers)
    if isinstance(content, Message):
        return Attachment.of_embedded_email(email.headers, disposition.filename, content.email)
    if isinstance(content, Data):
        return Attachment.of_content(email.headers, disposition.filename, content.octet_stream)
    return None


def all_attachments(email: Email, container_headers: Optional[Headers] = None) -> List[Attachment]:
    """
    Every attachment in the tree, in declaration order.

    A ``message/rfc822`` part may itself be an attachment; the attachments
    of the message it embeds follow it.
    """
    content = _safe_parse(email, container_headers)
    if content is None:
        return []
    if isinstance(content, Data):
        attachment = parse_attachment(email, container_headers)
        return [attachment] if attachment is not None else []
    if isinstance(content, Message):
        attachment = parse_attachment(email, container_headers)
        own = [attachment] if attachment is not None else []
        return own + all_attachments(content.email)
    result: List[Attachment] = []
    for child in content.parts:
        result.extend(all_attachments(child, content.container_headers))
    return result


def find_attachment(email: Email, filename: str) -> Optional[Attachment]:
    """First attachment whose filename is exactly ``filename``."""
    for attachment in all_attachments(email):
        if attachment.filename == filename:
            return attachment
    return None


async def map_file_attachments(
    email: Email,
    f: AttachmentCallback,
    container_headers: Optional[Headers] = None,
) -> Email:
    """
    Rebuild the tree, letting ``f`` keep or replace each attachment leaf.

    ``f`` may be a plain function or a coroutine function. Sibling parts are
    processed concurrently; the rebuilt parts keep their declaration order,
    boundary, prologue, epilogue and container headers. Subtrees in which
    nothing changed are returned as the original objects, so keeping every
    attachment reproduces the input exactly.

    Raises:
        Whatever ``f`` raises; callbacks still running for sibling parts are
        cancelled and no partially rebuilt tree is returned
    """
    content = _safe_parse(email, container_headers)
    if content is None:
        return email

    if isinstance(content, Data):
        attachment = parse_attachment(email, container_headers)
        if attachment is None:
            return email
        decision = f(attachment)
        if inspect.isawaitable(decision):
            decision = await decision
        if isinstance(decision, Replace):
            return decision.email
        return email

    if isinstance(content, Message):
        embedded = await map_file_attachments(content.email, f)
        if embedded is content.email:
            return email
        return set_content(email, Message(email=embedded))

    tasks = [
        asyncio.ensure_future(map_file_attachments(child, f, content.container_headers))
        for child in content.parts
    ]
    try:
        rebuilt = await asyncio.gather(*tasks)
    except BaseException:
        # Siblings of a failed part must not keep running.
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
    if all(new is old for new, old in zip(rebuilt, content.parts)):
        return email
    return set_content(email, content.with_parts(rebuilt))
