"""
Ambient process state used for default envelope values.

The builders never read the user, program name, hostname or clock on their
own: callers pass a ``ProcessIdentity`` and a timestamp, and only
``ProcessIdentity.from_environment`` looks at the running process.
"""

import getpass
import socket
import sys
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

from ..config import Settings, settings as default_settings

_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


@dataclass(frozen=True)
class ProcessIdentity:
    """Who is sending: login name, program basename and host."""

    user: str
    program: str
    hostname: str

    @classmethod
    def from_environment(cls, settings: Optional[Settings] = None) -> "ProcessIdentity":
        """
        Read the identity of the running process.

        Settings overrides (``EML_MIME_IDENTITY_*``) take precedence.
        """
        settings = settings or default_settings
        return cls(
            user=settings.identity_user or _login_name(),
            program=settings.identity_program or Path(sys.argv[0]).name or "python",
            hostname=settings.identity_hostname or socket.gethostname(),
        )

    def local_address(self) -> str:
        return f"{self.user}@{self.hostname}"


def _login_name() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "unknown"


def make_message_id(identity: ProcessIdentity, unique: Optional[uuid.UUID] = None) -> str:
    """
    Generate a Message-Id of the form ``<user/program+uuid@hostname>``.

    Args:
        identity: Sending process identity
        unique: UUID to embed (random if omitted)

    Returns:
        Message-Id including angle brackets
    """
    unique = unique or uuid.uuid4()
    return f"<{identity.user}/{identity.program}+{unique}@{identity.hostname}>"


def utc_offset_string(offset: Optional[timedelta]) -> Optional[str]:
    """
    Colon-free ``+HHMM`` / ``-HHMM`` offset, or None for UTC itself.

    Seconds in the offset are truncated.
    """
    if not offset:
        return None
    sign = "-" if offset < timedelta(0) else "+"
    minutes = int(abs(offset).total_seconds()) // 60
    return f"{sign}{minutes // 60:02d}{minutes % 60:02d}"


def rfc822_date(moment: datetime) -> str:
    """
    Render a Date header value, e.g. ``Thu, 12 Feb 2026 10:30:00 +0100``.

    Naive datetimes are interpreted in the local time zone. A zero UTC offset
    is rendered as ``+0000``.

    Args:
        moment: Timestamp to render

    Returns:
        Date header value
    """
    if moment.tzinfo is None:
        moment = moment.astimezone()
    offset = utc_offset_string(moment.utcoffset()) or "+0000"
    return (
        f"{_WEEKDAYS[moment.weekday()]}, {moment.day:02d} {_MONTHS[moment.month - 1]} "
        f"{moment.year} {moment:%H:%M:%S} {offset}"
    )
