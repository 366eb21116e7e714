"""
Exceptions raised by the MIME builder and decomposer.

Structural problems surface lazily: parse errors are absorbed by traversal,
decode and ambiguous-payload errors are raised only by the specific
extraction call that needs the payload.
"""

from typing import Any, Dict, Optional


class EmlMimeError(Exception):
    """Base exception for all eml_mime errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} (Details: {details_str})"
        return self.message


class ConfigurationError(EmlMimeError, ValueError):
    """Raised when a builder is called with arguments it cannot assemble."""


class ParseError(EmlMimeError):
    """Raised when a node's body cannot be interpreted per its headers."""


class DecodeError(EmlMimeError):
    """Raised when a payload uses an unknown or malformed transfer encoding."""


class AmbiguousPayloadError(EmlMimeError):
    """Raised when raw content is requested from a node that has sub-parts."""
