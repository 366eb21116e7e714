"""
Library configuration management.

This module handles configuration from environment variables using Pydantic Settings.
"""

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Library configuration from environment variables.

    All settings can be overridden via environment variables prefixed with
    ``EML_MIME_`` (e.g. ``EML_MIME_LOG_LEVEL=DEBUG``).
    """

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # Envelope defaults
    default_from: Optional[str] = None  # Falls back to user@hostname

    # Process identity overrides for Message-Id generation
    identity_user: Optional[str] = None
    identity_program: Optional[str] = None
    identity_hostname: Optional[str] = None

    # Attachment classification
    default_attachment_name: str = "unnamed-attachment"

    model_config = {
        "env_prefix": "EML_MIME_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Global settings instance
settings = Settings()
