"""
Unit tests for configuration, logging setup and exceptions.
"""

import logging

import pytest
import structlog

from eml_mime.config import Settings
from eml_mime.exceptions import (
    AmbiguousPayloadError,
    ConfigurationError,
    DecodeError,
    EmlMimeError,
    ParseError,
)
from eml_mime.logging_config import get_logger, setup_logging


class TestSettings:
    """Tests for Settings."""

    @pytest.mark.unit
    def test_defaults(self):
        """Test default configuration values."""
        settings = Settings(_env_file=None)
        assert settings.log_level == "INFO"
        assert settings.log_json is False
        assert settings.default_from is None
        assert settings.default_attachment_name == "unnamed-attachment"

    @pytest.mark.unit
    def test_environment_overrides(self, monkeypatch):
        """Test EML_MIME_ prefixed environment variables."""
        monkeypatch.setenv("EML_MIME_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("EML_MIME_LOG_JSON", "true")
        monkeypatch.setenv("EML_MIME_DEFAULT_FROM", "noreply@example.com")
        settings = Settings(_env_file=None)
        assert settings.log_level == "DEBUG"
        assert settings.log_json is True
        assert settings.default_from == "noreply@example.com"


class TestLogging:
    """Tests for setup_logging()."""

    @pytest.mark.unit
    def test_setup_logging_filters_by_level(self, mock_settings):
        """Test that the configured level filters lower events."""
        mock_settings.log_level = "WARNING"
        try:
            setup_logging(mock_settings)
            config = structlog.get_config()
            assert config["wrapper_class"] is structlog.make_filtering_bound_logger(logging.WARNING)
            assert get_logger("eml_mime.test") is not None
        finally:
            structlog.reset_defaults()

    @pytest.mark.unit
    def test_setup_logging_json_renderer(self, mock_settings):
        """Test that log_json selects the JSON renderer."""
        mock_settings.log_json = True
        try:
            setup_logging(mock_settings)
            processors = structlog.get_config()["processors"]
            assert isinstance(processors[-1], structlog.processors.JSONRenderer)
        finally:
            structlog.reset_defaults()


class TestExceptions:
    """Tests for the exception hierarchy."""

    @pytest.mark.unit
    def test_hierarchy(self):
        """Test that every error derives from EmlMimeError."""
        for cls in (ConfigurationError, ParseError, DecodeError, AmbiguousPayloadError):
            assert issubclass(cls, EmlMimeError)
        assert issubclass(ConfigurationError, ValueError)

    @pytest.mark.unit
    def test_message_with_details(self):
        """Test string rendering with and without details."""
        assert str(ParseError("bad body")) == "bad body"
        error = DecodeError("cannot decode", {"filename": "a.bin", "encoding": "x-uue"})
        assert str(error) == "cannot decode (Details: filename=a.bin, encoding=x-uue)"
        assert error.details["filename"] == "a.bin"
