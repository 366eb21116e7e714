"""
Global pytest fixtures and configuration for test suite.

This module provides reusable fixtures for:
- Sample email data
- Deterministic process identity and timestamps
- Captured structured logs
- Temporary files
"""

import os
from datetime import datetime, timedelta, timezone
from typing import Generator, List

import pytest
from structlog.testing import capture_logs

from eml_mime.building.identity import ProcessIdentity
from eml_mime.config import Settings
from eml_mime.models.email import Email
from .fixtures.emails import SAMPLE_EMAILS


@pytest.fixture
def mock_settings() -> Settings:
    """
    Create settings for testing with safe defaults.

    Returns:
        Settings instance with test configuration
    """
    return Settings(
        log_level="INFO",
        log_json=False,  # Easier to read in tests
        identity_user="alice",
        identity_program="mailer",
        identity_hostname="mail.example.com",
    )


@pytest.fixture
def identity() -> ProcessIdentity:
    """
    Fixed process identity for deterministic envelopes.

    Returns:
        ProcessIdentity for alice/mailer on mail.example.com
    """
    return ProcessIdentity(user="alice", program="mailer", hostname="mail.example.com")


@pytest.fixture
def fixed_timestamp() -> datetime:
    """
    Provide fixed timezone-aware timestamp for deterministic testing.

    Returns:
        Thursday 12 Feb 2026, 10:30 at UTC+1
    """
    return datetime(2026, 2, 12, 10, 30, 0, tzinfo=timezone(timedelta(hours=1)))


@pytest.fixture
def sample_eml_bytes() -> bytes:
    """Simple plain text email bytes for basic tests."""
    return SAMPLE_EMAILS["simple_plain_text"]


@pytest.fixture
def mixed_email() -> Email:
    """multipart/mixed message with a nested alternative body and two attachments."""
    return Email.of_bytes(SAMPLE_EMAILS["mixed_with_attachments"])


@pytest.fixture
def related_email() -> Email:
    return Email.of_bytes(SAMPLE_EMAILS["related"])


@pytest.fixture
def forwarded_email() -> Email:
    """Message carrying a forwarded message/rfc822 attachment."""
    return Email.of_bytes(SAMPLE_EMAILS["forwarded"])


@pytest.fixture
def digest_email() -> Email:
    return Email.of_bytes(SAMPLE_EMAILS["digest"])


@pytest.fixture
def undecodable_email() -> Email:
    """Message whose attachments use unknown or broken encodings."""
    return Email.of_bytes(SAMPLE_EMAILS["undecodable_attachments"])


@pytest.fixture
def tmp_eml_file(tmp_path) -> Generator[str, None, None]:
    """
    Create temporary .eml file for file-based tests.

    Args:
        tmp_path: pytest's temporary directory fixture

    Yields:
        Path to temporary .eml file
    """
    eml_path = tmp_path / "test_email.eml"
    eml_path.write_bytes(SAMPLE_EMAILS["simple_plain_text"])
    yield str(eml_path)
    # Cleanup is automatic with tmp_path


@pytest.fixture(autouse=True)
def captured_logs() -> Generator[List[dict], None, None]:
    """
    Capture structlog events emitted during a test.

    Yields:
        List of event dicts (``event``, ``log_level`` and bound values)
    """
    with capture_logs() as logs:
        yield logs


@pytest.fixture(autouse=True)
def reset_env_vars():
    """
    Reset environment variables before each test.

    This prevents test pollution from env var changes.
    """
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


def pytest_configure(config):
    """
    Configure pytest with custom markers and settings.
    """
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (CLI, end-to-end)"
    )
    config.addinivalue_line(
        "markers", "slow: Slow tests that may take longer to run"
    )
