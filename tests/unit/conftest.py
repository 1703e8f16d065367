"""
Unit Test Fixtures.

Fixtures for unit tests - all external dependencies are mocked.
Unit tests should be fast and isolated, never touching a real backend.
"""

from unittest.mock import MagicMock

import pytest

from kivi.http.client import KVHttpClient


# =============================================================================
# HTTP Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_http_client() -> MagicMock:
    """
    Mock KVHttpClient for sources whose HTTP calls are not under test.

    Usage:
        def test_write(mock_http_client):
            source = FakeSource(mock_http_client)
    """
    client = MagicMock(spec=KVHttpClient)
    client.is_closed = False
    return client


# =============================================================================
# Logging Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_logger() -> MagicMock:
    """
    Mock logger for testing logging calls.

    Usage:
        def test_logging(mock_logger):
            log_with_source(mock_logger, "cli", "debug", "message")
            mock_logger.debug.assert_called_once()
    """
    logger = MagicMock()
    logger.debug = MagicMock()
    logger.info = MagicMock()
    logger.warning = MagicMock()
    logger.error = MagicMock()
    return logger
