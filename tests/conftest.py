# tests/conftest.py

"""Shared pytest fixtures for all pricewatch tests."""

from collections.abc import Generator
from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def mock_http_session() -> Generator[None, None, None]:
    """Patch the curl_cffi session so no test can reach the network."""
    with patch(
        "pricewatch.scrapers.price_list_fetcher.curl_requests.Session"
    ):
        yield
