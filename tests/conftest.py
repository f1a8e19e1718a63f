"""
Shared Test Fixtures for Reddit Image Browser

This module provides common fixtures used across all test modules.
Fixtures include mocks for settings, logging, HTTP responses,
and data factories for Reddit listing and gallery documents.
"""

import pytest
from unittest.mock import MagicMock, patch
from typing import Optional, Dict, Any, List
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


# =============================================================================
# Settings Fixtures
# =============================================================================

@pytest.fixture
def mock_settings():
    """
    Mock the settings module with test configuration values.

    Usage:
        def test_something(mock_settings):
            mock_settings.FEED_PAGE_SIZE = 50
            # ... test code

    Returns:
        MagicMock: A mock settings object with default test values.
    """
    import config.settings  # noqa: F401

    with patch('config.settings') as mock_settings_module:
        # Reddit API Settings
        mock_settings_module.REDDIT_BASE_URL = "https://www.reddit.com"
        mock_settings_module.REDDIT_USER_AGENT = "test-agent/1.0"
        mock_settings_module.REQUEST_TIMEOUT = 10

        # Feed Settings
        mock_settings_module.FEED_SUBJECT = "Rabbits"
        mock_settings_module.FEED_PERIOD = "year"
        mock_settings_module.FEED_PAGE_SIZE = 25
        mock_settings_module.MAX_FEED_PAGE_SIZE = 100
        mock_settings_module.END_OF_FEED_POLICY = "restart"
        mock_settings_module.END_OF_FEED_POLICIES = ["restart", "stop"]

        # Gallery Settings
        mock_settings_module.GALLERY_CONCURRENCY = 4
        mock_settings_module.GALLERY_URL_PREFIX = "https://www.reddit.com/gallery/"
        mock_settings_module.GALLERY_IMAGE_URL_TEMPLATE = "https://i.redd.it/{media_id}.jpg"
        mock_settings_module.DIRECT_IMAGE_PREFIXES = ["https://i.redd.it/", "https://i.imgur.com/"]

        yield mock_settings_module


# =============================================================================
# Logging Fixtures
# =============================================================================

@pytest.fixture
def capture_logs():
    """
    Capture log messages for assertion in tests.

    The application logger does not propagate to a handler that pytest
    inspects by default, so records are collected directly.

    Returns:
        list: A list that will contain captured log records.
    """
    import logging
    from utils.logger import ROOT_LOGGER_NAME

    class LogCapture(logging.Handler):
        def __init__(self):
            super().__init__()
            self.records = []

        def emit(self, record):
            self.records.append(record)

    handler = LogCapture()
    handler.setLevel(logging.DEBUG)

    app_logger = logging.getLogger(ROOT_LOGGER_NAME)
    original_level = app_logger.level
    app_logger.setLevel(logging.DEBUG)
    app_logger.addHandler(handler)

    yield handler.records

    app_logger.removeHandler(handler)
    app_logger.setLevel(original_level)


# =============================================================================
# HTTP Response Fixtures
# =============================================================================

@pytest.fixture
def mock_http_response():
    """
    Factory fixture for creating mock HTTP responses.

    Usage:
        def test_http_request(mock_http_response):
            response = mock_http_response(status_code=200, json_data={'key': 'value'})

    Returns:
        callable: A factory function for creating mock responses.
    """
    def _create_response(
        status_code: int = 200,
        json_data: Optional[Any] = None,
        url: str = 'https://www.reddit.com',
        raise_for_status: bool = False
    ) -> MagicMock:
        """
        Create a mock HTTP response object.

        Args:
            status_code: HTTP status code (default 200).
            json_data: Value to return from response.json(); None makes json() raise ValueError.
            url: The URL of the response.
            raise_for_status: If True, raise_for_status() will raise an exception.

        Returns:
            MagicMock: A mock response object mimicking requests.Response.
        """
        mock_response = MagicMock()
        mock_response.status_code = status_code
        mock_response.url = url
        mock_response.ok = 200 <= status_code < 300

        if json_data is not None:
            mock_response.json.return_value = json_data
        else:
            mock_response.json.side_effect = ValueError("No JSON data")

        if raise_for_status or status_code >= 400:
            from requests.exceptions import HTTPError
            mock_response.raise_for_status.side_effect = HTTPError(
                f"{status_code} Error",
                response=mock_response
            )
        else:
            mock_response.raise_for_status.return_value = None

        return mock_response

    return _create_response


# =============================================================================
# Reddit Document Factories
# =============================================================================

@pytest.fixture
def listing_factory():
    """
    Factory fixture for Reddit listing JSON.

    Usage:
        listing = listing_factory(["https://i.redd.it/a.jpg"], after="t3_abc")

    Returns:
        callable: Builds a listing dict from post URLs and an optional token.
    """
    def _create_listing(urls: List[Optional[str]], after: Optional[str] = None) -> Dict[str, Any]:
        children = []
        for url in urls:
            data = {"title": "post", "score": 1}
            if url is not None:
                data["url"] = url
            children.append({"kind": "t3", "data": data})
        return {"kind": "Listing", "data": {"after": after, "before": None, "children": children}}

    return _create_listing


@pytest.fixture
def gallery_document_factory():
    """
    Factory fixture for gallery comments documents.

    Each listing is given as a list of children; a child is either None
    (a non-gallery child) or a list of media ids.

    Usage:
        doc = gallery_document_factory([[None, ["i1", "i2"]], [["i3"]]])

    Returns:
        callable: Builds the list-of-listings document.
    """
    def _create_document(listings: List[List[Optional[List[str]]]]) -> List[Dict[str, Any]]:
        document = []
        for children in listings:
            raw_children = []
            for media_ids in children:
                data = {"id": "abc"}
                if media_ids is not None:
                    data["gallery_data"] = {
                        "items": [{"media_id": m, "id": n} for n, m in enumerate(media_ids)]
                    }
                raw_children.append({"kind": "t3", "data": data})
            document.append({"kind": "Listing", "data": {"children": raw_children}})
        return document

    return _create_document


# =============================================================================
# Fake Fetchers
# =============================================================================

class FakeRedditClient:
    """
    In-memory stand-in for RedditClient.

    Listing pages are returned in order; gallery documents are looked up by id.
    Every call is recorded so tests can assert on requested tokens.
    """

    def __init__(self, pages=None, galleries=None):
        self.pages = list(pages or [])
        self.galleries = dict(galleries or {})
        self.listing_calls = []
        self.gallery_calls = []

    def fetch_listing(self, subject, period, limit, after=None):
        self.listing_calls.append({"subject": subject, "period": period, "limit": limit, "after": after})
        page = self.pages.pop(0)
        if isinstance(page, Exception):
            raise page
        return page

    def fetch_gallery_document(self, gallery_id):
        self.gallery_calls.append(gallery_id)
        document = self.galleries[gallery_id]
        if isinstance(document, Exception):
            raise document
        return document


@pytest.fixture
def fake_client_factory():
    """Factory fixture returning FakeRedditClient instances."""
    return FakeRedditClient
