"""
Reddit Client Module

This module talks to Reddit's public JSON endpoints. It provides the two
fetch capabilities the browser needs: a subreddit's top listing, and the
comments document that describes a gallery post.
"""

import threading
from typing import Any, Callable, Dict, List, Optional

import requests

from config import settings
from data.models import TimePeriod
from utils.exceptions import FeedFetchError, GalleryFetchError
from utils.logger import get_logger

logger = get_logger(__name__)


class RedditClient:
    """
    Minimal client for Reddit's unauthenticated JSON API.

    requests.Session is not safe to share between threads, and gallery
    lookups run in worker threads, so each thread gets its own session from
    ``session_factory``. ``close`` closes every session handed out.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        user_agent: Optional[str] = None,
        timeout: Optional[int] = None,
        session_factory: Optional[Callable[[], requests.Session]] = None
    ):
        """
        Initialize the client.

        Args:
            base_url: Reddit base URL, defaults to settings.REDDIT_BASE_URL.
            user_agent: User-Agent header, defaults to settings.REDDIT_USER_AGENT.
            timeout: Per-request timeout in seconds, defaults to settings.REQUEST_TIMEOUT.
            session_factory: Builds a session for each thread, defaults to requests.Session.
        """
        self.base_url = (base_url or settings.REDDIT_BASE_URL).rstrip("/")
        self.user_agent = user_agent or settings.REDDIT_USER_AGENT
        self.timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT
        self.session_factory = session_factory or requests.Session
        self._local = threading.local()
        self._sessions: List[requests.Session] = []
        self._sessions_lock = threading.Lock()

    @property
    def session(self) -> requests.Session:
        """The HTTP session for the calling thread, created on first use."""
        session = getattr(self._local, "session", None)
        if session is None:
            session = self.session_factory()
            session.headers.update({"User-Agent": self.user_agent})
            self._local.session = session
            with self._sessions_lock:
                self._sessions.append(session)
        return session

    def fetch_listing(
        self,
        subject: str,
        period: TimePeriod,
        limit: int,
        after: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Fetch one page of a subreddit's top posts.

        Args:
            subject: Subreddit name.
            period: Ranking window.
            limit: Number of posts to request.
            after: Continuation token from the previous page, if any.

        Returns:
            Dict[str, Any]: The decoded listing JSON.

        Raises:
            FeedFetchError: If the request fails or the body is not a JSON object.
        """
        url = f"{self.base_url}/r/{subject}/top.json"
        params = {"limit": limit, "t": TimePeriod.parse(period).value}
        if after:
            params["after"] = after

        logger.debug(f"Fetching listing {url} with {params}")
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            raise FeedFetchError(f"Error fetching r/{subject} listing: {e}") from e
        except ValueError as e:
            raise FeedFetchError(f"Invalid JSON in r/{subject} listing: {e}") from e

        if not isinstance(data, dict):
            raise FeedFetchError(f"Unexpected listing shape for r/{subject}: {type(data).__name__}")
        return data

    def fetch_gallery_document(self, gallery_id: str) -> List[Any]:
        """
        Fetch the comments document for a gallery post.

        Args:
            gallery_id: The id taken from the gallery link.

        Returns:
            List[Any]: The decoded list of listing objects.

        Raises:
            GalleryFetchError: If the request fails or the body is not a JSON list.
        """
        url = f"{self.base_url}/comments/{gallery_id}.json"

        logger.debug(f"Fetching gallery document {url}")
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            raise GalleryFetchError(f"Error fetching gallery {gallery_id}: {e}") from e
        except ValueError as e:
            raise GalleryFetchError(f"Invalid JSON for gallery {gallery_id}: {e}") from e

        if not isinstance(data, list):
            raise GalleryFetchError(f"Unexpected gallery document shape for {gallery_id}: {type(data).__name__}")
        return data

    def close(self) -> None:
        """Close every HTTP session this client has opened."""
        with self._sessions_lock:
            sessions, self._sessions = self._sessions, []
            self._local = threading.local()
        for session in sessions:
            session.close()
