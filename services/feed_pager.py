"""
Feed Pager Module

This module pages through a subreddit's top listing. Each call to
``advance`` fetches exactly one page and hands back the query for the next
page, so pagination state is passed along explicitly rather than kept on the
pager.
"""

import asyncio
from typing import Any, Dict, List, Optional, Tuple

from config import settings
from data.models import FeedPage, FeedQuery, Post
from services.protocols import ListingFetcher
from utils.exceptions import FeedFetchError
from utils.helpers import safe_get
from utils.logger import get_logger

logger = get_logger(__name__)


def parse_listing(listing: Dict[str, Any]) -> Tuple[List[Post], Optional[str]]:
    """
    Pull the posts and the continuation token out of a listing.

    Args:
        listing: Decoded listing JSON, ``{"data": {"children": [...], "after": ...}}``.

    Returns:
        tuple: (posts in listing order, the ``after`` token or None).

    Raises:
        FeedFetchError: If the object does not carry a children list.
    """
    children = safe_get(listing, "data", "children")
    if not isinstance(children, list):
        raise FeedFetchError("Listing response has no data.children list")

    posts = []
    for child in children:
        url = safe_get(child, "data", "url")
        posts.append(Post(url=url if isinstance(url, str) else None))

    after = safe_get(listing, "data", "after")
    if not isinstance(after, str) or not after:
        after = None
    return posts, after


class FeedPager:
    """Fetches feed pages one at a time, chaining continuation tokens."""

    def __init__(self, fetcher: ListingFetcher, page_size: Optional[int] = None):
        """
        Initialize the pager.

        Args:
            fetcher: The listing fetch capability, usually a RedditClient.
            page_size: Posts per page, defaults to settings.FEED_PAGE_SIZE.
        """
        self.fetcher = fetcher
        self.page_size = page_size if page_size is not None else settings.FEED_PAGE_SIZE
        if not 1 <= self.page_size <= settings.MAX_FEED_PAGE_SIZE:
            raise ValueError(f"page_size must be between 1 and {settings.MAX_FEED_PAGE_SIZE}, got {self.page_size}")

    async def advance(self, query: FeedQuery) -> FeedPage:
        """
        Fetch the page described by ``query``.

        Args:
            query: Subject, ranking window and optional continuation token.

        Returns:
            FeedPage: The page's posts in order and the next query. When the
            listing carries no continuation token the page is flagged as the
            end of the feed and ``next_query`` starts over from the first page.

        Raises:
            ValueError: If the query has no subject.
            FeedFetchError: If the page cannot be fetched or is not a listing.
        """
        if not query.subject:
            raise ValueError("FeedQuery.subject must not be empty")

        logger.debug(f"Fetching r/{query.subject} top/{query.period.value} after={query.after}")
        listing = await asyncio.to_thread(
            self.fetcher.fetch_listing,
            query.subject,
            query.period,
            self.page_size,
            query.after
        )
        posts, after = parse_listing(listing)

        if after is None:
            logger.info(f"Reached the end of r/{query.subject} after {len(posts)} posts")
            return FeedPage(posts=posts, next_query=query.restart(), end_of_feed=True)

        logger.debug(f"Fetched {len(posts)} posts from r/{query.subject}, next token {after}")
        return FeedPage(posts=posts, next_query=query.with_token(after))
