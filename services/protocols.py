"""
Service Protocol Definitions

This module defines typing.Protocol interfaces for the services used by the
Reddit Image Browser. These protocols keep the feed pager and gallery resolver
independent of the HTTP client, which makes them easy to drive from tests.

Protocols defined:
- ListingFetcher: Interface for fetching a page of a subreddit's top listing
- GalleryDocumentFetcher: Interface for fetching a gallery's comments document
- FeedPagerProtocol: Interface for advancing through a feed page by page
- GalleryResolverProtocol: Interface for expanding a gallery link into image URLs
"""

from typing import Any, Dict, List, Optional, Protocol

from data.models import FeedPage, FeedQuery, TimePeriod


class ListingFetcher(Protocol):
    """Protocol for the feed-listing fetch capability."""

    def fetch_listing(
        self,
        subject: str,
        period: TimePeriod,
        limit: int,
        after: Optional[str] = None
    ) -> Dict[str, Any]:
        """Fetch one page of a subreddit's top listing.

        Args:
            subject: Subreddit name.
            period: Ranking window.
            limit: Number of posts to request.
            after: Continuation token from the previous page, if any.

        Returns:
            The decoded listing JSON object.
        """
        ...


class GalleryDocumentFetcher(Protocol):
    """Protocol for the gallery-detail fetch capability."""

    def fetch_gallery_document(self, gallery_id: str) -> List[Any]:
        """Fetch the comments document for a gallery.

        Args:
            gallery_id: The id taken from the gallery link.

        Returns:
            The decoded list of listing objects.
        """
        ...


class FeedPagerProtocol(Protocol):
    """Protocol for paging through a feed with continuation tokens."""

    async def advance(self, query: FeedQuery) -> FeedPage:
        """Fetch the page described by ``query``.

        Args:
            query: The page to fetch.

        Returns:
            The page's posts and the query for the following page.
        """
        ...


class GalleryResolverProtocol(Protocol):
    """Protocol for expanding gallery links."""

    async def resolve(self, gallery_url: str) -> List[str]:
        """Resolve a gallery link into direct image URLs.

        Args:
            gallery_url: A Reddit gallery link.

        Returns:
            Direct image URLs in gallery order.
        """
        ...
