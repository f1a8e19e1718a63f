"""
Feed Walker Module

This module drives the feed pager and gallery resolver together. It owns the
current feed query, turns each page of posts into image URLs in feed order,
and decides what happens when the feed runs out of pages.
"""

import asyncio
from typing import AsyncIterator, List, Optional

from config import settings
from data.models import DirectImage, FeedQuery, GalleryReference, ImagePost, Post
from services.protocols import FeedPagerProtocol, GalleryResolverProtocol
from services.url_classifier import LinkClassifier
from utils.exceptions import ConfigurationError, EndOfFeedSignal, GalleryError
from utils.logger import get_logger

logger = get_logger(__name__)


class FeedWalker:
    """
    Walks a feed page by page and yields the images found on it.

    Pages are fetched strictly one after another. Galleries on the same page
    are resolved concurrently, up to ``concurrency`` at a time, and results are
    returned in the order the posts appeared in the feed.
    """

    def __init__(
        self,
        pager: FeedPagerProtocol,
        resolver: GalleryResolverProtocol,
        query: FeedQuery,
        classifier: Optional[LinkClassifier] = None,
        concurrency: Optional[int] = None,
        end_of_feed_policy: Optional[str] = None
    ):
        """
        Initialize the walker.

        Args:
            pager: Fetches feed pages.
            resolver: Expands gallery links.
            query: The first page to fetch.
            classifier: Sorts post links, defaults to the configured classifier.
            concurrency: Maximum gallery lookups in flight, defaults to settings.GALLERY_CONCURRENCY.
            end_of_feed_policy: "restart" or "stop", defaults to settings.END_OF_FEED_POLICY.

        Raises:
            ConfigurationError: If the concurrency or end of feed policy is invalid.
        """
        self.pager = pager
        self.resolver = resolver
        self.classifier = classifier or LinkClassifier()
        self.concurrency = concurrency if concurrency is not None else settings.GALLERY_CONCURRENCY
        self.end_of_feed_policy = (end_of_feed_policy or settings.END_OF_FEED_POLICY).lower()

        if self.concurrency < 1:
            raise ConfigurationError(f"Gallery concurrency must be at least 1, got {self.concurrency}")
        if self.end_of_feed_policy not in settings.END_OF_FEED_POLICIES:
            raise ConfigurationError(
                f"Unknown end of feed policy {self.end_of_feed_policy!r}, "
                f"expected one of: {', '.join(settings.END_OF_FEED_POLICIES)}"
            )

        self._query = query
        self._exhausted = False
        self._page_lock: Optional[asyncio.Lock] = None

    @property
    def query(self) -> FeedQuery:
        """The query the next page will be fetched with."""
        return self._query

    @property
    def exhausted(self) -> bool:
        """True once the final page has been returned under the "stop" policy."""
        return self._exhausted

    def restart(self) -> None:
        """Start again from the first page of the feed."""
        self._query = self._query.restart()
        self._exhausted = False

    async def next_page(self) -> List[ImagePost]:
        """
        Fetch the next page and resolve its image posts.

        Returns:
            List[ImagePost]: One entry per supported post, in feed order.

        Raises:
            EndOfFeedSignal: If the feed was exhausted and the policy is "stop".
            FeedFetchError: If the page cannot be fetched.
        """
        # Created on first use so the lock belongs to the running loop.
        if self._page_lock is None:
            self._page_lock = asyncio.Lock()

        async with self._page_lock:
            if self._exhausted:
                raise EndOfFeedSignal(self._query.subject)

            page = await self.pager.advance(self._query)
            self._query = page.next_query
            if page.end_of_feed and self.end_of_feed_policy == "stop":
                self._exhausted = True
            elif page.end_of_feed:
                logger.info(f"Restarting r/{self._query.subject} from the first page")

        return await self.resolve_posts(page.posts)

    async def next_batch(self) -> List[str]:
        """Fetch the next page and return its image URLs, galleries expanded in place."""
        image_posts = await self.next_page()
        return [url for post in image_posts for url in post.image_urls]

    async def pages(self, max_pages: Optional[int] = None) -> AsyncIterator[List[ImagePost]]:
        """
        Yield the image posts of each page in turn.

        Args:
            max_pages: Stop after this many pages; None polls until the feed
                ends under the "stop" policy, or forever under "restart".

        Yields:
            List[ImagePost]: One page's supported posts, in feed order.
        """
        count = 0
        while max_pages is None or count < max_pages:
            if count:
                logger.info("Getting next batch")
            try:
                image_posts = await self.next_page()
            except EndOfFeedSignal as e:
                logger.info(str(e))
                return
            count += 1
            yield image_posts

    async def stream(self, max_pages: Optional[int] = None) -> AsyncIterator[str]:
        """
        Yield image URLs page after page, galleries expanded in place.

        Args:
            max_pages: Passed through to ``pages``.

        Yields:
            str: Direct image URLs in feed order.
        """
        async for image_posts in self.pages(max_pages):
            for post in image_posts:
                for url in post.image_urls:
                    yield url

    async def resolve_posts(self, posts: List[Post]) -> List[ImagePost]:
        """
        Classify posts and resolve their galleries.

        A gallery that fails to resolve is logged and skipped; the other posts
        on the page are still returned.

        Args:
            posts: Posts in feed order.

        Returns:
            List[ImagePost]: Supported posts in feed order.

        Raises:
            Exception: Any error other than GalleryError from the resolver.
                The remaining lookups for the page are cancelled first.
        """
        semaphore = asyncio.Semaphore(self.concurrency)

        async def expand(link: GalleryReference) -> Optional[ImagePost]:
            async with semaphore:
                try:
                    urls = await self.resolver.resolve(link.url)
                except GalleryError as e:
                    logger.warning(f"Skipping gallery {link.url}: {e}")
                    return None
            return ImagePost(source_url=link.url, image_urls=urls, is_gallery=True)

        async def passthrough(link: DirectImage) -> ImagePost:
            return ImagePost(source_url=link.url, image_urls=[link.url])

        jobs = []
        for post in posts:
            link = self.classifier.classify(post.url)
            if isinstance(link, GalleryReference):
                jobs.append(expand(link))
            elif isinstance(link, DirectImage):
                jobs.append(passthrough(link))
            else:
                logger.debug(f"Dropping unsupported link {post.url}")

        tasks = [asyncio.ensure_future(job) for job in jobs]
        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return [r for r in results if r is not None]
