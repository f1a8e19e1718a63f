"""
Reddit Image Browser

This is the main entry point for the Reddit Image Browser.
It walks a subreddit's top posts page by page, expands gallery posts
into their individual images, and prints every direct image URL it finds.
"""

import sys
import asyncio
import argparse
import logging
from typing import Optional, TextIO

from config import settings
from config.validators import validate_settings, get_config_summary
from data.models import FeedQuery, TimePeriod
from services.reddit_client import RedditClient
from services.feed_pager import FeedPager
from services.gallery_resolver import GalleryResolver
from services.feed_walker import FeedWalker
from services.url_classifier import LinkClassifier
from utils.logger import get_logger, setup_file_logging
from utils.exceptions import (
    RedditBrowserError, ConfigurationError, FeedFetchError
)

# Set up logging
logger = get_logger(__name__)


class ImageBrowser:
    """
    Main application class for the Reddit Image Browser.

    Wires the Reddit client, feed pager, gallery resolver and feed walker
    together and prints the resulting image stream.
    """

    def __init__(
        self,
        subject: Optional[str] = None,
        period: Optional[str] = None,
        page_size: Optional[int] = None,
        concurrency: Optional[int] = None,
        end_of_feed_policy: Optional[str] = None,
        client: Optional[RedditClient] = None,
        walker: Optional[FeedWalker] = None,
        validate: bool = True
    ):
        """
        Initialize the browser.

        Args:
            subject: Subreddit to browse, defaults to settings.FEED_SUBJECT.
            period: Ranking window, defaults to settings.FEED_PERIOD.
            page_size: Posts per page, defaults to settings.FEED_PAGE_SIZE.
            concurrency: Gallery lookups in flight, defaults to settings.GALLERY_CONCURRENCY.
            end_of_feed_policy: "restart" or "stop", defaults to settings.END_OF_FEED_POLICY.
            client: Optional pre-built Reddit client.
            walker: Optional pre-built feed walker; replaces all of the above.
            validate: Validate settings before building services.
        """
        if validate:
            validate_settings()

        self.client = client
        if walker is None:
            if self.client is None:
                self.client = RedditClient()
            classifier = LinkClassifier()
            query = FeedQuery(
                subject=subject or settings.FEED_SUBJECT,
                period=TimePeriod.parse(period or settings.FEED_PERIOD)
            )
            walker = FeedWalker(
                pager=FeedPager(self.client, page_size=page_size),
                resolver=GalleryResolver(self.client, classifier=classifier),
                query=query,
                classifier=classifier,
                concurrency=concurrency,
                end_of_feed_policy=end_of_feed_policy
            )
        self.walker = walker

    async def run(
        self,
        max_pages: Optional[int] = None,
        group_galleries: bool = False,
        out: Optional[TextIO] = None
    ) -> int:
        """
        Print image URLs until the page limit or the end of the feed.

        Args:
            max_pages: Number of pages to print, None for no limit.
            group_galleries: Print a "Gallery at" header before each gallery's images.
            out: Stream to print to, defaults to stdout.

        Returns:
            int: Number of image URLs printed.

        Raises:
            FeedFetchError: If a feed page cannot be fetched.
        """
        out = out or sys.stdout
        printed = 0
        pages = 0

        async for image_posts in self.walker.pages(max_pages):
            pages += 1
            for post in image_posts:
                if group_galleries and post.is_gallery:
                    print(f"Gallery at {post.source_url}", file=out)
                    for url in post.image_urls:
                        print(f"   {url}", file=out)
                else:
                    for url in post.image_urls:
                        print(url, file=out)
                printed += len(post.image_urls)
            out.flush()

        logger.info(f"Printed {printed} image URLs from {pages} pages")
        return printed

    def close(self) -> None:
        """Release the HTTP session."""
        if self.client is not None:
            self.client.close()


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description='Reddit Image Browser')
    parser.add_argument('--subreddit', type=str, default=None,
                        help='Subreddit to browse (default: FEED_SUBJECT)')
    parser.add_argument('--period', type=str, choices=[p.value for p in TimePeriod], default=None,
                        help='Ranking window for top posts (default: FEED_PERIOD)')
    parser.add_argument('--page-size', type=int, default=None,
                        help='Posts per page, 1-100 (default: FEED_PAGE_SIZE)')
    parser.add_argument('--pages', type=int, default=None,
                        help='Stop after this many pages (default: keep polling)')
    parser.add_argument('--concurrency', type=int, default=None,
                        help='Gallery lookups in flight (default: GALLERY_CONCURRENCY)')
    parser.add_argument('--on-end', type=str, choices=settings.END_OF_FEED_POLICIES, default=None,
                        help='What to do when the feed runs out (default: END_OF_FEED_POLICY)')
    parser.add_argument('--group-galleries', action='store_true',
                        help='Print a header line before the images of each gallery')
    parser.add_argument('--log-file', type=str, default=None, help='Log file path')
    parser.add_argument('--log-level', type=str, choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        default='INFO', help='Logging level')
    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point for the application."""
    # Parse command line arguments
    args = parse_arguments(argv)

    # Set up logging
    log_level = getattr(logging, args.log_level)
    setup_file_logging(args.log_file, log_level)

    logger.info("Starting Reddit Image Browser")
    logger.debug(f"Configuration: {get_config_summary()}")

    browser = None
    try:
        browser = ImageBrowser(
            subject=args.subreddit,
            period=args.period,
            page_size=args.page_size,
            concurrency=args.concurrency,
            end_of_feed_policy=args.on_end
        )
        asyncio.run(browser.run(max_pages=args.pages, group_galleries=args.group_galleries))
        exit_code = 0

    except ConfigurationError as e:
        logger.error(str(e))
        exit_code = 1
    except ValueError as e:
        logger.error(f"Invalid option: {e}")
        exit_code = 1
    except FeedFetchError as e:
        logger.error(f"Feed error: {e}", exc_info=True)
        exit_code = 1
    except KeyboardInterrupt:
        logger.info("Interrupted")
        exit_code = 130
    except RedditBrowserError as e:
        logger.error(f"Reddit Image Browser error: {e}", exc_info=True)
        exit_code = 2
    except Exception as e:
        logger.error(f"Unhandled exception in Reddit Image Browser: {e}", exc_info=True)
        exit_code = 2
    finally:
        if browser is not None:
            browser.close()

    logger.info(f"Reddit Image Browser finished with exit code {exit_code}")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
