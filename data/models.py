"""
Data Models for Reddit Image Browser

This module contains the data classes passed between the feed pager,
the URL classifier, the gallery resolver and the drivers that consume them.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional

from utils.exceptions import ConfigurationError


class TimePeriod(str, Enum):
    """Ranking windows accepted by Reddit's top listing (the ``t`` parameter)."""
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    ALL = "all"

    @classmethod
    def parse(cls, value) -> "TimePeriod":
        """
        Parse a ranking window name, case-insensitively.

        Args:
            value: A TimePeriod or its name, e.g. "year" or "ALL".

        Returns:
            TimePeriod: The matching ranking window.

        Raises:
            ConfigurationError: If the value is not a known ranking window.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(p.value for p in cls)
            raise ConfigurationError(f"Unknown ranking window {value!r}, expected one of: {choices}")


@dataclass(frozen=True)
class FeedQuery:
    """
    One page request against a subreddit's top listing.

    Attributes:
        subject (str): Subreddit name, without the r/ prefix.
        period (TimePeriod): Ranking window.
        after (str, optional): Continuation token from the previous page.
    """
    subject: str
    period: TimePeriod = TimePeriod.YEAR
    after: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "period", TimePeriod.parse(self.period))

    def with_token(self, after: str) -> "FeedQuery":
        """Derive the query for the page following the one that returned ``after``."""
        return replace(self, after=after)

    def restart(self) -> "FeedQuery":
        """Derive a query for the first page of the same feed."""
        return replace(self, after=None)


@dataclass(frozen=True)
class Post:
    """A feed post. Only the link URL is used."""
    url: Optional[str] = None


@dataclass(frozen=True)
class FeedPage:
    """Posts from one listing page and the query for the next one."""
    posts: List[Post]
    next_query: FeedQuery
    end_of_feed: bool = False


# =============================================================================
# Classified links
# =============================================================================

@dataclass(frozen=True)
class ClassifiedLink:
    """Base for the result of classifying a post URL."""
    url: Optional[str]


@dataclass(frozen=True)
class DirectImage(ClassifiedLink):
    """A link that already points at an image on an allow-listed host."""
    pass


@dataclass(frozen=True)
class GalleryReference(ClassifiedLink):
    """A Reddit gallery link and the gallery id extracted from it."""
    gallery_id: str = ""


@dataclass(frozen=True)
class Unsupported(ClassifiedLink):
    """Anything that is neither a direct image nor a gallery link."""
    pass


# =============================================================================
# Gallery documents
# =============================================================================

@dataclass
class GalleryItem:
    """A single image in a gallery, keyed by its media id."""
    media_id: str


@dataclass
class GalleryChild:
    """A listing child. Only gallery posts carry gallery items."""
    gallery_items: Optional[List[GalleryItem]] = None


@dataclass
class GalleryListing:
    """One listing object from the comments endpoint."""
    children: List[GalleryChild] = field(default_factory=list)


@dataclass
class ImagePost:
    """
    The images contributed by one supported post.

    Attributes:
        source_url (str): The post's link.
        image_urls (List[str]): Direct image URLs, in gallery order for galleries.
        is_gallery (bool): True if the images were resolved from a gallery link.
    """
    source_url: str
    image_urls: List[str]
    is_gallery: bool = False
