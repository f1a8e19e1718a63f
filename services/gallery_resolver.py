"""
Gallery Resolver Module

This module expands a Reddit gallery link into the direct image URLs of the
gallery's items. Reddit describes a gallery through the post's comments
document: a list of listings whose children may carry ``gallery_data.items``,
each item naming a media id on the image CDN.
"""

import asyncio
from typing import Any, List, Optional

from config import settings
from data.models import GalleryChild, GalleryItem, GalleryListing
from services.protocols import GalleryDocumentFetcher
from services.url_classifier import LinkClassifier
from utils.exceptions import GalleryFetchError, MalformedGalleryUrlError
from utils.helpers import safe_get
from utils.logger import get_logger

logger = get_logger(__name__)


def _parse_child(raw_child: Any) -> GalleryChild:
    items = safe_get(raw_child, "data", "gallery_data", "items")
    if not isinstance(items, list):
        return GalleryChild()

    gallery_items = []
    for raw_item in items:
        media_id = safe_get(raw_item, "media_id")
        if isinstance(media_id, str) and media_id:
            gallery_items.append(GalleryItem(media_id=media_id))
    return GalleryChild(gallery_items=gallery_items)


def parse_gallery_document(raw: Any) -> List[GalleryListing]:
    """
    Decode a comments document into gallery listings.

    Missing or wrongly typed optional fields decode as absent; only the top
    level has to be a list.

    Args:
        raw: The decoded JSON document.

    Returns:
        List[GalleryListing]: Listings in document order.

    Raises:
        GalleryFetchError: If the document is not a list.
    """
    if not isinstance(raw, list):
        raise GalleryFetchError(f"Gallery document must be a list of listings, got {type(raw).__name__}")

    listings = []
    for raw_listing in raw:
        children = safe_get(raw_listing, "data", "children")
        if not isinstance(children, list):
            children = []
        listings.append(GalleryListing(children=[_parse_child(c) for c in children]))
    return listings


def extract_image_links(listings: List[GalleryListing], url_template: Optional[str] = None) -> List[str]:
    """
    Build direct image URLs from decoded gallery listings.

    Args:
        listings: Decoded gallery listings.
        url_template: Format string with a ``{media_id}`` field,
            defaults to settings.GALLERY_IMAGE_URL_TEMPLATE.

    Returns:
        List[str]: Image URLs in listing, child, item order. Duplicates are kept.
    """
    url_template = url_template or settings.GALLERY_IMAGE_URL_TEMPLATE
    links = []
    for listing in listings:
        for child in listing.children:
            if child.gallery_items is None:
                continue
            for item in child.gallery_items:
                links.append(url_template.format(media_id=item.media_id))
    return links


class GalleryResolver:
    """Resolves gallery links into direct image URLs."""

    def __init__(
        self,
        fetcher: GalleryDocumentFetcher,
        classifier: Optional[LinkClassifier] = None,
        url_template: Optional[str] = None
    ):
        """
        Initialize the resolver.

        Args:
            fetcher: The gallery-detail fetch capability, usually a RedditClient.
            classifier: Used to pull the gallery id out of a link.
            url_template: Image URL format string with a ``{media_id}`` field.
        """
        self.fetcher = fetcher
        self.classifier = classifier or LinkClassifier()
        self.url_template = url_template or settings.GALLERY_IMAGE_URL_TEMPLATE

    async def resolve(self, gallery_url: str) -> List[str]:
        """
        Resolve a gallery link.

        Args:
            gallery_url: A gallery link, e.g. https://www.reddit.com/gallery/abc123.

        Returns:
            List[str]: Direct image URLs in gallery order; empty if the gallery
            has no resolvable items.

        Raises:
            MalformedGalleryUrlError: If ``gallery_url`` is not a gallery link.
            GalleryFetchError: If the gallery document cannot be fetched or decoded.
        """
        gallery_id = self.classifier.extract_gallery_id(gallery_url)
        if gallery_id is None:
            raise MalformedGalleryUrlError(f"Not a gallery link: {gallery_url!r}")

        raw = await asyncio.to_thread(self.fetcher.fetch_gallery_document, gallery_id)
        links = extract_image_links(parse_gallery_document(raw), self.url_template)

        if not links:
            logger.info(f"Gallery {gallery_id} has no resolvable images")
        else:
            logger.debug(f"Resolved {len(links)} images from gallery {gallery_id}")
        return links
