"""
URL Classifier Module

Sorts post links into direct images, gallery references and everything else.
Classification is pure: no I/O, no state, and it never raises.
"""

from typing import Iterable, Optional

from config import settings
from data.models import ClassifiedLink, DirectImage, GalleryReference, Unsupported


class LinkClassifier:
    """Classifies post URLs against a direct-image allow-list and a gallery prefix."""

    def __init__(
        self,
        direct_image_prefixes: Optional[Iterable[str]] = None,
        gallery_prefix: Optional[str] = None
    ):
        """
        Args:
            direct_image_prefixes: Scheme and host prefixes of direct-image hosts,
                defaults to settings.DIRECT_IMAGE_PREFIXES.
            gallery_prefix: Prefix of gallery links, defaults to settings.GALLERY_URL_PREFIX.
        """
        if direct_image_prefixes is None:
            direct_image_prefixes = settings.DIRECT_IMAGE_PREFIXES
        self.direct_image_prefixes = tuple(direct_image_prefixes)
        gallery_prefix = gallery_prefix or settings.GALLERY_URL_PREFIX
        if not gallery_prefix.endswith("/"):
            gallery_prefix += "/"
        self.gallery_prefix = gallery_prefix

    def is_direct_image_link(self, url) -> bool:
        """Check whether ``url`` is on one of the allow-listed image hosts."""
        return isinstance(url, str) and url.startswith(self.direct_image_prefixes)

    def extract_gallery_id(self, url) -> Optional[str]:
        """
        Extract the gallery id from a gallery link.

        The id is the first path segment after the gallery prefix; any query
        string or fragment is ignored.

        Args:
            url: Candidate gallery link.

        Returns:
            Optional[str]: The gallery id, or None if ``url`` is not a gallery link.
        """
        if not isinstance(url, str) or not url.startswith(self.gallery_prefix):
            return None
        remainder = url[len(self.gallery_prefix):]
        for separator in ("?", "#"):
            remainder = remainder.split(separator, 1)[0]
        gallery_id = remainder.split("/", 1)[0]
        return gallery_id or None

    def is_gallery_link(self, url) -> bool:
        """Check whether ``url`` is a gallery link with a non-empty id."""
        return self.extract_gallery_id(url) is not None

    def classify(self, url) -> ClassifiedLink:
        """
        Classify a post URL.

        Args:
            url: The post's link. Any value is accepted.

        Returns:
            ClassifiedLink: DirectImage with the URL unchanged, GalleryReference
            carrying the gallery id, or Unsupported.
        """
        if self.is_direct_image_link(url):
            return DirectImage(url)
        gallery_id = self.extract_gallery_id(url)
        if gallery_id is not None:
            return GalleryReference(url, gallery_id=gallery_id)
        return Unsupported(url if isinstance(url, str) else None)


def default_classifier() -> LinkClassifier:
    """Build a classifier from the current settings."""
    return LinkClassifier()


def classify(url) -> ClassifiedLink:
    """Classify ``url`` with the configured hosts and gallery prefix."""
    return default_classifier().classify(url)


def is_direct_image_link(url) -> bool:
    return default_classifier().is_direct_image_link(url)


def is_gallery_link(url) -> bool:
    return default_classifier().is_gallery_link(url)


def extract_gallery_id(url) -> Optional[str]:
    return default_classifier().extract_gallery_id(url)
