"""
Custom Exception Classes for Reddit Image Browser

This module defines custom exceptions for better error handling and
categorization of failures across the application.
"""


class RedditBrowserError(Exception):
    """Base exception for all Reddit Image Browser errors."""
    pass


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(RedditBrowserError):
    """Raised when configuration validation fails or required settings are missing."""
    pass


# =============================================================================
# Feed Errors
# =============================================================================

class FeedError(RedditBrowserError):
    """Base exception for feed listing errors."""
    pass


class FeedFetchError(FeedError):
    """Raised when a feed page cannot be fetched or parsed into a listing."""
    pass


class EndOfFeedSignal(FeedError):
    """
    Raised when the feed has no further pages and the walker is set to stop.

    Not a failure: the caller may restart from a fresh query or terminate.
    """

    def __init__(self, subject: str):
        super().__init__(f"Reached the end of the feed for r/{subject}")
        self.subject = subject


# =============================================================================
# Gallery Errors
# =============================================================================

class GalleryError(RedditBrowserError):
    """Base exception for gallery resolution errors."""
    pass


class GalleryFetchError(GalleryError):
    """Raised when a gallery document cannot be fetched or has an unexpected shape."""
    pass


class MalformedGalleryUrlError(GalleryError):
    """Raised when a URL handed to the gallery resolver is not a gallery link."""
    pass
