"""
Configuration Settings for Reddit Image Browser

This module centralizes all configuration settings for the Reddit Image Browser,
including environment variables, Reddit endpoints, and application constants.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

from config import domain_lists

# Determine the application root directory
APP_ROOT = Path(__file__).resolve().parent.parent

# Load environment variables from .env file
load_dotenv(dotenv_path=os.path.join(APP_ROOT, '.env'))


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, keeping the raw value on parse failure for validation."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return raw


# =============================================================================
# Reddit API Settings
# =============================================================================

REDDIT_BASE_URL = os.getenv("REDDIT_BASE_URL", "https://www.reddit.com").rstrip("/")
REDDIT_USER_AGENT = os.getenv("REDDIT_USER_AGENT", "reddit-image-browser/1.0")
REQUEST_TIMEOUT = _env_int("REQUEST_TIMEOUT", 10)    # Seconds per HTTP request

# =============================================================================
# Feed Settings
# =============================================================================

FEED_SUBJECT = os.getenv("FEED_SUBJECT", "Rabbits")  # Subreddit to browse
FEED_PERIOD = os.getenv("FEED_PERIOD", "year")        # Ranking window for top posts
FEED_PAGE_SIZE = _env_int("FEED_PAGE_SIZE", 25)       # Posts requested per page
MAX_FEED_PAGE_SIZE = 100                              # Reddit caps listings at 100

# What to do once the feed runs out of pages: "restart" or "stop"
END_OF_FEED_POLICY = os.getenv("END_OF_FEED_POLICY", "restart").lower()
END_OF_FEED_POLICIES = ["restart", "stop"]

# =============================================================================
# Gallery Settings
# =============================================================================

GALLERY_CONCURRENCY = _env_int("GALLERY_CONCURRENCY", 4)  # Gallery lookups in flight per page
GALLERY_URL_PREFIX = domain_lists.GALLERY_URL_PREFIX
GALLERY_IMAGE_URL_TEMPLATE = domain_lists.GALLERY_IMAGE_URL_TEMPLATE
DIRECT_IMAGE_PREFIXES = domain_lists.DIRECT_IMAGE_PREFIXES
