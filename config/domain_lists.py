"""
Domain Lists and Link Patterns for Reddit Image Browser

This module contains the direct-image host allow-list and the Reddit link
patterns used by the URL classifier and gallery resolver.
Kept apart from settings.py to separate data from configuration logic.
"""

# Direct Image Hosts - links under these prefixes already point at an image.
# Hosts not listed here are never treated as direct images, even if they serve images.
DIRECT_IMAGE_PREFIXES = [
    "https://i.redd.it/",     # Reddit image CDN
    "https://i.imgur.com/",   # Imgur direct links
]

# Gallery links look like https://www.reddit.com/gallery/<gallery_id>
GALLERY_URL_PREFIX = "https://www.reddit.com/gallery/"

# Canonical direct-image URL for a gallery item's media id
GALLERY_IMAGE_URL_TEMPLATE = "https://i.redd.it/{media_id}.jpg"
