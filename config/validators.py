"""
Configuration Validation for Reddit Image Browser

This module contains configuration validation logic and a loggable summary of
the active configuration. Kept apart from settings.py for separation of concerns.
"""

from utils.exceptions import ConfigurationError


def validate_settings():
    """
    Validate that all settings are properly configured.

    Raises:
        ConfigurationError: If settings are missing or invalid.
    """
    # Import settings here to avoid circular imports
    from config import settings
    from data.models import TimePeriod

    errors = []

    if not settings.FEED_SUBJECT:
        errors.append("FEED_SUBJECT must name a subreddit")

    if not settings.REDDIT_USER_AGENT:
        errors.append("REDDIT_USER_AGENT must not be empty")

    try:
        TimePeriod.parse(settings.FEED_PERIOD)
    except ConfigurationError as e:
        errors.append(f"FEED_PERIOD: {e}")

    if settings.END_OF_FEED_POLICY not in settings.END_OF_FEED_POLICIES:
        errors.append(f"END_OF_FEED_POLICY must be one of {settings.END_OF_FEED_POLICIES}, "
                      f"got {settings.END_OF_FEED_POLICY!r}")

    # Validate numeric settings are within reasonable bounds
    numeric_validations = [
        ("FEED_PAGE_SIZE", settings.FEED_PAGE_SIZE, 1, settings.MAX_FEED_PAGE_SIZE),
        ("GALLERY_CONCURRENCY", settings.GALLERY_CONCURRENCY, 1, 32),
        ("REQUEST_TIMEOUT", settings.REQUEST_TIMEOUT, 1, 300),
    ]

    for name, value, min_val, max_val in numeric_validations:
        if not isinstance(value, int):
            errors.append(f"{name} must be an integer, got {value!r}")
        elif value < min_val or value > max_val:
            errors.append(f"{name} must be between {min_val} and {max_val}, got {value}")

    if "{media_id}" not in settings.GALLERY_IMAGE_URL_TEMPLATE:
        errors.append("GALLERY_IMAGE_URL_TEMPLATE must contain a {media_id} field")

    if not settings.DIRECT_IMAGE_PREFIXES:
        errors.append("DIRECT_IMAGE_PREFIXES must list at least one image host")

    # Raise all errors at once
    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ConfigurationError(error_msg)

    return True


def get_config_summary() -> dict:
    """
    Returns a summary of current configuration.
    Useful for logging startup state.
    """
    # Import settings here to avoid circular imports
    from config import settings

    return {
        "reddit": {
            "base_url": settings.REDDIT_BASE_URL,
            "user_agent": settings.REDDIT_USER_AGENT,
            "request_timeout": settings.REQUEST_TIMEOUT,
        },
        "feed_settings": {
            "subject": settings.FEED_SUBJECT,
            "period": settings.FEED_PERIOD,
            "page_size": settings.FEED_PAGE_SIZE,
            "end_of_feed_policy": settings.END_OF_FEED_POLICY,
        },
        "gallery_settings": {
            "concurrency": settings.GALLERY_CONCURRENCY,
            "direct_image_hosts": list(settings.DIRECT_IMAGE_PREFIXES),
        },
    }
