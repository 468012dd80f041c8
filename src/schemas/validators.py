"""
Shared validation and normalization functions for link input.

Each function raises ValueError with a user-facing message; the service layer
turns those into LinkValidationError.
"""
from pydantic import AnyUrl, TypeAdapter, ValidationError

from core.config import get_settings

# No length cap on URLs; the http(s) scheme is checked in validate_url.
_url_adapter = TypeAdapter(AnyUrl)

ALLOWED_URL_SCHEMES = frozenset({"http", "https"})


def validate_url(url: str) -> str:
    """
    Validate that url is an absolute http(s) URL.

    Returns:
        The trimmed URL exactly as given (not canonicalized).

    Raises:
        ValueError: If the URL does not parse, has no host, or uses another scheme.
    """
    trimmed = url.strip()
    try:
        parsed = _url_adapter.validate_python(trimmed)
    except ValidationError as e:
        raise ValueError("Please provide a valid URL") from e
    if parsed.scheme not in ALLOWED_URL_SCHEMES or not parsed.host:
        raise ValueError("Please provide a valid URL")
    return trimmed


def normalize_tags(tags: list[str]) -> list[str]:
    """
    Normalize a tag sequence.

    Entries are trimmed and lower-cased, empty entries are dropped. Order is
    preserved and duplicates are kept.

    Raises:
        ValueError: If any tag exceeds the maximum tag length.
    """
    settings = get_settings()
    normalized = []
    for tag in tags:
        trimmed = tag.strip()
        if not trimmed:
            continue  # Skip empty tags silently
        if len(trimmed) > settings.max_tag_length:
            raise ValueError(
                f"Tag exceeds maximum length of {settings.max_tag_length} characters "
                f"(got {len(trimmed)} characters).",
            )
        normalized.append(trimmed.lower())
    return normalized


def normalize_tag_filter(tag: str | None) -> str | None:
    """
    Normalize a tag query parameter.

    Only lower-cased, not trimmed: a padded tag can never equal a stored tag and
    so matches nothing. None and "" mean no tag filter.
    """
    if not tag:
        return None
    return tag.lower()


def validate_title_length(title: str) -> str:
    """Validate that title doesn't exceed maximum length."""
    settings = get_settings()
    if len(title) > settings.max_title_length:
        raise ValueError(
            f"Title exceeds maximum length of {settings.max_title_length:,} characters "
            f"(got {len(title):,} characters).",
        )
    return title


def validate_description_length(description: str) -> str:
    """Validate that description doesn't exceed maximum length."""
    settings = get_settings()
    if len(description) > settings.max_description_length:
        max_len = settings.max_description_length
        raise ValueError(
            f"Description exceeds maximum length of {max_len:,} characters "
            f"(got {len(description):,} characters).",
        )
    return description
