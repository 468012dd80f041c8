"""Shared utility functions for service layer."""


def escape_like(value: str) -> str:
    r"""
    Escape special LIKE characters for safe use in LIKE/ILIKE patterns.

    LIKE/ILIKE treat these characters specially:
    - % matches any sequence of characters
    - _ matches any single character
    - \\ is the escape character

    This function escapes them so they match literally.
    """
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
