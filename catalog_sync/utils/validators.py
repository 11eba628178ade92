"""
Security and validation utilities.
"""

import secrets
from catalog_sync.config import Config


# Remote API documents these bounds for product search
MAX_SEARCH_OFFSET = 9999
MAX_PAGE_SIZE = 100


def validate_api_token(provided_token: str) -> bool:
    """
    Validate shared API token using constant-time comparison.

    Args:
        provided_token: Token from X-Api-Token header

    Returns:
        True if valid, False otherwise
    """
    if not provided_token or not Config.API_TOKEN:
        return False

    return secrets.compare_digest(provided_token, Config.API_TOKEN)


def clamp_paging(offset: int, limit: int) -> tuple:
    """
    Clamp product search paging arguments to the bounds the remote accepts.

    Args:
        offset: Requested start offset
        limit: Requested page size

    Returns:
        (offset, limit) tuple within 0..9999 and 1..100
    """
    offset = max(0, min(int(offset), MAX_SEARCH_OFFSET))
    limit = max(1, min(int(limit), MAX_PAGE_SIZE))
    return offset, limit
