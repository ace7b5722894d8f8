"""Validation functions for requested domains"""

from favicache.icons.constants import ALLOWED_DOMAIN_CHARS, MAX_DOMAIN_LENGTH


def is_valid_domain(domain: str) -> bool:
    """Check that a domain is safe to use as a cache file name and as a bare host.

    Rejects empty or overly long values, path traversal (`..`) and any character
    that is neither alphanumeric nor one of `_`, `-`, `.`.
    """
    if not domain or len(domain) > MAX_DOMAIN_LENGTH or ".." in domain:
        return False

    return all(c.isalnum() or c in ALLOWED_DOMAIN_CHARS for c in domain)
