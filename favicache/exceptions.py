"""favicache specific exceptions."""


class IconError(Exception):
    """Base class for failures while resolving an icon for a domain."""
