"""Errors module that maintains all the icon resolution error strings and the
error classes used to tell failure causes apart in logs.
"""

from enum import Enum

from favicache.exceptions import IconError


class IconErrorMessages(Enum):
    """Enum variables with string values representing error messages"""

    INVALID_DOMAIN = "Invalid domain: {domain!r}"
    BLACKLISTED_HOST = "Host {host!r} is blacklisted"
    PAGE_UNREACHABLE = "Could not fetch a page for {domain}"
    FETCH_FAILED = "Request to {url} failed: {reason}"
    TOO_MANY_REDIRECTS = "Too many redirects while fetching {url}"
    INVALID_DATA_URI = "Data URI is invalid: {reason}"
    DATA_URI_TOO_SMALL = "Data URI payload of {size} bytes is below {minimum} bytes"
    EXHAUSTED_CANDIDATES = "No icon could be downloaded for {domain} ({tried} candidates tried)"

    def format_message(self, **kwargs) -> str:
        """Format the enum string value with the passed in keyword arguments"""
        return self.value.format(**kwargs)


class _FormattedIconError(IconError):
    def __init__(self, error_type: IconErrorMessages, **kwargs):
        # Use the `format_message` method to get the formatted error message
        message = error_type.format_message(**kwargs)
        super().__init__(message)
        self.error_type = error_type


class BlacklistedHostError(_FormattedIconError):
    """The SSRF guard refused to let a request reach a host."""


class FetchError(_FormattedIconError):
    """A page or icon request failed: connection, TLS, timeout or non-2xx status."""


class DataUriError(_FormattedIconError):
    """A data URI candidate could not be decoded or is too small to be an image."""


class ExhaustedCandidatesError(_FormattedIconError):
    """None of the top icon candidates could be downloaded."""
