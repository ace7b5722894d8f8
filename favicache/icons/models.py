"""Data models for icon resolution"""

import re
from enum import Enum, unique
from pathlib import Path
from typing import Any, Optional

import httpx
from pydantic import BaseModel, ConfigDict, field_validator


class IconCandidate(BaseModel):
    """A discovered or guessed icon location. Lower priority is preferred."""

    priority: int
    href: str


class Page(BaseModel):
    """A fetched web page, after redirects, with its body capped in size."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    url: str
    headers: httpx.Headers
    body: bytes
    cookies: str = ""


@unique
class CacheStatus(str, Enum):
    """Outcome of an icon cache lookup."""

    HIT = "hit"
    MISS = "miss"
    NEGATIVE = "negative"


class CacheLookup(BaseModel):
    """Result of an icon cache lookup. `icon` is only set on a hit."""

    status: CacheStatus
    icon: Optional[bytes] = None

    @classmethod
    def hit(cls, icon: bytes) -> "CacheLookup":
        """Build a lookup result for a fresh cached icon."""
        return cls(status=CacheStatus.HIT, icon=icon)

    @classmethod
    def miss(cls) -> "CacheLookup":
        """Build a lookup result for an absent or expired icon."""
        return cls(status=CacheStatus.MISS)

    @classmethod
    def negative(cls) -> "CacheLookup":
        """Build a lookup result for a domain that recently failed to resolve."""
        return cls(status=CacheStatus.NEGATIVE)


class IconConfig(BaseModel):
    """Icon service configuration. Immutable for the lifetime of the process."""

    model_config = ConfigDict(frozen=True)

    cache_dir: Path
    cache_ttl: int = 2592000
    cache_negttl: int = 259200
    blacklist_regex: Optional[str] = None
    blacklist_non_global_ips: bool = True
    disable_download: bool = False
    download_timeout: float = 10.0
    single_flight: bool = True
    max_connections: int = 100

    @field_validator("blacklist_regex")
    @classmethod
    def check_blacklist_regex(cls, value: Optional[str]) -> Optional[str]:
        """Treat an empty pattern as unset and reject patterns that don't compile."""
        if not value:
            return None
        try:
            re.compile(value)
        except re.error as e:
            raise ValueError(f"Invalid icon blacklist regex {value!r}: {e}") from e
        return value

    @classmethod
    def from_settings(cls, icon_settings: Any) -> "IconConfig":
        """Build the configuration from the `icons` section of the Dynaconf settings."""
        return cls(
            cache_dir=Path(icon_settings.cache_dir),
            cache_ttl=icon_settings.cache_ttl_sec,
            cache_negttl=icon_settings.cache_negttl_sec,
            blacklist_regex=icon_settings.get("blacklist_regex") or None,
            blacklist_non_global_ips=icon_settings.blacklist_non_global_ips,
            disable_download=icon_settings.get("disable_download", False),
            download_timeout=float(icon_settings.download_timeout_sec),
            single_flight=icon_settings.get("single_flight", True),
            max_connections=icon_settings.get("max_connections", 100),
        )
