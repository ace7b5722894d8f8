"""Resolve a domain to its best available icon, with caching and fallback."""

import asyncio
import base64
import binascii
import logging
from functools import cache
from importlib import resources
from urllib.parse import unquote_to_bytes

import aiodogstatsd
import httpx

from favicache.exceptions import IconError
from favicache.icons.cache import IconCache
from favicache.icons.constants import (
    DATA_URI_PREFIX,
    FALLBACK_ICON_RESOURCE,
    ICON_CONTENT_TYPE,
    MAX_CANDIDATES,
    MIN_DATA_URI_BYTES,
    REQUEST_HEADERS,
)
from favicache.icons.errors import (
    BlacklistedHostError,
    DataUriError,
    ExhaustedCandidatesError,
    FetchError,
    IconErrorMessages,
)
from favicache.icons.extractor import IconExtractor
from favicache.icons.fetcher import PageFetcher
from favicache.icons.models import CacheStatus, IconCandidate, IconConfig
from favicache.icons.ssrf_guard import SsrfGuard
from favicache.icons.validators import is_valid_domain
from favicache.utils.http_client import create_http_client

logger = logging.getLogger(__name__)


@cache
def get_fallback_icon() -> bytes:
    """Load the icon served whenever no real icon is available."""
    return resources.files("favicache").joinpath(FALLBACK_ICON_RESOURCE).read_bytes()


def decode_data_uri(uri: str) -> bytes:
    """Decode the payload of a `data:` URI.

    Raises:
        - `DataUriError` if the URI is malformed or its payload is too small to be an image.
    """
    header, separator, data = uri.partition(",")
    if not separator:
        raise DataUriError(IconErrorMessages.INVALID_DATA_URI, reason="missing ','")

    payload = unquote_to_bytes(data)
    if header.lower().endswith(";base64"):
        payload = b"".join(payload.split())
        try:
            payload = base64.b64decode(payload + b"=" * (-len(payload) % 4), validate=True)
        except (binascii.Error, ValueError) as e:
            raise DataUriError(IconErrorMessages.INVALID_DATA_URI, reason=e) from e

    if len(payload) < MIN_DATA_URI_BYTES:
        raise DataUriError(
            IconErrorMessages.DATA_URI_TOO_SMALL, size=len(payload), minimum=MIN_DATA_URI_BYTES
        )
    return payload


class IconResolver:
    """Turn a domain into icon bytes. Never raises: failures yield the fallback icon."""

    config: IconConfig
    cache: IconCache
    guard: SsrfGuard
    fetcher: PageFetcher
    extractor: IconExtractor
    metrics_client: aiodogstatsd.Client
    _in_flight: dict[str, asyncio.Task]

    def __init__(
        self,
        config: IconConfig,
        cache: IconCache,
        guard: SsrfGuard,
        fetcher: PageFetcher,
        metrics_client: aiodogstatsd.Client,
        extractor: IconExtractor | None = None,
    ) -> None:
        self.config = config
        self.cache = cache
        self.guard = guard
        self.fetcher = fetcher
        self.metrics_client = metrics_client
        self.extractor = extractor or IconExtractor()
        self._in_flight = {}

    @classmethod
    def from_config(
        cls,
        config: IconConfig,
        http_client: httpx.AsyncClient,
        metrics_client: aiodogstatsd.Client,
    ) -> "IconResolver":
        """Wire the resolver's components around a shared HTTP client."""
        guard = SsrfGuard(
            blacklist_non_global_ips=config.blacklist_non_global_ips,
            blacklist_regex=config.blacklist_regex,
        )
        return cls(
            config=config,
            cache=IconCache(config.cache_dir, config.cache_ttl, config.cache_negttl),
            guard=guard,
            fetcher=PageFetcher(http_client, guard),
            metrics_client=metrics_client,
        )

    @staticmethod
    def create_http_client(config: IconConfig) -> httpx.AsyncClient:
        """Create the HTTP client shared by every resolution."""
        return create_http_client(
            headers=REQUEST_HEADERS,
            max_connections=config.max_connections,
            connect_timeout=config.download_timeout,
            request_timeout=config.download_timeout,
        )

    async def resolve_icon(self, domain: str) -> bytes:
        """Return the icon for `domain`, from cache or freshly downloaded, or the fallback."""
        if not is_valid_domain(domain):
            logger.warning(IconErrorMessages.INVALID_DOMAIN.format_message(domain=domain))
            self.metrics_client.increment("icons.invalid_domain")
            return get_fallback_icon()

        if not self.config.single_flight:
            return await self._resolve(domain)

        task = self._in_flight.get(domain)
        if task is None:
            task = asyncio.ensure_future(self._resolve(domain))
            self._in_flight[domain] = task
            task.add_done_callback(lambda _: self._in_flight.pop(domain, None))
        # A cancelled caller must not cancel the resolution other callers are waiting on.
        return await asyncio.shield(task)

    async def resolve_icon_response(self, domain: str) -> tuple[str, bytes]:
        """Return `(content_type, icon)` for the HTTP layer."""
        return ICON_CONTENT_TYPE, await self.resolve_icon(domain)

    async def _resolve(self, domain: str) -> bytes:
        lookup = await self.cache.get(domain)
        match lookup.status:
            case CacheStatus.NEGATIVE:
                self.metrics_client.increment("icons.cache.negative")
                return get_fallback_icon()
            case CacheStatus.HIT if lookup.icon is not None:
                self.metrics_client.increment("icons.cache.hit")
                return lookup.icon
        self.metrics_client.increment("icons.cache.miss")

        if self.config.disable_download:
            return get_fallback_icon()

        try:
            with self.metrics_client.timeit("icons.download.timing"):
                icon = await self.download_icon(domain)
        except IconError as e:
            logger.error(f"Error downloading icon for {domain}: {e}")
            return await self._record_failure(domain, e)
        except Exception as e:
            logger.exception(f"Unexpected error downloading icon for {domain}: {e}")
            return await self._record_failure(domain, e)

        self.metrics_client.increment("icons.download.success")
        await self.cache.put_hit(domain, icon)
        return icon

    async def _record_failure(self, domain: str, error: Exception) -> bytes:
        if isinstance(error, BlacklistedHostError):
            self.metrics_client.increment("icons.blocked")
        self.metrics_client.increment("icons.download.failure")
        await self.cache.put_miss(domain)
        return get_fallback_icon()

    async def find_candidates(self, domain: str) -> tuple[list[IconCandidate], str]:
        """Return ranked icon candidates for a domain and the cookies its page set.

        When the page can't be fetched at all, `/favicon.ico` is guessed on both schemes.
        """
        try:
            page = await self.fetcher.fetch(domain)
        except FetchError as e:
            logger.info(f"Guessing icon locations: {e}")
            return self.extractor.default_candidates(domain), ""

        return self.extractor.extract(page), page.cookies

    async def _download_candidate(self, candidate: IconCandidate, cookies: str) -> bytes:
        if candidate.href.startswith(DATA_URI_PREFIX):
            return decode_data_uri(candidate.href)

        icon = (await self.fetcher.get(candidate.href, cookies=cookies)).body
        if not icon:
            raise FetchError(
                IconErrorMessages.FETCH_FAILED, url=candidate.href, reason="empty body"
            )
        return icon

    async def download_icon(self, domain: str) -> bytes:
        """Download the best icon for a domain, trying the top candidates in order.

        Raises:
            - `BlacklistedHostError` if the domain itself is blocked.
            - `ExhaustedCandidatesError` if no candidate could be downloaded.
        """
        if await self.guard.is_blocked(domain):
            raise BlacklistedHostError(IconErrorMessages.BLACKLISTED_HOST, host=domain)

        candidates, cookies = await self.find_candidates(domain)
        top_candidates = candidates[:MAX_CANDIDATES]

        for candidate in top_candidates:
            try:
                icon = await self._download_candidate(candidate, cookies)
            except DataUriError as e:
                logger.warning(f"Skipping data URI icon for {domain}: {e}")
                continue
            except IconError as e:
                logger.info(f"Download failed for {candidate.href}: {e}")
                continue

            logger.info(f"Downloaded icon from {candidate.href}")
            return icon

        raise ExhaustedCandidatesError(
            IconErrorMessages.EXHAUSTED_CANDIDATES, domain=domain, tried=len(top_candidates)
        )
