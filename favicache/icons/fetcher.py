"""Fetch pages and icons over HTTP(S) through the shared client and the SSRF guard."""

import logging

import httpx

from favicache.exceptions import IconError
from favicache.icons.constants import MAX_ICON_BYTES, MAX_PAGE_BYTES, MAX_REDIRECTS
from favicache.icons.errors import BlacklistedHostError, FetchError, IconErrorMessages
from favicache.icons.models import Page
from favicache.icons.ssrf_guard import SsrfGuard

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES: frozenset[str] = frozenset({"http", "https"})


def extract_cookies(headers: httpx.Headers) -> str:
    """Fold every `Set-Cookie` header into a single `name=value; ` cookie string.

    Attributes like `Path` or `Expires` are dropped; malformed headers are skipped.
    """
    pairs = []
    for raw_cookie in headers.get_list("set-cookie"):
        name, separator, value = raw_cookie.split(";", 1)[0].partition("=")
        name = name.strip()
        if not separator or not name:
            logger.debug(f"Skipping malformed Set-Cookie header: {raw_cookie!r}")
            continue
        pairs.append(f"{name}={value.strip()}; ")
    return "".join(pairs)


async def _read_body(response: httpx.Response, max_bytes: int, truncate: bool) -> bytes:
    body = bytearray()
    async for chunk in response.aiter_bytes():
        body.extend(chunk)
        if len(body) > max_bytes:
            if truncate:
                return bytes(body[:max_bytes])
            raise FetchError(
                IconErrorMessages.FETCH_FAILED,
                url=response.url,
                reason=f"body exceeds {max_bytes} bytes",
            )
    return bytes(body)


class PageFetcher:
    """Issue GET requests, re-checking the target host before every hop."""

    client: httpx.AsyncClient
    guard: SsrfGuard

    def __init__(self, client: httpx.AsyncClient, guard: SsrfGuard) -> None:
        self.client = client
        self.guard = guard

    async def _check_url(self, url: httpx.URL) -> None:
        if url.scheme not in ALLOWED_SCHEMES:
            raise FetchError(
                IconErrorMessages.FETCH_FAILED, url=url, reason=f"scheme {url.scheme!r}"
            )
        if await self.guard.is_blocked(url.host):
            raise BlacklistedHostError(IconErrorMessages.BLACKLISTED_HOST, host=url.host)

    async def get(
        self,
        url: str,
        cookies: str = "",
        max_bytes: int = MAX_ICON_BYTES,
        truncate: bool = False,
    ) -> Page:
        """Fetch `url`, following redirects manually.

        Args:
            - `url`: Absolute http(s) URL.
            - `cookies`: Cookie string sent as the `cookie` header when not empty. It's
              dropped once a redirect leaves the original host.
            - `max_bytes`: Maximum body size.
            - `truncate`: Cut the body at `max_bytes` instead of failing.
        Raises:
            - `BlacklistedHostError` if any hop targets a blocked host.
            - `FetchError` for invalid URLs, connection/TLS errors, timeouts, non-2xx
              responses, oversized bodies and redirect loops.
        """
        try:
            request_url = httpx.URL(url)
        except httpx.InvalidURL as e:
            raise FetchError(IconErrorMessages.FETCH_FAILED, url=url, reason=e) from e

        origin_host = request_url.host
        for _ in range(MAX_REDIRECTS + 1):
            await self._check_url(request_url)
            headers = {"cookie": cookies} if cookies and request_url.host == origin_host else None
            try:
                async with self.client.stream("GET", request_url, headers=headers) as response:
                    if response.is_redirect:
                        request_url = response.url.join(response.headers["location"])
                        continue
                    response.raise_for_status()
                    body = await _read_body(response, max_bytes, truncate)
                    return Page(url=str(response.url), headers=response.headers, body=body)
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                raise FetchError(
                    IconErrorMessages.FETCH_FAILED, url=request_url, reason=e
                ) from e

        raise FetchError(IconErrorMessages.TOO_MANY_REDIRECTS, url=url)

    async def fetch(self, domain: str) -> Page:
        """Fetch the home page of a domain over https, falling back to http.

        Raises:
            - `FetchError` if neither scheme yields a page.
        """
        for url in (f"https://{domain}", f"http://{domain}"):
            try:
                page = await self.get(url, max_bytes=MAX_PAGE_BYTES, truncate=True)
            except IconError as e:
                logger.debug(f"Could not fetch {url}: {e}")
                continue

            page.cookies = extract_cookies(page.headers)
            return page

        raise FetchError(IconErrorMessages.PAGE_UNREACHABLE, domain=domain)
