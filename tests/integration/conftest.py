# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

"""Module for test configurations for the integration test directory."""

from contextlib import nullcontext
from pathlib import Path
from typing import Iterator

import httpx
import pytest
from aiodogstatsd import Client as AioDogstatsdClient
from starlette.testclient import TestClient

from favicache.icons import get_resolver
from favicache.icons.models import IconConfig
from favicache.icons.resolver import IconResolver
from favicache.main import app

ICON_BYTES: bytes = b"\x89PNG\r\n\x1a\n" + b"\x00" * 92

PAGE_HTML: str = '<html><head><link rel="icon" sizes="32x32" href="/icon.png"></head></html>'


class NoOpMetricsClient(AioDogstatsdClient):
    """No-op metrics client for test usage that inherits from aiodogstatsd.Client."""

    def increment(self, *args, **kwargs):
        """Do nothing instead of sending a metric increment."""
        pass

    def timeit(self, *args, **kwargs):
        """Return a no-op context manager instead of timing."""
        return nullcontext()


def remote_site(request: httpx.Request) -> httpx.Response:
    """Serve a home page with one icon link for `example.com`, fail everything else."""
    if request.url.host != "example.com":
        raise httpx.ConnectError("connection refused", request=request)
    match request.url.path:
        case "/":
            return httpx.Response(200, html=PAGE_HTML)
        case "/icon.png":
            return httpx.Response(200, content=ICON_BYTES)
    return httpx.Response(404)


@pytest.fixture(name="icon_bytes")
def fixture_icon_bytes() -> bytes:
    """Return the icon served by the fake remote site."""
    return ICON_BYTES


@pytest.fixture(name="requests_seen")
def fixture_requests_seen() -> list[httpx.Request]:
    """Return the list every request to the fake remote site is recorded in."""
    return []


@pytest.fixture(name="resolver")
def fixture_resolver(tmp_path: Path, requests_seen: list[httpx.Request]) -> IconResolver:
    """Return a resolver talking to the fake remote site and caching under `tmp_path`."""

    def handler(request: httpx.Request) -> httpx.Response:
        requests_seen.append(request)
        return remote_site(request)

    config = IconConfig(
        cache_dir=tmp_path / "icon_cache",
        blacklist_non_global_ips=False,
        download_timeout=1.0,
    )
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return IconResolver.from_config(config, http_client, NoOpMetricsClient())


@pytest.fixture(name="client")
def fixture_test_client(resolver: IconResolver) -> Iterator[TestClient]:
    """Return a FastAPI TestClient instance serving icons from the test resolver.

    Note that this will NOT trigger event handlers (i.e. `startup` and `shutdown`) for
    the app, see: https://fastapi.tiangolo.com/advanced/testing-events/
    """
    app.dependency_overrides[get_resolver] = lambda: resolver
    yield TestClient(app)
    app.dependency_overrides.clear()
