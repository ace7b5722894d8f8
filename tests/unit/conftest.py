# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

"""Module for test configurations for the unit test directory."""

from pathlib import Path
from typing import Any, Callable

import httpx
import pytest
from pytest_mock import MockerFixture

from favicache.icons.models import IconConfig

Handler = Callable[[httpx.Request], httpx.Response]

# A payload comfortably above the minimum size accepted for an icon.
PNG_BYTES: bytes = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x10\x00\x00\x00\x10\x08\x06\x00\x00\x00"
    b"\x1f\xf3\xffa\x00\x00\x00\x00IEND\xaeB`\x82" + b"\x00" * 64
)


@pytest.fixture(name="png_bytes")
def fixture_png_bytes() -> bytes:
    """Return bytes standing in for a downloaded icon."""
    return PNG_BYTES


@pytest.fixture(name="cache_dir")
def fixture_cache_dir(tmp_path: Path) -> Path:
    """Return a cache directory that does not exist yet."""
    return tmp_path / "icon_cache"


@pytest.fixture(name="icon_config")
def fixture_icon_config(cache_dir: Path) -> IconConfig:
    """Return an icon configuration that skips DNS based blocking."""
    return IconConfig(
        cache_dir=cache_dir,
        cache_ttl=3600,
        cache_negttl=600,
        blacklist_non_global_ips=False,
        download_timeout=1.0,
    )


@pytest.fixture(name="metrics_client_mock")
def fixture_metrics_client_mock(mocker: MockerFixture) -> Any:
    """Create a StatsD client mock object for testing."""
    return mocker.MagicMock()


@pytest.fixture(name="mock_client")
def fixture_mock_client() -> Callable[[Handler], httpx.AsyncClient]:
    """Return a function that builds an async client answering with the given handler."""

    def mock_client(handler: Handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return mock_client
