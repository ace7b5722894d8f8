# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

"""Integration tests for the dockerflow endpoints."""

import logging

import pytest
from fastapi.testclient import TestClient
from pytest import LogCaptureFixture
from pytest_mock import MockerFixture

from favicache.icons.resolver import IconResolver
from favicache.utils.version import Version
from tests.conftest import FilterCaplogFixture


@pytest.mark.parametrize("endpoint", ["__heartbeat__", "__lbheartbeat__"])
def test_heartbeats(client: TestClient, endpoint: str) -> None:
    """Test that the heartbeat endpoints return an empty body."""
    response = client.get(f"/{endpoint}")

    assert response.status_code == 200
    assert response.content == b""


def test_heartbeat_creates_cache_directory(client: TestClient, resolver: IconResolver) -> None:
    """Test that the heartbeat leaves a usable cache directory behind."""
    client.get("/__heartbeat__")

    assert resolver.cache.cache_dir.is_dir()
    assert list(resolver.cache.cache_dir.iterdir()) == []


def test_heartbeat_cache_not_writable(
    client: TestClient, resolver: IconResolver, mocker: MockerFixture
) -> None:
    """Test that an unwritable icon cache fails the heartbeat."""
    mocker.patch.object(resolver.cache, "is_writable", return_value=False)

    response = client.get("/__heartbeat__")

    assert response.status_code == 503
    assert response.json() == {"status": "error", "checks": {"icon_cache": "not writable"}}


def test_version(client: TestClient, mocker: MockerFixture) -> None:
    """Test that the version endpoint returns the content of version.json."""
    version = Version(
        source="https://github.com/example/favicache",
        version="dev",
        commit="0123456789abcdef",
        build="build-1",
    )
    mocker.patch("favicache.web.dockerflow.fetch_app_version_from_file", return_value=version)

    response = client.get("/__version__")

    assert response.status_code == 200
    assert response.json() == {
        "source": "https://github.com/example/favicache",
        "version": "dev",
        "commit": "0123456789abcdef",
        "build": "build-1",
    }


def test_version_missing_file(client: TestClient, mocker: MockerFixture) -> None:
    """Test that a missing version.json yields a server error."""
    mocker.patch(
        "favicache.web.dockerflow.fetch_app_version_from_file", side_effect=FileNotFoundError
    )

    response = client.get("/__version__")

    assert response.status_code == 500


def test_request_summary_log(
    caplog: LogCaptureFixture, filter_caplog: FilterCaplogFixture, client: TestClient
) -> None:
    """Test that non-icon requests are logged to the request summary."""
    caplog.set_level(logging.INFO)

    client.get("/__heartbeat__?probe=1", headers={"Accept-Language": "en-US"})

    records = filter_caplog(caplog.records, "request.summary")
    assert len(records) == 1
    record = records[0]
    assert record.__dict__["path"] == "/__heartbeat__"
    assert record.__dict__["querystring"] == {"probe": "1"}
    assert record.__dict__["lang"] == "en-US"
    assert record.__dict__["code"] == 200
