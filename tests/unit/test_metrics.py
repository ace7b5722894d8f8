# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at http://mozilla.org/MPL/2.0/.

"""Unit tests for the metrics module."""

import logging

import aiodogstatsd
import pytest
from pytest import LogCaptureFixture

from favicache.metrics import (
    _LocalDatagramLogger,
    configure_metrics,
    get_constant_tags,
    get_metrics_client,
    shutdown_metrics,
)
from tests.conftest import FilterCaplogFixture


def test_get_metrics_client_is_memoized() -> None:
    """Test that the whole application shares one StatsD client."""
    client = get_metrics_client()

    assert isinstance(client, aiodogstatsd.Client)
    assert get_metrics_client() is client


@pytest.mark.asyncio
async def test_configure_metrics_dev_logger(
    caplog: LogCaptureFixture, filter_caplog: FilterCaplogFixture
) -> None:
    """Test that metrics are logged instead of sent when the dev logger is enabled."""
    caplog.set_level(logging.DEBUG)
    client = get_metrics_client()
    await configure_metrics()

    assert isinstance(client._protocol, _LocalDatagramLogger)

    client._protocol.send(b"favicache.icons.cache.hit:1|c")

    records = filter_caplog(caplog.records, "favicache.metrics")
    sent = [
        record.__dict__["data"] for record in records if record.getMessage() == "sending metrics"
    ]
    assert sent == ["favicache.icons.cache.hit:1|c"]
    await shutdown_metrics()


def test_constant_tags() -> None:
    """Test that every metric is tagged with the application and environment."""
    assert get_constant_tags() == {"application": "favicache", "environment": "testing"}
