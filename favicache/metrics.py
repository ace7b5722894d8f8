"""StatsD metrics for favicache.

One `aiodogstatsd.Client` is shared by the whole process. Every metric carries
the application and deployment environment as tags; in development the client
can log the datagrams it would send instead of sending them.
"""

import logging
from functools import cache
from typing import Mapping

import aiodogstatsd

from favicache.configs import settings

logger = logging.getLogger(__name__)

METRICS_NAMESPACE: str = "favicache"

# Type definition for tags in aiodogstatsd metrics
MetricTags = Mapping[str, float | int | str]


def get_constant_tags() -> MetricTags:
    """Return the tags attached to every metric."""
    return {
        "application": METRICS_NAMESPACE,
        "environment": settings.current_env.lower(),
    }


@cache
def get_metrics_client() -> aiodogstatsd.Client:
    """Return the process-wide StatsD client."""
    return aiodogstatsd.Client(
        host=settings.metrics.host,
        port=settings.metrics.port,
        namespace=METRICS_NAMESPACE,
        constant_tags=get_constant_tags(),
    )


async def configure_metrics() -> None:
    """Connect the StatsD client at application startup."""
    client = get_metrics_client()
    if settings.metrics.dev_logger:
        client._protocol = _LocalDatagramLogger()
    await client.connect()
    logger.info(
        "Metrics client connected",
        extra={"dev_logger": settings.metrics.dev_logger, "host": settings.metrics.host},
    )


async def shutdown_metrics() -> None:
    """Flush and close the StatsD client at application shutdown."""
    await get_metrics_client().close()


class _LocalDatagramLogger(aiodogstatsd.client.DatagramProtocol):
    """Datagram protocol that logs each metric at debug level instead of sending it."""

    def send(self, data: bytes) -> None:
        logger.debug("sending metrics", extra={"data": data.decode("utf8")})

    def error_received(self, exc) -> None:
        logger.exception(exc)
