"""Initialize the icon resolver"""

import logging

import httpx

from favicache.configs import settings
from favicache.icons.models import IconConfig
from favicache.icons.resolver import IconResolver
from favicache.metrics import get_metrics_client

logger = logging.getLogger(__name__)

resolver: IconResolver | None = None
http_client: httpx.AsyncClient | None = None


async def init_resolver() -> None:
    """Initialize the icon resolver and the HTTP client it shares across requests.

    This should only be called once at the startup of application.
    """
    global resolver, http_client

    config = IconConfig.from_settings(settings.icons)
    http_client = IconResolver.create_http_client(config)
    resolver = IconResolver.from_config(config, http_client, get_metrics_client())

    logger.info(
        "Icon resolver initialization completed",
        extra={
            "cache_dir": str(config.cache_dir),
            "disable_download": config.disable_download,
            "blacklist_non_global_ips": config.blacklist_non_global_ips,
        },
    )


async def shutdown_resolver() -> None:
    """Close the shared HTTP client."""
    global resolver, http_client

    if http_client is not None:
        await http_client.aclose()
    http_client = None
    resolver = None


def get_resolver() -> IconResolver:
    """Return the icon resolver"""
    if resolver is None:
        raise ValueError("Icon resolver has not been initialized.")
    return resolver
