"""Sentry Configuration"""

import logging

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration
from sentry_sdk.types import Event, Hint

from favicache.configs import settings

logger = logging.getLogger(__name__)

REDACTED_TEXT = "[REDACTED]"

# Frame locals that can hold cookies set by remote sites.
SENSITIVE_FRAME_VARS: tuple[str, ...] = ("cookies", "page")


def configure_sentry() -> None:  # pragma: no cover
    """Configure and initialize Sentry integration."""
    if settings.sentry.mode == "disabled":
        return
    sentry_sdk.init(
        dsn=settings.sentry.dsn,
        integrations=[
            StarletteIntegration(),
            FastApiIntegration(),
        ],
        debug="debug" == settings.sentry.mode,
        before_send=strip_sensitive_data,
        environment=settings.sentry.env,
        traces_sample_rate=settings.sentry.traces_sample_rate,
    )
    logger.info("Sentry initialized", extra={"mode": settings.sentry.mode})


def strip_sensitive_data(event: Event, hint: Hint) -> Event | None:
    """Filter cookies captured from remote sites out of Sentry events."""
    #  See: https://docs.sentry.io/platforms/python/configuration/filtering/
    request = event.get("request", {})
    if request.get("cookies"):
        request["cookies"] = REDACTED_TEXT
    headers = request.get("headers", {})
    if isinstance(headers, dict) and "cookie" in {key.lower() for key in headers}:
        for key in list(headers):
            if key.lower() == "cookie":
                headers[key] = REDACTED_TEXT

    event_exception_values = event.get("exception", {}).get("values", [])
    for value in event_exception_values:
        for entry in value.get("stacktrace", {}).get("frames", []):
            vars = entry.get("vars", {})
            for name in SENSITIVE_FRAME_VARS:
                if name in vars:
                    vars[name] = REDACTED_TEXT

    return event
