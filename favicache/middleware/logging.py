"""The middleware that records access logs for favicache."""

import logging
import re
import time
from datetime import datetime
from typing import Pattern

from starlette.requests import Request
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from favicache.utils.log_data_creators import (
    IconLogDataModel,
    RequestSummaryLogDataModel,
    create_icon_log_data,
    create_request_summary_log_data,
)

# web.icons.request is used for logs coming from the icon endpoint
icon_request_logger = logging.getLogger("web.icons.request")
# all other requests will be logged to request.summary
logger = logging.getLogger("request.summary")

# The path pattern for the icon API
PATTERN: Pattern = re.compile(r"^/icons/(?P<domain>[^/]+)/icon\.png$")


class LoggingMiddleware:
    """An ASGI middleware for logging."""

    def __init__(self, app: ASGIApp) -> None:
        """Initialize the middleware and store the ASGI app instance."""
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        """Log requests."""
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                request = Request(scope=scope)
                dt: datetime = datetime.fromtimestamp(time.time())
                if match := PATTERN.match(request.url.path):
                    icon_log_data: IconLogDataModel = create_icon_log_data(
                        request, message, dt, match.group("domain")
                    )
                    icon_request_logger.info("", extra=icon_log_data.model_dump())
                else:
                    request_log_data: RequestSummaryLogDataModel = create_request_summary_log_data(
                        request, message, dt
                    )
                    logger.info("", extra=request_log_data.model_dump())

            await send(message)

        await self.app(scope, receive, send_wrapper)
        return
