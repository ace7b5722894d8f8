"""A utility module for log data creation"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel
from starlette.datastructures import Headers
from starlette.requests import Request
from starlette.types import Message


class LogDataModel(BaseModel):
    """Fields shared by the request summary logs and the icon request logs."""

    errno: int
    time: datetime
    path: str
    method: str
    code: int

    def model_dump(self, **kwargs) -> dict[str, Any]:
        """Convert the datetime type to an iso-formatted string."""
        d: dict[str, Any] = super().model_dump(**kwargs)
        if d.get("time"):
            d["time"] = d["time"].isoformat()
        return d


class RequestSummaryLogDataModel(LogDataModel):
    """Log metadata specific to Request Summary."""

    agent: Optional[str] = None
    lang: Optional[str] = None
    querystring: dict[str, Any]


class IconLogDataModel(LogDataModel):
    """Log metadata specific to icon requests."""

    domain: str
    rid: Optional[str] = None  # Provided by the asgi-correlation-id middleware.
    agent: Optional[str] = None
    content_length: Optional[int] = None


def create_request_summary_log_data(
    request: Request, message: Message, dt: datetime
) -> RequestSummaryLogDataModel:
    """Create log data for API endpoints."""
    return RequestSummaryLogDataModel(
        errno=0,
        time=dt,
        agent=request.headers.get("User-Agent"),
        path=request.url.path,
        method=request.method,
        lang=request.headers.get("Accept-Language"),
        querystring=dict(request.query_params),
        code=message["status"],
    )


def create_icon_log_data(
    request: Request, message: Message, dt: datetime, domain: str
) -> IconLogDataModel:
    """Create log data for the icon endpoint."""
    response_headers = Headers(scope=message)
    content_length: str = response_headers.get("content-length", "")

    return IconLogDataModel(
        errno=0,
        time=dt,
        path=request.url.path,
        method=request.method,
        code=message["status"],
        domain=domain,
        rid=response_headers.get("X-Request-ID"),
        agent=request.headers.get("User-Agent"),
        content_length=int(content_length) if content_length.isdigit() else None,
    )
