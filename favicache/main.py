"""App startup point"""

import logging
from contextlib import asynccontextmanager

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI

from favicache import icons
from favicache.configs.app_configs.config_logging import configure_logging
from favicache.configs.app_configs.config_sentry import configure_sentry
from favicache.metrics import configure_metrics, shutdown_metrics
from favicache.middleware import logging as mw_logging
from favicache.web import dockerflow
from favicache.web import icons as web_icons

tags_metadata = [
    {
        "name": "icons",
        "description": "Favicons of arbitrary domains, cached on disk.",
    },
]

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Set up various configurations at startup and handle shutdown clean up.
    See lifespan events in fastAPI docs https://fastapi.tiangolo.com/advanced/events/
    """
    # Setup methods run before `yield` and cleanup methods after.
    configure_logging()
    configure_sentry()
    await configure_metrics()
    await icons.init_resolver()
    yield
    await icons.shutdown_resolver()
    await shutdown_metrics()


app = FastAPI(openapi_tags=tags_metadata, lifespan=lifespan)

# Note: `LoggingMiddleware` should be added after `CorrelationIdMiddleware`.
app.add_middleware(CorrelationIdMiddleware)
app.add_middleware(mw_logging.LoggingMiddleware)

app.include_router(dockerflow.router)
app.include_router(web_icons.router, prefix="/icons")


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000, proxy_headers=True)
