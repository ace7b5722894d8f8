"""Icon endpoint"""

import logging

from fastapi import APIRouter, Depends
from starlette.responses import Response

from favicache.configs import settings
from favicache.icons import get_resolver
from favicache.icons.resolver import IconResolver

logger = logging.getLogger(__name__)
router = APIRouter()

CACHE_MAX_AGE = settings.web.icons.cache_max_age


@router.get(
    "/{domain}/icon.png",
    tags=["icons"],
    summary="Favicon for a domain",
    response_class=Response,
)
async def icon(domain: str, resolver: IconResolver = Depends(get_resolver)) -> Response:
    """Return the icon of `domain`, or a fallback image when none can be found.

    Resolution failures never surface as errors, so the response is always a 200
    that clients may cache for a long time.
    """
    content_type, content = await resolver.resolve_icon_response(domain)
    return Response(
        content=content,
        media_type=content_type,
        headers={"Cache-Control": f"public, max-age={CACHE_MAX_AGE}"},
    )
