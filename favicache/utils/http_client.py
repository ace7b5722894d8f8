"""A helper to create asynchronous HTTP client (via `httpx.AsyncClient`)
with common configurations.
"""

from httpx import AsyncClient, Limits, Timeout


def create_http_client(
    headers: dict[str, str] | None = None,
    max_connections: int = 100,
    connect_timeout: float = 10.0,
    request_timeout: float = 10.0,
    pool_timeout: float = 1.0,
    follow_redirects: bool = False,
) -> AsyncClient:
    """Create a new `httpx.AsyncClient` with common configurations.

    The client is meant to be built once at startup and shared by every request, so that
    all outbound traffic goes through a single connection pool.

    Args:
      - `headers` {dict[str, str] | None}: Default headers attached to every request.
      - `max_connections` {int}: Max connections of the connection pool.
      - `connect_timeout` {float}: The timeout for establishing a connection to the host.
      - `request_timeout` {float}: The timeout for handling a request to the host.
      - `pool_timeout` {float}: The timeout for acquiring a connection from the pool.
      - `follow_redirects` {bool}: Whether httpx follows redirects on its own. Callers that
        need to inspect every hop (e.g. to re-check the target host) leave this off.
    Returns:
      - {AsyncClient}: An async HTTP client.
    """
    return AsyncClient(
        headers=headers,
        limits=Limits(max_connections=max_connections),
        timeout=Timeout(request_timeout, connect=connect_timeout, pool=pool_timeout),
        follow_redirects=follow_redirects,
    )
