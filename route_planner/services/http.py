# route_planner/services/http.py
from typing import Any, Optional

import httpx

from route_planner.core.config import settings


async def send_request(
    method: str,
    url: str,
    *,
    client: Optional[httpx.AsyncClient] = None,
    timeout: Optional[float] = None,
    **kwargs: Any,
) -> httpx.Response:
    """
    Issue one HTTP request with the shared User-Agent.

    Uses `client` when given (tests pass one with a mock transport),
    otherwise opens a short-lived AsyncClient.
    """
    headers = {"User-Agent": settings.USER_AGENT}
    headers.update(kwargs.pop("headers", None) or {})

    if client is not None:
        return await client.request(method, url, headers=headers, **kwargs)

    async with httpx.AsyncClient(timeout=timeout or settings.HTTP_TIMEOUT_SECONDS) as session:
        return await session.request(method, url, headers=headers, **kwargs)
