# mcp_auth_core/oauth/http.py
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx

DEFAULT_HTTP_TIMEOUT_SECONDS = 10.0


@asynccontextmanager
async def http_client_scope(
    http_client: Optional[httpx.AsyncClient] = None,
    timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
) -> AsyncIterator[httpx.AsyncClient]:
    """
    Yields the injected client untouched, or a short-lived client with
    `timeout` that is closed when the block exits.
    """
    if http_client is not None:
        yield http_client
    else:
        async with httpx.AsyncClient(timeout=timeout) as client:
            yield client
