import logging
from typing import Dict, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_CONNECT = 10.0
DEFAULT_TIMEOUT_READ = 30.0


def get_async_http_client(
    base_url: str,
    headers: Optional[Dict[str, str]] = None,
    connect_timeout: float = None,
    read_timeout: float = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """
    Returns a configured httpx.AsyncClient with:
    - Default timeouts (connect and read), so no provider call can block a tick forever.
    - The given base URL and headers.
    """
    c_timeout = connect_timeout if connect_timeout is not None else DEFAULT_TIMEOUT_CONNECT
    r_timeout = read_timeout if read_timeout is not None else DEFAULT_TIMEOUT_READ

    timeout = httpx.Timeout(r_timeout, connect=c_timeout)

    # No retries here: a failed call is retried by the next tick.
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=timeout,
        headers=headers or {},
        follow_redirects=True,
        transport=transport,
    )
