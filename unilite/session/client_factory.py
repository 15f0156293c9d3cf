import logging
from http.cookiejar import CookieJar
from typing import Optional

import httpx

from unilite.utils import mask_session
from unilite.vars import (
    ORIGIN_USER_AGENT,
    PROXY_CONNECT_TIMEOUT,
    PROXY_MAX_REDIRECTS,
    PROXY_TIMEOUT,
)
from .registry import SessionRegistryBase
from .session import Session

logger = logging.getLogger("uvicorn.error")

DEFAULT_HEADERS = {
    "User-Agent": ORIGIN_USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,"
    "image/avif,image/webp,image/apng,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


async def accept_deliverable_status(response: httpx.Response) -> None:
    """
    Treat every status below 500 as a deliverable page.

    401/403/404 bodies reach the transform pipeline so a logged-out page is
    recognisable by its content; only origin server errors abort the hop.
    """
    if response.status_code >= 500:
        await response.aread()
        raise httpx.HTTPStatusError(
            f"Origin returned {response.status_code} for {response.request.url}",
            request=response.request,
            response=response,
        )


class OriginClientFactory:
    """
    Vends httpx clients bound to a session's cookie context.

    The client shares the session's ``CookieJar`` instance, so cookies set on
    any response (redirect hops included) are visible to the next request made
    for the same session and never to another session.
    """

    def __init__(
        self,
        registry: SessionRegistryBase,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = PROXY_TIMEOUT,
        connect_timeout: float = PROXY_CONNECT_TIMEOUT,
        max_redirects: int = PROXY_MAX_REDIRECTS,
    ):
        self.registry = registry
        self.transport = transport
        self.timeout = httpx.Timeout(timeout, connect=connect_timeout)
        self.max_redirects = max_redirects

    def client_for(self, session_id: Optional[str]) -> httpx.AsyncClient:
        session = self.registry.get(session_id)
        if session is None and session_id:
            logger.info(
                mask_session(
                    f"[Session] Unknown session {session_id}, using anonymous client",
                    session_id,
                )
            )
        return self.client_for_session(session)

    def client_for_session(self, session: Optional[Session]) -> httpx.AsyncClient:
        # Anonymous clients get a throwaway jar that dies with the client
        jar = session.cookies if session is not None else CookieJar()
        return httpx.AsyncClient(
            cookies=jar,
            headers=DEFAULT_HEADERS,
            follow_redirects=True,
            max_redirects=self.max_redirects,
            timeout=self.timeout,
            transport=self.transport,
            event_hooks={"response": [accept_deliverable_status]},
        )
