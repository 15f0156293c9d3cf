import logging
from dataclasses import dataclass, field
from typing import Optional, Union
from urllib.parse import urlencode, urljoin, urlsplit

import httpx
from opentelemetry import trace

from unilite.session import OriginClientFactory, Session, SessionRegistryBase
from unilite.transform import HtmlTransformPipeline
from unilite.utils import mask_session
from unilite.utils.exception_logging import format_exception_message
from unilite.utils.traced_requests import traced_request
from unilite.vars import ORIGIN_BASE_URL
from .errors import (
    EmptyOriginResponseError,
    MissingTargetError,
    OriginTimeoutError,
    OriginTransportError,
)

logger = logging.getLogger("uvicorn.error")
tracer = trace.get_tracer(__name__)

# Proxy control parameters, never forwarded to the origin
CONTROL_PARAMS = frozenset({"url", "sessionId"})

SESSION_ACTIVE = "active"
SESSION_MISSING = "missing"
SESSION_UNKNOWN = "unknown"

HTML_MEDIA_TYPE = "text/html; charset=utf-8"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
LOGIN_MARKERS = ("password", "captcha")


@dataclass
class ProxyRequest:
    url: Optional[str]
    session_id: Optional[str] = None
    method: str = "GET"
    form: list[tuple[str, str]] = field(default_factory=list)

    def outbound_form(self) -> list[tuple[str, str]]:
        return [(k, v) for k, v in self.form if k not in CONTROL_PARAMS]


@dataclass
class ProxyResult:
    body: Union[bytes, str]
    media_type: str
    origin_status: int
    session_state: str
    final_url: str
    login_prompt: bool = False


def resolve_target_url(url: str, base_url: str = ORIGIN_BASE_URL) -> str:
    """Resolve an origin-relative target against the configured origin."""
    url = url.strip()
    if url.startswith("//"):
        return urljoin(base_url + "/", url)
    if url.startswith("/"):
        return f"{base_url.rstrip('/')}{url}"
    return url


def build_origin_headers(target_url: str, method: str) -> dict[str, str]:
    parts = urlsplit(target_url)
    headers = {"Referer": target_url}
    if parts.scheme and parts.netloc:
        headers["Origin"] = f"{parts.scheme}://{parts.netloc}"
    if method == "POST":
        headers["Content-Type"] = FORM_CONTENT_TYPE
    return headers


def looks_like_login_prompt(html: str) -> bool:
    lowered = html.lower()
    return any(marker in lowered for marker in LOGIN_MARKERS)


def targets_login(url: str) -> bool:
    return "login" in url.lower()


def is_image(content_type: str) -> bool:
    return "image" in content_type.lower()


class ProxyHandler:
    """
    Runs one proxy hop: resolve the target, fetch it with the session's
    cookie context, and hand back either the raw image or the rewritten page.

    Origin failures surface as ``ProxyError`` subclasses; nothing is retried.
    """

    def __init__(
        self,
        registry: SessionRegistryBase,
        client_factory: OriginClientFactory,
        pipeline: Optional[HtmlTransformPipeline] = None,
        base_url: str = ORIGIN_BASE_URL,
    ):
        self.registry = registry
        self.client_factory = client_factory
        self.pipeline = pipeline or HtmlTransformPipeline(base_url=base_url)
        self.base_url = base_url

    def _session_state(self, session_id: Optional[str], session: Optional[Session]) -> str:
        if session is not None:
            return SESSION_ACTIVE
        return SESSION_UNKNOWN if session_id else SESSION_MISSING

    async def handle(self, request: ProxyRequest) -> ProxyResult:
        if not request.url or not request.url.strip():
            raise MissingTargetError()

        method = request.method.upper()
        target_url = resolve_target_url(request.url, self.base_url)
        session = self.registry.get(request.session_id)
        session_state = self._session_state(request.session_id, session)

        with traced_request(
            tracer,
            operation="proxy_request",
            session_value=request.session_id,
            start_message=f"[Proxy] {method} {target_url} (session {request.session_id}, {session_state})",
            extra_attrs={
                "proxy.target_url": target_url,
                "proxy.method": method,
                "proxy.session_state": session_state,
            },
        ) as span:
            try:
                response = await self._fetch(session, request, method, target_url)
            except httpx.TimeoutException as e:
                span.set_attribute("proxy.error", "timeout")
                raise OriginTimeoutError(
                    f"Timed out contacting origin: {format_exception_message(e)}",
                    cause=e,
                ) from e
            except httpx.HTTPStatusError as e:
                span.set_attribute("proxy.error", "origin_status")
                span.set_attribute("proxy.origin_status", e.response.status_code)
                raise OriginTransportError(
                    f"Origin returned status {e.response.status_code}", cause=e
                ) from e
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                span.set_attribute("proxy.error", type(e).__name__)
                raise OriginTransportError(
                    f"Error connecting to origin: {format_exception_message(e)}",
                    cause=e,
                ) from e

            span.set_attribute("proxy.origin_status", response.status_code)
            content_type = response.headers.get("content-type", "")
            logger.info(
                f"[Proxy] Response for {target_url}: {response.status_code} "
                f"{content_type} ({len(response.content)} bytes)"
            )

            if not response.content:
                span.set_attribute("proxy.error", "empty_response")
                raise EmptyOriginResponseError(target_url)

            final_url = str(response.url)
            if is_image(content_type):
                return ProxyResult(
                    body=response.content,
                    media_type=content_type,
                    origin_status=response.status_code,
                    session_state=session_state,
                    final_url=final_url,
                )

            html = response.text
            login_prompt = looks_like_login_prompt(html) and not targets_login(target_url)
            if login_prompt:
                logger.warning(
                    mask_session(
                        f"[Proxy] Potential session issue for {target_url} "
                        f"(session {request.session_id}, {session_state})",
                        request.session_id,
                    )
                )

            cleaned = self.pipeline.transform(html, request.session_id, base_url=final_url)
            return ProxyResult(
                body=cleaned,
                media_type=HTML_MEDIA_TYPE,
                origin_status=response.status_code,
                session_state=session_state,
                final_url=final_url,
                login_prompt=login_prompt,
            )

    async def _fetch(
        self,
        session: Optional[Session],
        request: ProxyRequest,
        method: str,
        target_url: str,
    ) -> httpx.Response:
        headers = build_origin_headers(target_url, method)
        content = urlencode(request.outbound_form()) if method == "POST" else None

        async with self.client_factory.client_for_session(session) as client:
            if session is None:
                return await client.request(method, target_url, headers=headers, content=content)
            async with session.lock:
                return await client.request(method, target_url, headers=headers, content=content)
