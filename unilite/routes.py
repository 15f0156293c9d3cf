import logging
import os
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request, status
from fastapi.responses import FileResponse, PlainTextResponse, Response

from unilite.cache import ResponseCache, cache_key
from unilite.proxy import (
    MissingTargetError,
    ProxyError,
    ProxyHandler,
    ProxyRequest,
    ProxyResult,
)
from unilite.session import OriginClientFactory, session_registry
from unilite.utils import mask_session
from unilite.utils.exception_logging import (
    format_exception_message,
    log_exception_with_details,
)
from unilite.vars import PROXY_PATH, STATIC_DIR

router = APIRouter()
logger = logging.getLogger("uvicorn.error")

sessions = session_registry()
client_factory = OriginClientFactory(sessions)
proxy_handler = ProxyHandler(sessions, client_factory)
response_cache = ResponseCache()

ORIGIN_STATUS_HEADER = "X-Origin-Status"
SESSION_STATE_HEADER = "X-Proxy-Session"

# Placeholder figures until stats are scraped from the origin
DEMO_STATS = {
    "attendance": "85%",
    "results": "GPA: 8.5",
    "fees": "Pending: 0",
}


def _index_response() -> FileResponse:
    return FileResponse(os.path.join(STATIC_DIR, "index.html"), media_type="text/html")


def _to_response(result: ProxyResult) -> Response:
    return Response(
        content=result.body,
        media_type=result.media_type,
        headers={
            ORIGIN_STATUS_HEADER: str(result.origin_status),
            SESSION_STATE_HEADER: result.session_state,
        },
    )


async def _run_proxy(proxy_request: ProxyRequest) -> Response:
    try:
        result = await proxy_handler.handle(proxy_request)
    except MissingTargetError as e:
        logger.warning(f"[Proxy] Rejected request without target: {e.message}")
        return PlainTextResponse(e.message, status_code=e.status_code)
    except ProxyError as e:
        log_exception_with_details(logger, f"[Proxy] Error for {proxy_request.url}:", e.cause or e)
        return PlainTextResponse(e.message, status_code=e.status_code)
    except Exception as e:
        log_exception_with_details(logger, f"[Proxy] Unexpected error for {proxy_request.url}:", e)
        return PlainTextResponse(
            f"Error connecting to origin: {format_exception_message(e)}",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return _to_response(result)


async def _form_proxy_request(request: Request, target_field: str = "url") -> ProxyRequest:
    form = await request.form()
    fields = [(k, v) for k, v in form.multi_items() if isinstance(v, str)]
    url = form.get(target_field) or request.query_params.get("url")
    session_id = form.get("sessionId") or request.query_params.get("sessionId")
    return ProxyRequest(
        url=url,
        session_id=session_id,
        method="POST",
        form=[(k, v) for k, v in fields if k != target_field],
    )


@router.get(PROXY_PATH)
async def proxy_get(
    url: Optional[str] = Query(None),
    session_id: Optional[str] = Query(None, alias="sessionId"),
):
    return await _run_proxy(ProxyRequest(url=url, session_id=session_id))


@router.post(PROXY_PATH)
async def proxy_post(request: Request):
    return await _run_proxy(await _form_proxy_request(request))


@router.post("/proxy-login")
async def proxy_login(request: Request):
    """Legacy login entry point; the target arrives as ``loginUrl``."""
    return await _run_proxy(await _form_proxy_request(request, target_field="loginUrl"))


@router.get("/", include_in_schema=False)
async def index():
    return _index_response()


@router.post("/", include_in_schema=False)
async def root_form(request: Request):
    # Forms that lost their action still carry the hidden proxy fields
    form = await request.form()
    if form.get("url"):
        return await _run_proxy(await _form_proxy_request(request))
    return _index_response()


@router.get("/sw.js", include_in_schema=False)
async def service_worker():
    # Served from the root so its scope covers /proxy
    return FileResponse(
        os.path.join(STATIC_DIR, "sw.js"), media_type="application/javascript"
    )


@router.get("/api/session/new")
async def create_session():
    session_id = sessions.create()
    return {"sessionId": session_id}


@router.get("/api/session/{session_id}")
async def get_session_info(session_id: str):
    session = sessions.get(session_id)
    if session is None:
        logger.info(mask_session(f"[Session] Lookup for unknown session {session_id}", session_id))
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    return session.to_dict()


@router.delete("/api/session/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def invalidate_session(session_id: str):
    sessions.invalidate(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/api/data")
async def get_data(
    user_id: str = Query("default", alias="userId"),
    data_type: Optional[str] = Query(None, alias="type"),
):
    if data_type not in DEMO_STATS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown data type: {data_type}",
        )
    key = cache_key(user_id, data_type)
    cached = response_cache.get(key)
    if cached is not None:
        return {"source": "cache", "data": cached}

    data = DEMO_STATS[data_type]
    response_cache.put(key, data)
    return {"source": "erp", "data": data}


@router.get("/api/cache/stats")
async def get_cache_stats():
    return response_cache.stats()
