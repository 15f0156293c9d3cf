"""Proxy URL construction shared by the transform steps."""

from typing import Optional
from urllib.parse import parse_qs, quote, urljoin, urlsplit

from unilite.vars import PROXY_PATH

SCRIPT_SCHEME = "javascript:"


def is_script_url(href: str) -> bool:
    return href.strip().lower().startswith(SCRIPT_SCHEME)


def is_fragment(href: str) -> bool:
    return href.startswith("#")


def is_proxy_endpoint(url: str) -> bool:
    parts = urlsplit(url)
    return not parts.scheme and not parts.netloc and parts.path == PROXY_PATH


def unwrap_proxy_url(url: str) -> str:
    """
    Return the origin target of a proxy URL, or ``url`` unchanged.

    Lets the pipeline run over its own output without nesting proxy URLs.
    """
    if not is_proxy_endpoint(url):
        return url
    target = parse_qs(urlsplit(url).query).get("url")
    return target[0] if target else url


def resolve_url(url: str, base_url: str) -> str:
    return urljoin(base_url, unwrap_proxy_url(url.strip()))


def build_proxy_url(absolute_url: str, session_id: Optional[str]) -> str:
    return (
        f"{PROXY_PATH}?url={quote(absolute_url, safe='')}"
        f"&sessionId={quote(session_id or '', safe='')}"
    )
