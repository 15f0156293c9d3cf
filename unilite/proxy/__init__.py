from .errors import (
    ProxyError,
    MissingTargetError,
    OriginTransportError,
    OriginTimeoutError,
    EmptyOriginResponseError,
)
from .handler import ProxyHandler, ProxyRequest, ProxyResult, resolve_target_url

__all__ = [
    "ProxyError",
    "MissingTargetError",
    "OriginTransportError",
    "OriginTimeoutError",
    "EmptyOriginResponseError",
    "ProxyHandler",
    "ProxyRequest",
    "ProxyResult",
    "resolve_target_url",
]
