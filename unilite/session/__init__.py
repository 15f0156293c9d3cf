from .session import Session
from .registry import (
    SessionRegistryBase,
    InMemorySessionRegistry,
    session_registry,
)
from .client_factory import OriginClientFactory, DEFAULT_HEADERS

__all__ = [
    "Session",
    "SessionRegistryBase",
    "InMemorySessionRegistry",
    "session_registry",
    "OriginClientFactory",
    "DEFAULT_HEADERS",
]
