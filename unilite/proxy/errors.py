from typing import Optional


class ProxyError(Exception):
    """Base class for failures reported to the proxy caller."""

    status_code = 500

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class MissingTargetError(ProxyError):
    status_code = 400

    def __init__(self, message: str = "URL required"):
        super().__init__(message)


class OriginTransportError(ProxyError):
    """DNS, connect, TLS or transfer failure, or an origin 5xx."""

    status_code = 502


class OriginTimeoutError(OriginTransportError):
    status_code = 504


class EmptyOriginResponseError(OriginTransportError):
    def __init__(self, target_url: str):
        super().__init__(f"Empty response from origin for {target_url}")
