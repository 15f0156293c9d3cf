from .pipeline import HtmlTransformPipeline, transform
from .document import assemble_document
from .urls import build_proxy_url, unwrap_proxy_url, resolve_url

__all__ = [
    "HtmlTransformPipeline",
    "transform",
    "assemble_document",
    "build_proxy_url",
    "unwrap_proxy_url",
    "resolve_url",
]
