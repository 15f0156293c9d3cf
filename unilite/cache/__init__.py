from .response_cache import ResponseCache, cache_key

__all__ = ["ResponseCache", "cache_key"]
