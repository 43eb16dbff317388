"""Bounded TTL response cache with 5-minute expiry."""
from .ttl_cache import CacheEntry, ResponseCache
from .cache_key import generate_response_cache_key
from .with_cache import with_cache

__all__ = ["CacheEntry", "ResponseCache", "generate_response_cache_key", "with_cache"]
