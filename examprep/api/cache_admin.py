from __future__ import annotations

import logging

from fastapi import APIRouter

from examprep.cache import ResponseCache
from examprep.schemas.schemas import CacheClearResult, CachePruneResult, CacheStats

logger = logging.getLogger(__name__)


def create_cache_admin_router(cache: ResponseCache) -> APIRouter:
    router = APIRouter(prefix="/api/cache", tags=["cache"])

    @router.get("/stats", response_model=CacheStats)
    def get_cache_stats():
        """Current size, limits and hit/miss counters of the response cache."""
        return cache.stats()

    @router.delete("", response_model=CacheClearResult)
    def clear_cache():
        """Drop every cached response."""
        previous = cache.clear()
        logger.info(f"Response cache cleared ({previous} entries)")
        return {"cleared": previous}

    @router.post("/prune", response_model=CachePruneResult)
    def prune_cache():
        """Remove expired entries now instead of waiting for them to be read."""
        removed = cache.prune_expired()
        logger.info(f"Pruned {removed} expired response cache entries")
        return {"removed": removed}

    return router
