"""
Exam-prep chat API
Builds the process-wide response cache and generation client, then mounts
the chat and cache routers around them.
"""
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from examprep import __version__
from examprep.api.cache_admin import create_cache_admin_router
from examprep.api.chat import create_chat_router
from examprep.cache import ResponseCache
from examprep.config.settings import Settings, get_settings
from examprep.services.generation_client import GenerationClient


def create_app(
    settings: Optional[Settings] = None,
    cache: Optional[ResponseCache] = None,
    client: Optional[GenerationClient] = None,
) -> FastAPI:
    """Create the FastAPI app; one cache and one client per app instance."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if cache is None:
        cache = ResponseCache(
            capacity=settings.response_cache_capacity,
            ttl_ms=settings.response_cache_ttl_ms,
        )
    if client is None:
        client = GenerationClient(
            api_url=settings.perplexity_api_url,
            api_key=settings.perplexity_api_key,
            timeout=settings.generation_timeout_seconds,
            default_model=settings.default_chat_model,
        )

    app = FastAPI(
        title="Exam Prep Chat API",
        description="Exam preparation assistant with a bounded TTL response cache",
        version=__version__,
    )
    app.state.response_cache = cache
    app.state.generation_client = client

    # CORS config for frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(create_chat_router(cache, client))
    app.include_router(create_cache_admin_router(cache))

    @app.get("/")
    def root():
        """API health check and basic info"""
        return {
            "message": "Exam prep chat API is running",
            "version": __version__,
            "status": "operational",
            "docs": "/docs",
            "endpoints": {
                "chat": "/api/ai/chat",
                "cache_stats": "/api/cache/stats",
                "cache_clear": "/api/cache",
                "cache_prune": "/api/cache/prune",
            },
        }

    @app.get("/health")
    def health_check():
        """Simple health endpoint"""
        return {"status": "healthy", "cache_entries": cache.size()}

    return app


app = create_app()


# Run with:
#   uvicorn main:app --reload --port 8000
