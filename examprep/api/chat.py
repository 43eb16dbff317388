from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, HTTPException

from examprep.cache import ResponseCache, with_cache
from examprep.schemas.schemas import ChatRequest, ChatResponse
from examprep.services.generation_client import GenerationClient, GenerationError


def create_chat_router(cache: ResponseCache, client: GenerationClient) -> APIRouter:
    """Build the AI chat router around one shared cache and generation client."""
    router = APIRouter(prefix="/api/ai", tags=["chat"])

    def generate_reply(request: ChatRequest) -> Dict[str, Any]:
        if not request.message:
            raise HTTPException(status_code=400, detail="Message is required")

        # Text-only input skips generation; a null response is never cached
        if request.input_type == "textOnly":
            return {"response": None}

        try:
            reply = client.generate(
                request.message,
                model=request.model,
                language=request.language,
                system_prompt=request.system_prompt,
            )
        except GenerationError as e:
            raise HTTPException(status_code=e.status_code, detail=e.message) from e

        return {"response": reply}

    cached_reply = with_cache(generate_reply, cache)

    @router.post("/chat", response_model=ChatResponse, response_model_exclude_unset=True)
    def chat(request: ChatRequest):
        """Answer a student's message, serving repeats from the response cache."""
        return cached_reply(request)

    return router
