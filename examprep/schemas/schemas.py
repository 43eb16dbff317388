from pydantic import BaseModel, Field, field_validator
from typing import Any, Optional


# =========================
# CHAT SCHEMAS
# =========================
class ChatRequest(BaseModel):
    # Every field is optional so a malformed body still reaches the cache
    # and simply misses; the handler decides what is required.
    message: Optional[str] = None
    model: Optional[str] = None
    language: Optional[str] = None
    system_prompt: Optional[str] = Field(default=None, alias="systemPrompt")
    input_type: Optional[str] = Field(default=None, alias="inputType")

    model_config = {"populate_by_name": True}

    @field_validator("message", "model", "language", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Optional[str]:
        if value is None or isinstance(value, str):
            return value
        return str(value)


class ChatResponse(BaseModel):
    response: Optional[Any] = None
    cached: bool = False


# =========================
# CACHE ADMIN SCHEMAS
# =========================
class CacheStats(BaseModel):
    size: int
    capacity: int
    ttl_ms: int
    hits: int
    misses: int
    evictions: int
    expirations: int


class CacheClearResult(BaseModel):
    cleared: int


class CachePruneResult(BaseModel):
    removed: int
