"""API tests for the chat and cache routes."""
import pytest
from fastapi.testclient import TestClient

from examprep.cache import ResponseCache
from examprep.config.settings import Settings
from examprep.schemas.schemas import ChatRequest
from examprep.services.generation_client import GenerationError
from main import create_app


class FakeGenerationClient:
    def __init__(self, reply="Photosynthesis is...", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def generate(self, message, model=None, language=None, system_prompt=None):
        self.calls.append(
            {"message": message, "model": model, "language": language, "system_prompt": system_prompt}
        )
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def cache(clock):
    return ResponseCache(capacity=10, ttl_ms=300_000, clock=clock)


@pytest.fixture
def generation_client():
    return FakeGenerationClient()


@pytest.fixture
def client(cache, generation_client):
    app = create_app(settings=Settings(), cache=cache, client=generation_client)
    return TestClient(app)


def test_root_and_health(client):
    assert client.get("/").json()["status"] == "operational"
    assert client.get("/health").json() == {"status": "healthy", "cache_entries": 0}


def test_app_state_holds_injected_cache(cache, generation_client):
    app = create_app(settings=Settings(), cache=cache, client=generation_client)
    assert app.state.response_cache is cache
    assert app.state.generation_client is generation_client


def test_chat_miss_then_hit(client, generation_client):
    body = {"message": "Explain photosynthesis", "model": "sonar-pro", "language": "en"}

    first = client.post("/api/ai/chat", json=body)
    second = client.post("/api/ai/chat", json=body)

    assert first.status_code == 200
    assert first.json() == {"response": "Photosynthesis is..."}
    assert second.status_code == 200
    assert second.json() == {"response": "Photosynthesis is...", "cached": True}
    assert len(generation_client.calls) == 1


def test_chat_language_is_part_of_the_key(client, generation_client):
    client.post("/api/ai/chat", json={"message": "Explain photosynthesis", "model": "sonar-pro", "language": "en"})
    response = client.post(
        "/api/ai/chat", json={"message": "Explain photosynthesis", "model": "sonar-pro", "language": "hi"}
    )

    assert response.json() == {"response": "Photosynthesis is..."}
    assert len(generation_client.calls) == 2
    assert generation_client.calls[1]["language"] == "hi"


def test_chat_accepts_camel_case_fields(client, generation_client):
    client.post(
        "/api/ai/chat",
        json={"message": "Hi", "model": "m1", "language": "en", "systemPrompt": "Be brief."},
    )
    assert generation_client.calls[0]["system_prompt"] == "Be brief."


def test_chat_requires_message(client, cache, generation_client):
    response = client.post("/api/ai/chat", json={"model": "m1", "language": "en"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Message is required"
    assert generation_client.calls == []
    assert cache.size() == 0


def test_chat_text_only_input_is_not_cached(client, cache, generation_client):
    body = {"message": "Hi", "model": "m1", "language": "en", "inputType": "textOnly"}

    response = client.post("/api/ai/chat", json=body)

    assert response.status_code == 200
    assert response.json() == {"response": None}
    assert generation_client.calls == []
    assert cache.size() == 0


def test_chat_upstream_error_is_reported_and_not_cached(cache):
    failing = FakeGenerationClient(error=GenerationError("Rate limit exceeded.", status_code=429))
    client = TestClient(create_app(settings=Settings(), cache=cache, client=failing))
    body = {"message": "Hi", "model": "m1", "language": "en"}

    first = client.post("/api/ai/chat", json=body)
    second = client.post("/api/ai/chat", json=body)

    assert first.status_code == 429
    assert first.json()["detail"] == "Rate limit exceeded."
    assert second.status_code == 429
    assert len(failing.calls) == 2
    assert cache.size() == 0


def test_chat_entry_expires(client, clock, generation_client):
    body = {"message": "Hi", "model": "m1", "language": "en"}
    client.post("/api/ai/chat", json=body)

    clock.advance(300_001)
    response = client.post("/api/ai/chat", json=body)

    assert response.json() == {"response": "Photosynthesis is..."}
    assert len(generation_client.calls) == 2


def test_cache_stats_clear_and_prune(client, clock):
    client.post("/api/ai/chat", json={"message": "q1", "model": "m1", "language": "en"})
    client.post("/api/ai/chat", json={"message": "q1", "model": "m1", "language": "en"})
    client.post("/api/ai/chat", json={"message": "q2", "model": "m1", "language": "en"})

    stats = client.get("/api/cache/stats").json()
    assert stats["size"] == 2
    assert stats["capacity"] == 10
    assert stats["ttl_ms"] == 300_000
    assert stats["hits"] == 1
    assert stats["misses"] == 2

    clock.advance(300_001)
    assert client.post("/api/cache/prune").json() == {"removed": 2}

    client.post("/api/ai/chat", json={"message": "q3", "model": "m1", "language": "en"})
    assert client.delete("/api/cache").json() == {"cleared": 1}
    assert client.get("/api/cache/stats").json()["size"] == 0


def test_chat_accepts_non_string_fields(client, cache, generation_client):
    body = {"message": "Hi", "model": 5, "language": ["en"]}

    first = client.post("/api/ai/chat", json=body)
    second = client.post("/api/ai/chat", json=body)

    assert first.status_code == 200
    assert first.json() == {"response": "Photosynthesis is..."}
    assert second.json() == {"response": "Photosynthesis is...", "cached": True}
    assert cache.size() == 1
    assert cache.get("Hi", "5", "['en']") == "Photosynthesis is..."
    assert generation_client.calls[0]["model"] == "5"
    assert len(generation_client.calls) == 1


def test_chat_request_stringifies_wrong_typed_fields():
    request = ChatRequest(message=42, model=5, language=None)
    assert request.message == "42"
    assert request.model == "5"
    assert request.language is None
