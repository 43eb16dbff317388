import pytest

from examprep.config.settings import DEFAULT_CORS_ORIGINS, get_settings

ENV_VARS = [
    "PERPLEXITY_API_KEY",
    "PERPLEXITY_API_URL",
    "DEFAULT_CHAT_MODEL",
    "GENERATION_TIMEOUT_SECONDS",
    "RESPONSE_CACHE_CAPACITY",
    "RESPONSE_CACHE_TTL_MS",
    "LOG_LEVEL",
    "CORS_ORIGINS",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = get_settings()
    assert settings.perplexity_api_url == "https://api.perplexity.ai/chat/completions"
    assert settings.default_chat_model == "sonar-pro"
    assert settings.response_cache_capacity == 1000
    assert settings.response_cache_ttl_ms == 300_000
    assert settings.generation_timeout_seconds == 60
    assert settings.log_level == "INFO"
    assert settings.cors_origins == DEFAULT_CORS_ORIGINS


def test_overrides(monkeypatch):
    monkeypatch.setenv("PERPLEXITY_API_KEY", "pplx-123")
    monkeypatch.setenv("RESPONSE_CACHE_CAPACITY", "50")
    monkeypatch.setenv("RESPONSE_CACHE_TTL_MS", "1000")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example")

    settings = get_settings()

    assert settings.perplexity_api_key == "pplx-123"
    assert settings.response_cache_capacity == 50
    assert settings.response_cache_ttl_ms == 1000
    assert settings.log_level == "DEBUG"
    assert settings.cors_origins == ["https://a.example", "https://b.example"]


def test_bad_integer_names_the_variable(monkeypatch):
    monkeypatch.setenv("RESPONSE_CACHE_CAPACITY", "lots")

    with pytest.raises(ValueError, match="RESPONSE_CACHE_CAPACITY"):
        get_settings()
