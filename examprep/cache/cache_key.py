"""Cache key generation logic."""
import base64
from typing import Any


def _encode_message(message: Any) -> str:
    if message is None:
        message = ""
    elif not isinstance(message, str):
        message = str(message)
    return base64.b64encode(message.encode("utf-8")).decode("ascii")


def generate_response_cache_key(message: Any, model: Any, language: Any) -> str:
    """
    Generate a cache key for a generated chat response.

    Model and language stay readable; the message is base64-encoded so
    delimiter characters inside it cannot collide with another triple.

    Args:
        message: Raw message text sent by the student
        model: Upstream model identifier (e.g. 'sonar-pro')
        language: Language code of the requested answer (e.g. 'en', 'hi')

    Returns:
        Cache key string

    Example:
        >>> generate_response_cache_key("Hi", "sonar-pro", "en")
        "sonar-pro-en-SGk="
    """
    return f"{model}-{language}-{_encode_message(message)}"
