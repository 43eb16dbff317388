"""Wrap a chat handler so identical requests are answered from a ResponseCache."""
from __future__ import annotations

import functools
import inspect
import logging
from collections.abc import Mapping
from typing import Any, Callable, Tuple

from .ttl_cache import ResponseCache

logger = logging.getLogger(__name__)


def _request_fields(request: Any) -> Tuple[Any, Any, Any]:
    """Pull (message, model, language) from a dict or an attribute-style request.

    Missing fields come back as None so a malformed request simply misses.
    """
    if isinstance(request, Mapping):
        return request.get("message"), request.get("model"), request.get("language")
    return (
        getattr(request, "message", None),
        getattr(request, "model", None),
        getattr(request, "language", None),
    )


def _cached_payload(value: Any) -> dict:
    return {"response": value, "cached": True}


def _store_result(cache: ResponseCache, fields: Tuple[Any, Any, Any], payload: Any) -> None:
    if not isinstance(payload, Mapping):
        return
    if payload.get("response") and not payload.get("cached"):
        cache.set(*fields, payload["response"])


def with_cache(handler: Callable[[Any], Any], cache: ResponseCache) -> Callable[[Any], Any]:
    """Return ``handler`` fronted by ``cache``.

    On a hit the handler is not called and ``{"response": value, "cached": True}``
    is returned. On a miss the handler runs and its payload is returned as-is;
    a truthy ``response`` not already marked ``cached`` is copied into the cache.
    Exceptions from the handler propagate and nothing is stored.

    Coroutine handlers get a coroutine wrapper.
    """
    if inspect.iscoroutinefunction(handler):

        @functools.wraps(handler)
        async def async_wrapper(request: Any) -> Any:
            fields = _request_fields(request)
            cached = cache.get(*fields)
            if cached:
                logger.debug(f"Serving cached response for model={fields[1]} language={fields[2]}")
                return _cached_payload(cached)

            payload = await handler(request)
            _store_result(cache, fields, payload)
            return payload

        return async_wrapper

    @functools.wraps(handler)
    def wrapper(request: Any) -> Any:
        fields = _request_fields(request)
        cached = cache.get(*fields)
        if cached:
            logger.debug(f"Serving cached response for model={fields[1]} language={fields[2]}")
            return _cached_payload(cached)

        payload = handler(request)
        _store_result(cache, fields, payload)
        return payload

    return wrapper
