"""Shared HTTP helpers used by the updaters.

Encapsulates retries, timeouts and a small in-memory response cache so the
updaters only see "a parsed document" or a FetchError. This module is
dependency-light and can be safely imported by every updater without cycles.
"""
from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, Optional, Tuple

import requests

from constants import Constants
from errors import FetchError
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)

Response = Tuple[int, Dict[str, str], Any]

# url/headers -> (response tuple, stored-at)
_http_cache: Dict[str, Tuple[Response, float]] = {}


def _trace(message: str, **fields: Any) -> None:
    """Emit a structured DEBUG record for the http_client component."""
    if is_debug_enabled(logger):
        logger.debug(message, extra=extra_context(component="http_client", **fields))


def _cache_key(kind: str, url: str, headers: Optional[Dict[str, str]]) -> str:
    headers_str = str(sorted(headers.items())) if headers else ""
    return f"{kind}:{url}:{headers_str}"


def _cached(key: str) -> Optional[Response]:
    entry = _http_cache.get(key)
    if entry is None:
        return None
    response, stored_at = entry
    if time.time() - stored_at >= Constants.HTTP_CACHE_TTL_SEC:
        del _http_cache[key]
        return None
    return response


def clear_cache() -> None:
    """Drop every cached response."""
    _http_cache.clear()


def _request_headers(headers: Optional[Dict[str, str]]) -> Dict[str, str]:
    merged = {"User-Agent": Constants.USER_AGENT}
    if headers:
        merged.update(headers)
    return merged


def robust_get(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    binary: bool = False,
    **kwargs: Any
) -> Response:
    """GET with timeout, exponential-backoff retries on 5xx/transport errors, and caching.

    Only successful text responses are cached; binary bodies (installer jars)
    are returned without being retained.

    Returns:
        Tuple of (status_code, headers_dict, body). The body is text, or bytes
        when ``binary`` is set. A status of 0 means every attempt failed and the
        body carries the last failure reason.
    """
    key = _cache_key("bytes" if binary else "text", url, headers)
    target = safe_url(url)

    hit = _cached(key)
    if hit is not None:
        _trace("HTTP cache hit", event="cache_hit", action="GET", target=target)
        return hit

    failure = "no attempt made"
    for attempt in range(1, Constants.HTTP_RETRY_MAX + 1):
        if attempt > 1:
            time.sleep(Constants.HTTP_RETRY_BASE_DELAY_SEC * (2 ** (attempt - 2)))
        _trace("HTTP request", event="http_request", action="GET", target=target, attempt=attempt)
        with Timer() as timer:
            try:
                response = requests.get(
                    url,
                    timeout=Constants.REQUEST_TIMEOUT,
                    headers=_request_headers(headers),
                    **kwargs
                )
            except requests.Timeout:
                failure = "timeout"
            except requests.RequestException as exc:
                failure = str(exc)
            else:
                if response.status_code < 500:
                    result = (
                        response.status_code,
                        dict(response.headers),
                        response.content if binary else response.text,
                    )
                    if not binary and response.status_code == 200:
                        _http_cache[key] = (result, time.time())
                    _trace(
                        "HTTP response",
                        event="http_response",
                        action="GET",
                        status_code=response.status_code,
                        duration_ms=timer.duration_ms(),
                        target=target,
                    )
                    return result
                failure = f"status {response.status_code}"
        _trace("HTTP attempt failed", event="http_exception", action="GET", outcome=failure, attempt=attempt, target=target)

    logger.warning("GET %s failed after %d attempts: %s", target, Constants.HTTP_RETRY_MAX, failure)
    return 0, {}, f"Request failed after {Constants.HTTP_RETRY_MAX} attempts: {failure}"


def get_json(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any
) -> Tuple[int, Dict[str, str], Optional[Any]]:
    """GET and decode a JSON body.

    Returns:
        Tuple of (status_code, headers_dict, parsed_json_or_none)
    """
    status_code, response_headers, text = robust_get(url, headers=headers, **kwargs)
    if status_code != 200 or not text:
        return status_code, response_headers, None
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        _trace("JSON decode error", event="parse", action="get_json", outcome="json_decode_error", target=safe_url(url))
        return status_code, response_headers, None
    return status_code, response_headers, parsed


def fetch_json(url: str, *, context: str, **kwargs: Any) -> Any:
    """Return the parsed JSON document at ``url`` or raise FetchError."""
    status_code, _, parsed = get_json(url, **kwargs)
    if status_code != 200:
        raise FetchError(url, context, status_code)
    if parsed is None:
        raise FetchError(url, context, status_code, "response body is not JSON")
    return parsed


def fetch_bytes(url: str, *, context: str, **kwargs: Any) -> bytes:
    """Return the raw response body at ``url`` or raise FetchError."""
    status_code, _, body = robust_get(url, binary=True, **kwargs)
    if status_code != 200:
        detail = body if status_code == 0 else ""
        raise FetchError(url, context, status_code, detail)
    return body
