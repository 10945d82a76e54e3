"""Async HTTP helpers using ``httpx``."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from genai_tokens.api._exceptions import APIError, RateLimitError
from genai_tokens.api._http import (
    NO_RETRY,
    RetryConfig,
    _parse_retry_after,
    _should_retry,
    _wait_time,
)

logger = logging.getLogger(__name__)


def _raise_for_status_httpx(r: httpx.Response) -> None:
    if r.is_success:
        return
    try:
        body: dict[str, Any] | str = r.json()
    except Exception:
        body = r.text
    if r.status_code == 429:
        raise RateLimitError(r.status_code, body, _parse_retry_after(r.headers.get("Retry-After")))
    raise APIError(r.status_code, body)


def _json_body_httpx(r: httpx.Response) -> dict[str, Any]:
    if not r.content:
        return {}
    return r.json()


async def async_send(
    method: str,
    url: str,
    headers: dict[str, str],
    *,
    payload: dict[str, Any] | None = None,
    params: dict[str, Any] | None = None,
    timeout: int = 60,
    retry: RetryConfig | None = None,
) -> httpx.Response:
    """Send a request asynchronously and return the raw response."""
    config = retry or NO_RETRY
    last_exc: APIError | None = None
    for attempt in range(config.max_retries + 1):
        if attempt > 0 and last_exc is not None:
            retry_after = getattr(last_exc, "retry_after", None)
            wait = _wait_time(attempt, config, retry_after)
            logger.warning(
                "HTTP %s from %s %s, retrying in %.1fs (attempt %d/%d)",
                last_exc.status_code,
                method,
                url,
                wait,
                attempt,
                config.max_retries,
            )
            await asyncio.sleep(wait)
        try:
            logger.debug("%s %s", method, url)
            async with httpx.AsyncClient() as client:
                r = await client.request(
                    method, url, headers=headers, json=payload, params=params, timeout=timeout
                )
                _raise_for_status_httpx(r)
                return r
        except APIError as exc:
            last_exc = exc
            if not _should_retry(exc.status_code, attempt, config):
                raise
    raise last_exc  # type: ignore[misc]


async def async_post_json(
    url: str,
    headers: dict[str, str],
    payload: dict[str, Any],
    timeout: int = 60,
    retry: RetryConfig | None = None,
) -> dict[str, Any]:
    """POST JSON asynchronously and return the parsed response."""
    r = await async_send("POST", url, headers, payload=payload, timeout=timeout, retry=retry)
    return _json_body_httpx(r)
