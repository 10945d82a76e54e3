"""Thin HTTP helpers around ``requests``."""

from __future__ import annotations

import contextlib
import logging
import time
from dataclasses import dataclass
from typing import Any

import requests

from genai_tokens.api._exceptions import APIError, RateLimitError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RetryConfig:
    """Configuration for automatic retries with exponential backoff."""

    max_retries: int = 3
    backoff_factor: float = 2.0
    retryable_codes: frozenset[int] = frozenset({429, 500, 502, 503, 504})


NO_RETRY = RetryConfig(max_retries=0)

BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
UPLOAD_URL = "https://generativelanguage.googleapis.com/upload/v1beta/files"


def api_headers(api_key: str) -> dict[str, str]:
    return {"x-goog-api-key": api_key, "Content-Type": "application/json"}


def _should_retry(status_code: int, attempt: int, config: RetryConfig) -> bool:
    return attempt < config.max_retries and status_code in config.retryable_codes


def _wait_time(attempt: int, config: RetryConfig, retry_after: float | None = None) -> float:
    if retry_after is not None and retry_after > 0:
        return retry_after
    return config.backoff_factor**attempt


def _parse_retry_after(raw: str | None) -> float | None:
    retry_after: float | None = None
    if raw is not None:
        with contextlib.suppress(ValueError, TypeError):
            retry_after = float(raw)
    return retry_after


def _raise_for_status(r: requests.Response) -> None:
    if not r.ok:
        try:
            body: dict[str, Any] | str = r.json()
        except Exception:
            body = r.text
        if r.status_code == 429:
            raise RateLimitError(
                r.status_code, body, _parse_retry_after(r.headers.get("Retry-After"))
            )
        raise APIError(r.status_code, body)


def _json_body(r: requests.Response) -> dict[str, Any]:
    # DELETE and some PATCH calls answer with an empty body.
    if not r.content:
        return {}
    return r.json()


def send(
    method: str,
    url: str,
    headers: dict[str, str],
    *,
    payload: dict[str, Any] | None = None,
    params: dict[str, Any] | None = None,
    data: bytes | None = None,
    timeout: int = 60,
    retry: RetryConfig | None = None,
) -> requests.Response:
    """Send a request and return the raw response, raising on HTTP errors."""
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
            time.sleep(wait)
        try:
            logger.debug("%s %s", method, url)
            r = requests.request(
                method,
                url,
                headers=headers,
                json=payload,
                params=params,
                data=data,
                timeout=timeout,
            )
            _raise_for_status(r)
            return r
        except APIError as exc:
            last_exc = exc
            if not _should_retry(exc.status_code, attempt, config):
                raise
    raise last_exc  # type: ignore[misc]


def post_json(
    url: str,
    headers: dict[str, str],
    payload: dict[str, Any],
    timeout: int = 60,
    retry: RetryConfig | None = None,
) -> dict[str, Any]:
    """POST JSON and return the parsed response, raising on HTTP errors."""
    r = send("POST", url, headers, payload=payload, timeout=timeout, retry=retry)
    return _json_body(r)


def get_json(
    url: str,
    headers: dict[str, str],
    params: dict[str, Any] | None = None,
    timeout: int = 60,
    retry: RetryConfig | None = None,
) -> dict[str, Any]:
    """GET and return the parsed response, raising on HTTP errors."""
    r = send("GET", url, headers, params=params, timeout=timeout, retry=retry)
    return _json_body(r)


def patch_json(
    url: str,
    headers: dict[str, str],
    payload: dict[str, Any],
    params: dict[str, Any] | None = None,
    timeout: int = 60,
    retry: RetryConfig | None = None,
) -> dict[str, Any]:
    """PATCH JSON and return the parsed response, raising on HTTP errors."""
    r = send("PATCH", url, headers, payload=payload, params=params, timeout=timeout, retry=retry)
    return _json_body(r)


def delete(
    url: str,
    headers: dict[str, str],
    timeout: int = 60,
    retry: RetryConfig | None = None,
) -> None:
    """DELETE a resource, raising on HTTP errors."""
    send("DELETE", url, headers, timeout=timeout, retry=retry)
