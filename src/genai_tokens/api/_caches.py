"""Cached content: server-side context referenced by name."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from typing import Any

from genai_tokens.api._http import (
    BASE_URL,
    RetryConfig,
    api_headers,
    delete,
    get_json,
    patch_json,
    post_json,
)
from genai_tokens.api._models import _cache_name, normalize_model_name
from genai_tokens.api._types import CachedContent, Content, Tool
from genai_tokens.api._wire import (
    ContentsInput,
    content_to_wire,
    normalize_contents,
    parse_cached_content,
    system_instruction_to_content,
    tools_to_wire,
)

logger = logging.getLogger(__name__)


def _expiration(ttl_seconds: float | None, expire_time: str | None) -> dict[str, str]:
    if ttl_seconds is not None and expire_time is not None:
        raise ValueError("Pass either ttl_seconds or expire_time, not both")
    if ttl_seconds is not None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        seconds = int(ttl_seconds) if float(ttl_seconds).is_integer() else ttl_seconds
        return {"ttl": f"{seconds}s"}
    if expire_time is not None:
        return {"expireTime": expire_time}
    return {}


class CacheManager:
    """Client for the ``cachedContents`` resource."""

    def __init__(
        self,
        api_key: str,
        *,
        retry: RetryConfig | None = None,
        base_url: str = BASE_URL,
    ) -> None:
        self._retry = retry
        self._base_url = base_url.rstrip("/")
        self._headers = api_headers(api_key)

    def create(
        self,
        model: str,
        contents: ContentsInput,
        *,
        system_instruction: str | Content | None = None,
        tools: Sequence[Tool] | None = None,
        ttl_seconds: float | None = None,
        expire_time: str | None = None,
        display_name: str | None = None,
    ) -> CachedContent:
        """Store ``contents`` server-side and return the cache handle."""
        payload: dict[str, Any] = {
            "model": normalize_model_name(model),
            "contents": [content_to_wire(c) for c in normalize_contents(contents)],
            **_expiration(ttl_seconds, expire_time),
        }
        if system_instruction is not None:
            payload["systemInstruction"] = content_to_wire(
                system_instruction_to_content(system_instruction)
            )
        if tools:
            payload["tools"] = tools_to_wire(tools)
        if display_name:
            payload["displayName"] = display_name
        raw = post_json(
            f"{self._base_url}/cachedContents", self._headers, payload, retry=self._retry
        )
        cache = parse_cached_content(raw)
        logger.info("Created %s (expires %s)", cache.name, cache.expire_time or "unknown")
        return cache

    def get(self, name: str) -> CachedContent:
        raw = get_json(f"{self._base_url}/{_cache_name(name)}", self._headers, retry=self._retry)
        return parse_cached_content(raw)

    def list(self, page_size: int | None = None) -> Iterator[CachedContent]:
        """Yield every cached content, following ``nextPageToken``."""
        params: dict[str, Any] = {}
        if page_size is not None:
            params["pageSize"] = page_size
        while True:
            raw = get_json(
                f"{self._base_url}/cachedContents",
                self._headers,
                params=params,
                retry=self._retry,
            )
            for item in raw.get("cachedContents", []):
                yield parse_cached_content(item)
            token = raw.get("nextPageToken")
            if not token:
                return
            params["pageToken"] = token

    def update(
        self,
        name: str,
        *,
        ttl_seconds: float | None = None,
        expire_time: str | None = None,
    ) -> CachedContent:
        """Change the expiration of an existing cache."""
        expiration = _expiration(ttl_seconds, expire_time)
        if not expiration:
            raise ValueError("update needs ttl_seconds or expire_time")
        raw = patch_json(
            f"{self._base_url}/{_cache_name(name)}",
            self._headers,
            expiration,
            params={"updateMask": next(iter(expiration))},
            retry=self._retry,
        )
        return parse_cached_content(raw)

    def delete(self, name: str) -> None:
        delete(f"{self._base_url}/{_cache_name(name)}", self._headers, retry=self._retry)
        logger.info("Deleted %s", _cache_name(name))
