"""Client — the main user-facing entry point."""

from __future__ import annotations

import os
from typing import Any

from genai_tokens.api._caches import CacheManager
from genai_tokens.api._files import FileManager
from genai_tokens.api._http import BASE_URL, RetryConfig
from genai_tokens.api._models import AsyncGenerativeModel, GenerativeModel
from genai_tokens.api._types import CachedContent

API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")


def resolve_api_key(api_key: str | None = None) -> str:
    """Return ``api_key`` or the first API key found in the environment."""
    key = api_key or next((os.environ[v] for v in API_KEY_ENV_VARS if os.environ.get(v)), "")
    if not key:
        raise ValueError(
            "No API key provided. Pass api_key= or set the "
            f"{' or '.join(API_KEY_ENV_VARS)} environment variable."
        )
    return key


class Client:
    """Gemini API client: model handles plus the files and caches resources.

    Usage::

        from genai_tokens import Client

        client = Client()
        model = client.generative_model("gemini-1.5-flash")
        print(model.count_tokens("Hello!").total_tokens)
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        retry: RetryConfig | None = None,
        base_url: str = BASE_URL,
    ) -> None:
        self._api_key = resolve_api_key(api_key)
        self._retry = retry
        self._base_url = base_url
        self.files = FileManager(self._api_key, retry=retry, base_url=base_url)
        self.caches = CacheManager(self._api_key, retry=retry, base_url=base_url)

    def generative_model(self, model: str, **kwargs: Any) -> GenerativeModel:
        kwargs.setdefault("retry", self._retry)
        kwargs.setdefault("base_url", self._base_url)
        return GenerativeModel(model, self._api_key, **kwargs)

    def model_from_cache(self, cached_content: CachedContent, **kwargs: Any) -> GenerativeModel:
        """Model handle whose requests reference ``cached_content``."""
        kwargs.setdefault("retry", self._retry)
        kwargs.setdefault("base_url", self._base_url)
        return GenerativeModel.from_cached_content(cached_content, self._api_key, **kwargs)


class AsyncClient:
    """Async Gemini client for token counting, generation and chat.

    Usage::

        client = AsyncClient()
        model = client.generative_model("gemini-1.5-flash")
        result = await model.count_tokens("Hello!")
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        retry: RetryConfig | None = None,
        base_url: str = BASE_URL,
    ) -> None:
        self._api_key = resolve_api_key(api_key)
        self._retry = retry
        self._base_url = base_url

    def generative_model(self, model: str, **kwargs: Any) -> AsyncGenerativeModel:
        kwargs.setdefault("retry", self._retry)
        kwargs.setdefault("base_url", self._base_url)
        return AsyncGenerativeModel(model, self._api_key, **kwargs)

    def model_from_cache(
        self, cached_content: CachedContent, **kwargs: Any
    ) -> AsyncGenerativeModel:
        kwargs.setdefault("retry", self._retry)
        kwargs.setdefault("base_url", self._base_url)
        return AsyncGenerativeModel.from_cached_content(cached_content, self._api_key, **kwargs)
