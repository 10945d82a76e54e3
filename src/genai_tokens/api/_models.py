"""Generative model handles for the Gemini countTokens/generateContent API."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from genai_tokens.api._async_http import async_post_json
from genai_tokens.api._chat import AsyncChatSession, ChatSession
from genai_tokens.api._http import BASE_URL, RetryConfig, api_headers, post_json
from genai_tokens.api._types import (
    CachedContent,
    Content,
    CountTokensResponse,
    GenerateContentResponse,
    Tool,
)
from genai_tokens.api._wire import (
    ContentsInput,
    content_to_wire,
    normalize_contents,
    parse_count_tokens,
    parse_generate_response,
    system_instruction_to_content,
    tools_to_wire,
)

logger = logging.getLogger(__name__)

_GENERATION_CONFIG_KEYS = {
    "temperature": "temperature",
    "max_output_tokens": "maxOutputTokens",
    "top_p": "topP",
    "top_k": "topK",
    "candidate_count": "candidateCount",
    "stop_sequences": "stopSequences",
    "response_mime_type": "responseMimeType",
}

# Sentinel so call-level ``None`` can clear a model-level default.
_UNSET: Any = object()


def normalize_model_name(model: str) -> str:
    """Return ``models/<id>`` for either ``<id>`` or ``models/<id>``."""
    if not model or not model.strip():
        raise ValueError("model name must not be empty")
    return model if model.startswith(("models/", "tunedModels/")) else f"models/{model}"


def _generation_config(kwargs: dict[str, Any]) -> dict[str, Any]:
    config: dict[str, Any] = {}
    for key, wire_key in _GENERATION_CONFIG_KEYS.items():
        if key in kwargs:
            config[wire_key] = kwargs.pop(key)
    if kwargs:
        raise TypeError(f"Unknown generation config option(s): {sorted(kwargs)}")
    return config


class _BaseModel:
    """Request building shared by the sync and async model handles."""

    def __init__(
        self,
        model: str,
        api_key: str,
        *,
        system_instruction: str | Content | None = None,
        tools: Sequence[Tool] | None = None,
        generation_config: dict[str, Any] | None = None,
        cached_content: str | CachedContent | None = None,
        retry: RetryConfig | None = None,
        base_url: str = BASE_URL,
    ) -> None:
        self.model_name = normalize_model_name(model)
        self.system_instruction = (
            system_instruction_to_content(system_instruction)
            if system_instruction is not None
            else None
        )
        self.tools: tuple[Tool, ...] = tuple(tools or ())
        self.generation_config = dict(generation_config or {})
        self.cached_content = _cache_name(cached_content)
        self._api_key = api_key
        self._retry = retry
        self._base_url = base_url.rstrip("/")
        self._headers = api_headers(api_key)
        self._count_url = f"{self._base_url}/{self.model_name}:countTokens"
        self._url = f"{self._base_url}/{self.model_name}:generateContent"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(model_name={self.model_name!r})"

    def _count_tokens_payload(
        self,
        contents: ContentsInput | None,
        system_instruction: str | Content | None,
        tools: Sequence[Tool] | None,
        cached_content: str | CachedContent | None,
    ) -> dict[str, Any]:
        system = (
            self.system_instruction
            if system_instruction is _UNSET
            else (
                system_instruction_to_content(system_instruction)
                if system_instruction is not None
                else None
            )
        )
        tool_list = self.tools if tools is _UNSET else tuple(tools or ())
        cache = self.cached_content if cached_content is _UNSET else _cache_name(cached_content)

        wire_contents = (
            [content_to_wire(c) for c in normalize_contents(contents)]
            if contents is not None
            else []
        )
        if system is None and not tool_list and not cache:
            if not wire_contents:
                raise ValueError("count_tokens needs contents")
            return {"contents": wire_contents}

        request: dict[str, Any] = {"model": self.model_name, "contents": wire_contents}
        if system is not None:
            request["systemInstruction"] = content_to_wire(system)
        if tool_list:
            request["tools"] = tools_to_wire(tool_list)
        if cache:
            request["cachedContent"] = cache
        return {"generateContentRequest": request}

    def _generate_payload(self, contents: list[Content], **kwargs: Any) -> dict[str, Any]:
        payload: dict[str, Any] = {"contents": [content_to_wire(c) for c in contents]}
        if self.system_instruction is not None:
            payload["systemInstruction"] = content_to_wire(self.system_instruction)
        if self.tools:
            payload["tools"] = tools_to_wire(self.tools)
        if self.cached_content:
            payload["cachedContent"] = self.cached_content
        gen_config = {**self.generation_config, **_generation_config(kwargs)}
        if gen_config:
            payload["generationConfig"] = gen_config
        return payload


class GenerativeModel(_BaseModel):
    """Synchronous handle on one Gemini model.

    Usage::

        model = client.generative_model("gemini-1.5-flash")
        print(model.count_tokens("The quick brown fox.").total_tokens)
    """

    @classmethod
    def from_cached_content(
        cls,
        cached_content: CachedContent,
        api_key: str,
        **kwargs: Any,
    ) -> GenerativeModel:
        """Build a model bound to ``cached_content``, using the cache's model."""
        return cls(cached_content.model, api_key, cached_content=cached_content, **kwargs)

    def count_tokens(
        self,
        contents: ContentsInput | None = None,
        *,
        system_instruction: str | Content | None = _UNSET,
        tools: Sequence[Tool] | None = _UNSET,
        cached_content: str | CachedContent | None = _UNSET,
        timeout: int = 60,
    ) -> CountTokensResponse:
        """Count the input tokens of a request without generating anything.

        Keyword arguments override the model-level defaults for this call.
        """
        payload = self._count_tokens_payload(contents, system_instruction, tools, cached_content)
        raw = post_json(self._count_url, self._headers, payload, timeout=timeout, retry=self._retry)
        result = parse_count_tokens(raw)
        logger.debug("countTokens %s -> %d", self.model_name, result.total_tokens)
        return result

    def generate_content(
        self, contents: ContentsInput, *, timeout: int = 60, **kwargs: Any
    ) -> GenerateContentResponse:
        """Generate a response. Extra keyword arguments go to ``generationConfig``."""
        payload = self._generate_payload(normalize_contents(contents), **kwargs)
        raw = post_json(self._url, self._headers, payload, timeout=timeout, retry=self._retry)
        return parse_generate_response(raw)

    def start_chat(self, history: Sequence[Content] | None = None) -> ChatSession:
        return ChatSession(self, history)


class AsyncGenerativeModel(_BaseModel):
    """Async counterpart of :class:`GenerativeModel`."""

    @classmethod
    def from_cached_content(
        cls,
        cached_content: CachedContent,
        api_key: str,
        **kwargs: Any,
    ) -> AsyncGenerativeModel:
        return cls(cached_content.model, api_key, cached_content=cached_content, **kwargs)

    async def count_tokens(
        self,
        contents: ContentsInput | None = None,
        *,
        system_instruction: str | Content | None = _UNSET,
        tools: Sequence[Tool] | None = _UNSET,
        cached_content: str | CachedContent | None = _UNSET,
        timeout: int = 60,
    ) -> CountTokensResponse:
        payload = self._count_tokens_payload(contents, system_instruction, tools, cached_content)
        raw = await async_post_json(
            self._count_url, self._headers, payload, timeout=timeout, retry=self._retry
        )
        return parse_count_tokens(raw)

    async def generate_content(
        self, contents: ContentsInput, *, timeout: int = 60, **kwargs: Any
    ) -> GenerateContentResponse:
        payload = self._generate_payload(normalize_contents(contents), **kwargs)
        raw = await async_post_json(
            self._url, self._headers, payload, timeout=timeout, retry=self._retry
        )
        return parse_generate_response(raw)

    def start_chat(self, history: Sequence[Content] | None = None) -> AsyncChatSession:
        return AsyncChatSession(self, history)


def _cache_name(cached_content: str | CachedContent | None) -> str | None:
    if cached_content is None:
        return None
    name = cached_content.name if isinstance(cached_content, CachedContent) else cached_content
    return name if name.startswith("cachedContents/") else f"cachedContents/{name}"
