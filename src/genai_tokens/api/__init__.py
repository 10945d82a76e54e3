"""Gemini REST client — token counting, generation, files and caches."""

from genai_tokens.api._caches import CacheManager
from genai_tokens.api._chat import AsyncChatSession, ChatSession
from genai_tokens.api._client import AsyncClient, Client, resolve_api_key
from genai_tokens.api._exceptions import (
    APIError,
    FileProcessingError,
    FileProcessingTimeout,
    RateLimitError,
)
from genai_tokens.api._files import FileManager
from genai_tokens.api._http import RetryConfig
from genai_tokens.api._models import AsyncGenerativeModel, GenerativeModel
from genai_tokens.api._types import (
    CachedContent,
    Content,
    CountTokensResponse,
    File,
    FileDataPart,
    FileState,
    FunctionCallPart,
    FunctionDeclaration,
    GenerateContentResponse,
    InlineDataPart,
    ModalityTokenCount,
    TextPart,
    Tool,
    UsageMetadata,
)

__all__ = [
    "APIError",
    "AsyncChatSession",
    "AsyncClient",
    "AsyncGenerativeModel",
    "CacheManager",
    "CachedContent",
    "ChatSession",
    "Client",
    "Content",
    "CountTokensResponse",
    "File",
    "FileDataPart",
    "FileManager",
    "FileProcessingError",
    "FileProcessingTimeout",
    "FileState",
    "FunctionCallPart",
    "FunctionDeclaration",
    "GenerateContentResponse",
    "GenerativeModel",
    "InlineDataPart",
    "ModalityTokenCount",
    "RateLimitError",
    "RetryConfig",
    "TextPart",
    "Tool",
    "UsageMetadata",
    "resolve_api_key",
]
