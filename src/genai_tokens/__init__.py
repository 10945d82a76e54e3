"""genai-tokens — Gemini token counting samples on a thin REST client."""

from genai_tokens.api import (
    APIError,
    AsyncClient,
    CachedContent,
    Client,
    Content,
    CountTokensResponse,
    File,
    FileDataPart,
    FileProcessingError,
    FileState,
    FunctionDeclaration,
    GenerateContentResponse,
    InlineDataPart,
    RateLimitError,
    RetryConfig,
    TextPart,
    Tool,
    UsageMetadata,
)
from genai_tokens.config import Settings

__all__ = [
    "APIError",
    "AsyncClient",
    "CachedContent",
    "Client",
    "Content",
    "CountTokensResponse",
    "File",
    "FileDataPart",
    "FileProcessingError",
    "FileState",
    "FunctionDeclaration",
    "GenerateContentResponse",
    "InlineDataPart",
    "RateLimitError",
    "RetryConfig",
    "Settings",
    "TextPart",
    "Tool",
    "UsageMetadata",
]
