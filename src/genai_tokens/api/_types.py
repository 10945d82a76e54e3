"""Typed views of the Gemini request/response payloads."""

from __future__ import annotations

import base64
import enum
import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TypeAlias

# --- Content parts ---


@dataclass(frozen=True, slots=True)
class TextPart:
    """A plain text content part."""

    text: str


@dataclass(frozen=True, slots=True)
class InlineDataPart:
    """Raw bytes sent inline, base64-encoded."""

    mime_type: str
    data: str

    @classmethod
    def from_path(cls, path: str | Path, mime_type: str | None = None) -> InlineDataPart:
        """Read a local file and embed it as base64 inline data."""
        path = Path(path)
        mime_type = mime_type or guess_mime_type(path)
        return cls(mime_type=mime_type, data=base64.b64encode(path.read_bytes()).decode())


@dataclass(frozen=True, slots=True)
class FileDataPart:
    """A reference to a file previously uploaded through the File API."""

    file_uri: str
    mime_type: str

    @classmethod
    def from_file(cls, file: File) -> FileDataPart:
        return cls(file_uri=file.uri, mime_type=file.mime_type)


@dataclass(frozen=True, slots=True)
class FunctionCallPart:
    """A function call emitted by the model."""

    name: str
    args: dict[str, Any] = field(default_factory=dict)


Part: TypeAlias = TextPart | InlineDataPart | FileDataPart | FunctionCallPart


@dataclass(frozen=True, slots=True)
class Content:
    """A role-tagged conversation turn."""

    role: str
    parts: tuple[Part, ...] = ()

    @property
    def text(self) -> str:
        return "".join(p.text for p in self.parts if isinstance(p, TextPart))


# --- Tools ---


@dataclass(frozen=True, slots=True)
class FunctionDeclaration:
    """A function the model may call. Only ``name`` is required."""

    name: str
    description: str = ""
    parameters: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True)
class Tool:
    """A group of function declarations."""

    function_declarations: tuple[FunctionDeclaration, ...] = ()


# --- Token accounting ---


@dataclass(frozen=True, slots=True)
class ModalityTokenCount:
    """Token count for a single modality (TEXT, IMAGE, VIDEO, AUDIO, ...)."""

    modality: str
    token_count: int = 0


@dataclass(frozen=True, slots=True)
class UsageMetadata:
    """Token usage reported on a generateContent response."""

    prompt_token_count: int = 0
    candidates_token_count: int = 0
    total_token_count: int = 0
    cached_content_token_count: int = 0


@dataclass(frozen=True, slots=True)
class CountTokensResponse:
    """Result of a countTokens call."""

    total_tokens: int = 0
    cached_content_token_count: int = 0
    prompt_tokens_details: tuple[ModalityTokenCount, ...] = ()
    cache_tokens_details: tuple[ModalityTokenCount, ...] = ()
    raw: dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class GenerateContentResponse:
    """First candidate of a generateContent response."""

    text: str = ""
    function_calls: tuple[FunctionCallPart, ...] = ()
    usage_metadata: UsageMetadata = field(default_factory=UsageMetadata)
    finish_reason: str = ""
    content: Content | None = None
    raw: dict[str, object] = field(default_factory=dict)


# --- Files ---


class FileState(enum.StrEnum):
    STATE_UNSPECIFIED = "STATE_UNSPECIFIED"
    PROCESSING = "PROCESSING"
    ACTIVE = "ACTIVE"
    FAILED = "FAILED"


@dataclass(frozen=True, slots=True)
class File:
    """Metadata of a file stored by the File API."""

    name: str
    uri: str = ""
    mime_type: str = ""
    state: FileState = FileState.STATE_UNSPECIFIED
    display_name: str = ""
    size_bytes: int = 0
    create_time: str = ""
    update_time: str = ""
    expiration_time: str = ""
    sha256_hash: str = ""
    error: str = ""
    raw: dict[str, object] = field(default_factory=dict)


# --- Caching ---


@dataclass(frozen=True, slots=True)
class CachedContent:
    """A server-side cached context, referenced by ``name``."""

    name: str
    model: str = ""
    display_name: str = ""
    create_time: str = ""
    update_time: str = ""
    expire_time: str = ""
    total_token_count: int = 0
    raw: dict[str, object] = field(default_factory=dict)


def guess_mime_type(path: str | Path) -> str:
    mime_type, _ = mimetypes.guess_type(str(path))
    if not mime_type:
        raise ValueError(f"Cannot guess MIME type of {str(path)!r}; pass mime_type=")
    return mime_type
