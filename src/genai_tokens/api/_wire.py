"""Conversion between the typed dataclasses and the Gemini JSON wire format."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, TypeAlias

from genai_tokens.api._types import (
    CachedContent,
    Content,
    CountTokensResponse,
    File,
    FileDataPart,
    FileState,
    FunctionCallPart,
    GenerateContentResponse,
    InlineDataPart,
    ModalityTokenCount,
    Part,
    TextPart,
    Tool,
    UsageMetadata,
)

ContentsInput: TypeAlias = str | Part | Content | Sequence[str | Part | Content]

_PART_TYPES = (TextPart, InlineDataPart, FileDataPart, FunctionCallPart)


def _as_part(value: str | Part) -> Part:
    if isinstance(value, str):
        return TextPart(value)
    if isinstance(value, _PART_TYPES):
        return value
    raise TypeError(f"Unsupported content part: {value!r}")


def normalize_contents(contents: ContentsInput) -> list[Content]:
    """Turn the accepted input shapes into a list of turns.

    A string, a part, or a sequence of strings/parts becomes one user turn.
    A ``Content`` or a sequence of ``Content`` is used as-is.
    """
    if isinstance(contents, Content):
        return [contents]
    if isinstance(contents, str | TextPart | InlineDataPart | FileDataPart | FunctionCallPart):
        return [Content(role="user", parts=(_as_part(contents),))]
    items = list(contents)
    if not items:
        raise ValueError("contents must not be empty")
    turns = [i for i in items if isinstance(i, Content)]
    if turns:
        if len(turns) != len(items):
            raise TypeError("Cannot mix Content turns with bare parts in one request")
        return turns
    return [Content(role="user", parts=tuple(_as_part(i) for i in items))]


def system_instruction_to_content(value: str | Content) -> Content:
    if isinstance(value, Content):
        return value
    return Content(role="system", parts=(TextPart(value),))


# --- Outbound ---


def part_to_wire(part: Part) -> dict[str, Any]:
    if isinstance(part, TextPart):
        return {"text": part.text}
    if isinstance(part, InlineDataPart):
        return {"inlineData": {"mimeType": part.mime_type, "data": part.data}}
    if isinstance(part, FileDataPart):
        return {"fileData": {"mimeType": part.mime_type, "fileUri": part.file_uri}}
    if isinstance(part, FunctionCallPart):
        return {"functionCall": {"name": part.name, "args": part.args}}
    raise TypeError(f"Unsupported content part: {part!r}")


def content_to_wire(content: Content) -> dict[str, Any]:
    return {"role": content.role, "parts": [part_to_wire(p) for p in content.parts]}


def tools_to_wire(tools: Sequence[Tool]) -> list[dict[str, Any]]:
    wire: list[dict[str, Any]] = []
    for tool in tools:
        declarations: list[dict[str, Any]] = []
        for fd in tool.function_declarations:
            decl: dict[str, Any] = {"name": fd.name}
            if fd.description:
                decl["description"] = fd.description
            if fd.parameters is not None:
                decl["parameters"] = fd.parameters
            declarations.append(decl)
        wire.append({"functionDeclarations": declarations})
    return wire


# --- Inbound ---


def parse_part(raw: dict[str, Any]) -> Part | None:
    if "text" in raw:
        return TextPart(raw["text"])
    if "inlineData" in raw:
        data = raw["inlineData"]
        return InlineDataPart(mime_type=data.get("mimeType", ""), data=data.get("data", ""))
    if "fileData" in raw:
        data = raw["fileData"]
        return FileDataPart(file_uri=data.get("fileUri", ""), mime_type=data.get("mimeType", ""))
    if "functionCall" in raw:
        fc = raw["functionCall"]
        return FunctionCallPart(name=fc.get("name", ""), args=fc.get("args", {}))
    return None


def parse_content(raw: dict[str, Any]) -> Content:
    parts = [parse_part(p) for p in raw.get("parts", [])]
    return Content(role=raw.get("role", "model"), parts=tuple(p for p in parts if p is not None))


def parse_usage(raw: dict[str, Any]) -> UsageMetadata:
    return UsageMetadata(
        prompt_token_count=raw.get("promptTokenCount", 0),
        candidates_token_count=raw.get("candidatesTokenCount", 0),
        total_token_count=raw.get("totalTokenCount", 0),
        cached_content_token_count=raw.get("cachedContentTokenCount", 0),
    )


def _parse_modalities(raw: list[dict[str, Any]]) -> tuple[ModalityTokenCount, ...]:
    return tuple(
        ModalityTokenCount(modality=m.get("modality", ""), token_count=m.get("tokenCount", 0))
        for m in raw
    )


def parse_count_tokens(raw: dict[str, Any]) -> CountTokensResponse:
    return CountTokensResponse(
        total_tokens=raw.get("totalTokens", 0),
        cached_content_token_count=raw.get("cachedContentTokenCount", 0),
        prompt_tokens_details=_parse_modalities(raw.get("promptTokensDetails", [])),
        cache_tokens_details=_parse_modalities(raw.get("cacheTokensDetails", [])),
        raw=raw,
    )


def parse_generate_response(raw: dict[str, Any]) -> GenerateContentResponse:
    usage = parse_usage(raw.get("usageMetadata", {}))
    candidates = raw.get("candidates", [])
    if not candidates:
        return GenerateContentResponse(usage_metadata=usage, raw=raw)

    candidate = candidates[0]
    content = parse_content(candidate.get("content", {}))
    return GenerateContentResponse(
        text=content.text.strip(),
        function_calls=tuple(p for p in content.parts if isinstance(p, FunctionCallPart)),
        usage_metadata=usage,
        finish_reason=candidate.get("finishReason", ""),
        content=content,
        raw=raw,
    )


def parse_file(raw: dict[str, Any]) -> File:
    # Upload responses wrap the resource as {"file": {...}}.
    if "file" in raw and isinstance(raw["file"], dict):
        raw = raw["file"]
    state = raw.get("state", FileState.STATE_UNSPECIFIED.value)
    error = raw.get("error") or {}
    return File(
        name=raw.get("name", ""),
        uri=raw.get("uri", ""),
        mime_type=raw.get("mimeType", ""),
        state=FileState(state) if state in FileState.__members__ else FileState.STATE_UNSPECIFIED,
        display_name=raw.get("displayName", ""),
        size_bytes=int(raw.get("sizeBytes", 0)),
        create_time=raw.get("createTime", ""),
        update_time=raw.get("updateTime", ""),
        expiration_time=raw.get("expirationTime", ""),
        sha256_hash=raw.get("sha256Hash", ""),
        error=error.get("message", "") if isinstance(error, dict) else str(error),
        raw=raw,
    )


def parse_cached_content(raw: dict[str, Any]) -> CachedContent:
    return CachedContent(
        name=raw.get("name", ""),
        model=raw.get("model", ""),
        display_name=raw.get("displayName", ""),
        create_time=raw.get("createTime", ""),
        update_time=raw.get("updateTime", ""),
        expire_time=raw.get("expireTime", ""),
        total_token_count=raw.get("usageMetadata", {}).get("totalTokenCount", 0),
        raw=raw,
    )
