"""Tests for GenerativeModel / AsyncGenerativeModel."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from genai_tokens.api._models import AsyncGenerativeModel, GenerativeModel, normalize_model_name
from genai_tokens.api._types import CachedContent, Content, InlineDataPart, TextPart, Tool
from tests.conftest import MockResponse, sent_payload, sent_url

_COUNT_RESPONSE = {"totalTokens": 11}

_TEXT_RESPONSE = {
    "candidates": [
        {
            "content": {"role": "model", "parts": [{"text": "Hello there!"}]},
            "finishReason": "STOP",
        }
    ],
    "usageMetadata": {
        "promptTokenCount": 11,
        "candidatesTokenCount": 131,
        "totalTokenCount": 142,
    },
}


def _make_model(**kwargs) -> GenerativeModel:
    return GenerativeModel("gemini-1.5-flash", "test-key", **kwargs)


def test_normalize_model_name() -> None:
    assert normalize_model_name("gemini-1.5-flash") == "models/gemini-1.5-flash"
    assert normalize_model_name("models/gemini-1.5-flash") == "models/gemini-1.5-flash"


@pytest.mark.parametrize("name", ["", "   "])
def test_empty_model_name_rejected(name: str) -> None:
    with pytest.raises(ValueError, match="must not be empty"):
        GenerativeModel(name, "test-key")


def test_cache_without_model_rejected() -> None:
    cache = CachedContent(name="cachedContents/xyz", model="")
    with pytest.raises(ValueError, match="must not be empty"):
        GenerativeModel.from_cached_content(cache, "test-key")


def test_urls_include_model() -> None:
    model = _make_model()
    assert model._count_url.endswith("/v1beta/models/gemini-1.5-flash:countTokens")
    assert model._url.endswith("/v1beta/models/gemini-1.5-flash:generateContent")


def test_count_tokens_plain_contents(mock_request: MagicMock) -> None:
    mock_request.return_value = MockResponse(json_data=_COUNT_RESPONSE)
    result = _make_model().count_tokens("The quick brown fox jumps over the lazy dog.")

    assert result.total_tokens == 11
    assert sent_url(mock_request).endswith(":countTokens")
    assert sent_payload(mock_request) == {
        "contents": [
            {"role": "user", "parts": [{"text": "The quick brown fox jumps over the lazy dog."}]}
        ]
    }
    headers = mock_request.call_args.kwargs["headers"]
    assert headers["x-goog-api-key"] == "test-key"


def test_count_tokens_multimodal(mock_request: MagicMock) -> None:
    mock_request.return_value = MockResponse(json_data={"totalTokens": 265})
    image = InlineDataPart("image/jpeg", "AAAA")
    _make_model().count_tokens(["Tell me about this image.", image])

    parts = sent_payload(mock_request)["contents"][0]["parts"]
    assert parts == [
        {"text": "Tell me about this image."},
        {"inlineData": {"mimeType": "image/jpeg", "data": "AAAA"}},
    ]


def test_count_tokens_with_system_instruction_wraps_request(mock_request: MagicMock) -> None:
    mock_request.return_value = MockResponse(json_data={"totalTokens": 23})
    model = _make_model(system_instruction="You are a cat. Your name is Neko.")
    model.count_tokens("The quick brown fox jumps over the lazy dog.")

    request = sent_payload(mock_request)["generateContentRequest"]
    assert request["model"] == "models/gemini-1.5-flash"
    assert request["systemInstruction"] == {
        "role": "system",
        "parts": [{"text": "You are a cat. Your name is Neko."}],
    }
    assert request["contents"][0]["role"] == "user"
    assert "tools" not in request


def test_count_tokens_with_tools(mock_request: MagicMock, math_tool: Tool) -> None:
    mock_request.return_value = MockResponse(json_data={"totalTokens": 99})
    _make_model(tools=[math_tool]).count_tokens("How many mittens?")

    request = sent_payload(mock_request)["generateContentRequest"]
    names = [d["name"] for d in request["tools"][0]["functionDeclarations"]]
    assert names == ["add", "multiply"]


def test_count_tokens_call_level_override(mock_request: MagicMock) -> None:
    mock_request.return_value = MockResponse(json_data=_COUNT_RESPONSE)
    model = _make_model(system_instruction="Be terse.")
    model.count_tokens("Hi", system_instruction=None)
    assert "contents" in sent_payload(mock_request)
    assert "generateContentRequest" not in sent_payload(mock_request)

    model.count_tokens("Hi", cached_content="abc")
    request = sent_payload(mock_request)["generateContentRequest"]
    assert request["cachedContent"] == "cachedContents/abc"
    assert request["systemInstruction"]["parts"] == [{"text": "Be terse."}]


def test_count_tokens_cached_content_only(mock_request: MagicMock) -> None:
    mock_request.return_value = MockResponse(
        json_data={"totalTokens": 10, "cachedContentTokenCount": 323383}
    )
    cache = CachedContent(name="cachedContents/xyz", model="models/gemini-1.5-flash-001")
    model = GenerativeModel.from_cached_content(cache, "test-key")
    result = model.count_tokens("Please give a short summary of this file.")

    assert model.model_name == "models/gemini-1.5-flash-001"
    assert result.cached_content_token_count == 323383
    request = sent_payload(mock_request)["generateContentRequest"]
    assert request["cachedContent"] == "cachedContents/xyz"


def test_count_tokens_requires_contents() -> None:
    with pytest.raises(ValueError, match="needs contents"):
        _make_model().count_tokens()


def test_generate_content(mock_request: MagicMock) -> None:
    mock_request.return_value = MockResponse(json_data=_TEXT_RESPONSE)
    resp = _make_model().generate_content("Hi")

    assert resp.text == "Hello there!"
    assert resp.usage_metadata.prompt_token_count == 11
    assert resp.usage_metadata.candidates_token_count == 131
    assert resp.usage_metadata.total_token_count == 142
    assert resp.finish_reason == "STOP"
    assert sent_url(mock_request).endswith(":generateContent")
    assert "generationConfig" not in sent_payload(mock_request)


def test_generate_content_includes_model_settings(mock_request: MagicMock, math_tool: Tool) -> None:
    mock_request.return_value = MockResponse(json_data=_TEXT_RESPONSE)
    model = _make_model(
        system_instruction=Content("system", (TextPart("Be terse."),)),
        tools=[math_tool],
        generation_config={"temperature": 0.2},
    )
    model.generate_content("Hi", max_output_tokens=50, top_p=0.9)

    payload = sent_payload(mock_request)
    assert payload["systemInstruction"]["parts"] == [{"text": "Be terse."}]
    assert "functionDeclarations" in payload["tools"][0]
    assert payload["generationConfig"] == {
        "temperature": 0.2,
        "maxOutputTokens": 50,
        "topP": 0.9,
    }


def test_generate_content_rejects_unknown_option() -> None:
    with pytest.raises(TypeError, match="Unknown generation config"):
        _make_model().generate_content("Hi", creativity=11)


def test_generate_content_passes_timeout(mock_request: MagicMock) -> None:
    mock_request.return_value = MockResponse(json_data=_TEXT_RESPONSE)
    _make_model().generate_content("Hi", timeout=30)
    assert mock_request.call_args.kwargs["timeout"] == 30


def test_start_chat_copies_history() -> None:
    history = [Content("user", (TextPart("Hi"),))]
    chat = _make_model().start_chat(history)
    history.append(Content("model", (TextPart("Hello"),)))
    assert len(chat.get_history()) == 1


# --- async ---


@patch("genai_tokens.api._models.async_post_json", new_callable=AsyncMock)
async def test_async_count_tokens(mock_post: AsyncMock) -> None:
    mock_post.return_value = _COUNT_RESPONSE
    model = AsyncGenerativeModel("gemini-1.5-flash", "test-key")
    result = await model.count_tokens("Hello")

    assert result.total_tokens == 11
    url, _headers, payload = mock_post.call_args.args
    assert url.endswith(":countTokens")
    assert payload == {"contents": [{"role": "user", "parts": [{"text": "Hello"}]}]}


@patch("genai_tokens.api._models.async_post_json", new_callable=AsyncMock)
async def test_async_generate_content(mock_post: AsyncMock) -> None:
    mock_post.return_value = _TEXT_RESPONSE
    model = AsyncGenerativeModel("gemini-1.5-flash", "test-key")
    resp = await model.generate_content("Hello", temperature=0.5)

    assert resp.text == "Hello there!"
    payload = mock_post.call_args.args[2]
    assert payload["generationConfig"] == {"temperature": 0.5}
