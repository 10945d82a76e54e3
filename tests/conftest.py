"""Shared test fixtures."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import MagicMock

import pytest

from genai_tokens.api._types import FunctionDeclaration, Tool
from genai_tokens.config import Settings


@pytest.fixture
def math_tool() -> Tool:
    return Tool(
        function_declarations=(
            FunctionDeclaration("add"),
            FunctionDeclaration(
                "multiply",
                description="Multiply two numbers",
                parameters={
                    "type": "object",
                    "properties": {"a": {"type": "number"}, "b": {"type": "number"}},
                },
            ),
        )
    )


class MockResponse:
    """Mimics ``requests.Response`` for testing the HTTP helpers."""

    def __init__(
        self,
        json_data: dict[str, Any] | None = None,
        status_code: int = 200,
        text: str = "",
        headers: dict[str, str] | None = None,
    ) -> None:
        self.status_code = status_code
        self._json_data = json_data
        self.text = text or ""
        self.ok = 200 <= status_code < 300
        self.headers: dict[str, str] = headers or {}
        if json_data is not None:
            self.content = json.dumps(json_data).encode()
        else:
            self.content = self.text.encode()

    def json(self) -> dict[str, Any]:
        if self._json_data is None:
            raise ValueError("No JSON")
        return self._json_data


@pytest.fixture
def mock_request(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    """Monkeypatch ``requests.request`` and return the mock."""
    mock = MagicMock()
    monkeypatch.setattr("requests.request", mock)
    return mock


@pytest.fixture
def settings(tmp_path) -> Settings:
    media = tmp_path / "media"
    media.mkdir()
    (media / "jetpack.jpg").write_bytes(b"\xff\xd8\xff\xe0jpeg")
    (media / "Big_Buck_Bunny.mp4").write_bytes(b"\x00\x00\x00\x18ftypmp42")
    (media / "a11.txt").write_text("Apollo 11 transcript", encoding="utf-8")
    return Settings(api_key="test-key", media_dir=media, poll_interval=0)


def sent_payload(mock: MagicMock, index: int = -1) -> dict[str, Any]:
    """JSON body of the ``index``-th ``requests.request`` call."""
    return mock.call_args_list[index].kwargs["json"]


def sent_url(mock: MagicMock, index: int = -1) -> str:
    args = mock.call_args_list[index].args
    return args[1]


def sent_method(mock: MagicMock, index: int = -1) -> str:
    return mock.call_args_list[index].args[0]
