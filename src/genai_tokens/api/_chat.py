"""Multi-turn chat sessions that keep their own history."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from genai_tokens.api._types import Content, GenerateContentResponse
from genai_tokens.api._wire import ContentsInput, normalize_contents

if TYPE_CHECKING:
    from genai_tokens.api._models import AsyncGenerativeModel, GenerativeModel


def _user_turn(content: ContentsInput) -> Content:
    turns = normalize_contents(content)
    if len(turns) != 1 or turns[0].role != "user":
        raise ValueError("send_message takes a single user turn")
    return turns[0]


def _reply_turn(response: GenerateContentResponse) -> Content | None:
    # Blocked or empty replies are not recorded; the API rejects empty turns.
    if response.content is None or not response.content.parts:
        return None
    return Content(role="model", parts=response.content.parts)


class ChatSession:
    """Chat bound to a :class:`GenerativeModel`.

    History only grows when a round trip returns a model turn, so a failed
    or blocked ``send_message`` can simply be retried.
    """

    def __init__(self, model: GenerativeModel, history: Sequence[Content] | None = None) -> None:
        self.model = model
        self.history: list[Content] = list(history or ())

    def get_history(self) -> tuple[Content, ...]:
        return tuple(self.history)

    def send_message(self, content: ContentsInput, **kwargs: Any) -> GenerateContentResponse:
        user = _user_turn(content)
        response = self.model.generate_content([*self.history, user], **kwargs)
        reply = _reply_turn(response)
        if reply is not None:
            self.history.extend((user, reply))
        return response


class AsyncChatSession:
    """Chat bound to an :class:`AsyncGenerativeModel`."""

    def __init__(
        self, model: AsyncGenerativeModel, history: Sequence[Content] | None = None
    ) -> None:
        self.model = model
        self.history: list[Content] = list(history or ())

    def get_history(self) -> tuple[Content, ...]:
        return tuple(self.history)

    async def send_message(self, content: ContentsInput, **kwargs: Any) -> GenerateContentResponse:
        user = _user_turn(content)
        response = await self.model.generate_content([*self.history, user], **kwargs)
        reply = _reply_turn(response)
        if reply is not None:
            self.history.extend((user, reply))
        return response
