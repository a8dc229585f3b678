from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ConversationTurn(BaseModel):
    text: str
    is_user: bool
    timestamp: datetime = Field(default_factory=_utc_now)


def user_texts(turns: list[ConversationTurn]) -> list[str]:
    """User-authored texts, oldest first."""
    return [t.text for t in turns if t.is_user and t.text.strip()]


class ChatSession:
    """In-memory, append-only conversation history for one chat session."""

    def __init__(self) -> None:
        self._turns: list[ConversationTurn] = []

    @property
    def turns(self) -> list[ConversationTurn]:
        return list(self._turns)

    def add_user(self, text: str) -> ConversationTurn:
        if not text.strip():
            raise ValueError("message text must not be blank")
        turn = ConversationTurn(text=text, is_user=True)
        self._turns.append(turn)
        return turn

    def add_assistant(self, text: str) -> ConversationTurn:
        turn = ConversationTurn(text=text, is_user=False)
        self._turns.append(turn)
        return turn

    def user_texts(self) -> list[str]:
        return user_texts(self._turns)

    def clear(self) -> None:
        self._turns = []

    def __len__(self) -> int:
        return len(self._turns)
