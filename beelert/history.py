"""Conversation history translation for chat-style backends."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Tuple, Union

# Application roles -> provider chat roles. Unknown roles pass through.
ROLE_MAP = {"user": "user", "assistant": "model"}


@dataclass(frozen=True)
class ConversationTurn:
    """One message of a dialogue, oldest first when supplied as history."""

    role: str  # "user" | "assistant"
    content: str


TurnLike = Union[ConversationTurn, Mapping[str, Any]]


def _unpack(turn: TurnLike) -> Tuple[str, str]:
    if isinstance(turn, Mapping):
        return str(turn.get("role") or ""), str(turn.get("content") or "")
    return turn.role, turn.content


def translate_history(history: Iterable[TurnLike]) -> List[Dict[str, Any]]:
    """Convert `{role, content}` turns into the provider's chat history format.

    Returns a new list of the same length; ``assistant`` becomes ``model`` and
    each turn's content is wrapped as a single text part. The input is only read.
    """

    translated: List[Dict[str, Any]] = []
    for turn in history:
        role, content = _unpack(turn)
        translated.append(
            {
                "role": ROLE_MAP.get(role, role),
                "parts": [{"text": content}],
            }
        )
    return translated


def to_openai_messages(history: Iterable[Mapping[str, Any]]) -> List[Dict[str, str]]:
    """Map translated history back onto OpenAI-style chat messages."""

    messages: List[Dict[str, str]] = []
    for entry in history:
        role = entry.get("role") or "user"
        if role == "model":
            role = "assistant"
        text = "".join(str(part.get("text") or "") for part in entry.get("parts") or [])
        messages.append({"role": role, "content": text})
    return messages


__all__ = ["ConversationTurn", "ROLE_MAP", "translate_history", "to_openai_messages"]
