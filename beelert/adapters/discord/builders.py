"""Discord embed/message builders.

Pure construction helpers for Discord UI objects built from AI gateway
output. Keeping these in a separate module makes them easy to unit test and
reuse across command handlers.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List

import discord

from ...progress import ProgressFeedback

DISCORD_MESSAGE_LIMIT = 2000
EMBED_DESCRIPTION_LIMIT = 4096
EMBED_FIELD_LIMIT = 1024


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 1] + "…"


def split_message(text: str, limit: int = DISCORD_MESSAGE_LIMIT) -> List[str]:
    """Split text into Discord-sized chunks, preferring line boundaries.

    Lines longer than `limit` are hard-wrapped. Empty text yields no chunks.
    """

    if limit <= 0:
        raise ValueError("limit must be positive")
    chunks: List[str] = []
    current = ""
    for line in text.splitlines(keepends=True):
        while len(line) > limit:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(line[:limit])
            line = line[limit:]
        if len(current) + len(line) > limit:
            chunks.append(current)
            current = ""
        current += line
    if current:
        chunks.append(current)
    return [chunk.rstrip("\n") for chunk in chunks if chunk.strip()]


def build_answer_embed(question: str, answer: str) -> discord.Embed:
    """Construct the embed shown for an `/ask` reply."""

    embed = discord.Embed(
        title="🤖 AI Answer",
        description=_truncate(answer, EMBED_DESCRIPTION_LIMIT),
        colour=discord.Color.blurple(),
        timestamp=datetime.now(timezone.utc),
    )
    embed.add_field(
        name="Question", value=_truncate(question or "—", EMBED_FIELD_LIMIT), inline=False
    )
    embed.set_footer(text="Answers are AI-generated and may be inaccurate")
    return embed


def build_motivation_embed(message: str) -> discord.Embed:
    embed = discord.Embed(
        title="✨ Daily Motivation",
        description=_truncate(message, EMBED_DESCRIPTION_LIMIT),
        colour=discord.Color.gold(),
        timestamp=datetime.now(timezone.utc),
    )
    return embed


def build_progress_embed(feedback: ProgressFeedback) -> discord.Embed:
    """Construct the coaching embed attached to a progress update."""

    if feedback.is_valid:
        title = "✅ Progress Update Received"
        colour = discord.Color.green()
    else:
        title = "⚠️ Progress Update Needs Attention"
        colour = discord.Color.orange()
    embed = discord.Embed(
        title=title,
        colour=colour,
        timestamp=datetime.now(timezone.utc),
    )
    embed.add_field(
        name="Clarity Tip", value=_truncate(feedback.clarity_tip, EMBED_FIELD_LIMIT), inline=False
    )
    embed.add_field(
        name="Next Step", value=_truncate(feedback.next_step, EMBED_FIELD_LIMIT), inline=False
    )
    embed.add_field(
        name="Did You Know?", value=_truncate(feedback.topic_fact, EMBED_FIELD_LIMIT), inline=False
    )
    return embed


__all__ = [
    "DISCORD_MESSAGE_LIMIT",
    "build_answer_embed",
    "build_motivation_embed",
    "build_progress_embed",
    "split_message",
]
