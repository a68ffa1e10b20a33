"""Tests for Discord embed builders and message splitting."""
from __future__ import annotations

import pytest

from beelert.adapters.discord import (
    build_answer_embed,
    build_motivation_embed,
    build_progress_embed,
    split_message,
)
from beelert.progress import DEFAULT_FEEDBACK, ProgressFeedback


def test_split_message_short_text_is_single_chunk():
    assert split_message("hello") == ["hello"]


def test_split_message_prefers_line_boundaries():
    assert split_message("line1\nline2", limit=8) == ["line1", "line2"]


def test_split_message_hard_wraps_long_lines():
    chunks = split_message("a" * 4500)
    assert [len(chunk) for chunk in chunks] == [2000, 2000, 500]


def test_split_message_empty_and_invalid_limit():
    assert split_message("") == []
    with pytest.raises(ValueError):
        split_message("text", limit=0)


def test_answer_embed_truncates_long_answer():
    embed = build_answer_embed("What is Rust?", "x" * 5000)
    assert len(embed.description) == 4096
    assert embed.description.endswith("…")
    assert embed.fields[0].name == "Question"
    assert embed.fields[0].value == "What is Rust?"


def test_motivation_embed():
    embed = build_motivation_embed("Keep going! 🔥")
    assert embed.description == "Keep going! 🔥"


def test_progress_embed_reflects_validity():
    valid = build_progress_embed(DEFAULT_FEEDBACK)
    assert valid.title.startswith("✅")
    assert [field.name for field in valid.fields] == ["Clarity Tip", "Next Step", "Did You Know?"]

    invalid = build_progress_embed(
        ProgressFeedback(is_valid=False, clarity_tip="a", next_step="b", topic_fact="c")
    )
    assert invalid.title.startswith("⚠️")
    assert invalid.fields[2].value == "c"
