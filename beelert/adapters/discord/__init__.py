"""Discord adapter.

Presentation helpers that turn AI gateway output into Discord messages.
"""

from __future__ import annotations

from .builders import (
    build_answer_embed,
    build_motivation_embed,
    build_progress_embed,
    split_message,
)

__all__ = [
    "build_answer_embed",
    "build_motivation_embed",
    "build_progress_embed",
    "split_message",
]
