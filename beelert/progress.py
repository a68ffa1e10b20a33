"""Progress-update coaching prompts and response parsing."""
from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)

PROGRESS_MAX_TOKENS = 300

PROGRESS_SYSTEM_PROMPT = "You are a helpful AI progress coach. Always respond with valid JSON."

_JSON_BLOCK = re.compile(r"\{[\s\S]*\}")


@dataclass(frozen=True)
class ProgressFeedback:
    """Coaching feedback attached to a member's daily progress update."""

    is_valid: bool
    clarity_tip: str
    next_step: str
    topic_fact: str


DEFAULT_FEEDBACK = ProgressFeedback(
    is_valid=True,
    clarity_tip="Keep up the great work!",
    next_step="Continue making progress and sharing your updates.",
    topic_fact="Consistency is key to long-term success.",
)

PARSE_FALLBACK_FEEDBACK = ProgressFeedback(
    is_valid=True,
    clarity_tip="Your update is clear and well-written.",
    next_step=(
        "Keep maintaining this level of detail in your updates. "
        "Consider adding specific metrics or challenges faced."
    ),
    topic_fact="Regular progress tracking improves productivity by 25% on average.",
)


def build_progress_prompt(content: str) -> str:
    """Prompt asking the backend to review a progress update as JSON."""

    return f"""You are an AI progress coach. Analyze this daily progress update for spam/validity and provide constructive feedback.

Progress Update: "{content}"

Respond in JSON format ONLY (no markdown):
{{
    "isValid": true/false,
    "clarityTip": "One sentence about writing clarity or structure",
    "nextStep": "One actionable suggestion for their next update (2-3 sentences)",
    "topicFact": "One interesting fact related to their work topic"
}}

Rules:
- isValid: false only if it's spam, gibberish, or completely irrelevant
- Be encouraging and constructive
- Keep tips concise and actionable
- Make feedback specific to their content"""


def _coerce_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return default


def _coerce_text(value: Any, default: str) -> str:
    if value is None:
        return default
    text = str(value).strip()
    return text or default


def feedback_from_payload(
    payload: Mapping[str, Any],
    defaults: ProgressFeedback = DEFAULT_FEEDBACK,
) -> ProgressFeedback:
    """Build feedback from the backend's camelCase JSON, filling gaps from defaults."""

    return ProgressFeedback(
        is_valid=_coerce_bool(payload.get("isValid"), defaults.is_valid),
        clarity_tip=_coerce_text(payload.get("clarityTip"), defaults.clarity_tip),
        next_step=_coerce_text(payload.get("nextStep"), defaults.next_step),
        topic_fact=_coerce_text(payload.get("topicFact"), defaults.topic_fact),
    )


def _extract_json(raw: str) -> Optional[Mapping[str, Any]]:
    match = _JSON_BLOCK.search(raw)
    candidate = match.group(0) if match else raw
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as exc:
        logger.error("Error parsing AI feedback: %s", exc)
        return None
    if not isinstance(data, dict):
        logger.error("AI feedback was not a JSON object: %r", type(data).__name__)
        return None
    return data


def parse_feedback(raw: str) -> ProgressFeedback:
    """Parse a backend reply, falling back when it carries no usable JSON object."""

    payload = _extract_json(raw or "")
    if payload is None:
        return PARSE_FALLBACK_FEEDBACK
    return feedback_from_payload(payload)


__all__ = [
    "DEFAULT_FEEDBACK",
    "PARSE_FALLBACK_FEEDBACK",
    "PROGRESS_MAX_TOKENS",
    "PROGRESS_SYSTEM_PROMPT",
    "ProgressFeedback",
    "build_progress_prompt",
    "feedback_from_payload",
    "parse_feedback",
]
