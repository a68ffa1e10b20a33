"""Generative-AI gateway used by the BeeLert bot commands."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Protocol

import openai
from google import genai
from google.genai import types

from .history import TurnLike, to_openai_messages, translate_history
from .progress import (
    DEFAULT_FEEDBACK,
    PROGRESS_MAX_TOKENS,
    PROGRESS_SYSTEM_PROMPT,
    ProgressFeedback,
    build_progress_prompt,
    parse_feedback,
)

logger = logging.getLogger(__name__)


PROVIDER_GEMINI = "gemini"
PROVIDER_OPENROUTER = "openrouter"
PROVIDERS = (PROVIDER_GEMINI, PROVIDER_OPENROUTER)

API_KEY_ENV = {
    PROVIDER_GEMINI: "GEMINI_API_KEY",
    PROVIDER_OPENROUTER: "OPENROUTER_API_KEY",
}
MODEL_ENV = {
    PROVIDER_GEMINI: "GEMINI_MODEL",
    PROVIDER_OPENROUTER: "OPENROUTER_MODEL",
}
DEFAULT_MODELS = {
    PROVIDER_GEMINI: "gemini-2.0-flash",
    PROVIDER_OPENROUTER: "google/gemini-2.0-flash-lite-001",
}
OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"

CHAT_MAX_TOKENS = 500
MOTIVATION_MAX_TOKENS = 100

MOTIVATION_SYSTEM_PROMPT = "You are a motivational assistant. Generate short, inspiring messages."
MOTIVATION_PROMPT = (
    "Generate a short, inspiring motivational message (2-3 sentences max) about "
    "consistent learning, daily progress, and self-improvement. Make it encouraging "
    "and actionable. Include an emoji. Keep it under 150 characters."
)

CONFIG_ERROR_MESSAGE = "❌ AI features are not configured. Please check your AI API key."
UNAVAILABLE_MESSAGE = "AI features are not available."
RETRY_LATER_MESSAGE = (
    "Sorry, I encountered an error processing your question. Please try again later."
)
RETRY_MESSAGE = "Sorry, I encountered an error. Please try again."

# Substrings in provider error text that signal a rejected credential.
AUTH_MARKERS = ("API_KEY", "401")
AUTH_STATUS_CODES = frozenset({401})
RATE_LIMIT_STATUS = 429


def auth_error_message(api_key_env: str) -> str:
    """Remediation text shown when the provider rejects the configured key."""

    return (
        "❌ **AI API Error**: The API key is invalid.\n\n"
        "**To fix:**\n"
        "1. Create a new API key with your AI provider\n"
        f"2. Update `{api_key_env}` in your `.env` file\n"
        "3. Restart the bot"
    )


class AIBackendError(RuntimeError):
    """Raised by a backend when the provider returns an unusable response."""


class ErrorKind(Enum):
    """Coarse classification of backend failures."""

    AUTH = "auth"
    RATE_LIMITED = "rate_limited"
    OTHER = "other"


def _status_code(exc: BaseException) -> Optional[int]:
    # openai errors carry `status_code`; google-genai APIError carries `code`.
    for attr in ("status_code", "code"):
        value = getattr(exc, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def classify_error(exc: BaseException) -> ErrorKind:
    """Map a backend exception onto an `ErrorKind`.

    Structured status codes win; provider error text is only scanned when
    the code is absent or inconclusive.
    """

    status = _status_code(exc)
    if status in AUTH_STATUS_CODES:
        return ErrorKind.AUTH
    if status == RATE_LIMIT_STATUS:
        return ErrorKind.RATE_LIMITED

    message = str(exc)
    if any(marker in message for marker in AUTH_MARKERS):
        return ErrorKind.AUTH
    if str(RATE_LIMIT_STATUS) in message:
        return ErrorKind.RATE_LIMITED
    return ErrorKind.OTHER


@dataclass(frozen=True)
class AIConfig:
    """Configuration for the AI gateway."""

    provider: str = PROVIDER_GEMINI
    api_key: Optional[str] = None
    model_name: str = DEFAULT_MODELS[PROVIDER_GEMINI]
    api_base: str = OPENROUTER_BASE_URL
    temperature: float = 0.7
    timeout: float = 30.0

    @property
    def api_key_env(self) -> str:
        return API_KEY_ENV.get(self.provider, "AI_API_KEY")

    @classmethod
    def from_env(cls) -> "AIConfig":
        """Load configuration from environment variables."""
        provider = os.getenv("BEELERT_AI_PROVIDER", PROVIDER_GEMINI).strip().lower() or PROVIDER_GEMINI
        api_key = (os.getenv(API_KEY_ENV.get(provider, "AI_API_KEY")) or "").strip() or None
        model_name = os.getenv(MODEL_ENV.get(provider, "AI_MODEL")) or DEFAULT_MODELS.get(
            provider, DEFAULT_MODELS[PROVIDER_GEMINI]
        )
        return cls(
            provider=provider,
            api_key=api_key,
            model_name=model_name,
            api_base=os.getenv("OPENROUTER_BASE_URL", OPENROUTER_BASE_URL),
            temperature=float(os.getenv("AI_TEMPERATURE", "0.7")),
            timeout=float(os.getenv("AI_TIMEOUT", "30")),
        )


class ChatSession(Protocol):
    async def send(self, message: str) -> str:
        """Send one user message and return the model's reply text."""
        raise NotImplementedError


class AIBackend(Protocol):
    provider: str
    model: str
    api_key_env: str

    async def generate(
        self,
        prompt: str,
        *,
        system_instruction: Optional[str] = None,
        max_output_tokens: Optional[int] = None,
    ) -> str:
        """Return generated text for a single prompt."""
        raise NotImplementedError

    def start_chat(
        self,
        history: List[Dict[str, Any]],
        *,
        max_output_tokens: int,
    ) -> ChatSession:
        """Open a chat session seeded with translated history."""
        raise NotImplementedError


class GeminiChatSession:
    def __init__(self, chat: Any) -> None:
        self._chat = chat

    async def send(self, message: str) -> str:
        response = await self._chat.send_message(message)
        return response.text or ""


class GeminiBackend:
    """Google Gemini via the google-genai async client."""

    provider = PROVIDER_GEMINI
    api_key_env = API_KEY_ENV[PROVIDER_GEMINI]

    def __init__(self, config: AIConfig, client: Optional[Any] = None) -> None:
        self.config = config
        self.model = config.model_name
        self.client = client or genai.Client(
            api_key=config.api_key,
            http_options=types.HttpOptions(timeout=int(config.timeout * 1000)),
        )

    def _generation_config(
        self,
        *,
        system_instruction: Optional[str] = None,
        max_output_tokens: Optional[int] = None,
    ) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            temperature=self.config.temperature,
            max_output_tokens=max_output_tokens,
            system_instruction=system_instruction,
        )

    async def generate(
        self,
        prompt: str,
        *,
        system_instruction: Optional[str] = None,
        max_output_tokens: Optional[int] = None,
    ) -> str:
        response = await self.client.aio.models.generate_content(
            model=self.model,
            contents=prompt,
            config=self._generation_config(
                system_instruction=system_instruction,
                max_output_tokens=max_output_tokens,
            ),
        )
        return response.text or ""

    def start_chat(
        self,
        history: List[Dict[str, Any]],
        *,
        max_output_tokens: int,
    ) -> GeminiChatSession:
        chat = self.client.aio.chats.create(
            model=self.model,
            history=history,
            config=self._generation_config(max_output_tokens=max_output_tokens),
        )
        return GeminiChatSession(chat)


class OpenRouterChatSession:
    def __init__(
        self,
        backend: "OpenRouterBackend",
        messages: List[Dict[str, str]],
        max_output_tokens: int,
    ) -> None:
        self._backend = backend
        self._messages = messages
        self._max_output_tokens = max_output_tokens

    async def send(self, message: str) -> str:
        messages = self._messages + [{"role": "user", "content": message}]
        reply = await self._backend.complete(messages, max_output_tokens=self._max_output_tokens)
        self._messages = messages + [{"role": "assistant", "content": reply}]
        return reply


class OpenRouterBackend:
    """OpenRouter's OpenAI-compatible chat completions endpoint."""

    provider = PROVIDER_OPENROUTER
    api_key_env = API_KEY_ENV[PROVIDER_OPENROUTER]

    def __init__(self, config: AIConfig, client: Optional[Any] = None) -> None:
        self.config = config
        self.model = config.model_name
        self.client = client or openai.AsyncOpenAI(
            api_key=config.api_key,
            base_url=config.api_base,
            timeout=config.timeout,
            max_retries=0,
            default_headers={
                "HTTP-Referer": "https://github.com/Lethinkj/BeeLert",
                "X-Title": "BeeLert Discord Bot",
            },
        )

    async def complete(
        self,
        messages: List[Dict[str, str]],
        *,
        max_output_tokens: Optional[int] = None,
    ) -> str:
        kwargs: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": self.config.temperature,
        }
        if max_output_tokens is not None:
            kwargs["max_tokens"] = max_output_tokens
        response = await self.client.chat.completions.create(**kwargs)
        choices = getattr(response, "choices", None) or []
        if not choices:
            raise AIBackendError("OpenRouter response contained no choices")
        return choices[0].message.content or ""

    async def generate(
        self,
        prompt: str,
        *,
        system_instruction: Optional[str] = None,
        max_output_tokens: Optional[int] = None,
    ) -> str:
        messages: List[Dict[str, str]] = []
        if system_instruction:
            messages.append({"role": "system", "content": system_instruction})
        messages.append({"role": "user", "content": prompt})
        return await self.complete(messages, max_output_tokens=max_output_tokens)

    def start_chat(
        self,
        history: List[Dict[str, Any]],
        *,
        max_output_tokens: int,
    ) -> OpenRouterChatSession:
        return OpenRouterChatSession(self, to_openai_messages(history), max_output_tokens)


def build_backend(config: AIConfig) -> Optional[AIBackend]:
    """Construct the configured backend, or None when no credential is set."""

    if config.provider not in PROVIDERS:
        raise ValueError(
            f"Unknown BEELERT_AI_PROVIDER={config.provider!r}; expected one of {', '.join(PROVIDERS)}"
        )
    if not config.api_key:
        logger.warning(
            "%s not configured. AI features will be disabled.", config.api_key_env
        )
        return None

    backend: AIBackend
    if config.provider == PROVIDER_GEMINI:
        backend = GeminiBackend(config)
    else:
        backend = OpenRouterBackend(config)
    logger.info(
        "AI service initialised (provider=%s, model=%s)", config.provider, config.model_name
    )
    return backend


class AIService:
    """Single choke-point for generative-AI calls made by the bot.

    Every operation converts backend failures into a return value; callers
    never need to handle exceptions from this class. A service built without
    a backend stays unconfigured for its whole lifetime.
    """

    def __init__(self, backend: Optional[AIBackend] = None) -> None:
        self._backend = backend

    @classmethod
    def from_config(cls, config: AIConfig) -> "AIService":
        return cls(build_backend(config))

    def is_ai_available(self) -> bool:
        return self._backend is not None

    def _log_failure(self, action: str, exc: Exception) -> ErrorKind:
        kind = classify_error(exc)
        if kind is ErrorKind.RATE_LIMITED:
            logger.warning("Rate limited while %s: %s", action, exc)
        else:
            logger.error("Error %s (%s): %s", action, kind.value, exc)
        return kind

    async def ask_question(self, question: str) -> str:
        """Answer a standalone question with no history or system context."""
        if self._backend is None:
            return CONFIG_ERROR_MESSAGE
        try:
            return await self._backend.generate(question)
        except Exception as exc:
            kind = self._log_failure("asking question", exc)
            if kind is ErrorKind.AUTH:
                return auth_error_message(self._backend.api_key_env)
            return RETRY_LATER_MESSAGE

    async def generate_motivation(self) -> Optional[str]:
        """Return a short motivational message, or None so callers use a local quote."""
        if self._backend is None:
            return None
        try:
            response = await self._backend.generate(
                MOTIVATION_PROMPT,
                system_instruction=MOTIVATION_SYSTEM_PROMPT,
                max_output_tokens=MOTIVATION_MAX_TOKENS,
            )
        except Exception as exc:
            self._log_failure("generating motivation", exc)
            return None
        message = response.strip()
        return message or None

    async def ask_with_context(self, question: str, context: str = "") -> str:
        if self._backend is None:
            return UNAVAILABLE_MESSAGE
        prompt = f"{context}\n\nQuestion: {question}" if context else question
        try:
            return await self._backend.generate(prompt)
        except Exception as exc:
            self._log_failure("answering contextual query", exc)
            return RETRY_MESSAGE

    async def ask_with_history(
        self,
        question: str,
        history: Iterable[TurnLike] = (),
        system_prompt: str = "",
    ) -> str:
        """Continue a conversation seeded with prior `{role, content}` turns."""
        if self._backend is None:
            return CONFIG_ERROR_MESSAGE
        message = f"{system_prompt}\n\nUser message: {question}" if system_prompt else question
        try:
            session = self._backend.start_chat(
                translate_history(history), max_output_tokens=CHAT_MAX_TOKENS
            )
            return await session.send(message)
        except Exception as exc:
            self._log_failure("answering with history", exc)
            return RETRY_MESSAGE

    async def verify_progress_update(self, content: str) -> ProgressFeedback:
        """Review a daily progress update and return coaching feedback."""
        if self._backend is None:
            return DEFAULT_FEEDBACK
        try:
            response = await self._backend.generate(
                build_progress_prompt(content),
                system_instruction=PROGRESS_SYSTEM_PROMPT,
                max_output_tokens=PROGRESS_MAX_TOKENS,
            )
        except Exception as exc:
            self._log_failure("verifying progress update", exc)
            return DEFAULT_FEEDBACK
        return parse_feedback(response)


# Singleton instance
_ai_service: Optional[AIService] = None


def get_ai_service() -> AIService:
    """Get or create the process-wide AI service from the environment."""
    global _ai_service
    if _ai_service is None:
        _ai_service = AIService.from_config(AIConfig.from_env())
    return _ai_service


__all__ = [
    "AIBackend",
    "AIBackendError",
    "AIConfig",
    "AIService",
    "CHAT_MAX_TOKENS",
    "CONFIG_ERROR_MESSAGE",
    "ErrorKind",
    "GeminiBackend",
    "MOTIVATION_MAX_TOKENS",
    "OpenRouterBackend",
    "RETRY_LATER_MESSAGE",
    "RETRY_MESSAGE",
    "UNAVAILABLE_MESSAGE",
    "auth_error_message",
    "build_backend",
    "classify_error",
    "get_ai_service",
]
