"""Local motivational quotes used when AI generation is unavailable."""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional

import yaml

if TYPE_CHECKING:  # pragma: no cover
    from .llm_client import AIService

logger = logging.getLogger(__name__)

_QUOTES_PATH = Path(__file__).parent / "data" / "quotes.yaml"


class QuoteBook:
    """Loads the fallback quote list and picks one per calendar day."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or _QUOTES_PATH
        self._quotes: List[str] = []
        self._load()

    def _load(self) -> None:
        if not self._path.exists():
            logger.warning("Quote file %s not found; no fallback quotes loaded", self._path)
            self._quotes = []
            return
        with self._path.open("r", encoding="utf-8") as handle:
            raw = yaml.safe_load(handle) or {}
        entries = raw.get("quotes") if isinstance(raw, dict) else None
        if not isinstance(entries, list):
            logger.warning("Quote file %s has no quote list; no fallback quotes loaded", self._path)
            self._quotes = []
            return
        self._quotes = [
            str(item).strip() for item in entries if item and str(item).strip()
        ]

    @property
    def quotes(self) -> List[str]:
        return list(self._quotes)

    def daily_quote(self, day: Optional[date] = None) -> str:
        """Return the quote for `day` (today by default); rotates by day of year."""

        if not self._quotes:
            return ""
        day = day or date.today()
        return self._quotes[day.timetuple().tm_yday % len(self._quotes)]


_quote_book: Optional[QuoteBook] = None


def get_quote_book() -> QuoteBook:
    global _quote_book
    if _quote_book is None:
        _quote_book = QuoteBook()
    return _quote_book


async def motivation_message(
    service: "AIService",
    day: Optional[date] = None,
    quote_book: Optional[QuoteBook] = None,
) -> str:
    """AI-generated motivation, or the daily quote when the service returns None."""

    message = await service.generate_motivation()
    if message:
        return message
    return (quote_book or get_quote_book()).daily_quote(day)


__all__ = ["QuoteBook", "get_quote_book", "motivation_message"]
