"""Tests for fallback motivational quotes."""
from __future__ import annotations

from datetime import date
from unittest.mock import AsyncMock, Mock

import pytest

from beelert.quotes import QuoteBook, get_quote_book, motivation_message


def test_bundled_quotes_load():
    book = get_quote_book()
    assert len(book.quotes) == 30
    assert all(quote for quote in book.quotes)


def test_daily_quote_rotates_by_day_of_year(tmp_path):
    path = tmp_path / "quotes.yaml"
    path.write_text("quotes:\n  - first\n  - second\n  - third\n", encoding="utf-8")
    book = QuoteBook(path)

    # 1 January is day 1 of the year.
    assert book.daily_quote(date(2024, 1, 1)) == "second"
    assert book.daily_quote(date(2024, 1, 2)) == "third"
    assert book.daily_quote(date(2024, 1, 3)) == "first"
    assert book.daily_quote(date(2024, 1, 1)) == book.daily_quote(date(2024, 1, 1))


def test_missing_quote_file_yields_empty_quote(tmp_path):
    book = QuoteBook(tmp_path / "absent.yaml")
    assert book.quotes == []
    assert book.daily_quote(date(2024, 5, 5)) == ""


@pytest.mark.asyncio
async def test_motivation_message_prefers_ai(tmp_path):
    service = Mock()
    service.generate_motivation = AsyncMock(return_value="Ship it! 🚀")
    assert await motivation_message(service) == "Ship it! 🚀"


@pytest.mark.asyncio
async def test_motivation_message_falls_back_to_quote(tmp_path):
    path = tmp_path / "quotes.yaml"
    path.write_text("quotes:\n  - only quote\n", encoding="utf-8")
    service = Mock()
    service.generate_motivation = AsyncMock(return_value=None)

    result = await motivation_message(service, date(2024, 3, 1), quote_book=QuoteBook(path))

    assert result == "only quote"


@pytest.mark.parametrize("content", ["quotes: null\n", "- loose\n- list\n", "quotes: just one string\n"])
def test_malformed_quote_file_yields_no_quotes(tmp_path, content):
    path = tmp_path / "quotes.yaml"
    path.write_text(content, encoding="utf-8")
    book = QuoteBook(path)
    assert book.quotes == []
    assert book.daily_quote(date(2024, 5, 5)) == ""


@pytest.mark.asyncio
async def test_motivation_message_survives_malformed_quote_file(tmp_path):
    path = tmp_path / "quotes.yaml"
    path.write_text("quotes: null\n", encoding="utf-8")
    service = Mock()
    service.generate_motivation = AsyncMock(return_value=None)

    assert await motivation_message(service, quote_book=QuoteBook(path)) == ""
