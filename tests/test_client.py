"""Tests for bot startup."""

from types import SimpleNamespace

import pytest

from study_bot.bot import client
from study_bot.bot.services.calendar_service import CalendarService
from study_bot.bot.services.exceptions import ConfigurationError
from study_bot.bot.services.flash_cards_service import FlashCardService
from study_bot.shared.config import Settings


def test_create_bot_requires_token(tmp_path):
    with pytest.raises(ConfigurationError):
        client.create_bot(Settings(discord_token="", data_dir=tmp_path))


@pytest.mark.asyncio
async def test_run_bot_exits_without_token(monkeypatch, tmp_path):
    monkeypatch.setattr(
        client, "get_settings", lambda: Settings(discord_token="", data_dir=tmp_path)
    )

    with pytest.raises(SystemExit) as exc_info:
        await client.run_bot()

    assert exc_info.value.code == 1


@pytest.mark.asyncio
async def test_setup_bot_services_loads_calendar(tmp_path):
    settings = Settings(discord_token="token", data_dir=tmp_path / "data")
    bot = SimpleNamespace(d=SimpleNamespace())

    client.setup_bot_services(bot, settings)

    assert isinstance(bot.d.calendar_service, CalendarService)
    assert isinstance(bot.d.flash_card_service, FlashCardService)
    assert (tmp_path / "data").is_dir()
    assert (await bot.d.calendar_service.snapshot()).assignments == {}
