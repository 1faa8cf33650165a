"""Shared fixtures and fakes for bot service tests."""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from datetime import date

import pytest
import pytest_asyncio

from study_bot.bot.services.calendar_service import CalendarService
from study_bot.bot.services.exceptions import RoleNotFoundError
from study_bot.bot.services.flash_cards_service import FlashCardService
from study_bot.bot.services.models import CalendarData
from study_bot.bot.services.storage import CalendarStore
from study_bot.shared.config import Settings

TODAY = date(2026, 9, 1)


@dataclass
class SentMessage:
    channel_id: int
    message_id: int
    content: str | None
    filenames: list[str] = field(default_factory=list)


class FakeGateway:
    """In-memory stand-in for the Discord gateway."""

    def __init__(self, members: int = 5):
        self.members = members
        self.roles = {"contributor"}
        self.sent: list[SentMessage] = []
        self.live: list[SentMessage] = []
        self.reactions: dict[int, int] = {}
        self.reactions_added: list[tuple[int, int, str]] = []
        self.cleared: list[int] = []
        self.roles_granted: list[tuple[int, str]] = []
        self._next_id = 1000

    def vote(self, message_id: int, count: int = 1) -> None:
        self.reactions[message_id] = self.reactions.get(message_id, 0) + count

    def messages_in(self, channel_id: int) -> list[SentMessage]:
        return [m for m in self.live if m.channel_id == channel_id]

    async def count_channel_members(self, channel_id: int) -> int:
        return self.members

    async def count_reactions(self, channel_id: int, message_id: int, emoji: str) -> int:
        return self.reactions.get(message_id, 0)

    async def send_message(self, channel_id, content=None, attachments=()):
        self._next_id += 1
        message = SentMessage(
            channel_id, self._next_id, content, [a.filename for a in attachments]
        )
        self.sent.append(message)
        self.live.append(message)
        return message.message_id

    async def add_reaction(self, channel_id: int, message_id: int, emoji: str) -> None:
        self.reactions_added.append((channel_id, message_id, emoji))
        self.vote(message_id)

    async def clear_channel(self, channel_id: int) -> int:
        self.cleared.append(channel_id)
        removed = self.messages_in(channel_id)
        self.live = [m for m in self.live if m.channel_id != channel_id]
        return len(removed)

    async def grant_role(self, channel_id: int, user_id: int, role_name: str) -> None:
        if role_name not in self.roles:
            raise RoleNotFoundError(role_name)
        self.roles_granted.append((user_id, role_name))


class FakeAttachment:
    def __init__(self, filename: str, data: bytes = b"deck-bytes"):
        self.filename = filename
        self.data = data
        self.reads = 0

    async def read(self) -> bytes:
        self.reads += 1
        return self.data


class RecordingStore(CalendarStore):
    """Calendar store that counts saves."""

    def __init__(self, path):
        super().__init__(path)
        self.saves: list[CalendarData] = []

    async def save(self, calendar: CalendarData) -> None:
        self.saves.append(calendar)
        await super().save(calendar)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        discord_token="test-token",
        data_dir=tmp_path / "data",
        calendar_year=2026,
        for_review_channel_id=1,
        flash_cards_channel_id=2,
        calendar_channel_id=3,
    )


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def store(settings):
    return RecordingStore(settings.calendar_path)


@pytest_asyncio.fixture
async def flash_card_service(gateway, settings):
    return FlashCardService(gateway, settings)


@pytest.fixture
def make_calendar_service(gateway, settings, store):
    """Build a calendar service, optionally preloaded with ``calendar``."""

    def _make(calendar: CalendarData | None = None, today: date = TODAY):
        store.load()
        return CalendarService(gateway, settings, store, calendar, today=lambda: today)

    return _make


@pytest_asyncio.fixture
async def calendar_service(make_calendar_service):
    return make_calendar_service()


class FakeLazyIterator:
    """Awaitable result of hikari REST list calls, with ``limit()``."""

    def __init__(self, items):
        self.items = list(items)
        self.limited_to = None

    def limit(self, count: int) -> FakeLazyIterator:
        self.limited_to = count
        return self

    async def _collect(self):
        if self.limited_to is None:
            return list(self.items)
        return self.items[: self.limited_to]

    def __await__(self):
        return self._collect().__await__()
