"""Protocols and base class shared by bot services."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from study_bot.bot.services.models import FilePayload
from study_bot.shared.config import Settings

logger = logging.getLogger(__name__)


class ChatGatewayProtocol(Protocol):
    """Chat platform operations the services depend on."""

    async def count_channel_members(self, channel_id: int) -> int:
        """Number of members able to see the channel, the bot included."""
        ...

    async def count_reactions(
        self, channel_id: int, message_id: int, emoji: str
    ) -> int:
        """Number of users who reacted to a message with ``emoji``."""
        ...

    async def send_message(
        self,
        channel_id: int,
        content: str | None = None,
        attachments: Sequence[FilePayload] = (),
    ) -> int:
        """Post a message and return its id."""
        ...

    async def add_reaction(self, channel_id: int, message_id: int, emoji: str) -> None:
        ...

    async def clear_channel(self, channel_id: int) -> int:
        """Delete every message in a channel, returning how many were deleted."""
        ...

    async def grant_role(self, channel_id: int, user_id: int, role_name: str) -> None:
        """Give ``user_id`` the role named ``role_name`` in the channel's guild."""
        ...


class BaseService:
    """Common wiring for services backed by the chat gateway."""

    def __init__(
        self,
        gateway: ChatGatewayProtocol,
        settings: Settings,
        service_name: str,
    ):
        """Initialize base service.

        Args:
            gateway: Chat platform operations
            settings: Bot settings (channels, emoji, role names)
            service_name: Name used in log messages
        """
        self._gateway = gateway
        self._settings = settings
        self._service_name = service_name
        logger.debug(f"Initialized {service_name}")

    @property
    def gateway(self) -> ChatGatewayProtocol:
        return self._gateway

    @property
    def settings(self) -> Settings:
        return self._settings


class AttachmentProtocol(Protocol):
    """Downloadable message attachment (``hikari.Attachment`` satisfies it)."""

    filename: str

    async def read(self) -> bytes:
        ...
