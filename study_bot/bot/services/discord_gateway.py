"""Chat gateway implementation backed by hikari."""

from __future__ import annotations

import logging
from collections.abc import Sequence

import hikari
import lightbulb

from study_bot.bot.services.exceptions import ResourceNotFoundError
from study_bot.bot.services.exceptions import RoleNotFoundError
from study_bot.bot.services.models import FilePayload

logger = logging.getLogger(__name__)


class HikariGateway:
    """Discord operations used by the bot services."""

    def __init__(self, bot: lightbulb.BotApp):
        self._bot = bot

    async def _guild_channel(self, channel_id: int) -> hikari.GuildChannel:
        channel = self._bot.cache.get_guild_channel(channel_id)
        if channel is None:
            channel = await self._bot.rest.fetch_channel(channel_id)

        if not isinstance(channel, hikari.GuildChannel):
            raise ResourceNotFoundError(f"channel {channel_id} is not a guild channel")
        return channel

    async def count_channel_members(self, channel_id: int) -> int:
        channel = await self._guild_channel(channel_id)

        members: Sequence[hikari.Member] = list(
            self._bot.cache.get_members_view_for_guild(channel.guild_id).values()
        )
        if not members:
            logger.debug(f"No cached members for guild {channel.guild_id}, fetching")
            members = await self._bot.rest.fetch_members(channel.guild_id)

        return sum(
            1
            for member in members
            if lightbulb.utils.permissions_in(channel, member)
            & hikari.Permissions.VIEW_CHANNEL
        )

    async def count_reactions(self, channel_id: int, message_id: int, emoji: str) -> int:
        users = await self._bot.rest.fetch_reactions_for_emoji(
            channel_id, message_id, emoji
        )
        return len(users)

    async def send_message(
        self,
        channel_id: int,
        content: str | None = None,
        attachments: Sequence[FilePayload] = (),
    ) -> int:
        files = [hikari.Bytes(a.data, a.filename) for a in attachments]
        message = await self._bot.rest.create_message(
            channel_id,
            content if content is not None else hikari.UNDEFINED,
            attachments=files or hikari.UNDEFINED,
        )
        return int(message.id)

    async def add_reaction(self, channel_id: int, message_id: int, emoji: str) -> None:
        await self._bot.rest.add_reaction(channel_id, message_id, emoji)

    async def clear_channel(self, channel_id: int) -> int:
        messages = await self._bot.rest.fetch_messages(channel_id)
        for message in messages:
            await self._bot.rest.delete_message(channel_id, message)
        return len(messages)

    async def grant_role(self, channel_id: int, user_id: int, role_name: str) -> None:
        channel = await self._guild_channel(channel_id)

        roles = await self._bot.rest.fetch_roles(channel.guild_id)
        role = next((r for r in roles if r.name == role_name), None)
        if role is None:
            raise RoleNotFoundError(role_name)

        await self._bot.rest.add_role_to_member(channel.guild_id, user_id, role)
        logger.debug(f"Added role {role.name} to user {user_id}")
