"""Routing of gateway events to the flash card and calendar services.

Each event is handled in isolation: failures are logged and never reach
the gateway event loop.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from study_bot.bot.services.base import AttachmentProtocol
from study_bot.bot.services.calendar_service import CalendarService
from study_bot.bot.services.flash_cards_service import FlashCardService

logger = logging.getLogger(__name__)


async def dispatch_message(
    calendar_service: CalendarService,
    flash_card_service: FlashCardService,
    *,
    author_id: int,
    is_bot: bool,
    in_guild: bool,
    attachments: Sequence[AttachmentProtocol],
) -> None:
    """Handle a new message.

    Outdated assignments are pruned on every message, before anything else.
    Direct messages from users are then checked for deck submissions.
    """
    try:
        await calendar_service.sweep_expired()
    except Exception as e:
        logger.error(f"Error pruning outdated assignments: {e}")

    if is_bot or in_guild:
        return

    try:
        await flash_card_service.handle_direct_message(author_id, attachments)
    except Exception as e:
        logger.error(f"Error handling deck submission from {author_id}: {e}")


async def dispatch_reaction(
    calendar_service: CalendarService,
    flash_card_service: FlashCardService,
    *,
    channel_id: int,
    message_id: int,
    emoji: str | None,
) -> None:
    """Handle a reaction added to a message.

    Votes go to the flash card workflow first and fall through to the
    calendar when the message is not a deck submission.
    """
    if emoji != flash_card_service.settings.vote_emoji:
        return

    try:
        if await flash_card_service.handle_vote(channel_id, message_id):
            return
        await calendar_service.handle_vote(channel_id, message_id)
    except Exception as e:
        logger.error(f"Error handling vote on message {message_id}: {e}")
