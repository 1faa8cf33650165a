"""Calendar commands."""

from __future__ import annotations

import logging

import lightbulb

from study_bot.bot.services.models import Notification

plugin = lightbulb.Plugin("calendar")

logger = logging.getLogger(__name__)


@plugin.command
@lightbulb.option("month", "Month the assignment is due", type=int)
@lightbulb.option("day", "Day of the month the assignment is due", type=int)
@lightbulb.option("subject", "Subject the assignment belongs to")
@lightbulb.command("calendar_insert", "Propose an assignment for the calendar")
@lightbulb.implements(lightbulb.PrefixCommand)
async def calendar_insert(ctx: lightbulb.PrefixContext) -> None:
    """Post an assignment, with the message's attachments, for review."""
    notifications = [
        Notification(data=await attachment.read(), filename=attachment.filename)
        for attachment in ctx.event.message.attachments
    ]

    calendar_service = ctx.bot.d.calendar_service
    message_id = await calendar_service.insert_assignment(
        ctx.options.subject,
        ctx.options.day,
        ctx.options.month,
        notifications,
    )
    logger.debug(f"{ctx.author} proposed assignment {message_id}")


def load(bot: lightbulb.BotApp) -> None:
    """Load the calendar plugin."""
    bot.add_plugin(plugin)


def unload(bot: lightbulb.BotApp) -> None:
    """Unload the calendar plugin."""
    bot.remove_plugin(plugin)
