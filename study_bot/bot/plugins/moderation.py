"""Moderation commands."""

from __future__ import annotations

import logging

import hikari
import lightbulb

plugin = lightbulb.Plugin("moderation")

logger = logging.getLogger(__name__)


@plugin.command
@lightbulb.add_checks(
    lightbulb.guild_only,
    lightbulb.has_guild_permissions(hikari.Permissions.MANAGE_MESSAGES),
)
@lightbulb.option("count", "Number of messages to delete", type=int)
@lightbulb.command("prune", "Delete the messages before this one")
@lightbulb.implements(lightbulb.PrefixCommand)
async def prune(ctx: lightbulb.PrefixContext) -> None:
    """Delete ``count`` messages preceding the command, then the command itself."""
    message = ctx.event.message

    messages = await ctx.app.rest.fetch_messages(
        ctx.channel_id, before=message.id
    ).limit(ctx.options.count)

    if messages:
        await ctx.app.rest.delete_messages(ctx.channel_id, messages)
    await message.delete()

    logger.info(f"{ctx.author} pruned {len(messages)} messages in {ctx.channel_id}")


async def on_moderation_error(event: lightbulb.CommandErrorEvent) -> bool:
    if isinstance(event.exception, lightbulb.MissingRequiredPermission):
        await event.context.respond(
            "You need to have Manage Messages to use prune.", reply=True
        )
        return True
    return False


plugin.set_error_handler(on_moderation_error)


def load(bot: lightbulb.BotApp) -> None:
    """Load the moderation plugin."""
    bot.add_plugin(plugin)


def unload(bot: lightbulb.BotApp) -> None:
    """Unload the moderation plugin."""
    bot.remove_plugin(plugin)
