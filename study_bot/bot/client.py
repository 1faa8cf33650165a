"""Discord bot client setup and configuration."""

from __future__ import annotations

import asyncio
import logging

import hikari
import lightbulb

from study_bot.bot.events import dispatch_message
from study_bot.bot.events import dispatch_reaction
from study_bot.bot.services.calendar_service import CalendarService
from study_bot.bot.services.discord_gateway import HikariGateway
from study_bot.bot.services.exceptions import ConfigurationError
from study_bot.bot.services.flash_cards_service import FlashCardService
from study_bot.bot.services.storage import CalendarStore
from study_bot.shared.config import Settings
from study_bot.shared.config import get_settings

logger = logging.getLogger(__name__)

PLUGINS = (
    "study_bot.bot.plugins.moderation",
    "study_bot.bot.plugins.calendar",
)


def create_bot(settings: Settings | None = None) -> lightbulb.BotApp:
    """Create and configure the Discord bot.

    Raises:
        ConfigurationError: No bot token is configured
    """
    if settings is None:
        settings = get_settings()

    if not settings.discord_token:
        raise ConfigurationError("Discord bot token not provided (DISCORD_TOKEN)")

    intents = (
        hikari.Intents.GUILDS
        | hikari.Intents.GUILD_MEMBERS  # Review channel membership
        | hikari.Intents.GUILD_MESSAGES
        | hikari.Intents.MESSAGE_CONTENT  # Prefix commands
        | hikari.Intents.GUILD_MESSAGE_REACTIONS  # Review votes
        | hikari.Intents.DM_MESSAGES  # Deck submissions
    )

    bot = lightbulb.BotApp(
        token=settings.discord_token,
        prefix=settings.command_prefix,
        intents=intents,
        logs={
            "version": 1,
            "incremental": True,
            "loggers": {
                "hikari": {"level": "INFO"},
                "lightbulb": {"level": "INFO"},
                "study_bot": {"level": settings.log_level},
            },
        },
        banner=None,
    )

    return bot


def setup_bot_services(bot: lightbulb.BotApp, settings: Settings) -> None:
    """Load the saved calendar and register services on ``bot.d``."""
    logger.info("Setting up bot services...")

    store = CalendarStore(settings.calendar_path)
    gateway = HikariGateway(bot)

    bot.d.calendar_service = CalendarService(gateway, settings, store, store.load())
    bot.d.flash_card_service = FlashCardService(gateway, settings)

    logger.info("✓ Bot services setup complete")


def load_plugins(bot: lightbulb.BotApp) -> None:
    for extension in PLUGINS:
        bot.load_extensions(extension)
        logger.info(f"✓ Loaded {extension}")


def register_listeners(bot: lightbulb.BotApp) -> None:
    """Attach gateway event listeners to ``bot``."""

    @bot.listen()
    async def on_started(event: hikari.StartedEvent) -> None:
        bot_user = event.app.get_me()
        if bot_user:
            logger.info(f"{bot_user.username} is connected!")
        else:
            logger.info("Bot started")

    @bot.listen()
    async def on_message_create(event: hikari.MessageCreateEvent) -> None:
        await dispatch_message(
            bot.d.calendar_service,
            bot.d.flash_card_service,
            author_id=int(event.author_id),
            is_bot=event.is_bot,
            in_guild=isinstance(event, hikari.GuildMessageCreateEvent),
            attachments=event.message.attachments,
        )

    @bot.listen()
    async def on_reaction_add(event: hikari.ReactionAddEvent) -> None:
        await dispatch_reaction(
            bot.d.calendar_service,
            bot.d.flash_card_service,
            channel_id=int(event.channel_id),
            message_id=int(event.message_id),
            emoji=event.emoji_name,
        )

    @bot.listen()
    async def on_command_error(event: lightbulb.CommandErrorEvent) -> bool:
        command = event.context.command.name if event.context.command else "unknown"
        logger.error(f"Error in {command} command: {event.exception}")
        return True


async def run_bot() -> None:
    """Run the Discord bot until interrupted."""
    settings = get_settings()

    try:
        bot = create_bot(settings)
    except ConfigurationError as e:
        logger.error(str(e))
        raise SystemExit(1) from e

    setup_bot_services(bot, settings)
    register_listeners(bot)
    load_plugins(bot)

    try:
        await bot.start()
        logger.info("Bot is now running. Press Ctrl+C to stop.")

        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            logger.info("Bot shutdown requested")

    except Exception as e:
        logger.error(f"Bot crashed: {e}")
        raise
    finally:
        logger.info("Shutting down bot...")
        await bot.close()


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    try:
        asyncio.run(run_bot())
    except KeyboardInterrupt:
        logger.info("Bot shutdown requested via keyboard interrupt")


if __name__ == "__main__":
    main()
