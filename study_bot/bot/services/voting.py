"""Review vote tally.

A submission is accepted once at least half of the reviewers able to see
the review channel have reacted with the vote emoji. The bot is a member of
the channel and reacts to every submission itself, so it is subtracted
from both counts.
"""

from __future__ import annotations

import logging
import math

from study_bot.bot.services.base import ChatGatewayProtocol

logger = logging.getLogger(__name__)


def eligible_reviewers(member_count: int) -> int:
    """Channel members minus the bot."""
    return max(member_count - 1, 0)


def counted_votes(reactor_count: int) -> int:
    """Reactors minus the bot's own reaction."""
    return max(reactor_count - 1, 0)


def required_votes(reviewers: int) -> int:
    """Half the reviewers, rounding halves away from zero.

    ``round()`` rounds halves to even, which would make a single reviewer
    need zero votes.
    """
    return math.floor(reviewers / 2 + 0.5)


def has_enough_votes(votes: int, reviewers: int) -> bool:
    return votes >= required_votes(reviewers)


async def is_submission_accepted(
    gateway: ChatGatewayProtocol,
    channel_id: int,
    message_id: int,
    emoji: str,
) -> bool:
    """Check whether the review message has crossed the acceptance threshold.

    Platform errors propagate to the caller.
    """
    reviewers = eligible_reviewers(await gateway.count_channel_members(channel_id))
    votes = counted_votes(await gateway.count_reactions(channel_id, message_id, emoji))

    logger.debug(
        f"Message {message_id} has {votes}/{required_votes(reviewers)} votes "
        f"({reviewers} reviewers)"
    )
    return has_enough_votes(votes, reviewers)
