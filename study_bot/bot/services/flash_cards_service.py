"""Flash card deck review service.

Decks sent to the bot in a direct message are posted to the review channel.
Once enough reviewers vote for a deck it is published to the flash cards
channel and its author is given the contributor role.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Sequence

import aiorwlock

from study_bot.bot.services.base import AttachmentProtocol
from study_bot.bot.services.base import BaseService
from study_bot.bot.services.base import ChatGatewayProtocol
from study_bot.bot.services.models import Deck
from study_bot.bot.services.models import Submission
from study_bot.bot.services.voting import is_submission_accepted
from study_bot.shared.config import Settings

logger = logging.getLogger(__name__)


class FlashCardService(BaseService):
    """Flash card submission and review."""

    def __init__(self, gateway: ChatGatewayProtocol, settings: Settings):
        super().__init__(gateway, settings, "FlashCardService")
        self._submissions: list[Submission] = []
        self._lock = aiorwlock.RWLock()

    def is_deck(self, filename: str) -> bool:
        return filename.endswith(self.settings.deck_extension)

    async def list_submissions(self) -> list[Submission]:
        async with self._lock.reader_lock:
            return [dataclasses.replace(s) for s in self._submissions]

    async def find_submission(self, message_id: int) -> Submission | None:
        """Most recent submission posted as ``message_id``, copied out of the list."""
        async with self._lock.reader_lock:
            for submission in reversed(self._submissions):
                if submission.message_id == message_id:
                    return dataclasses.replace(submission)
        return None

    async def handle_direct_message(
        self,
        author_id: int,
        attachments: Sequence[AttachmentProtocol],
    ) -> Submission | None:
        """Post a deck sent by ``author_id`` for review.

        Messages without exactly one deck attachment are ignored.

        Returns:
            The new pending submission, or None when the message was ignored
        """
        if len(attachments) != 1:
            return None

        attachment = attachments[0]
        if not self.is_deck(attachment.filename):
            logger.debug(f"Ignoring non-deck attachment {attachment.filename!r}")
            return None

        deck = Deck(data=await attachment.read(), filename=attachment.filename)

        channel_id = self.settings.for_review_channel_id
        message_id = await self.gateway.send_message(channel_id, attachments=[deck])
        await self.gateway.add_reaction(channel_id, message_id, self.settings.vote_emoji)

        submission = Submission(deck=deck, message_id=message_id, author_id=author_id)
        async with self._lock.writer_lock:
            self._submissions.append(submission)

        logger.info(
            f"Posted deck {deck.filename!r} from user {author_id} for review "
            f"(message {message_id})"
        )
        return dataclasses.replace(submission)

    async def handle_vote(self, channel_id: int, message_id: int) -> bool:
        """Process a vote on a review message.

        Returns:
            False when the message is not a flash card submission, so the
            caller can try other workflows; True otherwise
        """
        submission = await self.find_submission(message_id)
        if submission is None:
            return False

        if submission.accepted:
            logger.debug(f"Submission {message_id} was already accepted")
            return True

        if not await is_submission_accepted(
            self.gateway, channel_id, message_id, self.settings.vote_emoji
        ):
            return True

        if not await self._set_accepted(message_id, True):
            logger.debug(f"Submission {message_id} is already being accepted")
            return True

        try:
            await self._publish(submission)
        except Exception:
            await self._set_accepted(message_id, False)
            raise

        # Published decks stay accepted even when the role grant fails
        await self.gateway.grant_role(
            channel_id, submission.author_id, self.settings.contributor_role_name
        )

        logger.info(
            f"Submission {message_id} accepted, {submission.author_id} is now a "
            f"{self.settings.contributor_role_name}"
        )
        return True

    async def _publish(self, submission: Submission) -> None:
        await self.gateway.send_message(
            self.settings.flash_cards_channel_id,
            f"Submitted by {submission.author_mention}",
            [submission.deck],
        )

    async def _set_accepted(self, message_id: int, accepted: bool) -> bool:
        """Flip the accepted flag, returning False if it already had that value."""
        async with self._lock.writer_lock:
            for submission in reversed(self._submissions):
                if submission.message_id == message_id:
                    if submission.accepted == accepted:
                        return False
                    submission.accepted = accepted
                    return True
        return False
