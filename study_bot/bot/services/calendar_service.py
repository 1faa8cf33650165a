"""Shared assignment calendar.

Assignments are proposed with the ``calendar_insert`` command and go through
the same review vote as flash card decks. Accepted assignments are mirrored
to the calendar channel, which is rebuilt from scratch on every change.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from collections.abc import Sequence
from datetime import date

import aiorwlock

from study_bot.bot.services.base import BaseService
from study_bot.bot.services.base import ChatGatewayProtocol
from study_bot.bot.services.exceptions import AssignmentNotFoundError
from study_bot.bot.services.exceptions import ValidationError
from study_bot.bot.services.models import Assignment
from study_bot.bot.services.models import CalendarData
from study_bot.bot.services.models import Notification
from study_bot.bot.services.storage import CalendarStore
from study_bot.bot.services.voting import is_submission_accepted
from study_bot.shared.config import Settings

logger = logging.getLogger(__name__)


class CalendarService(BaseService):
    """Assignment calendar management service."""

    def __init__(
        self,
        gateway: ChatGatewayProtocol,
        settings: Settings,
        store: CalendarStore,
        calendar: CalendarData | None = None,
        today: Callable[[], date] = date.today,
    ):
        """Initialize calendar service.

        Args:
            gateway: Chat platform operations
            settings: Bot settings
            store: Persistence for the calendar
            calendar: Previously saved calendar, empty when omitted
            today: Source of the current local date
        """
        super().__init__(gateway, settings, "CalendarService")
        self._store = store
        self._calendar = calendar if calendar is not None else CalendarData()
        self._lock = aiorwlock.RWLock()
        self._today = today
        self._needs_refresh = False

    def due_year(self) -> int:
        return self.settings.calendar_year or self._today().year

    async def snapshot(self) -> CalendarData:
        async with self._lock.reader_lock:
            return self._calendar.snapshot()

    async def get_assignment(self, message_id: int) -> Assignment:
        """Copy of the assignment reviewed in ``message_id``.

        Raises:
            AssignmentNotFoundError: No assignment uses that review message
        """
        async with self._lock.reader_lock:
            assignment = self._calendar.assignments.get(message_id)
            if assignment is None:
                raise AssignmentNotFoundError(message_id)
            return copy.deepcopy(assignment)

    async def insert_assignment(
        self,
        subject: str,
        day: int,
        month: int,
        notifications: Sequence[Notification] = (),
    ) -> int:
        """Post a new assignment for review.

        Returns:
            Id of the review message, which keys the assignment

        Raises:
            ValidationError: The day and month do not form a valid date
        """
        try:
            due_date = date(self.due_year(), month, day)
        except ValueError as e:
            raise ValidationError(f"invalid due date {day}/{month}: {e}") from e

        assignment = Assignment(
            subject=subject, due_date=due_date, notifications=list(notifications)
        )

        channel_id = self.settings.for_review_channel_id
        message_id = await self.gateway.send_message(
            channel_id, str(assignment), assignment.notifications
        )

        async with self._lock.writer_lock:
            self._calendar.assignments[message_id] = assignment
            snapshot = self._calendar.snapshot()

        await self.gateway.add_reaction(channel_id, message_id, self.settings.vote_emoji)
        await self._store.save(snapshot)

        logger.info(f"Posted assignment {assignment} for review (message {message_id})")
        return message_id

    async def handle_vote(self, channel_id: int, message_id: int) -> bool:
        """Process a vote on a review message.

        Returns:
            False when no assignment is reviewed in that message
        """
        try:
            assignment = await self.get_assignment(message_id)
        except AssignmentNotFoundError as e:
            logger.debug(f"Ignoring vote: {e}")
            return False

        if assignment.accepted:
            logger.debug(f"Assignment {message_id} was already accepted")
            return True

        if not await is_submission_accepted(
            self.gateway, channel_id, message_id, self.settings.vote_emoji
        ):
            return True

        async with self._lock.writer_lock:
            current = self._calendar.assignments.get(message_id)
            if current is None or current.accepted:
                return True
            current.accepted = True

        logger.info(f"Assignment {assignment} accepted")
        await self.refresh()
        return True

    async def refresh(self) -> None:
        """Rebuild the calendar channel from accepted assignments and persist.

        A failed refresh is retried by the next :meth:`sweep_expired`.
        """
        async with self._lock.writer_lock:
            snapshot = self._calendar.snapshot()
            self._needs_refresh = False

        channel_id = self.settings.calendar_channel_id
        try:
            deleted = await self.gateway.clear_channel(channel_id)

            accepted = snapshot.accepted_assignments()
            for assignment in accepted:
                await self.gateway.send_message(
                    channel_id, str(assignment), assignment.notifications
                )

            # Inserts may have landed while the channel was rebuilt
            await self._store.save(await self.snapshot())
        except Exception:
            self._needs_refresh = True
            raise

        logger.info(
            f"Refreshed calendar: removed {deleted} messages, posted {len(accepted)}"
        )

    async def remove_outdated_assignments(
        self, today: date | None = None
    ) -> list[Assignment]:
        """Drop every assignment due before ``today``."""
        today = today or self._today()

        async with self._lock.writer_lock:
            outdated = [
                message_id
                for message_id, assignment in self._calendar.assignments.items()
                if assignment.is_overdue(today)
            ]
            removed = [self._calendar.assignments.pop(message_id) for message_id in outdated]
            if removed:
                self._needs_refresh = True

        for assignment in removed:
            logger.info(f"Removed outdated assignment {assignment}")
        return removed

    async def sweep_expired(self) -> bool:
        """Prune outdated assignments and refresh once if any were removed.

        A refresh left pending by an earlier failure is retried here too.

        Returns:
            True if the calendar was refreshed
        """
        today = self._today()

        async with self._lock.reader_lock:
            outdated = self._calendar.is_outdated(today)

        if not outdated and not self._needs_refresh:
            return False

        removed = await self.remove_outdated_assignments(today)
        if not removed and not self._needs_refresh:
            return False

        await self.refresh()
        return True
