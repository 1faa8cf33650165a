"""Data models shared by the flash card and calendar services."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from dataclasses import field
from datetime import date


@dataclass(frozen=True)
class FilePayload:
    """Raw attachment bytes together with their filename."""

    data: bytes
    filename: str


@dataclass(frozen=True)
class Deck(FilePayload):
    """A flash card deck export."""


@dataclass(frozen=True)
class Notification(FilePayload):
    """A file attached to an assignment (task sheet, rubric...)."""


@dataclass
class Submission:
    """A deck posted for review on behalf of a user."""

    deck: Deck
    message_id: int
    author_id: int
    accepted: bool = False

    @property
    def author_mention(self) -> str:
        return f"<@{self.author_id}>"


@dataclass
class Assignment:
    """An assignment proposed for the shared calendar."""

    subject: str
    due_date: date
    notifications: list[Notification] = field(default_factory=list)
    accepted: bool = False

    def __str__(self) -> str:
        return f"{self.subject}: Due on {self.due_date.day}/{self.due_date.month}."

    def is_overdue(self, today: date) -> bool:
        return self.due_date < today


@dataclass
class CalendarData:
    """All assignments, keyed by the id of their review message.

    This is the unit of persistence.
    """

    assignments: dict[int, Assignment] = field(default_factory=dict)

    def accepted_assignments(self) -> list[Assignment]:
        return [a for a in self.assignments.values() if a.accepted]

    def is_outdated(self, today: date) -> bool:
        return any(a.is_overdue(today) for a in self.assignments.values())

    def snapshot(self) -> CalendarData:
        """Deep copy that can be used after the calendar lock is released."""
        return copy.deepcopy(self)
