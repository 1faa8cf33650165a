"""On-disk persistence of the calendar."""

from __future__ import annotations

import asyncio
import logging
import os
import pickle
import tempfile
from pathlib import Path

from study_bot.bot.services.models import CalendarData

logger = logging.getLogger(__name__)


class CalendarStore:
    """Reads and writes :class:`CalendarData` as a single pickle file.

    The file carries no schema version; changing the model classes needs a
    migration of existing files.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._write_lock = asyncio.Lock()

    def load(self) -> CalendarData:
        """Load the calendar, or return an empty one when no file exists yet.

        The containing directory is created when missing.
        """
        if not self.path.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
            logger.info(f"No calendar at {self.path}, starting empty")
            return CalendarData()

        with self.path.open("rb") as f:
            calendar = pickle.load(f)

        logger.info(f"Loaded {len(calendar.assignments)} assignments from {self.path}")
        return calendar

    async def save(self, calendar: CalendarData) -> None:
        """Overwrite the file with ``calendar``.

        Saves are serialized; the last one to start wins.
        """
        async with self._write_lock:
            await asyncio.to_thread(self._write, calendar)
        logger.debug(f"Saved {len(calendar.assignments)} assignments to {self.path}")

    def _write(self, calendar: CalendarData) -> None:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "wb") as f:
                pickle.dump(calendar, f)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
