"""Append-only record of completed quiz attempts."""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Union

from .scoring import format_duration


logger = logging.getLogger("quizweb.outcome_log")

TIMESTAMP_FORMAT = "%Y-%m-%d|%H:%M:%S"


@dataclass(frozen=True)
class OutcomeLogEntry:
    timestamp: datetime
    display_name: str
    correct_count: int
    total: int
    elapsed: timedelta

    @property
    def elapsed_formatted(self) -> str:
        return format_duration(self.elapsed)

    def to_line(self) -> str:
        # One entry must stay on one line whatever the user typed.
        name = " ".join(self.display_name.split())
        return (
            f"{self.timestamp.strftime(TIMESTAMP_FORMAT)}, {name}, "
            f"correct answers {self.correct_count} of {self.total}, "
            f"time: {self.elapsed_formatted}\n"
        )


class OutcomeLog:
    """Serialised appends to a text file, one line per completed quiz."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = threading.Lock()

    def append(self, entry: OutcomeLogEntry) -> bool:
        """
        Write ``entry`` to the log file.

        Returns False when the file cannot be written. The failure is logged
        and never raised so the user still receives their result.
        """
        line = entry.to_line()
        try:
            with self._lock:
                with open(self.path, "a", encoding="utf-8") as handle:
                    handle.write(line)
        except OSError:
            logger.exception("Failed to write quiz outcome to %s", self.path)
            return False
        return True
