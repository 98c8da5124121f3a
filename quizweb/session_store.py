"""
In-memory storage for quiz sessions.

A session exists from the moment a user starts the quiz until exactly one
submission consumes it. Data is lost on server restart; sessions still in
progress at that point are simply abandoned.
"""
from __future__ import annotations

import abc
import logging
import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from quizweb.question_bank import QuestionBank


logger = logging.getLogger("quizweb.session_store")

TOKEN_BYTES = 32


class SessionNotFound(LookupError):
    """No live session exists for the presented token."""


class TokenCollisionError(RuntimeError):
    """A freshly generated token matched a live session."""


@dataclass(frozen=True)
class QuizSession:
    """One in-progress attempt. Only its presence in the store ever changes."""

    token: str
    display_name: str
    started_at: datetime
    bank: QuestionBank


class SessionStore(abc.ABC):
    """Lifecycle owner for quiz sessions."""

    @abc.abstractmethod
    def create(self, display_name: str, bank: QuestionBank) -> str:
        """Start a session and return its token."""

    @abc.abstractmethod
    def peek(self, token: str) -> Optional[QuizSession]:
        """Return the live session for ``token`` without consuming it."""

    @abc.abstractmethod
    def take_for_submission(self, token: str) -> Optional[QuizSession]:
        """Remove and return the session for ``token``; at most one caller wins."""


class InMemorySessionStore(SessionStore):
    """Thread-safe dictionary-backed session store with optional expiry."""

    def __init__(
        self,
        max_age: Optional[timedelta] = None,
        clock: Callable[[], datetime] = datetime.now,
        token_factory: Callable[[], str] = lambda: secrets.token_urlsafe(TOKEN_BYTES),
    ):
        self._sessions: dict[str, QuizSession] = {}
        self._lock = threading.Lock()
        self._max_age = max_age
        self._clock = clock
        self._token_factory = token_factory

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def create(self, display_name: str, bank: QuestionBank) -> str:
        if bank is None:
            raise ValueError("A session needs a question bank")
        now = self._clock()
        token = self._token_factory()
        with self._lock:
            self._evict_expired(now)
            if token in self._sessions:
                raise TokenCollisionError("Generated session token is already in use")
            self._sessions[token] = QuizSession(
                token=token,
                display_name=display_name,
                started_at=now,
                bank=bank,
            )
        logger.info("Quiz session %s… started for %r", token[:8], display_name)
        return token

    def peek(self, token: str) -> Optional[QuizSession]:
        if not token:
            return None
        now = self._clock()
        with self._lock:
            session = self._sessions.get(token)
            if session is not None and self._is_expired(session, now):
                del self._sessions[token]
                return None
            return session

    def take_for_submission(self, token: str) -> Optional[QuizSession]:
        if not token:
            return None
        now = self._clock()
        with self._lock:
            session = self._sessions.pop(token, None)
        if session is None or self._is_expired(session, now):
            return None
        return session

    def clear(self) -> None:
        """Drop every session; in-progress attempts become abandoned."""
        with self._lock:
            self._sessions.clear()

    def cleanup_expired(self) -> int:
        """Remove sessions older than the configured maximum age."""
        with self._lock:
            return self._evict_expired(self._clock())

    def _is_expired(self, session: QuizSession, now: datetime) -> bool:
        if self._max_age is None:
            return False
        return now - session.started_at > self._max_age

    def _evict_expired(self, now: datetime) -> int:
        # Caller holds self._lock.
        if self._max_age is None:
            return 0
        expired = [key for key, value in self._sessions.items() if self._is_expired(value, now)]
        for key in expired:
            del self._sessions[key]
        if expired:
            logger.info("Evicted %d abandoned quiz sessions", len(expired))
        return len(expired)
