"""Reusable FastAPI dependencies."""
from datetime import timedelta
from functools import lru_cache

from fastapi import Depends, Request

from quizweb.config import Settings, get_settings as _get_settings
from quizweb.question_bank import QuestionBank, load_question_bank
from quizweb.services.outcome_log import OutcomeLog
from quizweb.session_store import InMemorySessionStore, QuizSession, SessionNotFound, SessionStore


SESSION_COOKIE_NAME = "quiz_session"


def get_settings() -> Settings:
    """Return application settings (cached)."""
    return _get_settings()


@lru_cache(maxsize=1)
def get_question_bank() -> QuestionBank:
    """Load the question bank once per process."""
    settings = _get_settings()
    return load_question_bank(settings.QUESTIONS_FILE, settings.QUESTIONS_DELIMITER)


@lru_cache(maxsize=1)
def get_session_store() -> SessionStore:
    """Return the process-wide session store."""
    settings = _get_settings()
    max_age = None
    if settings.SESSION_MAX_AGE_MINUTES:
        max_age = timedelta(minutes=settings.SESSION_MAX_AGE_MINUTES)
    return InMemorySessionStore(max_age=max_age)


@lru_cache(maxsize=1)
def get_outcome_log() -> OutcomeLog:
    """Return the outcome log bound to the configured file."""
    return OutcomeLog(_get_settings().LOG_FILE)


def get_session_token(request: Request) -> str:
    """Return the quiz token presented by the client, or an empty string."""
    return request.cookies.get(SESSION_COOKIE_NAME, "")


def get_optional_session(
    token: str = Depends(get_session_token),
    store: SessionStore = Depends(get_session_store),
) -> QuizSession | None:
    """Return the in-progress session without consuming it, or None."""
    return store.peek(token)


def take_submitted_session(
    token: str = Depends(get_session_token),
    store: SessionStore = Depends(get_session_store),
) -> QuizSession:
    """Consume the session so the same token can never be scored twice."""
    session = store.take_for_submission(token)
    if session is None:
        raise SessionNotFound(token)
    return session
