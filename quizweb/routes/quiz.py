"""Quiz flow routes: start, answer, submit."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Mapping

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse
from starlette.concurrency import run_in_threadpool

from quizweb.app import SESSION_EXPIRED_MESSAGE, templates
from quizweb.config import Settings
from quizweb.dependencies import (
    SESSION_COOKIE_NAME,
    get_optional_session,
    get_outcome_log,
    get_question_bank,
    get_session_store,
    get_settings,
    take_submitted_session,
)
from quizweb.question_bank import QuestionBank
from quizweb.services.outcome_log import OutcomeLog, OutcomeLogEntry
from quizweb.services.scoring import UNANSWERED, score
from quizweb.session_store import QuizSession, SessionStore

router = APIRouter()
logger = logging.getLogger("quizweb.web")


def _pop_flash_messages(request: Request) -> list[dict[str, str]]:
    messages = request.session.get("flash_messages", [])
    request.session["flash_messages"] = []
    return messages


def _add_flash_message(request: Request, message: str, category: str = "info") -> None:
    messages = request.session.get("flash_messages", [])
    messages.append({"message": message, "category": category})
    request.session["flash_messages"] = messages


def _clean_display_name(name: str, settings: Settings) -> str:
    cleaned = " ".join(part for part in name.strip().split() if part)
    cleaned = cleaned[: settings.DISPLAY_NAME_MAX_LENGTH].strip()
    return cleaned or settings.DEFAULT_DISPLAY_NAME


def _answers_from_form(form: Mapping[str, str], total: int) -> list[int]:
    """Read answers from fields q0..q{total-1}; anything unusable is unanswered."""
    answers = []
    for position in range(total):
        raw = form.get(f"q{position}")
        if not isinstance(raw, str):
            answers.append(UNANSWERED)
            continue
        try:
            answers.append(int(raw.strip()))
        except ValueError:
            answers.append(UNANSWERED)
    return answers


@router.get("/")
async def start_page(request: Request, settings: Settings = Depends(get_settings)):
    """Render the start page with the name form."""
    return templates.TemplateResponse(
        request,
        "start.html",
        {
            "title": settings.QUIZ_TITLE,
            "messages": _pop_flash_messages(request),
        },
    )


@router.post("/start")
async def start_quiz(
    name: str = Form(""),
    settings: Settings = Depends(get_settings),
    store: SessionStore = Depends(get_session_store),
    bank: QuestionBank = Depends(get_question_bank),
):
    """Create a session for the user and send them to the questions."""
    display_name = _clean_display_name(name, settings)
    token = store.create(display_name, bank)

    response = RedirectResponse(url="/quiz", status_code=status.HTTP_303_SEE_OTHER)
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        max_age=settings.SESSION_COOKIE_MAX_AGE,
        path="/",
        httponly=True,
        samesite="lax",
        secure=False,
    )
    return response


@router.get("/quiz")
async def quiz_page(
    request: Request,
    session: QuizSession | None = Depends(get_optional_session),
    settings: Settings = Depends(get_settings),
):
    """Render the questions of an in-progress session."""
    if session is None:
        _add_flash_message(request, SESSION_EXPIRED_MESSAGE, "warning")
        return RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)

    return templates.TemplateResponse(
        request,
        "quiz.html",
        {
            "title": settings.QUIZ_TITLE,
            "display_name": session.display_name,
            "questions": list(session.bank),
            "total": len(session.bank),
        },
    )


@router.post("/submit")
async def submit_quiz(
    request: Request,
    session: QuizSession = Depends(take_submitted_session),
    outcome_log: OutcomeLog = Depends(get_outcome_log),
    settings: Settings = Depends(get_settings),
):
    """Score the one allowed submission, record it and show the result."""
    form = await request.form()
    answers = _answers_from_form(form, len(session.bank))
    finished_at = datetime.now()
    result = score(session.bank, answers, session.started_at, finished_at)

    await run_in_threadpool(
        outcome_log.append,
        OutcomeLogEntry(
            timestamp=finished_at,
            display_name=session.display_name,
            correct_count=result.correct_count,
            total=result.total,
            elapsed=result.elapsed,
        )
    )
    logger.info(
        "Quiz submitted by %r: %d/%d in %s",
        session.display_name,
        result.correct_count,
        result.total,
        result.elapsed_formatted,
    )

    response = templates.TemplateResponse(
        request,
        "result.html",
        {
            "title": settings.QUIZ_TITLE,
            "display_name": session.display_name,
            "result": result,
        },
    )
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")
    return response
