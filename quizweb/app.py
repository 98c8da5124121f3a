"""FastAPI application entry point for the quiz server."""
from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from quizweb.config import get_settings
from quizweb.session_store import SessionNotFound


logger = logging.getLogger("quizweb.web")
logging.basicConfig(level=logging.INFO)

settings = get_settings()
BASE_DIR = Path(__file__).resolve().parent
VERSION = "1.0.0"
SESSION_EXPIRED_MESSAGE = "Your quiz session has expired. Please start again."

app = FastAPI(title=settings.QUIZ_TITLE, debug=settings.DEBUG)

templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))
app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")

app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SECRET_KEY,
    session_cookie="quiz_flash",
    https_only=False,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def on_startup() -> None:
    """Load the question bank; an unreadable source aborts startup."""
    from quizweb.dependencies import get_question_bank

    load_bank = app.dependency_overrides.get(get_question_bank, get_question_bank)
    bank = load_bank()
    logger.info("%s starting up with %d questions", settings.QUIZ_TITLE, len(bank))


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Simple health check endpoint."""
    return {"status": "healthy", "version": VERSION}


@app.exception_handler(SessionNotFound)
async def session_not_found_handler(request: Request, exc: SessionNotFound):
    """Send the user back to the start page whatever happened to their session."""
    detail = SESSION_EXPIRED_MESSAGE
    accept_header = request.headers.get("accept", "")
    if "text/html" in accept_header:
        messages = request.session.get("flash_messages", [])
        messages.append({"message": detail, "category": "warning"})
        request.session["flash_messages"] = messages
        return RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
    return JSONResponse({"detail": detail}, status_code=status.HTTP_400_BAD_REQUEST)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Custom HTTP exception responses."""
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        detail = exc.detail or "The requested resource was not found."
    else:
        detail = exc.detail or "An error occurred while processing the request."
    return JSONResponse({"detail": detail}, status_code=exc.status_code)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Catch-all handler for unhandled errors."""
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        {"detail": "Internal server error. Please try again later."},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


# Import routes after app, middleware, and templates are configured to avoid circular imports.
from quizweb.routes import quiz as quiz_routes  # noqa: E402  pylint: disable=wrong-import-position

app.include_router(quiz_routes.router)
