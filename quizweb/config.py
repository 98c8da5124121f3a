"""Application configuration for the quiz server."""
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables."""

    SECRET_KEY: str = Field(
        default="dev-secret-key",
        description="Secret key used to sign the flash-message cookie",
    )
    DEBUG: bool = Field(default=False, description="Enable FastAPI debug mode")
    QUIZ_TITLE: str = Field(default="Quiz", description="Title shown on every page")
    QUESTIONS_FILE: Path = Field(
        default=Path("questions.csv"),
        description="Delimited file the question bank is loaded from at startup",
    )
    QUESTIONS_DELIMITER: str = Field(default=";", min_length=1, max_length=1)
    LOG_FILE: Path = Field(
        default=Path("quiz.log"),
        description="Append-only file receiving one line per completed quiz",
    )
    DEFAULT_DISPLAY_NAME: str = Field(
        default="Anonymous", description="Name used when the start form is left blank"
    )
    DISPLAY_NAME_MAX_LENGTH: int = Field(default=100, ge=1)
    SESSION_COOKIE_MAX_AGE: int = Field(
        default=3600, ge=1, description="Lifetime of the quiz token cookie in seconds"
    )
    SESSION_MAX_AGE_MINUTES: int = Field(
        default=60,
        ge=0,
        description="Unsubmitted sessions older than this are evicted; 0 keeps them forever",
    )

    model_config = {
        "env_file": ".env",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
    }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached instance of the application settings."""
    return Settings()
