"""Run the FastAPI development server."""
from __future__ import annotations

import uvicorn

from quizweb.config import get_settings


def main() -> None:
    """Launch uvicorn with settings-aware defaults."""
    settings = get_settings()
    uvicorn.run(
        "quizweb.app:app",
        host="0.0.0.0",
        port=8080,
        reload=settings.DEBUG,
        log_level="info",
    )


if __name__ == "__main__":
    main()
