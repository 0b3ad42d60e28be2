"""
Main FastAPI application entry point for Wagerboard.

Run with:
    uvicorn main:app --reload
"""

from wagerboard.api import create_app
from wagerboard.config import get_settings
from wagerboard.observability import configure_logging

settings = get_settings()
configure_logging(settings.log_level)

app = create_app(settings)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level=settings.log_level.lower(),
    )
