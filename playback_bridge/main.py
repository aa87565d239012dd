"""Main FastAPI application entry point."""

from pathlib import Path

from dotenv import load_dotenv

from playback_bridge.config import get_settings
from playback_bridge.core.app_factory import create_app
from playback_bridge.logging_config import setup_logging

# Load environment variables from .env file
load_dotenv(Path(__file__).parent.parent / ".env")

# Configure structured logging (JSON to file + console)
setup_logging(get_settings().log_level)

# Create application
app = create_app()


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Playback Bridge API", "docs": "/docs", "login": "/login"}


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "playback_bridge.main:app",
        host=settings.api_host,
        port=settings.api_port,
    )
