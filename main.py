"""Application entry point."""

import uvicorn

from weather_screen.core.config import settings


def main():
    """Run the uvicorn server."""
    uvicorn.run(
        "weather_screen.app:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=False,
        workers=1,  # One process owns the single screen session
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
