"""Application entry point."""

import uvicorn

from weather_lookup_api.core.config import settings


def main():
    """Run the uvicorn server."""
    uvicorn.run(
        "weather_lookup_api.app:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=False,
        workers=1,  # Single worker: the cache is process-local
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
