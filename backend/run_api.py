"""
Web API runner

Starts the FastAPI server (REST + WebSocket channel).
"""
import signal
import sys
import logging

import uvicorn
from dotenv import load_dotenv

# Load .env before settings are read
load_dotenv()

from taskboard.config.settings import settings  # noqa: E402

logger = logging.getLogger("taskboard.runner")


def signal_handler(signum, frame):
    """Exit cleanly on termination signals."""
    logger.info("Received signal %s, shutting down...", signum)
    sys.exit(0)


def main():
    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)

    logger.info("Starting Taskboard API on port %s", settings.server.port)
    logger.info("Database: %s", settings.database.path)
    logger.info("Environment: %s", settings.app_env)

    uvicorn.run(
        "taskboard.api.app:app",
        host=settings.server.host,
        port=settings.server.port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
