"""CLI entry point for launching the FastAPI app with uvicorn."""

import logging

import uvicorn

from .app import app
from .dependencies import config

logger = logging.getLogger(__name__)


def main() -> None:
    """Run the relay server."""
    logger.info("Server running on http://localhost:%s", config.server.port)
    logger.info("API endpoint: http://localhost:%s/api/chat", config.server.port)
    logger.info("Make sure n8n is running on %s", config.upstream.base_url)
    uvicorn.run(app, host=config.server.host, port=config.server.port)


if __name__ == "__main__":
    main()
