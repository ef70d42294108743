"""Process setup shared by the command line entry points."""

import asyncio
import logging

from dotenv import load_dotenv

from analyser.config import get_settings

logger = logging.getLogger(__name__)


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once for the process."""
    load_dotenv()
    settings = get_settings()
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # Per-request logs from the HTTP clients drown out pipeline progress
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)


async def serve(port: int | None = None) -> None:
    """Run the HTTP surface until interrupted."""
    from analyser.web_server import WebServer

    settings = get_settings()
    logger.info(f"Starting analyser web server on port {port or settings.server_port}")
    logger.info(f"Using embedding backend: {settings.embedding_backend.value}")

    web_server = WebServer(port=port)
    runner = await web_server.start()
    try:
        await asyncio.Event().wait()
    finally:
        logger.info("Shutting down...")
        await web_server.stop(runner)
