"""Entry point for the token holder analytics API."""

import asyncio

from loguru import logger

from src.api.server import run_api_server
from src.utils.logger import setup_logger


async def main() -> None:
    setup_logger(level="INFO")
    logger.info("Starting token holder analytics API...")

    # uvicorn traps SIGINT/SIGTERM and runs the lifespan shutdown (closes Helius)
    await run_api_server()

    logger.info("Shutdown complete")


if __name__ == "__main__":
    asyncio.run(main())
