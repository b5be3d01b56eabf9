"""Entry point for the CyberProfile mint API."""

import asyncio

from loguru import logger

from src.api.server import run_api_server
from src.utils.logger import setup_logger


async def main() -> None:
    setup_logger(level="INFO")
    logger.info("Starting CyberProfile mint API...")
    try:
        await run_api_server()
    finally:
        logger.info("Shutdown complete")


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
