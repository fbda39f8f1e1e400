"""Process entry point: boots the economy runtime and an operator console.

Run with: python -m src.main

Console commands (one per line on stdin):
    refresh  reload economies from the store and clear the user cache
    stop     shut down
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import asyncio
import logging
import sys

from sqlalchemy import text

from config.settings import settings
from src.eco_common.database import engine
from src.runtime import EconomyRuntime

logger = logging.getLogger("eco.console")


async def handle_command(runtime: EconomyRuntime, command: str) -> bool:
    """Execute one console command. Returns False when the process should stop."""
    command = command.strip().lower()
    if command == "refresh":
        await runtime.refresh()
        logger.info("Refresh complete")
    elif command in ("stop", "exit"):
        return False
    elif command:
        logger.warning("Unknown command: %s", command)
    return True


async def serve() -> None:
    # Startup: verify DB connection before loading caches
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))

    runtime = EconomyRuntime()
    await runtime.start()
    loop = asyncio.get_running_loop()
    try:
        while True:
            line = await loop.run_in_executor(None, sys.stdin.readline)
            if not line:  # EOF
                break
            if not await handle_command(runtime, line):
                break
    finally:
        await runtime.close()


def main() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting %s", settings.APP_NAME)
    asyncio.run(serve())


if __name__ == "__main__":
    main()
