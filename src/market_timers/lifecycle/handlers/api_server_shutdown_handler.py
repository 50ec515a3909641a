from __future__ import annotations

import asyncio
from typing import Optional

import uvicorn

from market_timers.lifecycle.shutdown_protocol import IShutdownHandler
from market_timers.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SHUTDOWN)


class APIServerShutdownHandler(IShutdownHandler):
    """
    Shutdown handler for the API server (FastAPI + Uvicorn).

    Asks uvicorn to exit, waits for serve() to return, then cancels the
    task if it is still running so the port is released.

    Priority: 90 (after the timer provider)
    """

    def __init__(self, server: uvicorn.Server, task: Optional[asyncio.Task], grace_seconds: float = 3.0):
        self.server = server
        self.task = task
        self.grace_seconds = grace_seconds

    @property
    def shutdown_priority(self) -> int:
        return 90

    async def shutdown(self) -> None:
        log.info("Stopping API server...")

        if self.task is None or self.task.done():
            log.debug("API server not running")
            return

        self.server.should_exit = True
        try:
            await asyncio.wait_for(asyncio.shield(self.task), timeout=self.grace_seconds)
        except asyncio.TimeoutError:
            log.warn("API server did not exit in time, forcing")
            self.server.force_exit = True
            self.task.cancel()
            await asyncio.gather(self.task, return_exceptions=True)
        except asyncio.CancelledError:
            if not self.task.done():
                raise

        log.info("✓ API server stopped")
