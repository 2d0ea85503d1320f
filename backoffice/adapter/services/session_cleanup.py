"""
Background service for sweeping expired sessions.
"""

import asyncio
import contextlib
import logging
from typing import Optional

from backoffice.app.services.session_manager import SessionManager

logger = logging.getLogger(__name__)


class SessionCleanupService:
    """Periodically calls SessionManager.cleanup_expired_sessions()."""

    def __init__(self, session_manager: SessionManager, cleanup_interval: int = 3600):
        self.session_manager = session_manager
        self.cleanup_interval = cleanup_interval
        self.is_running = False
        self._task: Optional[asyncio.Task] = None

    async def start(self) -> None:
        if self.is_running:
            logger.warning("Session cleanup service already running")
            return

        self.is_running = True
        self._task = asyncio.create_task(self._cleanup_loop())
        logger.info(f"Session cleanup service started, interval {self.cleanup_interval}s")

    async def stop(self) -> None:
        self.is_running = False
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
        logger.info("Session cleanup service stopped")

    async def run_once(self) -> int:
        try:
            return await self.session_manager.cleanup_expired_sessions()
        except Exception as e:
            logger.error(f"Error in session cleanup: {e}")
            return 0

    async def _cleanup_loop(self) -> None:
        while self.is_running:
            await self.run_once()
            await asyncio.sleep(self.cleanup_interval)
