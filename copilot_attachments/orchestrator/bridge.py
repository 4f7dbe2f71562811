"""CompletionBridge - turns a status callback stream into one awaitable result."""
import asyncio
import logging
import threading
from typing import Callable, Optional

from ..models import UploadStatus

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[UploadStatus], None]


class CompletionBridge:
    """
    Resolves exactly once, with the first terminal status it receives.

    ``handle`` is safe to call from any thread. Statuses arriving after
    resolution (or after ``abandon``) are dropped.
    """

    def __init__(
        self,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        self._loop = loop or asyncio.get_running_loop()
        self._future: asyncio.Future = self._loop.create_future()
        self._progress_callback = progress_callback
        self._lock = threading.Lock()
        self._resolved = False

    @property
    def resolved(self) -> bool:
        with self._lock:
            return self._resolved

    def _claim(self) -> bool:
        with self._lock:
            if self._resolved:
                return False
            self._resolved = True
            return True

    def handle(self, status: UploadStatus) -> None:
        """Transport callback."""
        if not status.is_terminal:
            if self._progress_callback is None or self.resolved:
                return
            try:
                self._progress_callback(status)
            except Exception as e:
                logger.error("Error in progress callback: %s", e)
            return

        if not self._claim():
            logger.debug("Ignoring %s status after completion", status.state.value)
            return
        self._loop.call_soon_threadsafe(self._set_result, status)

    def _set_result(self, status: UploadStatus) -> None:
        if not self._future.done():
            self._future.set_result(status)

    def abandon(self) -> bool:
        """Stop listening. Returns False if already resolved."""
        claimed = self._claim()
        if claimed:
            self._loop.call_soon_threadsafe(self._future.cancel)
        return claimed

    async def wait(self) -> UploadStatus:
        """Wait for the terminal status."""
        return await asyncio.shield(self._future)
