"""Background asyncio event loop for Qt widgets."""

import asyncio
import concurrent.futures
import logging
import threading
from collections.abc import Coroutine

from PySide6.QtCore import QThread

logger = logging.getLogger(__name__)

LOOP_START_TIMEOUT = 5.0  # seconds


class AsyncLoopThread(QThread):
    """Worker thread that owns one asyncio event loop.

    All controller and client coroutines run on this loop, so their state
    is only ever touched from one thread. Widgets hand work over with
    submit() and get results back through Qt signals.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self._loop: asyncio.AbstractEventLoop | None = None
        self._ready = threading.Event()

    def run(self):
        """Run the event loop until stop() is called."""
        self._loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self._loop)
        self._ready.set()
        try:
            self._loop.run_forever()
        finally:
            try:
                self._loop.run_until_complete(self._loop.shutdown_asyncgens())
            finally:
                self._loop.close()
                self._loop = None
                self._ready.clear()

    def submit(self, coro: Coroutine) -> concurrent.futures.Future | None:
        """Schedule a coroutine on the loop from any thread."""
        if not self._ready.wait(LOOP_START_TIMEOUT) or self._loop is None:
            logger.error("Async loop not running, dropping task")
            coro.close()
            return None
        return asyncio.run_coroutine_threadsafe(coro, self._loop)

    def stop(self):
        """Stop the loop and wait for the thread to finish."""
        if self._loop and self._loop.is_running():
            self._loop.call_soon_threadsafe(self._loop.stop)
        self.wait()
