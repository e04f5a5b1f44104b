"""Standalone Qt application around the 7TV search dialog."""

import concurrent.futures
import logging
import sys

from PySide6.QtWidgets import QApplication

from ..__version__ import __version__
from ..core.settings import SevenTVSettings
from ..plugin import SevenTVPlugin
from .async_loop import AsyncLoopThread
from .search_dialog import SevenTVSearchDialog

logger = logging.getLogger(__name__)

CLOSE_TIMEOUT = 5.0  # seconds


def run(query: str = "") -> int:
    """Open the search dialog; the picked emote link goes to the clipboard.

    Args:
        query: Search text to start with; empty browses the configured category.
    """
    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName("seventv-links")
    app.setApplicationVersion(__version__)

    settings = SevenTVSettings.load()
    plugin = SevenTVPlugin(settings)
    if query:
        plugin.search.state.query = query
    loop_thread = AsyncLoopThread()
    loop_thread.start()

    dialog = SevenTVSearchDialog(plugin, loop_thread)

    def on_selected(url: str) -> None:
        app.clipboard().setText(url)
        print(url)

    dialog.emote_selected.connect(on_selected)
    result = dialog.exec()

    future = loop_thread.submit(plugin.close())
    if future is not None:
        try:
            future.result(timeout=CLOSE_TIMEOUT)
        except concurrent.futures.TimeoutError as e:
            logger.warning(f"Timed out closing HTTP session: {e}")
    loop_thread.stop()

    return 0 if result else 1
