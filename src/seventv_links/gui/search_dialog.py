"""7TV emote search dialog with a paged result grid."""

import asyncio
import logging

import aiohttp
from PySide6.QtCore import QSize, Qt, Signal
from PySide6.QtGui import QIcon, QPixmap
from PySide6.QtWidgets import (
    QDialog,
    QFrame,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from ..chat.models import SevenTVEmote
from ..plugin import SevenTVPlugin
from .async_loop import AsyncLoopThread

logger = logging.getLogger(__name__)

EMOTE_BUTTON_SIZE = 48
EMOTE_ICON_SIZE = 40
GRID_COLUMNS = 7


class SevenTVSearchDialog(QDialog):
    """Search the 7TV catalog and pick an emote link to send.

    Picking an emote emits emote_selected with the link to insert into the
    chat box and closes the dialog.
    """

    emote_selected = Signal(str)  # emote link
    _results_changed = Signal()
    _image_loaded = Signal(str, bytes)  # emote id, image data

    def __init__(self, plugin: SevenTVPlugin, loop_thread: AsyncLoopThread, parent=None):
        super().__init__(parent)
        self._plugin = plugin
        self._controller = plugin.search
        self._loop_thread = loop_thread
        self._buttons: dict[str, QPushButton] = {}  # emote id -> button
        self._results_changed.connect(self._on_results_changed)
        self._image_loaded.connect(self._on_image_loaded)
        self._notify = self._results_changed.emit
        self._controller.on_update = self._notify
        self._setup_ui()

        # Reopening keeps the last search; first open browses the category
        self._search.setText(self._controller.state.query)
        if self._controller.emotes:
            self._on_results_changed()
        else:
            self._submit(self._controller.ensure_loaded())

    def _setup_ui(self) -> None:
        self.setWindowTitle("7TV")
        self.resize(420, 460)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)
        layout.setSpacing(6)

        search_row = QHBoxLayout()
        self._search = QLineEdit()
        self._search.setPlaceholderText("Search 7TV Emotes")
        self._search.returnPressed.connect(self._on_search)
        search_row.addWidget(self._search)
        self._search_btn = QPushButton("Search")
        self._search_btn.clicked.connect(self._on_search)
        search_row.addWidget(self._search_btn)
        layout.addLayout(search_row)

        divider = QFrame()
        divider.setFrameShape(QFrame.Shape.HLine)
        layout.addWidget(divider)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self._grid_container = QWidget()
        self._grid = QGridLayout(self._grid_container)
        self._grid.setSpacing(2)
        self._grid.setAlignment(Qt.AlignmentFlag.AlignTop | Qt.AlignmentFlag.AlignLeft)
        scroll.setWidget(self._grid_container)
        layout.addWidget(scroll, 1)

        nav_row = QHBoxLayout()
        self._prev_btn = QPushButton("<")
        self._prev_btn.setFixedWidth(40)
        self._prev_btn.clicked.connect(lambda: self._submit(self._controller.previous_page()))
        nav_row.addWidget(self._prev_btn)
        self._status = QLabel(self._controller.status_text)
        self._status.setAlignment(Qt.AlignmentFlag.AlignCenter)
        nav_row.addWidget(self._status, 1)
        self._next_btn = QPushButton(">")
        self._next_btn.setFixedWidth(40)
        self._next_btn.clicked.connect(lambda: self._submit(self._controller.next_page()))
        nav_row.addWidget(self._next_btn)
        layout.addLayout(nav_row)

    def _submit(self, coro) -> None:
        self._loop_thread.submit(coro)

    def _on_search(self) -> None:
        self._submit(self._controller.search(self._search.text().strip()))

    def _on_results_changed(self) -> None:
        """Rebuild the grid from the controller's current results."""
        self._status.setText(self._controller.status_text)
        self._clear_grid()

        for index, emote in enumerate(self._controller.emotes):
            btn = QPushButton()
            btn.setFixedSize(EMOTE_BUTTON_SIZE, EMOTE_BUTTON_SIZE)
            btn.setIconSize(QSize(EMOTE_ICON_SIZE, EMOTE_ICON_SIZE))
            btn.setToolTip(emote.name)
            btn.setText(emote.name[:6])
            btn.clicked.connect(lambda _=False, e=emote: self._on_emote_clicked(e))
            self._grid.addWidget(btn, index // GRID_COLUMNS, index % GRID_COLUMNS)
            self._buttons[emote.id] = btn
            self._submit(self._load_image(emote))

    def _clear_grid(self) -> None:
        self._buttons.clear()
        while self._grid.count():
            item = self._grid.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()

    async def _load_image(self, emote: SevenTVEmote) -> None:
        """Download a grid thumbnail on the loop thread."""
        url = self._plugin.emote_url(emote)
        try:
            async with self._plugin.client.session.get(url) as resp:
                if resp.status != 200:
                    logger.debug(f"Emote image {emote.id} failed: {resp.status}")
                    return
                data = await resp.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.debug(f"Emote image {emote.id} error: {e}")
            return
        self._image_loaded.emit(emote.id, data)

    def _on_image_loaded(self, emote_id: str, data: bytes) -> None:
        btn = self._buttons.get(emote_id)
        if btn is None:
            return
        pixmap = QPixmap()
        if not pixmap.loadFromData(data):
            return
        btn.setText("")
        btn.setIcon(QIcon(pixmap))

    def _on_emote_clicked(self, emote: SevenTVEmote) -> None:
        self.emote_selected.emit(self._plugin.emote_url(emote))
        self.accept()

    def done(self, result: int) -> None:
        if self._controller.on_update is self._notify:
            self._controller.on_update = None
        super().done(result)
