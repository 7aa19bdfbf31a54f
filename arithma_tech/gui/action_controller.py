# arithma_tech/gui/action_controller.py

import logging

from PySide6.QtCore import QObject, QTimer, Signal, Slot

from arithma_tech.core.config_manager import AppSettings, load_settings
from arithma_tech.core.exceptions import StoreError, UnsupportedFormat, ValidationError
from arithma_tech.core.history_store import HistoryStore
from arithma_tech.core.models import COMPLETE_TITLES, InputMode, OperationKind, StatusCode
from arithma_tech.core.operation_controller import ControllerState, OperationController
from arithma_tech.core.progress import SimulatedProgress

logger = logging.getLogger(__name__)

_SUCCESS_CODES = {StatusCode.COMPRESSION_COMPLETE, StatusCode.DECOMPRESSION_COMPLETE}


# --- The Action Controller: the Qt face of the OperationController ---
class ActionController(QObject):
    """
    Adapts the headless OperationController to the Qt event loop.

    It owns the progress timer that drives the controller's ticks and turns the
    controller's callbacks into Qt signals the widgets can connect to. It holds
    no operation state of its own.
    """
    status_updated = Signal(str, str)            # status text, StatusCode name
    progress_percentage_updated = Signal(int)
    state_changed = Signal(str, str)             # "IDLE"/"BUSY", input mode
    mode_changed = Signal(str)
    selection_changed = Signal(str)              # selected file's name, "" when cleared
    show_message_box = Signal(str, str, str)     # type, title, message
    history_changed = Signal()

    def __init__(self, parent=None, store: HistoryStore | None = None, settings: AppSettings | None = None):
        super().__init__(parent)
        self.settings = settings if settings is not None else load_settings()
        self.store = store if store is not None else HistoryStore(self.settings.resolved_database_path())

        self.controller = OperationController(
            self.store,
            progress=SimulatedProgress(self.settings.progress_step),
            on_status=self._on_status,
            on_progress=self.progress_percentage_updated.emit,
            on_complete=self._on_complete,
            on_store_error=self._on_store_error,
        )

        self.progress_timer = QTimer(self)
        self.progress_timer.timeout.connect(self._on_progress_tick)

        self.store.subscribe(self._on_history_changed)

    def initialize_history(self) -> bool:
        """
        Prepares the history database. Call once the UI has connected to our signals.

        A failure is reported but is not fatal: operations still run, they just
        cannot be logged.
        """
        try:
            self.store.initialize()
            return True
        except StoreError as e:
            logger.error(f"History database unavailable: {e}")
            self.show_message_box.emit("critical", "Database Error", "Could not open the SQLite database.")
            return False

    def is_idle(self) -> bool:
        """A helper for the UI to check if an operation is running."""
        return self.controller.is_idle()

    def mode(self) -> InputMode:
        return self.controller.mode

    # --- Input Slots ---

    @Slot()
    def switch_to_text_mode(self):
        self._switch_mode(InputMode.TEXT)

    @Slot()
    def switch_to_file_mode(self):
        self._switch_mode(InputMode.FILE)

    def _switch_mode(self, mode: InputMode):
        self.controller.switch_mode(mode)
        self.mode_changed.emit(self.controller.mode.value)
        self.selection_changed.emit(self._selected_file_name())

    def _selected_file_name(self) -> str:
        selection = self.controller.selection
        return selection.display_name if selection.file_path else ""

    @Slot(str)
    def set_text(self, text: str):
        self.controller.set_text(text)

    @Slot(str)
    def select_file(self, file_path: str):
        """Stages a browsed or dropped file, warning the user if it is not a supported image."""
        try:
            if self.controller.select_file(file_path):
                self.selection_changed.emit(self._selected_file_name())
        except UnsupportedFormat as e:
            self.show_message_box.emit("warning", e.title, e.message)

    @Slot()
    def clear_selection(self):
        self.controller.clear_selection()
        self.selection_changed.emit(self._selected_file_name())

    # --- Operation Slots ---

    @Slot()
    def start_compress(self):
        self._start(OperationKind.COMPRESS)

    @Slot()
    def start_decompress(self):
        self._start(OperationKind.DECOMPRESS)

    def _start(self, kind: OperationKind):
        try:
            accepted = self.controller.request(kind)
        except ValidationError as e:
            self.show_message_box.emit("warning", e.title, e.message)
            return
        if not accepted:
            return

        interval = (self.settings.compress_interval_ms if kind == OperationKind.COMPRESS
                    else self.settings.decompress_interval_ms)
        self.state_changed.emit(ControllerState.BUSY.value, self.controller.mode.value)
        self.progress_timer.start(interval)

    @Slot()
    def _on_progress_tick(self):
        self.controller.tick()

    # --- History Slots ---

    def delete_history_entry(self, timestamp: str) -> bool:
        """Deletes every history row recorded at `timestamp`, warning the user on failure."""
        try:
            self.store.delete_by_timestamp(timestamp)
            return True
        except StoreError as e:
            self.show_message_box.emit("warning", "Delete Failed", f"Could not delete the entry.\n{e}")
            return False

    def shutdown(self):
        """Stops the progress timer and detaches from the history store."""
        self.progress_timer.stop()
        self.store.unsubscribe(self._on_history_changed)

    # --- Controller Callbacks ---

    def _on_status(self, code: StatusCode, text: str):
        self.status_updated.emit(text, code.name)

    def _on_complete(self, kind: OperationKind, mode: InputMode, message: str):
        self.progress_timer.stop()
        self.state_changed.emit(ControllerState.IDLE.value, mode.value)
        self.show_message_box.emit("info", COMPLETE_TITLES[kind], message)

    def _on_store_error(self, error: StoreError):
        self.show_message_box.emit("warning", "History Not Saved", f"The operation was not logged.\n{error}")

    def _on_history_changed(self, action: str, payload):
        self.history_changed.emit()

    @staticmethod
    def is_success_status(code_name: str) -> bool:
        """True for the status codes that mark a finished operation."""
        return code_name in {code.name for code in _SUCCESS_CODES}
