# arithma_tech/core/operation_controller.py

import logging
import threading
from enum import Enum
from typing import Callable

from .exceptions import EmptyInput, NoFileSelected, StoreError, UnsupportedFormat
from .history_store import HistoryStore
from .models import (
    COMPLETE_STATUS, IN_PROGRESS_STATUS, InputMode, OperationKind, OperationRecord,
    Selection, StatusCode, completion_message, is_image_file,
)
from .progress import ProgressSource, SimulatedProgress

logger = logging.getLogger(__name__)

StatusCallback = Callable[[StatusCode, str], None]
ProgressCallback = Callable[[int], None]
CompleteCallback = Callable[[OperationKind, InputMode, str], None]
StoreErrorCallback = Callable[[StoreError], None]


class ControllerState(Enum):
    IDLE = "IDLE"
    BUSY = "BUSY"


class OperationController:
    """
    The headless brain of the application.

    Owns the input mode, the staged selection and the in-flight guard, and drives
    every request through validate -> start -> progress -> complete. Each
    accepted request is logged to the history store the moment it starts, so the
    history reflects attempted operations rather than verified results.

    The controller never talks to a UI directly. Front ends observe it through
    the optional callbacks passed in at construction.
    """

    def __init__(
            self,
            store: HistoryStore,
            progress: ProgressSource | None = None,
            on_status: StatusCallback | None = None,
            on_progress: ProgressCallback | None = None,
            on_complete: CompleteCallback | None = None,
            on_store_error: StoreErrorCallback | None = None,
            initial_mode: InputMode = InputMode.FILE,
    ):
        """
        Args:
            store: Where every accepted operation is recorded.
            progress: The progress source that decides when an operation is done.
                      Defaults to the simulated fixed-step counter.
            on_status: Called with (code, text) whenever the status changes.
            on_progress: Called with the new percentage after every tick.
            on_complete: Called with (kind, mode, confirmation message) when an operation finishes.
            on_store_error: Called when a history write fails. The operation continues regardless.
            initial_mode: The input mode the controller starts in.
        """
        self.store = store
        self.progress = progress if progress is not None else SimulatedProgress()
        self.on_status = on_status
        self.on_progress = on_progress
        self.on_complete = on_complete
        self.on_store_error = on_store_error

        self.selection = Selection(mode=initial_mode)
        self.operation_in_progress = False
        self.active_operation: OperationKind | None = None
        self.last_record: OperationRecord | None = None
        self.status = StatusCode.READY
        self.status_text = StatusCode.READY.render()

        self._lock = threading.RLock()

    # --- Read-only State ---

    @property
    def mode(self) -> InputMode:
        return self.selection.mode

    @property
    def state(self) -> ControllerState:
        return ControllerState.BUSY if self.operation_in_progress else ControllerState.IDLE

    def is_idle(self) -> bool:
        return not self.operation_in_progress

    # --- Input Staging ---

    def switch_mode(self, mode: InputMode):
        """
        Activates an input mode and discards the other mode's staged data.

        Switching to Text clears the file selection; switching to File clears the
        text buffer. Ignored while an operation is running.
        """
        with self._lock:
            if self._ignored_while_busy("switch_mode"):
                return
            if mode == InputMode.TEXT:
                self.selection.mode = InputMode.TEXT
                self._clear_file()
                self._set_status(StatusCode.TEXT_MODE_SELECTED)
            else:
                self.selection.mode = InputMode.FILE
                self.selection.text = ""
                self._set_status(StatusCode.FILE_MODE_SELECTED)
            logger.info(f"Input mode switched to {mode.value}.")

    def set_text(self, text: str):
        """Stages the text to operate on. Only meaningful in Text mode."""
        with self._lock:
            if self._ignored_while_busy("set_text"):
                return
            self.selection.text = text

    def select_file(self, file_path: str) -> bool:
        """
        Stages a picked or dropped file.

        Returns:
            True if the file was selected, False if the request was ignored
            (Text mode is active, or an operation is running).

        Raises:
            UnsupportedFormat: If the file is not one of the allowed image types.
                               The current selection is left untouched.
        """
        with self._lock:
            if self._ignored_while_busy("select_file"):
                return False
            if self.mode != InputMode.FILE:
                logger.debug(f"Ignoring file selection '{file_path}' while in Text mode.")
                return False
            if not is_image_file(file_path):
                logger.warning(f"Rejected unsupported file: {file_path}")
                raise UnsupportedFormat(file_path)

            self.selection.file_path = file_path
            self._set_status(StatusCode.FILE_SELECTED, self.selection.display_name)
            logger.info(f"File selected: {file_path}")
            return True

    def clear_selection(self):
        """Drops the staged file."""
        with self._lock:
            if self._ignored_while_busy("clear_selection"):
                return
            self._clear_file()

    def _clear_file(self):
        self.selection.file_path = None
        self._set_status(StatusCode.FILE_CLEARED)

    # --- Operation Lifecycle ---

    def request_compress(self) -> bool:
        """Starts a compress operation. See `request()`."""
        return self.request(OperationKind.COMPRESS)

    def request_decompress(self) -> bool:
        """Starts a decompress operation. See `request()`."""
        return self.request(OperationKind.DECOMPRESS)

    def request(self, kind: OperationKind) -> bool:
        """
        Validates and starts an operation on the current selection.

        A request that arrives while another operation is running is dropped
        silently, before its input is even looked at.

        Returns:
            True if the operation started, False if it was dropped because the
            controller is busy.

        Raises:
            EmptyInput: Text mode with no text staged.
            NoFileSelected: File mode with no file staged.
        """
        with self._lock:
            if self.operation_in_progress:
                logger.debug(f"{kind.value} request dropped: an operation is already running.")
                return False

            verb = kind.value.lower()
            if self.selection.is_empty():
                if self.mode == InputMode.TEXT:
                    raise EmptyInput(verb)
                raise NoFileSelected(verb)

            self.operation_in_progress = True
            self.active_operation = kind
            self._set_status(IN_PROGRESS_STATUS[(kind, self.mode)], self.selection.display_name)
            logger.info(f"{kind.value} started on '{self.selection.display_name}' ({self.mode.value} mode).")

            self._record(OperationRecord.from_selection(self.selection, kind))

            self.progress.reset()
            if self.on_progress:
                self.on_progress(self.progress.percent)
            return True

    def _record(self, record: OperationRecord):
        """Persists the record on a best-effort basis. A failed write never stops the operation."""
        try:
            self.last_record = self.store.insert(record)
        except StoreError as e:
            self.last_record = None
            logger.warning(f"Operation continues without a history entry: {e}")
            if self.on_store_error:
                self.on_store_error(e)

    def tick(self) -> int | None:
        """
        Advances the running operation by one progress step.

        Completes the operation once the progress source reports it is done.

        Returns:
            The new percentage, or None if no operation is running.
        """
        with self._lock:
            if not self.operation_in_progress:
                return None
            percent = self.progress.advance()
            if self.on_progress:
                self.on_progress(percent)
            if self.progress.is_complete():
                self.processing_complete()
            return percent

    def processing_complete(self):
        """Finishes the running operation and returns the controller to Idle."""
        with self._lock:
            if not self.operation_in_progress:
                logger.debug("Completion signal received while idle; ignoring.")
                return
            kind = self.active_operation
            self.operation_in_progress = False
            self.active_operation = None
            self._set_status(COMPLETE_STATUS[kind])
            message = completion_message(kind, self.mode)
            logger.info(f"{kind.value} completed ({self.mode.value} mode).")
            if self.on_complete:
                self.on_complete(kind, self.mode, message)

    # --- Helpers ---

    def _ignored_while_busy(self, action: str) -> bool:
        if self.operation_in_progress:
            logger.debug(f"Ignoring {action} while an operation is running.")
            return True
        return False

    def _set_status(self, code: StatusCode, name: str = ""):
        self.status = code
        self.status_text = code.render(name)
        if self.on_status:
            self.on_status(code, self.status_text)
