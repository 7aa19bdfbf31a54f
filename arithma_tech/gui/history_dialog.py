# arithma_tech/gui/history_dialog.py

import logging

from PySide6.QtCore import Slot
from PySide6.QtWidgets import (
    QAbstractItemView, QDialog, QHeaderView, QMessageBox, QPushButton, QTableView, QVBoxLayout
)

from arithma_tech.core.exceptions import StoreError

from .action_controller import ActionController
from .history_model import HistoryModel
from .resources import ICON_SIZE, get_icon

logger = logging.getLogger(__name__)


class HistoryView(QTableView):
    """Read-only, row-selecting table for the history model."""

    def __init__(self, model: HistoryModel, parent=None):
        super().__init__(parent)
        self.setModel(model)

        self.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.setSelectionMode(QAbstractItemView.SingleSelection)
        self.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.setWordWrap(False)
        self.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.verticalHeader().hide()

    def selected_row(self) -> int:
        """The selected row index, or -1 when nothing is selected."""
        rows = self.selectionModel().selectedRows()
        return rows[0].row() if rows else -1


class HistoryDialog(QDialog):
    """
    Non-modal window listing every recorded operation, with a Delete Selected button.

    The list is re-read every time the dialog is shown and whenever the store
    reports a change while it is visible.
    """

    def __init__(self, controller: ActionController, parent=None):
        super().__init__(parent)
        self.controller = controller
        self.setWindowTitle("File History")
        self.resize(600, 400)
        self.setModal(False)

        layout = QVBoxLayout(self)
        self.model = HistoryModel(controller.store, self)
        self.table = HistoryView(self.model, self)

        self.delete_button = QPushButton(" Delete Selected")
        self.delete_button.setIcon(get_icon("delete"))
        self.delete_button.setIconSize(ICON_SIZE)

        layout.addWidget(self.table)
        layout.addWidget(self.delete_button)

        self.delete_button.clicked.connect(self.delete_selected_row)
        self.controller.history_changed.connect(self._on_history_changed)

    def showEvent(self, event):
        self.refresh_history()
        super().showEvent(event)

    @Slot()
    def refresh_history(self):
        """Reloads the table from the store."""
        try:
            self.model.refresh()
        except StoreError as e:
            logger.error(f"Could not load history: {e}")
            QMessageBox.warning(self, "History Unavailable", f"Could not read the history.\n{e}")

    @Slot()
    def _on_history_changed(self):
        if self.isVisible():
            self.refresh_history()

    @Slot()
    def delete_selected_row(self):
        """Deletes the entries sharing the selected row's timestamp."""
        row = self.table.selected_row()
        if row < 0:
            QMessageBox.information(self, "No Selection", "Please select an entry to delete.")
            return

        timestamp = self.model.timestamp_at(row)
        if not timestamp:
            return

        # The table reloads from the store's change notification.
        self.controller.delete_history_entry(timestamp)
