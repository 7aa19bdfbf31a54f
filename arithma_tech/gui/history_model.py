# arithma_tech/gui/history_model.py

from PySide6.QtCore import QAbstractTableModel, QModelIndex, Qt

from arithma_tech.core.history_store import HistoryStore
from arithma_tech.core.models import OperationRecord

# Column order of the history table. The timestamp is last and identifies a row for deletion.
HEADERS = ["Name", "Operation", "Type", "File Path", "Text Content", "Timestamp"]
TIMESTAMP_COLUMN = 5


class HistoryModel(QAbstractTableModel):
    """
    Table model over the history store.

    The model keeps a snapshot of `store.list_all()` and only changes when
    `refresh()` is called; it never writes to the store itself.
    """

    def __init__(self, store: HistoryStore, parent=None):
        super().__init__(parent)
        self.store = store
        self._records: list[OperationRecord] = []

    # --- Required Methods for QAbstractTableModel ---

    def rowCount(self, parent=QModelIndex()):
        if parent.isValid():
            return 0
        return len(self._records)

    def columnCount(self, parent=QModelIndex()):
        if parent.isValid():
            return 0
        return len(HEADERS)

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole):
        if not index.isValid():
            return None

        record = self._records[index.row()]
        col = index.column()

        if role == Qt.DisplayRole:
            return self._column_value(record, col)

        if role == Qt.ToolTipRole and col == 4 and record.text_content:
            # The full text payload can be long; the tooltip shows all of it.
            return record.text_content

        return None

    def headerData(self, section: int, orientation: Qt.Orientation, role: int = Qt.DisplayRole):
        if role == Qt.DisplayRole and orientation == Qt.Horizontal:
            return HEADERS[section]
        return None

    @staticmethod
    def _column_value(record: OperationRecord, col: int) -> str:
        values = (
            record.name,
            record.operation.value,
            record.data_type.value,
            record.file_path,
            record.text_content,
            record.timestamp or "",
        )
        return values[col]

    # --- Custom Public Methods ---

    def refresh(self):
        """
        Re-reads the whole history from the store, newest first.

        Raises:
            StoreError: If the store cannot be read. The current rows are kept.
        """
        records = list(self.store.list_all())
        self.beginResetModel()
        self._records = records
        self.endResetModel()

    def record_at(self, row: int) -> OperationRecord | None:
        if 0 <= row < len(self._records):
            return self._records[row]
        return None

    def timestamp_at(self, row: int) -> str:
        """The timestamp shown on `row`, or "" for an invalid row."""
        record = self.record_at(row)
        return record.timestamp or "" if record else ""
