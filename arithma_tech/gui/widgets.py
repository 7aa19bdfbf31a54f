# arithma_tech/gui/widgets.py

from PySide6.QtCore import Qt, Signal, Slot
from PySide6.QtWidgets import (
    QFileDialog, QHBoxLayout, QLabel, QPushButton, QSizePolicy, QToolButton, QVBoxLayout, QWidget
)

from .resources import ICON_SIZE, get_icon

IMAGE_FILE_FILTER = "Images (*.png *.jpg *.jpeg *.bmp *.gif)"
NO_FILE_TEXT = "No file selected"


# --- Custom Widget 1: The Drop Zone ---
class DropZone(QLabel):
    """
    A label that accepts a file dragged in from the desktop.

    It does no validation itself: the first local file of the drop is emitted
    through `fileDropped` and the controller decides whether to accept it.
    """
    fileDropped = Signal(str)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("DropZone")
        self.setText("Drag & Drop Image Here")
        self.setAlignment(Qt.AlignCenter)
        self.setMinimumHeight(120)
        self.setAcceptDrops(True)

    def dragEnterEvent(self, event):
        if event.mimeData().hasUrls():
            event.acceptProposedAction()
        else:
            super().dragEnterEvent(event)

    def dragMoveEvent(self, event):
        if event.mimeData().hasUrls():
            event.acceptProposedAction()
        else:
            super().dragMoveEvent(event)

    def dropEvent(self, event):
        if event.mimeData().hasUrls():
            for url in event.mimeData().urls():
                local_path = url.toLocalFile()
                if local_path:
                    self.fileDropped.emit(local_path)
                    break
            event.acceptProposedAction()
        else:
            super().dropEvent(event)


# --- Custom Widget 2: The File Input Panel ---
class FileInputPanel(QWidget):
    """
    The File-mode input area: a drop zone, the selected file's name with a
    clear button, and a Browse... button.

    The panel only reports what the user picked (`fileChosen`) or asked to clear
    (`clearRequested`). It shows whatever name the controller tells it to.
    """
    fileChosen = Signal(str)
    clearRequested = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.drop_zone = DropZone()

        selected_layout = QHBoxLayout()
        self.selected_file_label = QLabel(NO_FILE_TEXT)
        self.selected_file_label.setObjectName("SelectedFileLabel")
        self.cancel_file_button = QToolButton()
        self.cancel_file_button.setText("x")
        self.cancel_file_button.setToolTip("Clear file selection")
        self.cancel_file_button.hide()
        selected_layout.addWidget(self.selected_file_label)
        selected_layout.addWidget(self.cancel_file_button)
        selected_layout.addStretch()

        self.browse_button = QPushButton(" Browse...")
        self.browse_button.setIcon(get_icon("folder-open"))
        self.browse_button.setIconSize(ICON_SIZE)

        layout.addWidget(self.drop_zone)
        layout.addLayout(selected_layout)
        layout.addWidget(self.browse_button)

        self.drop_zone.fileDropped.connect(self.fileChosen)
        self.browse_button.clicked.connect(self._browse)
        self.cancel_file_button.clicked.connect(self.clearRequested)

    @Slot()
    def _browse(self):
        """Opens a native file dialog restricted to the supported image formats."""
        file_path, _ = QFileDialog.getOpenFileName(self, "Select Image", "", IMAGE_FILE_FILTER)
        if file_path:
            self.fileChosen.emit(file_path)

    def show_selection(self, file_name: str | None):
        """Displays the selected file's name, or the 'No file selected' placeholder."""
        if file_name:
            self.selected_file_label.setText(file_name)
            self.cancel_file_button.show()
        else:
            self.selected_file_label.setText(NO_FILE_TEXT)
            self.cancel_file_button.hide()

    def selected_text(self) -> str:
        return self.selected_file_label.text()


# --- Custom Widget 3: The Status Widget ---
class StatusWidget(QWidget):
    """A word-wrapping status line that turns red for errors and green for success."""

    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(10, 5, 10, 5)

        self.status_label = QLabel("Status:")
        self.status_label.setObjectName("StatusLabel")
        self.status_message = QLabel("Ready to start...")
        self.status_message.setWordWrap(True)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Minimum)

        layout.addWidget(self.status_label)
        layout.addWidget(self.status_message)
        layout.addStretch()

    def set_status(self, message: str, is_success: bool = False):
        """Updates the status message, highlighting completed operations."""
        self.status_message.setText(message)
        if is_success:
            self.status_message.setStyleSheet("color: #2d8a54; font-weight: bold;")
        else:
            self.status_message.setStyleSheet("")

    def message(self) -> str:
        return self.status_message.text()
