# arithma_tech/gui/main_window.py

import sys

from PySide6.QtCore import Slot
from PySide6.QtGui import QAction, QActionGroup
from PySide6.QtWidgets import (
    QApplication, QGroupBox, QHBoxLayout, QLabel, QMainWindow, QMessageBox, QProgressBar,
    QPushButton, QRadioButton, QTextEdit, QVBoxLayout, QWidget
)

from arithma_tech.core.config_manager import AppSettings, load_settings, save_settings
from arithma_tech.core.history_store import HistoryStore
from arithma_tech.core.models import InputMode
from arithma_tech.core.operation_controller import ControllerState
from arithma_tech.utils.logger import setup_logging

from .action_controller import ActionController
from .history_dialog import HistoryDialog
from .resources import AVAILABLE_THEMES, ICON_SIZE, get_icon, load_stylesheet, validate_assets
from .user_guide_dialog import UserGuideDialog
from .widgets import FileInputPanel, StatusWidget


class MainWindow(QMainWindow):
    """
    The application shell: input mode switch, text or file input, the two action
    buttons, a progress bar and a status line. Every decision is delegated to
    the ActionController; this window only mirrors its signals.
    """

    def __init__(self, store: HistoryStore | None = None, settings: AppSettings | None = None):
        super().__init__()
        self.setWindowTitle("Arithma-Tech")
        self.setWindowIcon(get_icon("app_icon"))
        self.resize(900, 650)

        self.settings = settings if settings is not None else load_settings()
        self.action_controller = ActionController(self, store=store, settings=self.settings)

        self.history_dialog = HistoryDialog(self.action_controller, self)
        self.user_guide_dialog = UserGuideDialog(self)

        self._create_menus()
        self._init_ui()
        self._connect_signals()

        self.action_controller.initialize_history()

    def _create_menus(self):
        menu_bar = self.menuBar()

        history_action = QAction("File History", self)
        history_action.triggered.connect(self.show_file_history)
        menu_bar.addAction(history_action)

        guide_action = QAction("User Guide", self)
        guide_action.triggered.connect(self.show_user_guide)
        menu_bar.addAction(guide_action)

        settings_menu = menu_bar.addMenu("&Settings")
        theme_menu = settings_menu.addMenu("Theme")
        theme_group = QActionGroup(self)
        for label, theme_file in AVAILABLE_THEMES.items():
            action = QAction(label, self, checkable=True)
            action.setChecked(theme_file == self.settings.theme)
            action.triggered.connect(lambda checked=False, f=theme_file: self._handle_theme_change(f))
            theme_menu.addAction(action)
            theme_group.addAction(action)

    def _init_ui(self):
        central = QWidget(self)
        main_layout = QVBoxLayout(central)
        main_layout.setContentsMargins(15, 15, 15, 15)
        main_layout.setSpacing(10)

        title = QLabel("Arithma-Tech")
        title.setObjectName("TitleLabel")
        subtitle = QLabel("Lossless compression for text and images with Arithmetic Encoding")
        subtitle.setObjectName("SubtitleLabel")

        # --- Input Mode ---
        self.input_mode_group = QGroupBox("Input Mode")
        mode_layout = QHBoxLayout(self.input_mode_group)
        self.text_mode_radio = QRadioButton("Text Input")
        self.file_mode_radio = QRadioButton("File Input")
        self.file_mode_radio.setChecked(self.action_controller.mode() == InputMode.FILE)
        self.text_mode_radio.setChecked(self.action_controller.mode() == InputMode.TEXT)
        mode_layout.addWidget(self.text_mode_radio)
        mode_layout.addWidget(self.file_mode_radio)
        mode_layout.addStretch()

        # --- Inputs ---
        self.text_input = QTextEdit()
        self.text_input.setPlaceholderText("Type or paste the text to process...")
        self.file_panel = FileInputPanel()
        self._show_input_for_mode(self.action_controller.mode().value)

        # --- Actions ---
        action_layout = QHBoxLayout()
        self.compress_button = QPushButton(" Compress")
        self.decompress_button = QPushButton(" Decompress")
        self.compress_button.setIcon(get_icon("compress"))
        self.decompress_button.setIcon(get_icon("decompress"))
        for button in (self.compress_button, self.decompress_button):
            button.setIconSize(ICON_SIZE)
            action_layout.addWidget(button)
        action_layout.addStretch()

        self.progress_bar = QProgressBar()
        self.progress_bar.setRange(0, 100)
        self.progress_bar.setValue(0)
        self.status_widget = StatusWidget()

        main_layout.addWidget(title)
        main_layout.addWidget(subtitle)
        main_layout.addWidget(self.input_mode_group)
        main_layout.addWidget(self.text_input)
        main_layout.addWidget(self.file_panel)
        main_layout.addLayout(action_layout)
        main_layout.addWidget(QLabel("Progress"))
        main_layout.addWidget(self.progress_bar)
        main_layout.addWidget(self.status_widget)

        self.setCentralWidget(central)

    def _connect_signals(self):
        controller = self.action_controller

        # --- View -> Controller ---
        self.text_mode_radio.toggled.connect(self._on_text_mode_toggled)
        self.file_mode_radio.toggled.connect(self._on_file_mode_toggled)
        self.text_input.textChanged.connect(self._on_text_changed)
        self.file_panel.fileChosen.connect(controller.select_file)
        self.file_panel.clearRequested.connect(controller.clear_selection)
        self.compress_button.clicked.connect(controller.start_compress)
        self.decompress_button.clicked.connect(controller.start_decompress)

        # --- Controller -> View ---
        controller.status_updated.connect(self._on_status_updated)
        controller.progress_percentage_updated.connect(self.progress_bar.setValue)
        controller.state_changed.connect(self._on_state_changed)
        controller.mode_changed.connect(self._on_mode_changed)
        controller.selection_changed.connect(self.file_panel.show_selection)
        controller.show_message_box.connect(self._show_message_box)

    # --- View Slots ---

    @Slot(bool)
    def _on_text_mode_toggled(self, checked: bool):
        if checked:
            self.action_controller.switch_to_text_mode()

    @Slot(bool)
    def _on_file_mode_toggled(self, checked: bool):
        if checked:
            self.action_controller.switch_to_file_mode()

    @Slot()
    def _on_text_changed(self):
        self.action_controller.set_text(self.text_input.toPlainText())

    @Slot()
    def show_file_history(self):
        self.history_dialog.show()
        self.history_dialog.raise_()
        self.history_dialog.activateWindow()

    @Slot()
    def show_user_guide(self):
        self.user_guide_dialog.show()
        self.user_guide_dialog.raise_()
        self.user_guide_dialog.activateWindow()

    @Slot(str)
    def _handle_theme_change(self, theme_file: str):
        """Applies the selected theme and remembers it in settings.json."""
        self.settings.theme = theme_file
        QApplication.instance().setStyleSheet(load_stylesheet(theme_file))
        if not save_settings(self.settings):
            QMessageBox.critical(self, "Error", "Could not save theme setting.")

    # --- Controller Slots ---

    @Slot(str, str)
    def _on_status_updated(self, text: str, code_name: str):
        self.status_widget.set_status(text, is_success=ActionController.is_success_status(code_name))

    @Slot(str)
    def _on_mode_changed(self, mode_value: str):
        if mode_value == InputMode.FILE.value and self.text_input.toPlainText():
            self.text_input.clear()
        self._show_input_for_mode(mode_value)

    def _show_input_for_mode(self, mode_value: str):
        is_text = mode_value == InputMode.TEXT.value
        self.text_input.setVisible(is_text)
        self.file_panel.setVisible(not is_text)

    @Slot(str, str)
    def _on_state_changed(self, state: str, mode_value: str):
        idle = state == ControllerState.IDLE.value
        for widget in (self.compress_button, self.decompress_button, self.input_mode_group,
                       self.text_input, self.file_panel):
            widget.setEnabled(idle)

    @Slot(str, str, str)
    def _show_message_box(self, msg_type, title, message):
        """Shows message boxes requested by the controller."""
        if msg_type == "critical":
            QMessageBox.critical(self, title, message)
        elif msg_type == "warning":
            QMessageBox.warning(self, title, message)
        else:
            QMessageBox.information(self, title, message)

    def closeEvent(self, event):
        """Asks for confirmation before quitting in the middle of an operation."""
        if not self.action_controller.is_idle():
            reply = QMessageBox.question(self, 'Operation in Progress',
                                         "An operation is running. Are you sure you want to quit?",
                                         QMessageBox.Yes | QMessageBox.No, QMessageBox.No)
            if reply != QMessageBox.Yes:
                event.ignore()
                return
        self.action_controller.shutdown()
        event.accept()


def run_gui():
    """The entry point for the GUI application."""
    setup_logging()
    validate_assets()

    app = QApplication(sys.argv)
    settings = load_settings()
    app.setStyleSheet(load_stylesheet(settings.theme))

    window = MainWindow(settings=settings)
    window.show()

    sys.exit(app.exec())
