# arithma_tech/gui/resources.py

import logging
import sys
from pathlib import Path

from PySide6.QtCore import QDir, QSize
from PySide6.QtGui import QIcon

from arithma_tech.core.config_manager import DEFAULT_THEME

logger = logging.getLogger(__name__)


def get_resource_path(relative_path: str) -> Path:
    """
    Gets the absolute path to a resource, working for both development (source)
    and production (PyInstaller bundled executable).
    """
    try:
        # PyInstaller unpacks bundled data into a temporary folder stored in `sys._MEIPASS`.
        base_path = Path(sys._MEIPASS)
    except AttributeError:
        # Running from source: the project root is three levels up from this file.
        base_path = Path(__file__).resolve().parent.parent.parent

    return base_path / relative_path


ASSETS_PATH = get_resource_path('assets')
STYLES_PATH = ASSETS_PATH / 'styles'
THEMES_PATH = STYLES_PATH / 'themes'
ICONS_PATH = ASSETS_PATH / 'icons'

AVAILABLE_THEMES = {
    "Dark Theme": "dark_theme.qss",
    "Light Theme": "light_theme.qss",
}

# Every icon the interface asks for. Missing ones fall back to FALLBACK_ICON_NAME.
REQUIRED_ICONS = [
    "app_icon", "folder-open", "compress", "decompress", "cancel",
    "history", "delete", "info", "settings",
]
FALLBACK_ICON_NAME = "app_icon"
ICON_SIZE = QSize(20, 20)

_icon_cache = {}


def validate_assets():
    """Logs a warning for every missing theme directory or icon at start-up."""
    logger.info("Validating GUI assets...")

    if not THEMES_PATH.is_dir():
        logger.warning(f"Themes directory not found at: {THEMES_PATH}")

    missing_icons = [name for name in REQUIRED_ICONS if not (ICONS_PATH / f"{name}.svg").exists()]
    if missing_icons:
        logger.warning(f"Missing required icons in '{ICONS_PATH}': {', '.join(missing_icons)}")
    else:
        logger.info("All required icons found.")


def load_stylesheet(theme_file: str = DEFAULT_THEME) -> str:
    """
    Loads the stylesheet for `theme_file` and registers the 'assets' search
    prefix so the sheet can reference other assets with relative URLs.

    Returns an empty string (Qt's default look) if the theme is missing.
    """
    QDir.addSearchPath("assets", str(ASSETS_PATH))

    theme_path = THEMES_PATH / theme_file
    if theme_path.exists():
        logger.info(f"Loading theme: {theme_file}")
        return theme_path.read_text(encoding='utf-8')
    logger.error(f"Failed to load theme file: {theme_path}")
    return ""


def get_icon(name: str) -> QIcon:
    """
    Creates and caches a QIcon from an SVG file, falling back to the app icon,
    and finally to an empty icon, when the file is missing.
    """
    if name in _icon_cache:
        return _icon_cache[name]

    icon_path = ICONS_PATH / f"{name}.svg"
    if not icon_path.exists():
        logger.debug(f"Icon '{name}.svg' not found. Using fallback.")
        if name == FALLBACK_ICON_NAME:
            return QIcon()
        return get_icon(FALLBACK_ICON_NAME)

    icon = QIcon(str(icon_path))
    _icon_cache[name] = icon
    return icon
