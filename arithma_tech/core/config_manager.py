# arithma_tech/core/config_manager.py

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path

from .history_store import DEFAULT_DB_NAME
from .progress import DEFAULT_PROGRESS_STEP

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[2]
SETTINGS_FILE_PATH = PROJECT_ROOT / 'config' / 'settings.json'

DEFAULT_THEME = "dark_theme.qss"


@dataclass
class AppSettings:
    """
    User-tunable settings, persisted as config/settings.json.

    Attributes:
        database_path: The history database. Relative paths are resolved against the project root.
        theme: The stylesheet file name under assets/styles/themes.
        progress_step: Percentage added to the progress bar on every tick.
        compress_interval_ms: Tick interval while compressing.
        decompress_interval_ms: Tick interval while decompressing.
    """
    database_path: str = DEFAULT_DB_NAME
    theme: str = DEFAULT_THEME
    progress_step: int = DEFAULT_PROGRESS_STEP
    compress_interval_ms: int = 150
    decompress_interval_ms: int = 200

    def resolved_database_path(self) -> Path:
        path = Path(self.database_path).expanduser()
        return path if path.is_absolute() else PROJECT_ROOT / path


def load_settings(settings_path: Path = SETTINGS_FILE_PATH) -> AppSettings:
    """
    Reads the settings file, falling back to defaults for anything missing.

    A missing, unreadable or corrupt file is not an error: the defaults are
    returned and a warning is logged. Unknown keys are ignored.
    """
    if not settings_path.exists():
        logger.info(f"No settings file at '{settings_path}', using defaults.")
        return AppSettings()

    try:
        with open(settings_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (IOError, json.JSONDecodeError) as e:
        logger.warning(f"Could not read settings file '{settings_path}', using defaults: {e}")
        return AppSettings()

    if not isinstance(data, dict):
        logger.warning(f"Settings file '{settings_path}' does not contain an object, using defaults.")
        return AppSettings()

    defaults = AppSettings()
    values = {}
    for field in fields(AppSettings):
        if field.name not in data:
            continue
        value = data[field.name]
        expected = type(getattr(defaults, field.name))
        if not isinstance(value, expected) or isinstance(value, bool):
            logger.warning(f"Ignoring setting '{field.name}': expected {expected.__name__}, got {value!r}.")
            continue
        values[field.name] = value

    settings = AppSettings(**values)
    if settings.progress_step <= 0:
        logger.warning(f"Ignoring non-positive progress_step {settings.progress_step}.")
        settings.progress_step = DEFAULT_PROGRESS_STEP
    return settings


def save_settings(settings: AppSettings, settings_path: Path = SETTINGS_FILE_PATH) -> bool:
    """Writes the settings file. Returns False (and logs) if it cannot be written."""
    try:
        settings_path.parent.mkdir(parents=True, exist_ok=True)
        with open(settings_path, 'w', encoding='utf-8') as f:
            json.dump(asdict(settings), f, indent=2)
        logger.info(f"Settings saved to: {settings_path}")
        return True
    except IOError as e:
        logger.error(f"Could not write settings file at '{settings_path}': {e}")
        return False
