# arithma_tech/core/models.py

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

# The image formats a File-mode selection may point at. Matching is done on the
# lower-cased suffix only; file contents are never inspected.
ALLOWED_IMAGE_EXTENSIONS = ("png", "jpg", "jpeg", "bmp", "gif")

# Every text-mode record is logged under this fixed display name.
TEXT_RECORD_NAME = "Text Data"


class InputMode(Enum):
    """The kind of input the user is currently staging. Doubles as a record's data type."""
    TEXT = "Text"
    FILE = "File"


class OperationKind(Enum):
    """The two user-triggerable operations."""
    COMPRESS = "Compress"
    DECOMPRESS = "Decompress"


class StatusCode(Enum):
    """
    The enumerable status vocabulary of the controller.

    Each member's value is the human-readable template shown to the user.
    Templates containing '{name}' are filled in with the selected file's base name.
    """
    READY = "Ready to start..."
    TEXT_MODE_SELECTED = "Text input mode selected"
    FILE_MODE_SELECTED = "File input mode selected"
    FILE_SELECTED = "File selected: {name}"
    FILE_CLEARED = "File selection cleared"
    COMPRESSING_TEXT = "⚙️ Compressing text..."
    COMPRESSING_FILE = "⚙️ Compressing: {name}"
    DECOMPRESSING_TEXT = "⚙️ Decompressing text..."
    DECOMPRESSING_FILE = "⚙️ Decompressing: {name}"
    COMPRESSION_COMPLETE = "✓ Compression completed successfully"
    DECOMPRESSION_COMPLETE = "✓ Decompression completed successfully"

    def render(self, name: str = "") -> str:
        """Returns the display text for this status."""
        return self.value.format(name=name)


# Lookup tables keyed by (kind, mode) so the controller never has to branch on strings.
IN_PROGRESS_STATUS = {
    (OperationKind.COMPRESS, InputMode.TEXT): StatusCode.COMPRESSING_TEXT,
    (OperationKind.COMPRESS, InputMode.FILE): StatusCode.COMPRESSING_FILE,
    (OperationKind.DECOMPRESS, InputMode.TEXT): StatusCode.DECOMPRESSING_TEXT,
    (OperationKind.DECOMPRESS, InputMode.FILE): StatusCode.DECOMPRESSING_FILE,
}

COMPLETE_STATUS = {
    OperationKind.COMPRESS: StatusCode.COMPRESSION_COMPLETE,
    OperationKind.DECOMPRESS: StatusCode.DECOMPRESSION_COMPLETE,
}

COMPLETE_TITLES = {
    OperationKind.COMPRESS: "Compression Complete",
    OperationKind.DECOMPRESS: "Decompression Complete",
}


def completion_message(kind: OperationKind, mode: InputMode) -> str:
    """Builds the confirmation shown once an operation finishes, e.g. 'Your text has been compressed successfully!'"""
    subject = "text" if mode == InputMode.TEXT else "image"
    verb = "compressed" if kind == OperationKind.COMPRESS else "decompressed"
    return f"Your {subject} has been {verb} successfully!"


def is_image_file(file_path: str) -> bool:
    """Checks a path against the allowed image extensions, ignoring case."""
    suffix = Path(file_path).suffix.lower().lstrip(".")
    return suffix in ALLOWED_IMAGE_EXTENSIONS


@dataclass
class Selection:
    """
    The currently staged unit of work.

    Only the field that belongs to the active mode is meaningful: `file_path`
    in File mode, `text` in Text mode.
    """
    mode: InputMode = InputMode.FILE
    file_path: str | None = None
    text: str = ""

    def is_empty(self) -> bool:
        """True when there is nothing to operate on for the active mode."""
        if self.mode == InputMode.TEXT:
            return self.text == ""
        return not self.file_path

    @property
    def display_name(self) -> str:
        """The name an operation on this selection is logged under."""
        if self.mode == InputMode.TEXT:
            return TEXT_RECORD_NAME
        return Path(self.file_path).name if self.file_path else ""


@dataclass(frozen=True)
class OperationRecord:
    """
    One durable audit-log row describing an attempted compress/decompress action.

    `timestamp` and `record_id` are left empty by the controller and filled in
    by the history store when the row is written.
    """
    name: str
    operation: OperationKind
    data_type: InputMode
    file_path: str = ""
    text_content: str = ""
    timestamp: str | None = None
    record_id: int | None = None

    @classmethod
    def from_selection(cls, selection: Selection, kind: OperationKind) -> "OperationRecord":
        """Creates the record for an operation that is about to start on `selection`."""
        if selection.mode == InputMode.TEXT:
            return cls(
                name=TEXT_RECORD_NAME,
                operation=kind,
                data_type=InputMode.TEXT,
                file_path="",
                text_content=selection.text,
            )
        return cls(
            name=selection.display_name,
            operation=kind,
            data_type=InputMode.FILE,
            file_path=selection.file_path or "",
            text_content="",
        )
