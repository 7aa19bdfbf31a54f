# arithma_tech/core/exceptions.py

"""
Exception hierarchy for Arithma-Tech.

Validation errors describe a problem with what the user staged and carry a
short `title` suitable for a message box. Store errors describe a problem with
the history database; they are reported but never stop an operation.
"""


class ArithmaTechError(Exception):
    """Base exception for all Arithma-Tech errors."""
    pass


# --- Input Validation ---

class ValidationError(ArithmaTechError):
    """
    Raised when a user request cannot be accepted because of its input.

    Attributes:
        title: Short heading for the error (e.g., a message box title).
        message: Human-readable explanation.
    """
    title = "Invalid Input"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class EmptyInput(ValidationError):
    """Raised when a Text-mode operation is requested with no text."""
    title = "Empty Input"

    def __init__(self, operation: str = "compress"):
        self.operation = operation
        super().__init__(f"Please enter text to {operation}")


class NoFileSelected(ValidationError):
    """Raised when a File-mode operation is requested with no file selected."""
    title = "No File Selected"

    def __init__(self, operation: str = "compress"):
        self.operation = operation
        super().__init__(f"Please select an image to {operation}")


class UnsupportedFormat(ValidationError):
    """
    Raised when a picked or dropped file is not one of the supported images.

    Attributes:
        file_path: The path that was rejected.
    """
    title = "Unsupported File"

    def __init__(self, file_path: str):
        self.file_path = file_path
        super().__init__(
            "This is not a recognized image format.\n"
            "Supported formats: PNG, JPG, JPEG, BMP, GIF."
        )


# --- Persistence ---

class StoreError(ArithmaTechError):
    """Base exception for history store failures."""
    pass


class WriteFailed(StoreError):
    """
    Raised when the backing database rejects an insert or delete.

    Attributes:
        action: What was being attempted ('insert', 'delete', 'initialize').
        reason: The underlying database error text.
    """

    def __init__(self, action: str, reason: str):
        self.action = action
        self.reason = reason
        super().__init__(f"History {action} failed: {reason}")
