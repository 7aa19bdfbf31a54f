# arithma_tech/core/progress.py

from abc import ABC, abstractmethod

# The reference behaviour: the bar grows by 5% per tick until it reaches 100%.
DEFAULT_PROGRESS_STEP = 5


class ProgressSource(ABC):
    """
    The port through which an in-flight operation reports progress.

    The controller only ever calls `reset()` when an operation starts and
    `advance()` on every tick, then asks `is_complete()`. A real encoder can be
    slotted in behind this interface without touching the controller.
    """

    @property
    @abstractmethod
    def percent(self) -> int:
        """The current completion percentage, 0-100."""

    @abstractmethod
    def reset(self):
        """Prepares the source for a new operation."""

    @abstractmethod
    def advance(self) -> int:
        """Moves the operation forward by one tick and returns the new percentage."""

    @abstractmethod
    def is_complete(self) -> bool:
        """True once the operation has finished."""


class SimulatedProgress(ProgressSource):
    """A fixed-step progress counter. No data is actually processed."""

    def __init__(self, step: int = DEFAULT_PROGRESS_STEP):
        if step <= 0:
            raise ValueError(f"Progress step must be positive, got {step}.")
        self.step = step
        self._percent = 0

    @property
    def percent(self) -> int:
        return self._percent

    def reset(self):
        self._percent = 0

    def advance(self) -> int:
        self._percent = min(100, self._percent + self.step)
        return self._percent

    def is_complete(self) -> bool:
        return self._percent >= 100
