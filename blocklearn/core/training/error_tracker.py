"""
Rolling error estimate for training.

Keeps a fixed window of recent losses in a circular buffer.
"""

import logging

import numpy as np

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_SENTINEL = 1_000_000.0


class ErrorTracker:
    """
    Fixed-capacity circular buffer of scalar losses.

    The buffer starts filled with a large sentinel and the mean always
    covers every slot, so until ``capacity`` values have been recorded the
    mean is inflated by the remaining sentinels. Callers comparing the mean
    against a threshold must expect this warm-up period.

    A capacity of 0 disables averaging: ``record`` returns the value it was
    given.
    """

    def __init__(self, capacity: int = 10, sentinel: float = DEFAULT_SENTINEL):
        """
        Initialize error tracker.

        Args:
            capacity: Number of recent losses kept
            sentinel: Value filling slots that were never written
        """
        self.sentinel = float(sentinel)
        self._allocate(capacity)

    def _allocate(self, capacity: int):
        capacity = int(capacity)
        if capacity < 0:
            raise ConfigurationError(
                f"Error memory length cannot be lower than zero, got {capacity}"
            )
        self._capacity = capacity
        self._buffer = np.full(capacity, self.sentinel, dtype=float)
        self._position = 0
        self._recorded = 0
        self._mean = float("inf")

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def position(self) -> int:
        """Slot the next value will be written to."""
        return self._position

    @property
    def mean(self) -> float:
        """Last computed running mean, ``inf`` before the first record."""
        return self._mean

    @property
    def is_warm(self) -> bool:
        """True once every slot holds a recorded value."""
        return self._recorded >= self._capacity

    def values(self) -> np.ndarray:
        """Copy of the buffer in slot order."""
        return self._buffer.copy()

    def record(self, value: float) -> float:
        """
        Store a loss and return the mean over the whole buffer.

        Overwriting the oldest slot is the normal steady-state path.
        """
        value = float(value)
        self._recorded += 1

        if self._capacity == 0:
            self._mean = value
            return self._mean

        self._buffer[self._position] = value
        self._position = (self._position + 1) % self._capacity
        self._mean = float(self._buffer.sum() / self._capacity)
        return self._mean

    def resize(self, capacity: int):
        """Reallocate with a new capacity. Recorded history is lost."""
        logger.debug(f"Resizing error memory from {self._capacity} to {capacity}")
        self._allocate(capacity)

    def reset(self):
        """Refill with the sentinel and rewind."""
        self._allocate(self._capacity)
