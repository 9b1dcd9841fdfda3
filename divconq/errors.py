"""Invalid-argument errors raised by the divide-and-conquer algorithms.

All of them derive from :class:`ValueError`, so callers that only care about
"bad input" can catch that, while the subclasses tell the kinds apart.
"""

from __future__ import annotations


class InvalidArgumentError(ValueError):
    """Raised before a run starts when its input cannot be processed."""


class EmptyInputError(InvalidArgumentError):
    """Raised when a selection is requested on a missing or empty array."""

    def __init__(self, message: str = "input array must not be empty") -> None:
        super().__init__(message)


class IndexOutOfRangeError(InvalidArgumentError):
    """Raised when an order-statistic index falls outside ``[0, size)``."""

    def __init__(self, k: int, size: int) -> None:
        super().__init__(f"k={k} is out of range for an array of size {size}")
        self.k = k
        self.size = size


class InsufficientPointsError(InvalidArgumentError):
    """Raised when a closest-pair search gets fewer than two points."""

    def __init__(self, count: int) -> None:
        super().__init__(f"need at least 2 points, got {count}")
        self.count = count
