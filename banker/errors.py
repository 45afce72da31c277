"""
Validation errors for the Banker's Safe-State Checker.

Every error is scoped to the single operation that raised it: a failed
process declaration or finalize call leaves already-committed state intact,
so the caller can correct the offending input and retry.
"""

from typing import Optional


class ValidationError(ValueError):
    """Base class for all resource-state validation failures."""
    pass


class LengthMismatch(ValidationError):
    """
    A vector has the wrong number of entries.

    Raised when a process's allocation and max need differ in length from
    each other or from the resource capacity vector.
    """

    def __init__(self, expected: int, actual: int, what: str = "vector", pid: Optional[int] = None):
        self.expected = expected
        self.actual = actual
        self.what = what
        self.pid = pid
        owner = f"P{pid}: " if pid is not None else ""
        super().__init__(
            f"{owner}{what} has {actual} values, expected {expected}"
        )


class OverAllocation(ValidationError):
    """A process's allocation exceeds its own declared max need."""

    def __init__(self, index: int, allocation: int, max_need: int, pid: Optional[int] = None):
        self.index = index
        self.allocation = allocation
        self.max_need = max_need
        self.pid = pid
        owner = f"P{pid}: " if pid is not None else ""
        super().__init__(
            f"{owner}allocation ({allocation}) exceeds max need ({max_need}) "
            f"for resource R{index}"
        )


class ExceedsCapacity(ValidationError):
    """A process's allocation or max need exceeds total system capacity."""

    def __init__(self, index: int, value: int, limit: int, what: str = "allocation", pid: Optional[int] = None):
        self.index = index
        self.value = value
        self.limit = limit
        self.what = what
        self.pid = pid
        owner = f"P{pid}: " if pid is not None else ""
        super().__init__(
            f"{owner}{what} ({value}) for resource R{index} exceeds "
            f"total system resources ({limit})"
        )


class EmptySystem(ValidationError):
    """Finalize was attempted with zero processes."""

    def __init__(self):
        super().__init__("No process created; a system needs at least one process")


class OverCommitted(ValidationError):
    """Total allocations across all processes exceed capacity."""

    def __init__(self, index: int, deficit: int, allocated: Optional[int] = None, capacity: Optional[int] = None):
        self.index = index
        self.deficit = deficit
        self.allocated = allocated
        self.capacity = capacity
        detail = ""
        if allocated is not None and capacity is not None:
            detail = f" ({allocated} allocated, {capacity} in total)"
        super().__init__(
            f"Total allocations for resource R{index} exceed capacity by "
            f"{deficit}{detail}. Invalid initial state."
        )


class InvalidQuantity(ValidationError):
    """A vector entry is not an integer in 0..MAX_UNITS."""

    def __init__(self, index: int, value, limit: int, what: str = "vector"):
        self.index = index
        self.value = value
        self.limit = limit
        self.what = what
        super().__init__(
            f"{what}[{index}] = {value!r} is not an integer between 0 and {limit}"
        )


class EmptyCapacity(ValidationError):
    """The resource capacity vector has no entries."""

    def __init__(self):
        super().__init__("Resources array must contain at least one resource type")


class InconsistentAvailable(ValidationError):
    """The available vector does not equal capacity minus total allocation."""

    def __init__(self, index: int, available: int, expected: int):
        self.index = index
        self.available = available
        self.expected = expected
        super().__init__(
            f"Available for resource R{index} is {available}, but capacity minus "
            f"allocations leaves {expected}"
        )
