"""
Process model for the Banker's Safe-State Checker.

Represents one process with its current allocation and declared maximum need.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Dict, Sequence, Union

from banker.errors import LengthMismatch, OverAllocation
from banker.models.vector import as_vector, first_exceeding


@dataclass(frozen=True, eq=False)
class Process:
    """
    Represents a process declared to the system.

    Constructing a Process validates it; there is no way to build an
    unchecked one and no way to change its vectors afterwards.

    Attributes:
        pid: Sequential process identifier (assigned in creation order)
        allocation: Units of each resource type currently held [R]
        max_need: Maximum units of each resource type the process may claim [R]
        need: Derived as max_need - allocation [R]

    Raises:
        LengthMismatch: If allocation and max_need differ in length
        OverAllocation: If allocation[k] > max_need[k] for any k
    """
    pid: int
    allocation: Union[Sequence[int], np.ndarray]
    max_need: Union[Sequence[int], np.ndarray]
    need: np.ndarray = field(init=False, repr=False)

    def __post_init__(self):
        """Validate vectors and derive need exactly once."""
        allocation = as_vector(self.allocation, f"P{self.pid} allocation")
        max_need = as_vector(self.max_need, f"P{self.pid} max need")

        if len(allocation) != len(max_need):
            raise LengthMismatch(len(allocation), len(max_need), "max need", self.pid)

        over = first_exceeding(allocation, max_need)
        if over is not None:
            raise OverAllocation(over, int(allocation[over]), int(max_need[over]), self.pid)

        need = max_need - allocation
        need.flags.writeable = False

        object.__setattr__(self, "allocation", allocation)
        object.__setattr__(self, "max_need", max_need)
        object.__setattr__(self, "need", need)

    @classmethod
    def create(cls, pid: int, allocation: Sequence[int], max_need: Sequence[int]) -> "Process":
        """Validating factory; same as calling the constructor."""
        return cls(pid=pid, allocation=allocation, max_need=max_need)

    @property
    def num_resources(self) -> int:
        """Number of resource types this process declares."""
        return len(self.allocation)

    def as_dict(self) -> Dict:
        """Plain-list view for JSON output."""
        return {
            'pid': self.pid,
            'allocation': self.allocation.tolist(),
            'max_need': self.max_need.tolist(),
            'need': self.need.tolist(),
        }

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"Process(pid={self.pid}, alloc={self.allocation.tolist()}, "
            f"max={self.max_need.tolist()}, need={self.need.tolist()})"
        )
