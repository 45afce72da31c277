"""
System State model for the Banker's Safe-State Checker.

SystemBuilder collects processes one at a time against a fixed resource
capacity vector. finalize() validates the whole declared state and returns
an immutable SystemState holding the matrices and vectors the safety
algorithm reads.
"""

import numpy as np
from dataclasses import dataclass
from functools import cached_property
from typing import Dict, List, Sequence, Tuple

from banker.errors import (
    EmptyCapacity,
    EmptySystem,
    ExceedsCapacity,
    InconsistentAvailable,
    LengthMismatch,
    OverCommitted,
)
from banker.models.process import Process
from banker.models.vector import as_vector, column_totals, first_exceeding


class SystemBuilder:
    """
    Setup-phase accumulator for a SystemState.

    Each add_process() call is validated on its own and either commits the
    process or raises without touching the builder, so a rejected
    declaration can simply be retried with corrected values.
    """

    def __init__(self, capacity: Sequence[int]):
        """
        Initialize builder with the total resource capacities.

        Args:
            capacity: Total instances of each resource type [R]

        Raises:
            InvalidQuantity: If a capacity is not an integer in 0..MAX_UNITS
            EmptyCapacity: If no resource types are given
        """
        self.capacity = as_vector(capacity, "resources")
        if len(self.capacity) == 0:
            raise EmptyCapacity()

        self._processes: List[Process] = []
        self._total_allocated = np.zeros(len(self.capacity), dtype=np.int64)

    @property
    def num_processes(self) -> int:
        """Number of processes committed so far."""
        return len(self._processes)

    @property
    def num_resources(self) -> int:
        """Number of resource types in the system."""
        return len(self.capacity)

    @property
    def next_pid(self) -> int:
        """Id the next successfully added process will receive."""
        return len(self._processes)

    @property
    def total_allocated(self) -> np.ndarray:
        """Running per-resource total of committed allocations (copy)."""
        return self._total_allocated.copy()

    def add_process(self, allocation: Sequence[int], max_need: Sequence[int]) -> int:
        """
        Validate and commit one process.

        Validation order:
        1. Both vectors must have one entry per resource type
        2. The process itself must be valid (allocation <= max_need)
        3. allocation and max_need must each fit within total capacity

        Args:
            allocation: Units currently held [R]
            max_need: Maximum units the process may claim [R]

        Returns:
            Sequential pid assigned to the new process

        Raises:
            LengthMismatch, OverAllocation, ExceedsCapacity, InvalidQuantity
        """
        pid = self.next_pid

        for what, values in (("allocation", allocation), ("max need", max_need)):
            if len(values) != self.num_resources:
                raise LengthMismatch(self.num_resources, len(values), what, pid)

        candidate = Process(pid=pid, allocation=allocation, max_need=max_need)

        for what, vector in (("allocation", candidate.allocation), ("max need", candidate.max_need)):
            over = first_exceeding(vector, self.capacity)
            if over is not None:
                raise ExceedsCapacity(
                    over, int(vector[over]), int(self.capacity[over]), what, pid
                )

        # Commit only after every check has passed
        self._processes.append(candidate)
        self._total_allocated += candidate.allocation
        return pid

    def finalize(self) -> "SystemState":
        """
        Validate the whole declared state and freeze it.

        Critical validation: for each resource r, sum(allocation[:,r]) <= total[r].
        The checks themselves run in SystemState's constructor.

        Returns:
            Immutable SystemState with available = capacity - total allocated

        Raises:
            EmptySystem: If no process was added
            OverCommitted: If allocations exceed capacity for some resource
        """
        return SystemState(
            capacity=self.capacity,
            processes=tuple(self._processes),
            available=self.capacity - self._total_allocated,
        )


@dataclass(frozen=True, eq=False)
class SystemState:
    """
    Validated, read-only resource-allocation state.

    Usually produced by SystemBuilder.finalize(). Direct construction runs
    the same whole-system checks, so no inconsistent instance can exist;
    nothing mutates one afterwards, so it can be shared freely between
    safety checks.

    Attributes:
        capacity: [R] Total instances of each resource type
        processes: Validated processes in pid order
        available: [R] Free resource instances (capacity - total allocated)

    Raises:
        EmptyCapacity: If capacity has no entries
        EmptySystem: If there are no processes
        LengthMismatch: If a process or available has the wrong width
        OverCommitted: If allocations exceed capacity for some resource
        InconsistentAvailable: If available != capacity - total allocated
    """
    capacity: np.ndarray
    processes: Tuple[Process, ...]
    available: np.ndarray

    def __post_init__(self):
        """Check emptiness, widths, overcommitment and conservation."""
        capacity = as_vector(self.capacity, "resources")
        if len(capacity) == 0:
            raise EmptyCapacity()

        processes = tuple(self.processes)
        if not processes:
            raise EmptySystem()
        for process in processes:
            if process.num_resources != len(capacity):
                raise LengthMismatch(len(capacity), process.num_resources, "allocation", process.pid)

        available = np.array(self.available, dtype=np.int64)
        if available.shape != capacity.shape:
            raise LengthMismatch(len(capacity), available.size, "available")

        allocated = column_totals([p.allocation for p in processes], len(capacity))
        over = first_exceeding(allocated, capacity)
        if over is not None:
            raise OverCommitted(
                over,
                int(allocated[over] - capacity[over]),
                int(allocated[over]),
                int(capacity[over]),
            )

        expected = capacity - allocated
        mismatch = np.flatnonzero(available != expected)
        if mismatch.size:
            k = int(mismatch[0])
            raise InconsistentAvailable(k, int(available[k]), int(expected[k]))

        available.flags.writeable = False
        object.__setattr__(self, "capacity", capacity)
        object.__setattr__(self, "processes", processes)
        object.__setattr__(self, "available", available)

    @property
    def num_processes(self) -> int:
        """Number of processes in the system."""
        return len(self.processes)

    @property
    def num_resources(self) -> int:
        """Number of resource types in the system."""
        return len(self.capacity)

    @cached_property
    def allocation_matrix(self) -> np.ndarray:
        """Get allocation matrix [P][R]."""
        return self._stack('allocation')

    @cached_property
    def max_need_matrix(self) -> np.ndarray:
        """Get max need matrix [P][R]."""
        return self._stack('max_need')

    @cached_property
    def need_matrix(self) -> np.ndarray:
        """
        Get need matrix [P][R].
        Stacked from each process's need (Max - Allocation).
        """
        return self._stack('need')

    def _stack(self, attribute: str) -> np.ndarray:
        """Build a read-only [P][R] matrix from one process attribute."""
        matrix = np.zeros((self.num_processes, self.num_resources), dtype=np.int64)
        for i, process in enumerate(self.processes):
            matrix[i] = getattr(process, attribute)
        matrix.flags.writeable = False
        return matrix

    def assert_resource_conservation(self, context: str = "") -> None:
        """Verify resource conservation: allocated + available = total for all resources.

        Args:
            context: Description of when this check is being run (for error messages)

        Raises:
            AssertionError: If resource conservation is violated
        """
        allocated = column_totals([p.allocation for p in self.processes], self.num_resources)

        for r_idx in range(self.num_resources):
            total = int(self.capacity[r_idx])
            available = int(self.available[r_idx])

            assert allocated[r_idx] + available == total, (
                f"Resource conservation violated for R{r_idx} {context}\n"
                f"  Allocated: {allocated[r_idx]}, Available: {available}, Total: {total}"
            )
            assert available >= 0, (
                f"Negative available resources for R{r_idx} {context}\n"
                f"  Available: {available}"
            )

    def as_dict(self) -> Dict:
        """Plain-list view for JSON output."""
        return {
            'resources': self.capacity.tolist(),
            'available': self.available.tolist(),
            'processes': [p.as_dict() for p in self.processes],
        }

    def display(self) -> str:
        """
        Generate readable string representation of system state.

        Returns:
            Formatted string showing capacities, available vector and
            the allocation, max need and need matrices
        """
        header = "      " + " ".join([f"{'R' + str(i):>3}" for i in range(self.num_resources)])

        output = []
        output.append("\n" + "="*60)
        output.append("SYSTEM STATE")
        output.append("="*60)

        output.append(f"\nTotal Resources:   {self.capacity.tolist()}")
        output.append(f"Initial Available: {self.available.tolist()}")

        sections = [
            ("Allocation Matrix:", self.allocation_matrix),
            ("Max Need Matrix:", self.max_need_matrix),
            ("Need Matrix (Max - Allocation):", self.need_matrix),
        ]
        for title, matrix in sections:
            output.append(f"\n{title}")
            output.append(header)
            for i, process in enumerate(self.processes):
                row = f"  P{process.pid}: "
                row += " ".join([f"{matrix[i][j]:3}" for j in range(self.num_resources)])
                output.append(row)

        output.append("\n" + "="*60)
        return "\n".join(output)
