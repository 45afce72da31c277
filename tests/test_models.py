"""
Core Data Model Tests

Tests resource vectors, Process validation and SystemBuilder/SystemState.
"""

import sys
from dataclasses import FrozenInstanceError
from pathlib import Path

import numpy as np
import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from banker.errors import (
    EmptyCapacity,
    EmptySystem,
    ExceedsCapacity,
    InconsistentAvailable,
    InvalidQuantity,
    LengthMismatch,
    OverAllocation,
    OverCommitted,
    ValidationError,
)
from banker.models.process import Process
from banker.models.system_state import SystemBuilder, SystemState
from banker.models.vector import as_vector, column_totals, first_exceeding, fits_within


CLASSIC_RESOURCES = [10, 5, 7]
CLASSIC_PROCESSES = [
    ([0, 1, 0], [7, 5, 3]),
    ([2, 0, 0], [3, 2, 2]),
    ([3, 0, 2], [9, 0, 2]),
    ([2, 1, 1], [2, 2, 2]),
    ([0, 0, 2], [4, 3, 3]),
]


def _classic_builder():
    builder = SystemBuilder(CLASSIC_RESOURCES)
    for allocation, max_need in CLASSIC_PROCESSES:
        builder.add_process(allocation, max_need)
    return builder


# -- Resource vectors ---------------------------------------------------------


def test_as_vector_is_read_only_int_array():
    vector = as_vector([10, 5, 7])
    assert vector.tolist() == [10, 5, 7]
    assert vector.dtype == np.int64
    with pytest.raises(ValueError):
        vector[0] = 1


@pytest.mark.parametrize("values, bad_index", [
    ([1, -1], 1),
    ([256], 0),
    ([3, 1.5], 1),
    ([True, 2], 0),
    (["4"], 0),
])
def test_as_vector_rejects_invalid_quantities(values, bad_index):
    with pytest.raises(InvalidQuantity) as excinfo:
        as_vector(values, "allocation")
    assert excinfo.value.index == bad_index


def test_vector_comparisons():
    lhs = as_vector([1, 2, 3])
    rhs = as_vector([1, 1, 4])
    assert not fits_within(lhs, rhs)
    assert fits_within(as_vector([0, 1, 4]), rhs)
    assert first_exceeding(lhs, rhs) == 1
    assert first_exceeding(rhs, as_vector([5, 5, 5])) is None


def test_column_totals():
    rows = [as_vector([1, 2]), as_vector([3, 4])]
    assert column_totals(rows, 2).tolist() == [4, 6]
    assert column_totals([], 3).tolist() == [0, 0, 0]


# -- Process ------------------------------------------------------------------


def test_process_need_is_max_minus_allocation():
    """need[k] == max_need[k] - allocation[k] and need[k] >= 0."""
    for pid, (allocation, max_need) in enumerate(CLASSIC_PROCESSES):
        process = Process.create(pid, allocation, max_need)
        expected = [m - a for a, m in zip(allocation, max_need)]
        assert process.need.tolist() == expected
        assert (process.need >= 0).all()


def test_process_over_allocation_is_rejected_not_clamped():
    with pytest.raises(OverAllocation) as excinfo:
        Process(pid=4, allocation=[1, 5, 0], max_need=[2, 3, 0])
    error = excinfo.value
    assert error.index == 1
    assert error.allocation == 5
    assert error.max_need == 3
    assert error.pid == 4
    assert "R1" in str(error)


def test_process_length_mismatch():
    with pytest.raises(LengthMismatch):
        Process(pid=0, allocation=[1, 2], max_need=[3])


def test_process_is_immutable():
    process = Process(pid=0, allocation=[1, 0], max_need=[2, 2])
    with pytest.raises(FrozenInstanceError):
        process.allocation = [0, 0]
    with pytest.raises(ValueError):
        process.need[0] = 9
    assert process.need.tolist() == [1, 2]


def test_process_as_dict():
    process = Process(pid=3, allocation=[2, 1, 1], max_need=[2, 2, 2])
    assert process.as_dict() == {
        'pid': 3,
        'allocation': [2, 1, 1],
        'max_need': [2, 2, 2],
        'need': [0, 1, 1],
    }


# -- SystemBuilder ------------------------------------------------------------


def test_builder_assigns_sequential_pids():
    builder = SystemBuilder([4, 4])
    assert builder.add_process([1, 0], [2, 2]) == 0
    assert builder.add_process([0, 1], [1, 1]) == 1
    assert builder.add_process([1, 1], [3, 3]) == 2
    assert builder.num_processes == 3
    assert builder.total_allocated.tolist() == [2, 2]


def test_builder_rejects_empty_capacity():
    with pytest.raises(EmptyCapacity):
        SystemBuilder([])


def test_builder_length_mismatch_against_capacity():
    builder = SystemBuilder([3, 3, 3])
    with pytest.raises(LengthMismatch) as excinfo:
        builder.add_process([1, 1], [2, 2])
    assert excinfo.value.expected == 3
    assert excinfo.value.actual == 2


def test_builder_exceeds_capacity_for_allocation_and_max_need():
    builder = SystemBuilder([5, 5])

    with pytest.raises(ExceedsCapacity) as excinfo:
        builder.add_process([6, 0], [6, 0])
    assert (excinfo.value.index, excinfo.value.value, excinfo.value.limit) == (0, 6, 5)
    assert excinfo.value.what == "allocation"

    with pytest.raises(ExceedsCapacity) as excinfo:
        builder.add_process([1, 0], [2, 7])
    assert (excinfo.value.index, excinfo.value.value, excinfo.value.limit) == (1, 7, 5)
    assert excinfo.value.what == "max need"


def test_failed_add_leaves_builder_unchanged():
    builder = SystemBuilder([5])
    builder.add_process([2], [4])

    for allocation, max_need in ([[3], [1]], [[1], [9]], [[1, 1], [1, 1]], [[-1], [1]]):
        with pytest.raises(ValidationError):
            builder.add_process(allocation, max_need)

    assert builder.num_processes == 1
    assert builder.total_allocated.tolist() == [2]
    # Retry after a failure gets the next id, not a skipped one
    assert builder.add_process([1], [1]) == 1


def test_finalize_requires_a_process():
    with pytest.raises(EmptySystem):
        SystemBuilder([1, 2]).finalize()


def test_finalize_overcommitted():
    """Total allocation 6 > capacity 5 must fail with OverCommitted(0)."""
    builder = SystemBuilder([5])
    builder.add_process([3], [5])
    builder.add_process([3], [5])

    with pytest.raises(OverCommitted) as excinfo:
        builder.finalize()
    assert excinfo.value.index == 0
    assert excinfo.value.deficit == 1


def test_finalize_overcommitted_reports_lowest_index():
    builder = SystemBuilder([4, 2, 2])
    builder.add_process([1, 2, 2], [1, 2, 2])
    builder.add_process([1, 1, 1], [1, 1, 1])
    with pytest.raises(OverCommitted) as excinfo:
        builder.finalize()
    assert excinfo.value.index == 1


# -- SystemState --------------------------------------------------------------


def test_available_vector():
    state = _classic_builder().finalize()
    assert state.available.tolist() == [3, 3, 2]
    assert state.num_processes == 5
    assert state.num_resources == 3


def _random_builder(seed):
    """Random valid declaration: every allocation fits what is still unallocated."""
    rng = np.random.default_rng(seed)
    capacity = rng.integers(0, 11, size=int(rng.integers(1, 5)))
    builder = SystemBuilder(capacity.tolist())

    remaining = capacity.copy()
    for _ in range(int(rng.integers(1, 7))):
        max_need = [int(rng.integers(0, c + 1)) for c in capacity]
        allocation = [int(rng.integers(0, min(m, r) + 1)) for m, r in zip(max_need, remaining)]
        builder.add_process(allocation, max_need)
        remaining -= allocation
    return builder


@pytest.mark.parametrize("seed", range(40))
def test_resource_conservation(seed):
    """sum(allocation[:,k]) + available[k] == capacity[k] for every k."""
    state = _random_builder(seed).finalize()

    totals = state.allocation_matrix.sum(axis=0) + state.available
    assert totals.tolist() == state.capacity.tolist()
    assert (state.available >= 0).all()
    assert (state.need_matrix == state.max_need_matrix - state.allocation_matrix).all()
    state.assert_resource_conservation("in test")


def test_resource_conservation_classic():
    _classic_builder().finalize().assert_resource_conservation("in test")


def test_direct_construction_without_processes_fails():
    with pytest.raises(EmptySystem):
        SystemState(capacity=as_vector([1]), processes=(), available=np.array([-5]))


def test_direct_construction_with_forged_available_fails():
    processes = (
        Process(pid=0, allocation=[3], max_need=[5]),
        Process(pid=1, allocation=[3], max_need=[5]),
    )
    with pytest.raises(OverCommitted) as excinfo:
        SystemState(capacity=as_vector([5]), processes=processes, available=np.array([9]))
    assert excinfo.value.index == 0
    assert excinfo.value.deficit == 1


def test_direct_construction_checks_available_against_allocations():
    processes = (Process(pid=0, allocation=[1, 0], max_need=[2, 2]),)

    with pytest.raises(InconsistentAvailable) as excinfo:
        SystemState(capacity=[3, 3], processes=processes, available=[2, -1])
    assert (excinfo.value.index, excinfo.value.available, excinfo.value.expected) == (1, -1, 3)

    with pytest.raises(InconsistentAvailable):
        SystemState(capacity=[3, 3], processes=processes, available=[3, 3])

    with pytest.raises(LengthMismatch):
        SystemState(capacity=[3, 3], processes=processes, available=[2])

    with pytest.raises(LengthMismatch):
        SystemState(capacity=[3], processes=processes, available=[2])


def test_direct_construction_of_consistent_state():
    processes = tuple(
        Process(pid=pid, allocation=allocation, max_need=max_need)
        for pid, (allocation, max_need) in enumerate(CLASSIC_PROCESSES)
    )
    state = SystemState(capacity=CLASSIC_RESOURCES, processes=processes, available=[3, 3, 2])

    assert state.available.tolist() == [3, 3, 2]
    with pytest.raises(ValueError):
        state.available[0] = 0


def test_matrices():
    state = _classic_builder().finalize()
    assert state.allocation_matrix.shape == (5, 3)
    assert state.need_matrix[0].tolist() == [7, 4, 3]
    assert state.max_need_matrix[2].tolist() == [9, 0, 2]
    with pytest.raises(ValueError):
        state.need_matrix[0][0] = 0


def test_state_is_read_only():
    state = _classic_builder().finalize()
    with pytest.raises(FrozenInstanceError):
        state.available = np.zeros(3)
    with pytest.raises(ValueError):
        state.available[0] = 100


def test_finalize_snapshots_are_independent():
    builder = SystemBuilder([4])
    builder.add_process([1], [2])
    first = builder.finalize()
    builder.add_process([1], [1])
    second = builder.finalize()

    assert first.num_processes == 1
    assert first.available.tolist() == [3]
    assert second.num_processes == 2
    assert second.available.tolist() == [2]


def test_display_and_as_dict():
    state = _classic_builder().finalize()
    output = state.display()
    assert "Allocation Matrix:" in output
    assert "Need Matrix (Max - Allocation):" in output
    assert "  P4: " in output

    data = state.as_dict()
    assert data['resources'] == CLASSIC_RESOURCES
    assert data['available'] == [3, 3, 2]
    assert data['processes'][1]['need'] == [1, 2, 2]
