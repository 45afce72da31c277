"""
Banker's Algorithm safety check for the Safe-State Checker.

Decides whether a validated SystemState is safe, i.e. whether every process
can run to completion in some order without deadlock.
"""

import numpy as np
from typing import Iterable, List, Tuple

from banker.config import PROCESS_PREFIX, SEQUENCE_SEPARATOR
from banker.models.system_state import SystemState
from banker.models.vector import fits_within


def is_safe_state(system_state: SystemState) -> Tuple[bool, List[int]]:
    """
    Check if system is in a safe state using Banker's Algorithm.

    Algorithm:
    1. Initialize Work = Available, Finish = [False] * num_processes
    2. Scan all processes in ascending pid order. For each i where
       Finish[i] == False and Need[i] <= Work: Work += Allocation[i],
       Finish[i] = True, add PID to sequence
    3. Repeat full scans until a scan finishes no process
    4. SAFE if every process finished, otherwise UNSAFE

    Work is updated as soon as a process finishes, so a process later in
    the same scan already sees the resources released by an earlier one.

    Time Complexity: O(P²×R)

    Args:
        system_state: Validated system state (never modified)

    Returns:
        Tuple of (is_safe, safe_sequence); the sequence is empty when unsafe

    References:
        Silberschatz, A., Galvin, P. B., & Gagne, G. (2018).
        Operating System Concepts (10th ed.). Chapter 7.5: Deadlock Avoidance.
    """
    finish, safe_sequence = _simulate(system_state)

    if finish.all():
        return True, safe_sequence
    return False, []


def unfinished_processes(system_state: SystemState) -> List[int]:
    """
    PIDs the safety algorithm cannot show to complete.

    Empty for a safe state. For an unsafe state these processes cannot be
    proven to finish under every request order; not all of them are
    necessarily deadlocked.
    """
    finish, _ = _simulate(system_state)
    return [p.pid for i, p in enumerate(system_state.processes) if not finish[i]]


def _simulate(system_state: SystemState) -> Tuple[np.ndarray, List[int]]:
    """Run the Work/Finish scan; returns (finish vector, completion order)."""
    # Work = copy of Available; the state itself is never modified
    work = system_state.available.copy()
    finish = np.zeros(system_state.num_processes, dtype=bool)
    sequence = []

    need = system_state.need_matrix
    allocation = system_state.allocation_matrix

    made_progress = True
    while made_progress:
        made_progress = False

        for i, process in enumerate(system_state.processes):
            if finish[i]:
                continue

            # Need[i] <= Work for all resource types
            if fits_within(need[i], work):
                work += allocation[i]
                finish[i] = True
                sequence.append(process.pid)
                made_progress = True

    return finish, sequence


def format_sequence(sequence: Iterable[int]) -> str:
    """Render a safe sequence as 'P1 -> P3 -> P4'."""
    return SEQUENCE_SEPARATOR.join(f"{PROCESS_PREFIX}{pid}" for pid in sequence)
