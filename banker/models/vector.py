"""
Resource vector arithmetic for the Banker's Safe-State Checker.

A resource vector is an ordered sequence of non-negative integers, one entry
per resource type. Position is the only resource-type identifier.

Vectors are stored as read-only signed numpy arrays so that derived values
such as available = capacity - allocated can represent a deficit while the
state is being validated.
"""

import numpy as np
from typing import Optional, Sequence

from banker.config import MAX_UNITS
from banker.errors import InvalidQuantity


def as_vector(values: Sequence[int], name: str = "vector") -> np.ndarray:
    """
    Convert a sequence of quantities into a read-only resource vector.

    Args:
        values: Quantities, one per resource type
        name: Label used in error messages

    Returns:
        1-D int64 numpy array with writes disabled

    Raises:
        InvalidQuantity: If an entry is not an integer in 0..MAX_UNITS
    """
    for i, value in enumerate(values):
        # bool is an int subclass but never a valid quantity
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise InvalidQuantity(i, value, MAX_UNITS, name)
        if value < 0 or value > MAX_UNITS:
            raise InvalidQuantity(i, value, MAX_UNITS, name)

    vector = np.array(list(values), dtype=np.int64)
    vector.flags.writeable = False
    return vector


def fits_within(lhs: np.ndarray, rhs: np.ndarray) -> bool:
    """True if lhs[k] <= rhs[k] for every resource type k."""
    return bool(np.all(lhs <= rhs))


def first_exceeding(lhs: np.ndarray, rhs: np.ndarray) -> Optional[int]:
    """
    Find the lowest resource index where lhs exceeds rhs.

    Returns:
        Index k with lhs[k] > rhs[k], or None if lhs fits within rhs
    """
    over = np.flatnonzero(lhs > rhs)
    if over.size == 0:
        return None
    return int(over[0])


def column_totals(rows: Sequence[np.ndarray], width: int) -> np.ndarray:
    """Per-resource sum over a list of vectors (zeros for an empty list)."""
    totals = np.zeros(width, dtype=np.int64)
    for row in rows:
        totals += row
    return totals
