"""
Core exception types raised by indexing and derived-metric computations.

Provides typed exceptions for core-domain failures:
- DataIntegrityError for duplicate natural keys and values that cannot be coerced.
- DegenerateComputation for inputs that have no defined numeric result (empty sets,
  vertical regressions, division by zero).

Notes:
    - This module uses only the Python standard library and has no side effects.
    - Public engine functions in mortality.core.metrics never let DegenerateComputation
      escape; they resolve it to a documented fallback (None / excluded). Only the
      low-level primitives raise it.

Examples:
    >>> from mortality.core.errors import DataIntegrityError
    >>> try:
    ...     raise DataIntegrityError("duplicate record for ('Ohio', 2020)")
    ... except ValueError as e:
    ...     msg = str(e)
    >>> "Ohio" in msg
    True
"""

from __future__ import annotations

__all__ = [
    "DataIntegrityError",
    "DegenerateComputation",
]


class DataIntegrityError(ValueError):
    """Dataset violates a record-level contract (duplicate (state, year), bad numeric field)."""


class DegenerateComputation(ArithmeticError):
    """Computation has no finite result for the given input (e.g., all x identical)."""
