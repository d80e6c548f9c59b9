"""
Custom exceptions for the mortality.io module.

Purpose
- Provide IO-layer error types, distinct from the record-level errors in
  mortality.core.errors (DataIntegrityError is raised by the loader for bad values but
  is defined in core, next to the Record contract it protects).

Errors
- LoadError: the CSV could not be fetched or parsed, or lacks required columns. Fatal to
  the session; no partial index is built.
- IoConfigError: invalid or inconsistent settings.
"""

from __future__ import annotations


class IoError(Exception):
    """
    Base class for IO-related errors in mortality.io.
    """


class LoadError(IoError):
    """
    Raised when the source table cannot be fetched, parsed, or lacks required columns.

    Notes:
        The underlying exception (OSError, polars error) is chained as __cause__.
    """


class IoConfigError(IoError):
    """
    Raised when settings are invalid or inconsistent.

    Examples:
        - start_year after end_year
        - Non-positive tick interval
        - Unknown metric name
    """
