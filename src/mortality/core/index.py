"""
Indexer: lookup structures over a flat sequence of Records.

Overview
- build_index(): groups records by state and by year (arrival order within each group)
  and computes the sorted distinct state and year keys.
- Index: frozen snapshot; mappings are read-only views over tuples of the very same
  Record objects found in Index.records.

Loader boundary contract
- Records reaching build_index are already typed (mortality.core.schema.Record): numeric
  fields were coerced at the CSV boundary (mortality.io.read) and any value that could not
  be coerced raised there. The indexer only checks the natural key (state, year).

Notes
- O(n) time and space. The index is never mutated; a reload builds a new one, so readers
  holding an old Index keep a consistent snapshot.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .errors import DataIntegrityError
from .schema import Record

__all__ = ["Index", "build_index", "EMPTY_INDEX"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Index:
    """
    Precomputed grouping of Records.

    Attributes:
        records (tuple[Record, ...]): Source records in arrival order.
        by_state (Mapping[str, tuple[Record, ...]]): State name -> that state's records.
        by_year (Mapping[int, tuple[Record, ...]]): Year -> that year's records.
        all_states (tuple[str, ...]): Distinct state names, lexicographic.
        all_years (tuple[int, ...]): Distinct years, ascending.
    """

    records: tuple[Record, ...] = ()
    by_state: Mapping[str, tuple[Record, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    by_year: Mapping[int, tuple[Record, ...]] = field(default_factory=lambda: MappingProxyType({}))
    all_states: tuple[str, ...] = ()
    all_years: tuple[int, ...] = ()
    _by_key: Mapping[tuple[str, int], Record] = field(
        default_factory=lambda: MappingProxyType({}), repr=False, compare=False
    )

    def __len__(self) -> int:
        return len(self.records)

    @property
    def is_empty(self) -> bool:
        return not self.records

    def lookup(self, state: str, year: int) -> Record | None:
        """Return the record for (state, year), or None when the pair is not covered."""
        return self._by_key.get((state, year))


EMPTY_INDEX = Index()


def build_index(records: Iterable[Record]) -> Index:
    """
    Build an Index from any finite iterable of Records.

    Args:
        records (Iterable[Record]): Records in any order.

    Returns:
        Index: Frozen index sharing the input Record objects.

    Raises:
        TypeError: If an element is not a Record.
        DataIntegrityError: If two records share the same (state, year) key.

    Examples:
        >>> from mortality.core.schema import Record
        >>> r = Record(year=2014, state="Ohio", death_count=1, adjusted_rate=1.0)
        >>> build_index([r]).all_states
        ('Ohio',)
    """
    flat: list[Record] = []
    by_state: dict[str, list[Record]] = {}
    by_year: dict[int, list[Record]] = {}
    by_key: dict[tuple[str, int], Record] = {}

    for pos, rec in enumerate(records):
        if not isinstance(rec, Record):
            raise TypeError(f"build_index expects Record instances (item {pos}: {type(rec)!r})")
        key = rec.key
        if key in by_key:
            raise DataIntegrityError(f"duplicate record for (state, year) {key!r} at item {pos}")
        by_key[key] = rec
        flat.append(rec)
        by_state.setdefault(rec.state, []).append(rec)
        by_year.setdefault(rec.year, []).append(rec)

    index = Index(
        records=tuple(flat),
        by_state=MappingProxyType({k: tuple(v) for k, v in by_state.items()}),
        by_year=MappingProxyType({k: tuple(v) for k, v in by_year.items()}),
        all_states=tuple(sorted(by_state)),
        all_years=tuple(sorted(by_year)),
        _by_key=MappingProxyType(by_key),
    )
    logger.debug(
        "built index: %d records, %d states, %d years",
        len(flat),
        len(index.all_states),
        len(index.all_years),
    )
    return index
