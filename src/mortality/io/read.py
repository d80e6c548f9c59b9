"""
CSV loader for the mortality table.

Overview
- read_csv(): reads the raw table with polars, every column as a string.
- coerce_frame(): selects/renames the five canonical columns and applies strict numeric
  casts; any value that cannot be coerced raises instead of becoming NaN.
- records_from_frame() / records_from_rows(): typed Records from a coerced frame or from
  any iterable of string-field mappings (e.g., csv.DictReader rows).
- load_records() / load_index(): the full path from a source to Records / an Index.

Boundary contract
- Fetch/parse failures and missing columns raise mortality.io.errors.LoadError (chained).
- Non-numeric, non-finite, or negative numeric fields and empty state names raise
  mortality.core.errors.DataIntegrityError naming the column and 1-based data rows.
- Duplicate (state, year) keys raise DataIntegrityError from build_index.
- Nothing is silently dropped.

Import DAG discipline
- Depends on stdlib, polars, and mortality.core; does not import session/app.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping
from typing import IO, Any

import polars as pl
from pydantic import ValidationError

from mortality.core.constants import CSV_COLUMNS
from mortality.core.errors import DataIntegrityError
from mortality.core.index import Index, build_index
from mortality.core.schema import Record

from .errors import LoadError

__all__ = [
    "read_csv",
    "coerce_frame",
    "records_from_frame",
    "records_from_rows",
    "load_records",
    "load_index",
]

logger = logging.getLogger(__name__)

Source = str | os.PathLike[str] | IO[bytes]

# Rows listed per offending column in error messages.
_MAX_REPORTED_ROWS = 10


def read_csv(source: Source) -> pl.DataFrame:
    """
    Read the raw table, all columns as strings.

    Args:
        source: Path, URL, or binary file object.

    Returns:
        pl.DataFrame: Uncoerced string columns.

    Raises:
        LoadError: If the source cannot be opened or parsed.
    """
    try:
        return pl.read_csv(source, infer_schema=False)
    except (OSError, pl.exceptions.PolarsError) as exc:
        raise LoadError(f"failed to read CSV from {source!r}: {exc}") from exc


def _bad_rows(df: pl.DataFrame, mask: pl.Expr) -> list[int]:
    hits = df.with_row_index(name="_rn").filter(mask).get_column("_rn").to_list()
    return [int(i) + 1 for i in hits]


def coerce_frame(df: pl.DataFrame) -> pl.DataFrame:
    """
    Rename the source columns and cast numeric fields strictly.

    Args:
        df (pl.DataFrame): Raw frame with columns Year, State, Deaths, Age Adjusted Rate, URL
            (extra columns are ignored).

    Returns:
        pl.DataFrame: Columns year (i64), state (str), death_count (i64), adjusted_rate (f64),
        source_url (str).

    Raises:
        LoadError: If a required column is missing.
        DataIntegrityError: If any numeric value is non-coercible, non-finite, or negative,
            or a state name is empty.
    """
    missing = [c for c in CSV_COLUMNS if c not in df.columns]
    if missing:
        raise LoadError(f"missing required columns: {missing!r}")

    raw = df.select(
        [pl.col(src).cast(pl.Utf8).str.strip_chars().alias(dst) for src, dst in CSV_COLUMNS.items()]
    )
    typed = raw.with_columns(
        pl.col("year").cast(pl.Int64, strict=False),
        pl.col("death_count").cast(pl.Int64, strict=False),
        pl.col("adjusted_rate").cast(pl.Float64, strict=False),
        pl.col("source_url").fill_null(""),
    )

    checks: dict[str, pl.Expr] = {
        "state": pl.col("state").is_null() | (pl.col("state") == ""),
        "year": pl.col("year").is_null(),
        "death_count": pl.col("death_count").is_null() | (pl.col("death_count") < 0),
        "adjusted_rate": (
            pl.col("adjusted_rate").is_null()
            | pl.col("adjusted_rate").is_nan()
            | pl.col("adjusted_rate").is_infinite()
            | (pl.col("adjusted_rate") < 0)
        ),
    }
    problems: list[str] = []
    for column, mask in checks.items():
        rows = _bad_rows(typed, mask)
        if rows:
            sample = raw.get_column(column)[rows[0] - 1]
            shown = rows[:_MAX_REPORTED_ROWS]
            more = f" (+{len(rows) - len(shown)} more)" if len(rows) > len(shown) else ""
            problems.append(f"{column}: rows {shown}{more}, e.g. {sample!r}")
    if problems:
        raise DataIntegrityError("invalid values: " + "; ".join(problems))
    return typed


def records_from_frame(df: pl.DataFrame) -> list[Record]:
    """
    Build Records from a frame produced by coerce_frame().

    Raises:
        DataIntegrityError: If a row fails Record validation.
    """
    out: list[Record] = []
    for pos, row in enumerate(df.iter_rows(named=True), start=1):
        try:
            out.append(Record(**row))
        except ValidationError as exc:
            raise DataIntegrityError(f"row {pos} is not a valid record: {exc}") from exc
    return out


def records_from_rows(rows: Iterable[Mapping[str, Any]]) -> list[Record]:
    """
    Coerce rows of named string fields (source column names) into Records.

    Args:
        rows (Iterable[Mapping[str, Any]]): e.g. csv.DictReader output.

    Returns:
        list[Record]

    Raises:
        LoadError: If a required column is absent from every row.
        DataIntegrityError: If a value cannot be coerced.
    """
    materialized = [dict(r) for r in rows]
    present = set().union(*(r.keys() for r in materialized)) if materialized else set(CSV_COLUMNS)
    missing = [c for c in CSV_COLUMNS if c not in present]
    if missing:
        raise LoadError(f"missing required columns: {missing!r}")
    df = pl.DataFrame(
        {
            col: [None if r.get(col) is None else str(r.get(col)) for r in materialized]
            for col in CSV_COLUMNS
        },
        schema={col: pl.Utf8 for col in CSV_COLUMNS},
    )
    return records_from_frame(coerce_frame(df))


def load_records(source: Source) -> list[Record]:
    return records_from_frame(coerce_frame(read_csv(source)))


def load_index(source: Source) -> Index:
    """
    Read, coerce, and index a CSV source.

    Raises:
        LoadError: Fetch/parse failure or missing columns.
        DataIntegrityError: Bad values or duplicate (state, year) keys.
    """
    index = build_index(load_records(source))
    logger.info(
        "loaded %d records (%d states, %d years) from %s",
        len(index),
        len(index.all_states),
        len(index.all_years),
        source,
    )
    return index
