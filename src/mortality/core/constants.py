"""
Core defaults and reference tables.

Defines the default year range and playback interval, the canonical CSV column names,
and the state reference table (postal abbreviation and FIPS code) used by chart labels
and the choropleth lookup. This module is zero-IO and uses only the Python standard
library.

Notes:
    - mortality.io.config.Settings consumes these values as its defaults.
    - FIPS codes are integers; map layers format them as the two-digit feature ids of us-atlas.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_START_YEAR",
    "DEFAULT_END_YEAR",
    "DEFAULT_TICK_INTERVAL_MS",
    "CSV_COLUMNS",
    "STATE_ABBREVIATIONS",
    "STATE_FIPS",
    "state_abbreviation",
]

DEFAULT_START_YEAR: int = 2014
DEFAULT_END_YEAR: int = 2023

# Milliseconds the animated map dwells on each year.
DEFAULT_TICK_INTERVAL_MS: int = 1500

# Source CSV header -> Record field.
CSV_COLUMNS: dict[str, str] = {
    "Year": "year",
    "State": "state",
    "Deaths": "death_count",
    "Age Adjusted Rate": "adjusted_rate",
    "URL": "source_url",
}

# name: (postal abbreviation, FIPS)
_STATES: dict[str, tuple[str, int]] = {
    "Alabama": ("AL", 1),
    "Alaska": ("AK", 2),
    "Arizona": ("AZ", 4),
    "Arkansas": ("AR", 5),
    "California": ("CA", 6),
    "Colorado": ("CO", 8),
    "Connecticut": ("CT", 9),
    "Delaware": ("DE", 10),
    "District of Columbia": ("DC", 11),
    "Florida": ("FL", 12),
    "Georgia": ("GA", 13),
    "Hawaii": ("HI", 15),
    "Idaho": ("ID", 16),
    "Illinois": ("IL", 17),
    "Indiana": ("IN", 18),
    "Iowa": ("IA", 19),
    "Kansas": ("KS", 20),
    "Kentucky": ("KY", 21),
    "Louisiana": ("LA", 22),
    "Maine": ("ME", 23),
    "Maryland": ("MD", 24),
    "Massachusetts": ("MA", 25),
    "Michigan": ("MI", 26),
    "Minnesota": ("MN", 27),
    "Mississippi": ("MS", 28),
    "Missouri": ("MO", 29),
    "Montana": ("MT", 30),
    "Nebraska": ("NE", 31),
    "Nevada": ("NV", 32),
    "New Hampshire": ("NH", 33),
    "New Jersey": ("NJ", 34),
    "New Mexico": ("NM", 35),
    "New York": ("NY", 36),
    "North Carolina": ("NC", 37),
    "North Dakota": ("ND", 38),
    "Ohio": ("OH", 39),
    "Oklahoma": ("OK", 40),
    "Oregon": ("OR", 41),
    "Pennsylvania": ("PA", 42),
    "Rhode Island": ("RI", 44),
    "South Carolina": ("SC", 45),
    "South Dakota": ("SD", 46),
    "Tennessee": ("TN", 47),
    "Texas": ("TX", 48),
    "Utah": ("UT", 49),
    "Vermont": ("VT", 50),
    "Virginia": ("VA", 51),
    "Washington": ("WA", 53),
    "West Virginia": ("WV", 54),
    "Wisconsin": ("WI", 55),
    "Wyoming": ("WY", 56),
}

STATE_ABBREVIATIONS: dict[str, str] = {name: abbr for name, (abbr, _) in _STATES.items()}
STATE_FIPS: dict[str, int] = {name: fips for name, (_, fips) in _STATES.items()}


def state_abbreviation(name: str) -> str:
    """
    Return the postal abbreviation for a state name.

    Unknown names fall back to their first two letters upper-cased.

    Examples:
        >>> state_abbreviation("New York")
        'NY'
        >>> state_abbreviation("Guam")
        'GU'
    """
    return STATE_ABBREVIATIONS.get(name) or name[:2].upper()
