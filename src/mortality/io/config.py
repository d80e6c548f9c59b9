"""
Configuration for the mortality explorer.

Defines Settings, a frozen dataclass carrying runtime configuration: where the CSV lives,
the year range used for start-to-end changes and the playback loop, the playback interval,
the default metric, and the log level. Defaults are sourced from mortality.core.constants.

Precedence
- environment (MORTALITY_*) > TOML (./mortality.toml or [tool.mortality] in ./pyproject.toml)
  > defaults.

Notes
- Loaders are loose: a value that cannot be parsed is ignored (with a warning) and the
  previous layer's value is kept. Settings.validate() checks cross-field consistency.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

try:  # Python 3.11+ stdlib TOML parser
    import tomllib  # type: ignore
except Exception:  # pragma: no cover - environments without tomllib
    tomllib = None  # type: ignore[assignment]

from mortality.core.constants import DEFAULT_END_YEAR, DEFAULT_START_YEAR, DEFAULT_TICK_INTERVAL_MS
from mortality.core.grammar import Metric, metric_from_value

from .errors import IoConfigError

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    """
    Runtime settings for the explorer.

    Attributes:
        data_path (str): CSV path or URL (columns Year, State, Deaths, Age Adjusted Rate, URL).
        start_year (int): First year of the change range and playback loop.
        end_year (int): Last year of the change range and playback loop.
        tick_interval_ms (int): Playback interval in milliseconds.
        metric (str): Default metric ("death_count" | "adjusted_rate").
        log_level (str): Root log level applied by the app entrypoint.

    Examples:
        >>> from mortality.io.config import Settings
        >>> Settings(data_path="data/table.csv", tick_interval_ms=800)  # doctest: +ELLIPSIS
        Settings(...)
    """

    data_path: str = "data-table.csv"
    start_year: int = DEFAULT_START_YEAR
    end_year: int = DEFAULT_END_YEAR
    tick_interval_ms: int = DEFAULT_TICK_INTERVAL_MS
    metric: str = Metric.ADJUSTED_RATE.value
    log_level: str = "WARNING"

    @property
    def metric_enum(self) -> Metric:
        return metric_from_value(self.metric)

    def validate(self) -> Settings:
        """
        Check cross-field consistency.

        Returns:
            Settings: self, for chaining.

        Raises:
            IoConfigError: On an inverted year range, a non-positive interval, an unknown
                metric, or an unknown log level.
        """
        if self.start_year > self.end_year:
            raise IoConfigError(f"start_year {self.start_year} is after end_year {self.end_year}")
        if self.tick_interval_ms <= 0:
            raise IoConfigError(f"tick_interval_ms must be positive (got {self.tick_interval_ms})")
        try:
            metric_from_value(self.metric)
        except ValueError as exc:
            raise IoConfigError(str(exc)) from exc
        if self.log_level.upper() not in _LOG_LEVELS:
            raise IoConfigError(f"log_level must be one of {_LOG_LEVELS} (got {self.log_level!r})")
        return self

    # Configuration loaders (env/TOML) with precedence: env > TOML > defaults.

    @classmethod
    def _apply_mapping(cls, base: Settings, cfg: dict[str, Any] | None) -> Settings:
        """Apply a loose config mapping onto Settings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base

        if "data_path" in cfg and isinstance(cfg["data_path"], str):
            s = replace(s, data_path=cfg["data_path"])

        for name in ("start_year", "end_year", "tick_interval_ms"):
            if name in cfg:
                try:
                    s = replace(s, **{name: int(cfg[name])})
                except (TypeError, ValueError):
                    logger.warning("ignoring %s=%r (not an integer)", name, cfg[name])

        if "metric" in cfg:
            try:
                s = replace(s, metric=metric_from_value(str(cfg["metric"])).value)
            except ValueError:
                logger.warning("ignoring metric=%r (unknown metric)", cfg["metric"])

        if "log_level" in cfg and isinstance(cfg["log_level"], str):
            level = cfg["log_level"].strip().upper()
            if level in _LOG_LEVELS:
                s = replace(s, log_level=level)
            else:
                logger.warning("ignoring log_level=%r", cfg["log_level"])

        return s

    @classmethod
    def from_env(cls, base: Settings | None = None, prefix: str = "MORTALITY_") -> Settings:
        """
        Build Settings from environment variables. Precedence is env > base (if provided) > defaults.

        Recognized variables:
            - MORTALITY_DATA_PATH
            - MORTALITY_START_YEAR
            - MORTALITY_END_YEAR
            - MORTALITY_TICK_INTERVAL_MS
            - MORTALITY_METRIC
            - MORTALITY_LOG_LEVEL
        """
        s = base or cls()

        mapping: dict[str, Any] = {}
        for name in ("data_path", "start_year", "end_year", "tick_interval_ms", "metric", "log_level"):
            v = os.getenv(prefix + name.upper())
            if v:
                mapping[name] = v

        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> Settings:
        """
        Build Settings from a TOML file.

        Search order when `path` is None:
            1) ./mortality.toml (with either a [mortality] table or top-level keys)
            2) ./pyproject.toml under [tool.mortality]

        Returns defaults if no file is present or tomllib is unavailable.
        """
        s = cls()
        if tomllib is None:
            return s

        def _load_toml(p: Path) -> dict[str, Any] | None:
            try:
                with p.open("rb") as fh:
                    return tomllib.load(fh)  # type: ignore[arg-type]
            except (OSError, tomllib.TOMLDecodeError) as exc:
                logger.warning("could not read %s: %s", p, exc)
                return None

        cfg: dict[str, Any] | None = None

        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / "mortality.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        for p in cand:
            if not p.exists():
                continue
            data = _load_toml(p)
            if not isinstance(data, dict):
                continue
            if p.name == "pyproject.toml":
                tool = data.get("tool", {})
                cfg = tool.get("mortality") if isinstance(tool, dict) else None
            else:
                top = data
                if "mortality" in top and isinstance(top["mortality"], dict):
                    cfg = top["mortality"]
                else:
                    cfg = top
            if cfg:
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> Settings:
        """
        Load Settings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults (mortality.toml, pyproject.toml).

        Returns:
            Settings
        """
        s = cls.from_toml(path)
        s = cls.from_env(base=s)
        return s
