"""
Mortality explorer entrypoint.

This module provides the CLI entrypoint to launch the Streamlit UI. It defers all UI
composition to the app.ui package and exists solely to start Streamlit programmatically
or render directly when already running under Streamlit.

Usage:
    - Python execution (hands process to Streamlit):
        python -m app.main --data data-table.csv --tick-ms 1000

    - Streamlit direct:
        streamlit run src/app/main.py -- --data data-table.csv --tick-ms 1000
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from app.ui import streamlit_app
from mortality.io.config import Settings

_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _build_parser(add_help: bool = True) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="State Mortality Explorer", add_help=add_help)
    parser.add_argument("--data", default=None, help="CSV path or URL (default: settings)")
    parser.add_argument(
        "--tick-ms",
        type=int,
        default=None,
        help="Animated map interval in milliseconds (default: settings).",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (default: settings, WARNING).",
    )
    return parser


def configure_logging(level: str | None) -> None:
    """Configure root logging once for the process; the library itself never adds handlers."""
    resolved = (level or Settings.load().log_level).upper()
    logging.basicConfig(level=getattr(logging, resolved, logging.WARNING), format=_LOG_FORMAT)


def main(argv: list[str] | None = None) -> None:
    """Console entrypoint that launches Streamlit with the explorer UI.

    If already executing within a Streamlit server (environment variable
    STREAMLIT_SERVER_PORT is set), this function renders the app directly.
    Otherwise, it execs "python -m streamlit run <this_module>" to leverage
    Streamlit's reloader and argument parsing, passing through any supported
    options after "--".

    Args:
        argv (list[str] | None): Optional list of CLI arguments. If None,
            sys.argv[1:] is used.
    """
    args = list(sys.argv[1:] if argv is None else argv)
    ns = _build_parser().parse_args(args)

    # If invoked within Streamlit, just render
    if os.environ.get("STREAMLIT_SERVER_PORT"):
        configure_logging(ns.log_level)
        streamlit_app(default_data=ns.data, default_tick_ms=ns.tick_ms)
        return

    # Otherwise, exec streamlit run on this module to take over the process
    app_path = Path(__file__).resolve()
    cmd = [sys.executable, "-m", "streamlit", "run", str(app_path)]

    passthrough: list[str] = []
    if ns.data:
        passthrough += ["--data", ns.data]
    if ns.tick_ms is not None:
        passthrough += ["--tick-ms", str(int(ns.tick_ms))]
    if ns.log_level:
        passthrough += ["--log-level", ns.log_level]
    if passthrough:
        cmd += ["--"] + passthrough

    try:
        os.execv(sys.executable, cmd)
    except OSError:
        import subprocess

        subprocess.run(cmd, check=False)


if __name__ == "__main__":
    # Support: --data, --tick-ms, --log-level after '--' when using `streamlit run`
    try:
        ns, _ = _build_parser(add_help=False).parse_known_args(sys.argv[1:])
    except SystemExit:
        # Fallback to no-arg render
        ns = argparse.Namespace(data=None, tick_ms=None, log_level=None)
    configure_logging(ns.log_level)
    streamlit_app(default_data=ns.data, default_tick_ms=ns.tick_ms)
