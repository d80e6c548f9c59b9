from __future__ import annotations

"""
Top-level Streamlit app package.

This package hosts the interactive mortality explorer (Streamlit) decoupled from the
mortality.* library modules. Indexing, derived metrics and playback live in the library;
the Streamlit UI shell, cached loaders and Altair chart builders live here.

CLI entrypoint (configured in pyproject.toml):
    mortality-app = app.main:main
"""
