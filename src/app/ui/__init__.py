"""
Mortality explorer UI package.

Modules:
    - app: Streamlit application orchestrator (streamlit_app).
    - helpers: Small formatting helpers shared by the tabs.

Usage:
    from app.ui import streamlit_app
    streamlit_app(default_data="data-table.csv")
"""

from __future__ import annotations

from .app import streamlit_app

__all__ = [
    "streamlit_app",
]
