from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import streamlit as st

from mortality.core.index import Index
from mortality.io.read import load_index as _load_index

__all__ = [
    "CacheConfig",
    "load_index",
]

# ---------- Cache configuration (factory of cached callables) ----------


@dataclass(frozen=True)
class CacheConfig:
    """Hashable cache configuration for Streamlit's cache decorators.

    Note: Streamlit's decorator parameters (ttl) are fixed at decoration time. We build
    and memoize decorated callables per (name, ttl) so the app can switch these at
    runtime while still benefiting from caching.

    The index is cached with st.cache_resource (shared, not copied): it is immutable,
    so every view reading the same object is safe.
    """

    ttl: int | None = None


# Registry of decorated functions by (loader_name, CacheConfig)
_CACHE_REGISTRY: dict[tuple[str, CacheConfig], Callable[..., Any]] = {}


def _get_cached(loader_name: str, cfg: CacheConfig, fn: Callable[..., Any]) -> Callable[..., Any]:
    key = (loader_name, cfg)
    if key in _CACHE_REGISTRY:
        return _CACHE_REGISTRY[key]
    wrapped = st.cache_resource(ttl=cfg.ttl, show_spinner=False)(fn)
    _CACHE_REGISTRY[key] = wrapped
    return wrapped


def _load_index_impl(source: str) -> Index:
    return _load_index(source)


def load_index(source: str, *, cfg: CacheConfig = CacheConfig()) -> Index:
    """Load (or reuse) the index for a CSV path/URL. LoadError/DataIntegrityError propagate."""
    fn = _get_cached("load_index", cfg, _load_index_impl)
    return fn(source)  # type: ignore[no-any-return]
