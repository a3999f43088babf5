"""EcoLearn backend.

``app.app`` resolves to the FastAPI instance on first access, so the
storage and rules modules can be imported without building the API."""

from __future__ import annotations

__all__ = ["app"]


def __getattr__(name: str):
    if name != "app":
        raise AttributeError(f"module {__name__} has no attribute {name!r}")
    from .main import app as api

    return api
