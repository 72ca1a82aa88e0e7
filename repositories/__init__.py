"""
Repository layer - abstracts persistence of the theme library.

Usage:
    from repositories import get_repository

    repo = get_repository()  # Returns configured backend
    theme = repo.themes.find_by_name("Friendship")
    repo.extracts.create(extract)

Backends are swappable via config (LIBRARY_BACKEND).
"""

from typing import Optional

from config import get_settings
from .base import (
    Repository,
    StoreError,
    DuplicateNameError,
    MissingReferenceError,
    EntityNotFoundError,
)
from .json_backend import JsonRepository
from .memory_backend import MemoryRepository

_backend: Optional[str] = None
_options: dict = {}
_instance: Optional[Repository] = None


def get_repository() -> Repository:
    """Get the configured repository instance."""
    global _instance

    if _instance is None:
        backend = _backend or get_settings().backend
        if backend == "json":
            _instance = JsonRepository(**_options)
        elif backend == "memory":
            _instance = MemoryRepository(**_options)
        else:
            raise ValueError(f"Unknown backend: {backend}")

    return _instance


def configure_backend(backend: str, **kwargs) -> None:
    """Configure the repository backend."""
    global _backend, _options, _instance
    _backend = backend
    _options = kwargs
    _instance = None  # Force re-initialization


__all__ = [
    "get_repository",
    "configure_backend",
    "Repository",
    "JsonRepository",
    "MemoryRepository",
    "StoreError",
    "DuplicateNameError",
    "MissingReferenceError",
    "EntityNotFoundError",
]
