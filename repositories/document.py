"""
Document-style repository - the whole library is one document.

Backends only provide `_read_state()` and `_write_state()`. Every
mutation runs read-modify-write under one lock, so uniqueness and
reference checks see the state they are about to replace. Reads never
take the lock: backends swap in a fresh state object on write.
"""

import logging
import threading
from abc import abstractmethod
from typing import Generic, TypeVar, Optional, Callable

from models import Theme, ThemeGroup, Extract, Library
from .base import (
    Repository,
    ThemeRepository,
    ThemeGroupRepository,
    ExtractRepository,
    DuplicateNameError,
    MissingReferenceError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", Theme, ThemeGroup, Extract)
R = TypeVar("R")


class _Collection(Generic[T]):
    """Shared CRUD over one list of the library document."""

    kind: str = ""
    field: str = ""

    def __init__(self, parent: "DocumentRepository"):
        self._parent = parent

    def _items(self, state: Library) -> list[T]:
        return getattr(state, self.field)

    def _check(self, state: Library, entity: T) -> None:
        """Constraint checks against the state being modified. Override."""

    def get(self, id: str) -> Optional[T]:
        for item in self._items(self._parent._read_state()):
            if item.id == id:
                return item.model_copy(deep=True)
        return None

    def list(self) -> list[T]:
        return [item.model_copy(deep=True) for item in self._items(self._parent._read_state())]

    def exists(self, id: str) -> bool:
        return any(item.id == id for item in self._items(self._parent._read_state()))

    def create(self, entity: T) -> T:
        def apply(state: Library) -> T:
            items = self._items(state)
            if any(item.id == entity.id for item in items):
                raise ValueError(f"{self.kind} id '{entity.id}' already exists")
            self._check(state, entity)
            stored = entity.model_copy(deep=True)
            items.append(stored)
            return stored.model_copy(deep=True)

        created = self._parent._mutate(apply)
        logger.debug("Created %s %s", self.kind, created.id)
        return created

    def save(self, entity: T) -> T:
        def apply(state: Library) -> T:
            self._check(state, entity)
            items = self._items(state)
            entity.touch()
            stored = entity.model_copy(deep=True)
            for i, item in enumerate(items):
                if item.id == entity.id:
                    items[i] = stored
                    break
            else:
                items.append(stored)
            return stored.model_copy(deep=True)

        return self._parent._mutate(apply)

    def delete(self, id: str) -> bool:
        def apply(state: Library) -> bool:
            items = self._items(state)
            kept = [item for item in items if item.id != id]
            if len(kept) == len(items):
                return False
            setattr(state, self.field, kept)
            self._on_delete(state, id)
            return True

        return self._parent._mutate(apply)

    def _on_delete(self, state: Library, id: str) -> None:
        """Cascade hook. Override."""


class _NamedCollection(_Collection[T]):
    """Collection whose `name` is unique across live entities."""

    def find_by_name(self, name: str) -> Optional[T]:
        for item in self._items(self._parent._read_state()):
            if item.name == name:
                return item.model_copy(deep=True)
        return None

    def _check(self, state: Library, entity: T) -> None:
        for item in self._items(state):
            if item.name == entity.name and item.id != entity.id:
                raise DuplicateNameError(self.kind, entity.name)


class DocumentThemeRepository(_NamedCollection[Theme], ThemeRepository):
    kind = "theme"
    field = "themes"

    def _on_delete(self, state: Library, id: str) -> None:
        # Never leave a dangling reference behind
        state.theme_groups = [
            g.without_theme(id) if id in g.theme_ids else g for g in state.theme_groups
        ]
        for extract in state.extracts:
            if extract.theme_id == id:
                extract.theme_id = None


class DocumentThemeGroupRepository(_NamedCollection[ThemeGroup], ThemeGroupRepository):
    kind = "theme group"
    field = "theme_groups"

    def _check(self, state: Library, entity: ThemeGroup) -> None:
        super()._check(state, entity)
        live = {t.id for t in state.themes}
        missing = [t for t in entity.theme_ids if t not in live]
        if missing:
            raise MissingReferenceError(self.kind, missing)


class DocumentExtractRepository(_Collection[Extract], ExtractRepository):
    kind = "extract"
    field = "extracts"

    def _check(self, state: Library, entity: Extract) -> None:
        if entity.theme_id and not any(t.id == entity.theme_id for t in state.themes):
            raise MissingReferenceError(self.kind, [entity.theme_id])

    def for_theme(self, theme_id: str) -> list[Extract]:
        return [e for e in self.list() if e.theme_id == theme_id]

    def count_for_theme(self, theme_id: str) -> int:
        return self._parent._read_state().extract_count(theme_id)


class DocumentRepository(Repository):
    """Repository over a single library document."""

    def __init__(self):
        self._lock = threading.RLock()
        self._themes = DocumentThemeRepository(self)
        self._theme_groups = DocumentThemeGroupRepository(self)
        self._extracts = DocumentExtractRepository(self)

    @abstractmethod
    def _read_state(self) -> Library:
        """Current library state. Callers must not mutate it."""
        pass

    @abstractmethod
    def _write_state(self, state: Library) -> None:
        """Replace the library state atomically."""
        pass

    def _mutate(self, apply: Callable[[Library], R]) -> R:
        """Run apply() on a private copy of the state and commit it."""
        with self._lock:
            state = self._read_state().model_copy(deep=True)
            result = apply(state)
            self._write_state(state)
            return result

    @property
    def themes(self) -> ThemeRepository:
        return self._themes

    @property
    def theme_groups(self) -> ThemeGroupRepository:
        return self._theme_groups

    @property
    def extracts(self) -> ExtractRepository:
        return self._extracts

    def read_all(self) -> Library:
        return self._read_state().model_copy(deep=True)
