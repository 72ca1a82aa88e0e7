"""
Repository base classes - define the interface and the store errors.

The store enforces the library invariants at write time:
- theme names and theme group names are unique (case-sensitive)
- every theme reference (extract.theme_id, group.theme_ids) resolves
  to a live theme
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar, Optional

from models import Theme, ThemeGroup, Extract, Library

T = TypeVar("T")


class StoreError(Exception):
    """Base class for store failures."""
    code = "STORE_ERROR"


class DuplicateNameError(StoreError):
    """A live entity of the same kind already has this name."""
    code = "DUPLICATE_NAME"

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"A {kind} named '{name}' already exists")


class MissingReferenceError(StoreError):
    """An entity references themes that are not live."""
    code = "MISSING_REFERENCE"

    def __init__(self, kind: str, missing: list[str]):
        self.kind = kind
        self.missing = missing
        super().__init__(f"{kind} references unknown theme(s): {', '.join(missing)}")


class EntityNotFoundError(StoreError):
    code = "NOT_FOUND"

    def __init__(self, kind: str, id: str):
        self.kind = kind
        self.id = id
        super().__init__(f"{kind} '{id}' not found")


class BaseRepository(ABC, Generic[T]):
    """Abstract base for entity repositories."""

    @abstractmethod
    def get(self, id: str) -> Optional[T]:
        """Get entity by ID."""
        pass

    @abstractmethod
    def create(self, entity: T) -> T:
        """Insert a new entity. Raises StoreError on constraint violation."""
        pass

    @abstractmethod
    def save(self, entity: T) -> T:
        """Insert or update entity. Raises StoreError on constraint violation."""
        pass

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Delete entity by ID. Returns True if deleted."""
        pass

    @abstractmethod
    def list(self) -> list[T]:
        """List all entities in creation order."""
        pass

    @abstractmethod
    def exists(self, id: str) -> bool:
        """Check if entity exists."""
        pass


class ThemeRepository(BaseRepository[Theme]):
    """Repository for themes."""

    @abstractmethod
    def find_by_name(self, name: str) -> Optional[Theme]:
        """Exact, case-sensitive name lookup."""
        pass


class ThemeGroupRepository(BaseRepository[ThemeGroup]):
    """Repository for theme groups."""

    @abstractmethod
    def find_by_name(self, name: str) -> Optional[ThemeGroup]:
        """Exact, case-sensitive name lookup."""
        pass


class ExtractRepository(BaseRepository[Extract]):
    """Repository for extracts."""

    @abstractmethod
    def for_theme(self, theme_id: str) -> list[Extract]:
        """Extracts filed under a theme."""
        pass

    @abstractmethod
    def count_for_theme(self, theme_id: str) -> int:
        """Derived extract count of a theme."""
        pass


class Repository:
    """
    Aggregate repository - provides access to all entity repositories.

    This is what consumers use. Backend implementations provide
    concrete versions of each sub-repository.
    """

    @property
    @abstractmethod
    def themes(self) -> ThemeRepository:
        """Access theme repository."""
        pass

    @property
    @abstractmethod
    def theme_groups(self) -> ThemeGroupRepository:
        """Access theme group repository."""
        pass

    @property
    @abstractmethod
    def extracts(self) -> ExtractRepository:
        """Access extract repository."""
        pass

    @abstractmethod
    def read_all(self) -> Library:
        """One consistent read of the whole library. Does not block writers."""
        pass
