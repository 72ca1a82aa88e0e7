"""
In-memory backend - same constraints as the JSON backend, no I/O.
"""

from typing import Optional

from models import Library
from .document import DocumentRepository


class MemoryRepository(DocumentRepository):
    """Keeps the library document in memory."""

    def __init__(self, library: Optional[Library] = None):
        super().__init__()
        self._state = library.model_copy(deep=True) if library else Library()

    def _read_state(self) -> Library:
        return self._state

    def _write_state(self, state: Library) -> None:
        # Readers keep whatever object they already hold
        self._state = state
