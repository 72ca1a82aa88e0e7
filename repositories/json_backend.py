"""
JSON file backend - stores the library as one JSON document.

Directory structure:
    {data_dir}/
        library.json      - themes, theme_groups, extracts
"""

import json
import logging
import threading
from pathlib import Path
from typing import Optional

from config import get_settings
from models import Library
from .document import DocumentRepository

logger = logging.getLogger(__name__)

LIBRARY_FILE = "library.json"


class WriteQueue:
    """Thread-safe write serialization, one lock per file."""

    def __init__(self):
        self._locks: dict[Path, threading.RLock] = {}
        self._guard = threading.Lock()

    def lock_for(self, path: Path) -> threading.RLock:
        """The lock every writer of `path` in this process shares."""
        key = path.resolve()
        with self._guard:
            if key not in self._locks:
                self._locks[key] = threading.RLock()
            return self._locks[key]

    def write_json(self, path: Path, data: dict) -> None:
        """Atomic JSON write."""
        with self.lock_for(path):
            path.parent.mkdir(parents=True, exist_ok=True)
            temp = path.with_suffix(".json.tmp")
            with open(temp, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False, default=str)
            temp.replace(path)


_write_queue = WriteQueue()


class JsonRepository(DocumentRepository):
    """JSON file backend implementation."""

    def __init__(self, base_path: Optional[Path] = None):
        super().__init__()
        self._base_path = Path(base_path or get_settings().data_dir)
        self._path = self._base_path / LIBRARY_FILE
        # Share the lock with every repository on the same file
        self._lock = _write_queue.lock_for(self._path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_state(self) -> Library:
        if not self._path.exists():
            return Library()

        with open(self._path, encoding="utf-8") as f:
            data = json.load(f)

        return Library.model_validate(data)

    def _write_state(self, state: Library) -> None:
        _write_queue.write_json(self._path, state.model_dump(mode="json"))
