"""
Import session - the workflow state machine a UI drives.

    UPLOAD -> PREVIEW -> (CONFLICTS) -> IMPORTING -> SUCCESS
                 ^                          |
                 +------ hard failure ------+

close() resets to UPLOAD from any state except IMPORTING: a running
import cannot be cancelled. The session only sequences calls into the
TransferService; it holds no import logic itself.
"""

import logging
import threading
import time
from enum import Enum
from typing import Optional, Union

from models import (
    Conflict,
    ConflictType,
    ConflictResolution,
    ImportPreview,
    ImportResult,
    Resolution,
    new_id,
)
from .errors import (
    InvalidTransitionError,
    SessionBusyError,
    UnknownConflictError,
    UnresolvedConflictError,
)
from .service import TransferService

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    UPLOAD = "upload"
    PREVIEW = "preview"
    CONFLICTS = "conflicts"
    IMPORTING = "importing"
    SUCCESS = "success"


class ImportSession:
    """
    One import, from uploaded file to result.

    Resolutions default to REUSE_EXISTING for every conflict found at
    load time. Those defaults are sent explicitly to the service, which
    itself never defaults.
    """

    def __init__(self, service: TransferService, id: Optional[str] = None):
        self.id = id or new_id()
        self.service = service
        self._import_lock = threading.Lock()
        self._reset()

    def _reset(self) -> None:
        self.state = SessionState.UPLOAD
        self.data: Optional[bytes] = None
        self.file_name: Optional[str] = None
        self.preview: Optional[ImportPreview] = None
        self.resolutions: dict[tuple[ConflictType, str], Resolution] = {}
        self.result: Optional[ImportResult] = None
        self.error: Optional[str] = None

    def _require(self, action: str, *states: SessionState) -> None:
        if self.state not in states:
            raise InvalidTransitionError(self.state, action)

    @property
    def conflicts(self) -> list[Conflict]:
        return self.preview.conflicts if self.preview else []

    def load(self, data: Union[bytes, str], file_name: Optional[str] = None) -> ImportPreview:
        """
        UPLOAD -> PREVIEW.

        Decode errors propagate unchanged and the session stays in UPLOAD.
        """
        self._require("load a file", SessionState.UPLOAD)
        if isinstance(data, str):
            data = data.encode("utf-8")

        preview = self.service.preview_import(data)

        self.data = data
        self.file_name = file_name
        self.preview = preview
        self.resolutions = {
            (c.type, c.original_id): Resolution.REUSE_EXISTING for c in preview.conflicts
        }
        self.state = SessionState.PREVIEW
        logger.debug("Session %s loaded %s (%d conflicts)", self.id, file_name, len(preview.conflicts))
        return preview

    def _refresh_conflicts(self) -> None:
        """
        Re-run the preview against the live store.

        Choices already made for conflicts that still exist are kept;
        new conflicts start as REUSE_EXISTING like at load time.
        """
        preview = self.service.preview_import(self.data)
        self.preview = preview
        self.resolutions = {
            (c.type, c.original_id): self.resolutions.get((c.type, c.original_id), Resolution.REUSE_EXISTING)
            for c in preview.conflicts
        }
        logger.info("Session %s now has %d conflict(s)", self.id, len(preview.conflicts))

    def open_conflicts(self) -> None:
        """PREVIEW -> CONFLICTS, only when there is something to resolve."""
        self._require("review conflicts", SessionState.PREVIEW)
        if not self.conflicts:
            raise InvalidTransitionError(self.state, "review conflicts without conflicts")
        self.state = SessionState.CONFLICTS

    def back_to_preview(self) -> None:
        self._require("go back to preview", SessionState.CONFLICTS)
        self.state = SessionState.PREVIEW

    def set_resolution(
        self,
        original_id: str,
        resolution: Union[Resolution, str],
        type: Optional[Union[ConflictType, str]] = None,
    ) -> None:
        """Choose how to handle one conflict."""
        self._require("change a resolution", SessionState.PREVIEW, SessionState.CONFLICTS)
        resolution = Resolution(resolution)
        matches = [
            c for c in self.conflicts
            if c.original_id == original_id and (type is None or c.type == ConflictType(type))
        ]
        if not matches:
            raise UnknownConflictError(original_id)
        for c in matches:
            self.resolutions[(c.type, c.original_id)] = resolution

    def resolution_list(self) -> list[ConflictResolution]:
        """Resolutions as sent to execute_import."""
        existing = {(c.type, c.original_id): c.existing_id for c in self.conflicts}
        return [
            ConflictResolution(original_id=oid, type=ctype, resolution=res, existing_id=existing.get((ctype, oid)))
            for (ctype, oid), res in self.resolutions.items()
        ]

    def start_import(self) -> ImportResult:
        """
        PREVIEW (no conflicts) or CONFLICTS -> IMPORTING -> SUCCESS.

        Partial per-item errors still end in SUCCESS. A hard failure
        returns the session to PREVIEW with `error` set, then re-raises.
        A conflict that appeared since load is added to `conflicts` so
        it can be resolved before retrying.
        """
        if not self._import_lock.acquire(blocking=False):
            raise SessionBusyError(f"Import already running for session {self.id}")
        try:
            if self.state is SessionState.PREVIEW and self.conflicts:
                raise InvalidTransitionError(self.state, "import before reviewing conflicts")
            self._require("start the import", SessionState.PREVIEW, SessionState.CONFLICTS)

            self.state = SessionState.IMPORTING
            self.error = None
            try:
                result = self.service.execute_import(self.data, self.resolution_list())
            except Exception as e:
                self.error = str(e)
                self.state = SessionState.PREVIEW
                logger.warning("Session %s import failed: %s", self.id, e)
                if isinstance(e, UnresolvedConflictError):
                    # A name was taken after load: show the new conflicts
                    self._refresh_conflicts()
                raise

            self.result = result
            self.state = SessionState.SUCCESS
            return result
        finally:
            self._import_lock.release()

    def close(self) -> None:
        """Reset to UPLOAD. Rejected while an import is running."""
        if self.state is SessionState.IMPORTING:
            raise SessionBusyError(f"Cannot close session {self.id} while importing")
        self._reset()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "state": self.state.value,
            "fileName": self.file_name,
            "preview": self.preview.to_wire() if self.preview else None,
            "resolutions": [r.to_wire() for r in self.resolution_list()],
            "result": self.result.to_wire() if self.result else None,
            "error": self.error,
        }


class SessionRegistry:
    """
    Live sessions by id, for the HTTP workflow.

    Sessions idle for longer than `max_idle` seconds are dropped the next
    time a session is opened, unless an import is running. A session is
    also dropped once its import has succeeded and the result was handed
    out (see `discard`).
    """

    def __init__(self, max_idle: float = 3600.0):
        self.max_idle = max_idle
        self._sessions: dict[str, ImportSession] = {}
        self._last_seen: dict[str, float] = {}
        self._lock = threading.Lock()

    def open(self, service: TransferService) -> ImportSession:
        self.prune()
        session = ImportSession(service)
        with self._lock:
            self._sessions[session.id] = session
            self._last_seen[session.id] = time.monotonic()
        return session

    def get(self, session_id: str) -> Optional[ImportSession]:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is not None:
                self._last_seen[session_id] = time.monotonic()
            return session

    def discard(self, session_id: str) -> None:
        """Forget a session without resetting it."""
        with self._lock:
            self._sessions.pop(session_id, None)
            self._last_seen.pop(session_id, None)

    def close(self, session_id: str) -> bool:
        """Close and forget a session. Returns False if unknown."""
        session = self.get(session_id)
        if session is None:
            return False
        session.close()
        self.discard(session_id)
        return True

    def prune(self, now: Optional[float] = None) -> int:
        """Drop idle sessions. Returns how many were dropped."""
        now = time.monotonic() if now is None else now
        with self._lock:
            stale = [
                sid for sid, seen in self._last_seen.items()
                if now - seen > self.max_idle and self._sessions[sid].state is not SessionState.IMPORTING
            ]
            for sid in stale:
                self._sessions.pop(sid, None)
                self._last_seen.pop(sid, None)
        if stale:
            logger.debug("Dropped %d idle import session(s)", len(stale))
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
