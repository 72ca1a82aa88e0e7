"""
Engine errors. Every error carries a stable `code` for API callers.
"""


class TransferError(Exception):
    """Base class for export/import failures the caller must handle."""
    code = "TRANSFER_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"error": self.message, "code": self.code}


class MalformedSnapshotError(TransferError):
    """The data is not a well-formed snapshot."""
    code = "MALFORMED_SNAPSHOT"


class UnsupportedVersionError(TransferError):
    code = "UNSUPPORTED_VERSION"

    def __init__(self, version):
        self.version = version
        super().__init__(f"Unsupported snapshot format version: {version!r}")


class DanglingReferenceError(TransferError):
    """A reference inside the snapshot does not resolve within it."""
    code = "DANGLING_REFERENCE"


class UnresolvedConflictError(TransferError):
    """A detected conflict has no caller-supplied resolution."""
    code = "UNRESOLVED_CONFLICT"

    def __init__(self, conflicts: list):
        self.conflicts = conflicts
        names = ", ".join(f"{c.type.value}:{c.original_id}" for c in conflicts)
        super().__init__(f"Missing resolution for {len(conflicts)} conflict(s): {names}")


class SelectionNotFoundError(TransferError):
    code = "SELECTION_NOT_FOUND"

    def __init__(self, kind: str, missing: list[str]):
        self.kind = kind
        self.missing = missing
        super().__init__(f"Unknown {kind} id(s): {', '.join(missing)}")


class SessionError(Exception):
    """Base class for import workflow misuse."""
    code = "SESSION_ERROR"


class InvalidTransitionError(SessionError):
    code = "INVALID_TRANSITION"

    def __init__(self, state, action: str):
        self.state = state
        self.action = action
        super().__init__(f"Cannot {action} while in state {state.value}")


class SessionBusyError(SessionError):
    """An import is already running for this session."""
    code = "SESSION_BUSY"


class UnknownConflictError(SessionError):
    """A resolution names a conflict the session does not have."""
    code = "NOT_FOUND"

    def __init__(self, original_id: str):
        self.original_id = original_id
        super().__init__(f"No conflict for '{original_id}'")
