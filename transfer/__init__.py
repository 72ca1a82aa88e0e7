"""
Transfer - export and re-import of the theme library.

The pipeline:
    assemble -> encode -> (file) -> decode -> detect -> build_plan -> execute

Modules:
- codec: versioned JSON snapshot encode/decode with structural checks
- conflicts: name collisions between a snapshot and the live store
- resolver: caller decisions -> originalId remapping plan
- executor: best-effort, dependency-ordered application of a plan
- assembler: selection walk over the live library
- service: engine boundary (export_selection, preview_import, execute_import)
- session: import workflow state machine
"""

from .errors import (
    TransferError,
    MalformedSnapshotError,
    UnsupportedVersionError,
    DanglingReferenceError,
    UnresolvedConflictError,
    SelectionNotFoundError,
    SessionError,
    InvalidTransitionError,
    SessionBusyError,
    UnknownConflictError,
)
from .codec import encode, decode, suggest_file_name
from .conflicts import NameIndex, detect
from .resolver import (
    SKIPPED,
    Action,
    Outcome,
    RemappingPlan,
    ResolutionMap,
    resolve,
    build_plan,
)
from .executor import ImportExecutor, execute
from .assembler import assemble
from .service import (
    TransferService,
    build_preview,
    export_selection,
    preview_import,
    execute_import,
)
from .session import SessionState, ImportSession, SessionRegistry

__all__ = [
    # errors
    'TransferError',
    'MalformedSnapshotError',
    'UnsupportedVersionError',
    'DanglingReferenceError',
    'UnresolvedConflictError',
    'SelectionNotFoundError',
    'SessionError',
    'InvalidTransitionError',
    'SessionBusyError',
    'UnknownConflictError',
    # codec
    'encode',
    'decode',
    'suggest_file_name',
    # conflicts
    'NameIndex',
    'detect',
    # resolver
    'SKIPPED',
    'Action',
    'Outcome',
    'RemappingPlan',
    'ResolutionMap',
    'resolve',
    'build_plan',
    # executor
    'ImportExecutor',
    'execute',
    # assembler
    'assemble',
    # service
    'TransferService',
    'build_preview',
    'export_selection',
    'preview_import',
    'execute_import',
    # session
    'SessionState',
    'ImportSession',
    'SessionRegistry',
]
