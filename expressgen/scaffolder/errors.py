"""Exceptions raised by the scaffolding core.

The core never recovers from its own failures: every error propagates to the
caller (normally :class:`expressgen.orchestrator.ProjectOrchestrator`), which
decides whether to re-prompt or give up.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable


class ScaffoldError(Exception):
    """Base class for all scaffolding core errors."""


class UnknownEngine(ScaffoldError):
    """Raised when a storage-engine identifier is not in the registry.

    Always detected before any filesystem mutation, so it is safe to re-prompt.
    """

    def __init__(self, engine_id: object, known: Iterable[str] = ()) -> None:
        self.engine_id = engine_id
        self.known = tuple(known)
        message = f"Unknown storage engine: {engine_id!r}"
        if self.known:
            message += f" (expected one of: {', '.join(self.known)})"
        super().__init__(message)


class MaterializationError(ScaffoldError):
    """Raised when creating a directory or writing a file fails.

    Carries the offending path and the underlying ``OSError``.  The target
    directory may be left partially populated.
    """

    def __init__(self, path: str | Path, original: OSError) -> None:
        self.path = Path(path)
        self.original = original
        reason = original.strerror or str(original)
        super().__init__(f"Failed to write {self.path}: {reason}")
