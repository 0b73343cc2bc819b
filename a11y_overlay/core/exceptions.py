from __future__ import annotations

"""Exception classes for the checker overlay.

Only setup and precondition violations are meant to propagate to the host.
Tree walks, resolution and marking never raise for stale or read-only nodes;
quick-fix load failures are delivered to error callbacks instead of being
raised out of the scheduler.
"""

from typing import Optional


class A11yCheckerError(Exception):
    """Base exception for all checker overlay errors."""

    def __init__(self, message: str, name: Optional[str] = None,
                 cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.name = name
        self.cause = cause

    def __str__(self) -> str:
        if self.name:
            return f"[{self.name}] {super().__str__()}"
        return super().__str__()


class EditableNotAvailableError(A11yCheckerError):
    """Raised when listeners are attached before the editable exists.

    This is a caller ordering bug, so it is never retried.
    """
    pass


class EngineError(A11yCheckerError):
    """Raised when a checking engine cannot process the content."""
    pass


class QuickFixError(A11yCheckerError):
    """Base exception for quick-fix related errors."""
    pass


class QuickFixLoadError(QuickFixError):
    """Raised when a quick-fix type cannot be found, imported or validated."""

    def __init__(self, message: str, fix_name: Optional[str] = None,
                 cause: Optional[Exception] = None) -> None:
        super().__init__(message, fix_name, cause)
        self.fix_name = fix_name
