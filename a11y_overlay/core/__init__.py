from __future__ import annotations

"""Core of the checker overlay: document helpers, identifiers, markers,
issue models, click routing, engines and quick fixes."""

from .exceptions import (
    A11yCheckerError,
    EditableNotAvailableError,
    EngineError,
    QuickFixError,
    QuickFixLoadError,
)
from .models import Issue, IssueDetails, IssueList
from .identity import IdentityRegistry
from .marking import MarkingEngine
from .click_router import ClickEvent, ClickRouter, Mode
from .engine import Engine
from .editor import Editor, OutputFilter
from .decorator import EditableDecorator
from .session import CheckingSession

__all__ = [
    "A11yCheckerError",
    "EditableNotAvailableError",
    "EngineError",
    "QuickFixError",
    "QuickFixLoadError",
    "Issue",
    "IssueDetails",
    "IssueList",
    "IdentityRegistry",
    "MarkingEngine",
    "ClickEvent",
    "ClickRouter",
    "Mode",
    "Engine",
    "Editor",
    "OutputFilter",
    "EditableDecorator",
    "CheckingSession",
]
