from __future__ import annotations

"""Base class and form model for quick fixes.

A quick fix is a small remediation unit bound to one issue. The review panel
asks it to describe the inputs it needs (:meth:`QuickFix.display`), checks
what the user typed (:meth:`QuickFix.validate`) and finally applies it
(:meth:`QuickFix.fix`).
"""

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

if TYPE_CHECKING:
    from a11y_overlay.core.models import Issue

__all__ = ["QuickFix", "QuickFixForm", "FixCallback"]

logger = logging.getLogger(__name__)

FixCallback = Callable[["QuickFix"], None]


class QuickFixForm:
    """Collects the inputs a quick fix asks for.

    Inputs are described as ``name -> {"type": ..., "label": ..., "value": ...}``.
    """

    def __init__(self) -> None:
        self._inputs: Dict[str, Dict[str, Any]] = {}

    def set_inputs(self, inputs: Dict[str, Dict[str, Any]]) -> None:
        self._inputs = {name: dict(spec) for name, spec in (inputs or {}).items()}

    def get_inputs(self) -> Dict[str, Dict[str, Any]]:
        return {name: dict(spec) for name, spec in self._inputs.items()}

    def default_values(self) -> Dict[str, Any]:
        """Return the pre-filled value of each input."""
        return {name: spec.get("value") for name, spec in self._inputs.items()}


class QuickFix(ABC):
    """Abstract base class for quick fixes.

    Subclasses must implement :meth:`fix`. ``lang`` holds the default English
    labels; hosts may replace it with translated strings.
    """

    lang: Dict[str, str] = {}

    def __init__(self, issue: "Issue") -> None:
        self.issue = issue
        self.lang = dict(type(self).lang)

    @classmethod
    def get_name(cls) -> str:
        return cls.__name__

    def display(self, form: QuickFixForm) -> None:
        """Describe the inputs of this fix on *form*. No inputs by default."""
        form.set_inputs({})

    @abstractmethod
    def fix(self, form_attributes: Dict[str, Any],
            callback: Optional[FixCallback] = None) -> None:
        """Apply the fix to ``issue.element`` and call *callback* with self."""

    def validate(self, form_attributes: Dict[str, Any]) -> List[str]:
        """Return error messages for *form_attributes*; empty means valid."""
        return []

    def __repr__(self) -> str:
        issue_id = getattr(self.issue, "id", None)
        return f"<{self.get_name()} issue={issue_id!r}>"
