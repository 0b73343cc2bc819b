from __future__ import annotations

"""Routes clicks inside the editable to the issue they belong to.

The router does not own the checker mode; it only asks the controller for a
transition. Modes are the controller's:

- ``Mode.NORMAL``: browsing issues in the review panel.
- ``Mode.LISTENING``: the user edits content, the checker waits.
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, Iterator, Optional, Protocol, runtime_checkable

from lxml import etree as ET

from . import document, markers

__all__ = ["Mode", "ClickEvent", "CheckerController", "ClickRouter"]

logger = logging.getLogger(__name__)


class Mode(IntEnum):
    CLOSED = 0
    NORMAL = 1
    LISTENING = 2


@dataclass
class ClickEvent:
    """A click that landed on *target* inside the editable."""

    target: Any

    def ancestors(self) -> Iterator[ET._Element]:
        """Ancestors of the target, closest first."""
        return document.iter_ancestors(self.target)


@runtime_checkable
class CheckerController(Protocol):
    """What the click router needs from the checker controller."""

    enabled: bool

    def set_mode(self, mode: Mode) -> None:
        ...

    def show_issue_by_element(self, element: ET._Element,
                              callback: Optional[Callable[[], None]] = None) -> bool:
        ...

    def focus_next_control(self) -> None:
        ...


class ClickRouter:
    """Maps raw click targets to marked nodes and mode changes."""

    def __init__(self, controller: CheckerController) -> None:
        self.controller = controller

    @staticmethod
    def find_issue_element(event: ClickEvent) -> Optional[ET._Element]:
        """Return the target, or its closest ancestor, flagged with an issue."""
        if document.has_class(event.target, markers.ISSUE_CLASS):
            return event.target

        for ancestor in event.ancestors():
            if document.has_class(ancestor, markers.ISSUE_CLASS):
                return ancestor
        return None

    def on_click(self, event: ClickEvent) -> Optional[ET._Element]:
        """Handle a click; return the issue node it was routed to, if any."""
        controller = self.controller
        target = self.find_issue_element(event)

        if target is not None:
            if document.has_class(target, markers.FOCUSED_CLASS):
                # Clicking the focused issue means the user wants to edit it.
                controller.set_mode(Mode.LISTENING)
            else:
                controller.show_issue_by_element(target, controller.focus_next_control)
                controller.set_mode(Mode.NORMAL)
        elif controller.enabled:
            # Click on content without issues.
            controller.set_mode(Mode.LISTENING)
        else:
            logger.debug("Click ignored, checker is not enabled")

        return target
