from __future__ import annotations

"""Decoration of the editable with identifiers and issue markers.

:class:`EditableDecorator` is the single object a controller talks to when
it needs to touch the editable: it stamps identifiers before a check,
resolves engine issues back onto live nodes, renders markers, routes clicks
and keeps identifiers out of exported markup.
"""

import logging
from typing import Any, Optional, Union

from lxml import etree as ET

from a11y_overlay.config import ConfigManager

from .click_router import CheckerController, ClickEvent, ClickRouter
from .editor import Editor
from .exceptions import EditableNotAvailableError
from .identity import IdentityRegistry
from .marking import MarkingEngine
from .models import Issue, IssueList

__all__ = ["EditableDecorator"]

logger = logging.getLogger(__name__)


class EditableDecorator:
    """Encapsulates every modification of issue nodes in the editable.

    Args:
        editor: Host editor. When given, listeners are attached immediately,
            so its editable must already exist.
        controller: Checker controller; provides ``enabled``,
            ``disable_filter_strip`` and the mode / navigation requests.
        identity: Identifier registry, built from configuration if omitted.
        marking: Marking engine, a plain :class:`MarkingEngine` if omitted.
    """

    def __init__(self, editor: Optional[Editor], controller: CheckerController,
                 identity: Optional[IdentityRegistry] = None,
                 marking: Optional[MarkingEngine] = None) -> None:
        self.editor = editor
        self.controller = controller
        self.identity = identity or IdentityRegistry()
        self.marking = marking or MarkingEngine()
        self.router = ClickRouter(controller)

        if editor is not None:
            self.add_listeners()

    def editable(self) -> Optional[ET._Element]:
        """Return the editor's editable, or None if it is not available."""
        return self.editor.editable() if self.editor is not None else None

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def add_listeners(self) -> None:
        """Hook click routing and the output filter into the editor.

        Raises:
            EditableNotAvailableError: If the editor has no editable yet.
        """
        editor = self.editor
        editable = self.editable()

        if editable is None:
            raise EditableNotAvailableError("Editable not available")

        editor.attach_listener(editable, "click", self.click_listener)

        def reattach(_data: Any = None) -> None:
            # A new editable replaced the one listened to above.
            editor.attach_listener(editor.editable(), "click", self.click_listener)

        editor.on("content_dom", reattach)

        config = ConfigManager()
        strip_ignore_data = bool(editor.config.get("no_ignore_data", config.strip_ignore_data()))
        editor.output_filter.add_rule(self.identity.output_filter_rule(
            keep_ids=lambda: bool(getattr(self.controller, "disable_filter_strip", False)),
            strip_ignore_data=strip_ignore_data,
            ignore_attribute=config.get_ignore_attribute(),
        ))

    # ------------------------------------------------------------------
    # Markup
    # ------------------------------------------------------------------

    def apply_markup(self) -> int:
        """Stamp identifiers on the editable; return the last one assigned."""
        return self.identity.stamp(self._require_editable())

    def remove_markup(self) -> None:
        """Clean the editable from every identifier and marker."""
        self.identity.unstamp(self._require_editable(), unmark=self.unmark_issue_element)

    def resolve_editor_elements(self, issue_list: IssueList) -> int:
        """Bind each issue of *issue_list* to its live node."""
        return self.identity.resolve(issue_list, self._require_editable())

    # ------------------------------------------------------------------
    # Marking
    # ------------------------------------------------------------------

    def mark_issues(self, issue_list: IssueList) -> None:
        self.marking.mark_all(issue_list)

    def mark_issue_element(self, issue: Issue, issue_list: IssueList) -> None:
        self.marking.mark_one(issue, issue_list)

    def mark_ignored_issue(self, issue: Issue) -> None:
        self.marking.mark_ignored(issue)

    def unmark_issue_element(self, target: Union[Issue, ET._Element],
                             skip_common_class: bool = False) -> None:
        self.marking.unmark_one(target, keep_common_marker=skip_common_class)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def click_listener(self, event: ClickEvent) -> Optional[ET._Element]:
        return self.router.on_click(event)

    def _require_editable(self) -> ET._Element:
        editable = self.editable()
        if editable is None:
            raise EditableNotAvailableError("Editable not available")
        return editable
