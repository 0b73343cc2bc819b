from __future__ import annotations

"""Checking session: runs an engine over the editable and tracks its issues.

The session plays the controller role for the decorator and the click
router: it owns the current mode, the issue list and the focused issue.

Flow of :meth:`CheckingSession.check`:

1. identifiers are stamped on the live editable;
2. the content is exported with identifiers kept, and parsed again into a
   detached copy handed to the engine;
3. once the engine reports, every issue is resolved back onto the live
   editable and markers are rendered. If the editable was rebuilt in the
   meantime its issues stay unbound and it is stamped for the next check.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from lxml import etree as ET

from a11y_overlay.config import ConfigManager

from . import document, markers
from .click_router import Mode
from .decorator import EditableDecorator
from .editor import Editor
from .engine import Engine
from .exceptions import QuickFixLoadError
from .models import Issue, IssueDetails, IssueList
from .quickfix.base import FixCallback, QuickFix

__all__ = ["CheckingSession"]

logger = logging.getLogger(__name__)


class CheckingSession:
    """Controller for one editor and one engine.

    Args:
        editor: Host editor; its editable must exist.
        engine: Checking engine used by :meth:`check`.
        focus_next: Called when the review panel should move focus to its
            "next" control after a click selected an issue.
        on_mode_change: Called with the new :class:`Mode` on each change.
    """

    def __init__(self, editor: Editor, engine: Engine,
                 focus_next: Optional[Callable[[], None]] = None,
                 on_mode_change: Optional[Callable[[Mode], None]] = None) -> None:
        self.editor = editor
        self.engine = engine
        self.mode = Mode.CLOSED
        self.enabled = False
        self.disable_filter_strip = False
        self.issues = IssueList()
        self.focused_issue: Optional[Issue] = None
        self._focus_next = focus_next
        self._on_mode_change = on_mode_change
        self._ignore_attribute = ConfigManager().get_ignore_attribute()
        self.decorator = EditableDecorator(editor, self)
        self._logger = logging.getLogger(f"{__name__}.CheckingSession")

    # -------------------------------------------------------------------------
    # Checking
    # -------------------------------------------------------------------------

    def check(self, callback: Optional[Callable[[IssueList], None]] = None) -> None:
        """Run the engine over the current content.

        *callback* receives the resolved issue list once markers are drawn.
        """
        self.decorator.remove_markup()
        self.focused_issue = None
        self.decorator.apply_markup()

        self.disable_filter_strip = True
        try:
            markup = self.editor.get_data()
        finally:
            self.disable_filter_strip = False

        scratchpad = document.parse_editable(markup)

        def on_processed(issue_list: IssueList) -> None:
            self._accept_issues(issue_list)
            if callback:
                callback(issue_list)

        self._logger.debug("Starting %s check", self.engine.name)
        self.engine.process(self, scratchpad, on_processed)

    def _accept_issues(self, issue_list: IssueList) -> None:
        # Content rebuilt while the engine ran carries none of the checked
        # identifiers, so nothing in it can be matched to an issue.
        editable = self.editor.editable()
        rebuilt = editable is not None and self.decorator.identity.read_id(editable) is None
        if rebuilt:
            self._logger.warning("Content was replaced during the %s check; "
                                 "%d issue(s) left unbound", self.engine.name, issue_list.count())
            for issue in issue_list:
                issue.element = None
            resolved = 0
            self.decorator.apply_markup()
        else:
            resolved = self.decorator.resolve_editor_elements(issue_list)

        self.issues = issue_list
        self.decorator.mark_issues(issue_list)
        self.enabled = True
        self._logger.info("Check finished: %d issue(s), %d bound to content",
                          issue_list.count(), resolved)
        self.set_mode(Mode.NORMAL if issue_list.count() else Mode.LISTENING)

    def close(self) -> None:
        """Remove every trace of the session from the editable."""
        if self.editor.editable() is not None:
            self.decorator.remove_markup()
        self.issues = IssueList()
        self.focused_issue = None
        self.enabled = False
        self.set_mode(Mode.CLOSED)

    # -------------------------------------------------------------------------
    # Controller protocol
    # -------------------------------------------------------------------------

    def set_mode(self, mode: Mode) -> None:
        if mode == self.mode:
            return
        self._logger.debug("Mode %s -> %s", self.mode.name, mode.name)
        self.mode = mode
        if self._on_mode_change:
            self._on_mode_change(mode)

    def show_issue_by_element(self, element: ET._Element,
                              callback: Optional[Callable[[], None]] = None) -> bool:
        """Focus the first issue bound to *element*, then call *callback*."""
        issue = self.issues.get_item_by_element(element)
        if issue is None:
            self._logger.debug("No issue bound to clicked element <%s>", getattr(element, "tag", "?"))
            return False
        self.focus_issue(issue)
        if callback:
            callback()
        return True

    def focus_next_control(self) -> None:
        if self._focus_next:
            self._focus_next()

    # -------------------------------------------------------------------------
    # Issues
    # -------------------------------------------------------------------------

    def focus_issue(self, issue: Issue) -> None:
        """Move the focused marker to the element of *issue*."""
        if self.focused_issue is not None and self.focused_issue.element is not None:
            document.remove_class(self.focused_issue.element, markers.FOCUSED_CLASS)
        self.focused_issue = issue
        if issue.element is not None:
            document.add_class(issue.element, markers.FOCUSED_CLASS)

    def set_issue_ignored(self, issue: Issue, ignored: bool) -> None:
        """Change the ignored flag of *issue* and refresh its node."""
        issue.set_ignored(ignored)
        element = issue.element
        if element is None:
            return

        ignored_ids = sorted({i.id for i in self.issues.get_issues_by_element(element) if i.ignored})
        if ignored_ids:
            document.set_attribute(element, self._ignore_attribute, ",".join(ignored_ids))
        else:
            document.remove_attribute(element, self._ignore_attribute)

        for bound in self.issues.get_issues_by_element(element):
            self.decorator.mark_issue_element(bound, self.issues)

    def get_issue_details(self, issue: Issue, callback: Callable[[IssueDetails], None]) -> None:
        self.engine.get_issue_details(issue, callback)

    def get_fixes(self, issue: Issue, callback: Callable[[List[QuickFix]], None],
                  on_error: Optional[Callable[[List[QuickFixLoadError]], None]] = None) -> None:
        self.engine.get_fixes(issue, callback, on_error)

    def apply_fix(self, fix: QuickFix, form_attributes: Dict[str, Any],
                  callback: Optional[FixCallback] = None) -> List[str]:
        """Validate *form_attributes* and apply *fix* when they are valid.

        Returns the validation messages; the fix only runs when there are none.
        """
        errors = fix.validate(form_attributes)
        if errors:
            self._logger.debug("Quick fix %s rejected input: %s", fix.get_name(), errors)
            return errors

        fix.fix(form_attributes, callback)
        return []
