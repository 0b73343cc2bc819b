from __future__ import annotations

"""Issue marker rendering on the live editable.

For every node bound to at least one issue the engine keeps exactly one of
{error, warning, notice, ignored} plus the has-issue marker. A node is shown
as ignored only when every issue bound to it is ignored; otherwise it shows
the highest severity among its non-ignored issues. Since the state of a node
is derived from all of its issues, running :meth:`MarkingEngine.mark_all`
again after an ignore toggle always converges to the same markers, whatever
the order of the list.
"""

import logging
from typing import Any, Union

from lxml import etree as ET

from . import document, markers
from .models import Issue, IssueList

__all__ = ["MarkingEngine"]

logger = logging.getLogger(__name__)


class MarkingEngine:
    """Applies and removes marker classes for issues."""

    def mark_all(self, issue_list: IssueList) -> None:
        """Mark each issue element, in list order."""
        for issue in issue_list:
            self.mark_one(issue, issue_list)

    def mark_one(self, issue: Issue, issue_list: IssueList) -> None:
        """Apply markers for *issue*, considering every issue on its node."""
        element = issue.element
        if element is None:
            logger.debug("Skipping unresolved issue %s", issue.id)
            return

        # Ignored only if this issue is ignored AND no other issue on the
        # node is still active.
        active = issue_list.get_issues_by_element(element, skip_ignored=True)
        should_be_ignored = issue.ignored and not active

        document.add_class(element, markers.ISSUE_CLASS)

        if should_be_ignored:
            document.remove_class(element, *markers.SEVERITY_CLASSES)
            self.mark_ignored(issue)
        else:
            # An issue not (yet) in the list still marks its own severity
            target = self.severity_class(max(active or [issue], key=lambda i: i.severity))
            document.remove_class(element, markers.IGNORED_CLASS,
                                  *(c for c in markers.SEVERITY_CLASSES if c != target))
            document.add_class(element, target)

    def mark_ignored(self, issue: Issue) -> None:
        """Flag the element of *issue* as ignored.

        Subclasses may override this to render ignored issues differently.
        """
        document.add_class(issue.element, markers.IGNORED_CLASS)

    def unmark_one(self, target: Union[Issue, ET._Element, Any],
                   keep_common_marker: bool = False) -> None:
        """Remove markers from an issue's element or from a node directly."""
        element = target.element if isinstance(target, Issue) else target
        if element is None:
            return
        markers.clear_markers(element, keep_common=keep_common_marker)

    def unmark_all(self, issue_list: IssueList) -> None:
        for issue in issue_list:
            self.unmark_one(issue)

    def severity_class(self, issue: Issue) -> str:
        return markers.severity_class(issue.severity)
