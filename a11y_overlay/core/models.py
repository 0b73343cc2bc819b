from __future__ import annotations

"""Issue data structures shared across the checker overlay.

These objects are produced by checking engines and consumed by the identity,
marking and click routing layers. They hold no UI state.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from lxml import etree as ET

__all__ = ["Issue", "IssueList", "IssueDetails", "DEFAULT_TESTABILITY"]

DEFAULT_TESTABILITY = 1


@dataclass(eq=False)
class Issue:
    """A single accessibility issue reported by an engine.

    Attributes
    ----------
    id
        Issue kind identifier, e.g. ``"imgHasAlt"``. Used as the key of
        ``Engine.fixes_mapping``.
    original_element
        Node the engine reported, living in the detached copy of the markup
        that was checked. Carries the identifier attribute.
    element
        Matching node in the live editable. ``None`` until resolution ran, or
        when the node no longer exists (stale issue).
    testability
        ``0`` notice, ``0.5`` warning, ``1`` error. ``None`` means error.
    ignored
        Whether the user chose to ignore this issue.
    engine
        Name of the engine that produced the issue.
    details
        Engine specific payload.
    """

    id: str
    original_element: Optional[ET._Element] = None
    element: Optional[ET._Element] = None
    testability: Optional[float] = None
    ignored: bool = False
    engine: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def is_ignored(self) -> bool:
        return self.ignored

    def set_ignored(self, ignored: bool) -> None:
        self.ignored = bool(ignored)

    @property
    def severity(self) -> float:
        """Testability with the default applied."""
        return DEFAULT_TESTABILITY if self.testability is None else self.testability

    def is_resolved(self) -> bool:
        return self.element is not None


@dataclass
class IssueDetails:
    """Human-readable description of an issue kind."""

    title: str
    descr: str = ""
    path: List[str] = field(default_factory=list)


class IssueList:
    """Ordered collection of issues.

    Insertion order is display order and is never re-sorted.
    """

    def __init__(self, issues: Optional[List[Issue]] = None) -> None:
        self._items: List[Issue] = list(issues or [])

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Issue]:
        return iter(list(self._items))

    def count(self) -> int:
        return len(self._items)

    def add_item(self, issue: Issue) -> None:
        self._items.append(issue)

    def get_item(self, index: int) -> Optional[Issue]:
        if 0 <= index < len(self._items):
            return self._items[index]
        return None

    def index_of(self, issue: Issue) -> int:
        """Return the position of *issue*, or -1 when absent."""
        for i, item in enumerate(self._items):
            if item is issue:
                return i
        return -1

    def remove_item(self, issue: Issue) -> bool:
        index = self.index_of(issue)
        if index == -1:
            return False
        del self._items[index]
        return True

    def clear(self) -> None:
        self._items.clear()

    def get_issues_by_element(self, element: Any, skip_ignored: bool = False) -> List[Issue]:
        """Return issues bound to *element*, in list order.

        With *skip_ignored* only issues that are not ignored are returned.
        """
        if element is None:
            return []
        return [
            issue for issue in self._items
            if issue.element is element and not (skip_ignored and issue.ignored)
        ]

    def get_item_by_element(self, element: Any) -> Optional[Issue]:
        matches = self.get_issues_by_element(element)
        return matches[0] if matches else None
