from __future__ import annotations

"""Base interface for accessibility checking engines.

Each engine must implement :meth:`Engine.process` and
:meth:`Engine.get_issue_details`. Both are asynchronous: results are handed
to a callback, never returned. Engines declare which quick fixes apply to
which issue kind in :attr:`Engine.fixes_mapping`::

    class QuailEngine(Engine):
        fixes_mapping = {
            "imgHasAlt": ["ImgAlt"],
            "pNotUsedAsHeader": ["ParagraphToHeader"],
        }

Engines may override :meth:`Engine.get_fix_type` and :meth:`Engine.get_fixes`
if the default behaviour is not suitable.
"""

import logging
from abc import ABC, abstractmethod
from threading import Lock
from typing import Any, Callable, ClassVar, Dict, List, Optional, Type

from lxml import etree as ET

from .exceptions import QuickFixLoadError
from .models import Issue, IssueDetails, IssueList
from .quickfix.base import QuickFix
from .quickfix.cache import FixTypeCache, shared_fix_cache

__all__ = ["Engine", "ProcessCallback", "DetailsCallback", "FixesCallback"]

logger = logging.getLogger(__name__)

ProcessCallback = Callable[[IssueList], None]
DetailsCallback = Callable[[IssueDetails], None]
FixesCallback = Callable[[List[QuickFix]], None]
FixErrorsCallback = Callable[[List[QuickFixLoadError]], None]


class Engine(ABC):
    """Abstract checking engine.

    Args:
        fix_cache: Cache used to load quick-fix types. Defaults to the
            process-wide :func:`shared_fix_cache`.
    """

    name: ClassVar[str] = "engine"

    # Issue kind -> ordered quick-fix type names.
    fixes_mapping: ClassVar[Dict[str, List[str]]] = {}

    def __init__(self, fix_cache: Optional[FixTypeCache] = None) -> None:
        self._fix_cache = fix_cache

    @property
    def fix_cache(self) -> FixTypeCache:
        return self._fix_cache if self._fix_cache is not None else shared_fix_cache()

    @abstractmethod
    def process(self, context: Any, content_element: ET._Element,
                callback: ProcessCallback) -> None:
        """Check *content_element* and pass the found issues to *callback*.

        *content_element* is a detached copy of the editable content; every
        element in it carries its identifier attribute.
        """

    @abstractmethod
    def get_issue_details(self, issue: Issue, callback: DetailsCallback) -> None:
        """Pass the :class:`IssueDetails` of *issue* to *callback*."""

    # -------------------------------------------------------------------------
    # Quick fixes
    # -------------------------------------------------------------------------

    def get_fix_type(self, fix_name: str,
                     callback: Optional[Callable[[Type[QuickFix]], None]] = None,
                     on_error: Optional[Callable[[QuickFixLoadError], None]] = None) -> None:
        """Deliver the quick-fix type called *fix_name* to *callback*."""
        self.fix_cache.request(fix_name, callback, on_error)

    def get_fixes(self, issue: Issue, callback: FixesCallback,
                  on_error: Optional[FixErrorsCallback] = None) -> None:
        """Pass the quick fixes for *issue*, bound to it, to *callback*.

        *callback* is called exactly once: with an empty list when no fix is
        mapped to the issue kind, otherwise once every mapped type settled.
        The list keeps the declared mapping order. Types that failed to load
        or construct are left out and reported together to *on_error*.
        """
        fix_names = list(self.fixes_mapping.get(issue.id) or [])

        if not fix_names:
            callback([])
            return

        slots: List[Optional[QuickFix]] = [None] * len(fix_names)
        errors: List[QuickFixLoadError] = []
        remaining = [len(fix_names)]
        lock = Lock()

        def settle() -> None:
            with lock:
                remaining[0] -= 1
                if remaining[0]:
                    return
            if errors:
                logger.warning("%d quick fix(es) unavailable for issue %s", len(errors), issue.id)
                if on_error:
                    on_error(list(errors))
            callback([fix for fix in slots if fix is not None])

        for index, fix_name in enumerate(fix_names):

            def on_type(fix_type: Type[QuickFix], index: int = index, fix_name: str = fix_name) -> None:
                try:
                    slots[index] = fix_type(issue)
                except Exception as e:
                    with lock:
                        errors.append(QuickFixLoadError(
                            f"Failed to construct quick fix '{fix_name}': {e}",
                            fix_name=fix_name,
                            cause=e,
                        ))
                settle()

            def on_fail(error: QuickFixLoadError) -> None:
                with lock:
                    errors.append(error)
                settle()

            self.get_fix_type(fix_name, on_type, on_fail)
