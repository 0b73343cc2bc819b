from __future__ import annotations

"""Quick fix replacing an element by one with another tag name."""

import logging
from abc import abstractmethod
from typing import Any, Dict, Optional

from lxml import etree as ET

from a11y_overlay.core import markers
from a11y_overlay.core.exceptions import QuickFixError
from a11y_overlay.core.quickfix.base import FixCallback, QuickFix

__all__ = ["ElementReplace"]

logger = logging.getLogger(__name__)


class ElementReplace(QuickFix):
    """Replaces ``issue.element`` with an element named by :meth:`get_target_name`.

    Text, children, attributes and tail move to the new element, which takes
    the old one's place in its parent. Issue markers are not carried over.
    The issue is rebound to the new element.
    """

    @abstractmethod
    def get_target_name(self, form_attributes: Dict[str, Any]) -> str:
        """Return the tag name the element should be converted to."""

    def fix(self, form_attributes: Dict[str, Any],
            callback: Optional[FixCallback] = None) -> None:
        """
        Raises:
            QuickFixError: If the element has no parent to be replaced in.
        """
        element = self.issue.element
        parent = element.getparent() if element is not None else None
        if parent is None:
            raise QuickFixError(
                f"Cannot replace element of issue '{self.issue.id}': it has no parent",
                name=self.get_name(),
            )

        replacement = self._build_replacement(element, self.get_target_name(form_attributes))
        parent.replace(element, replacement)
        self.issue.element = replacement
        logger.debug("Replaced <%s> with <%s>", element.tag, replacement.tag)

        if callback:
            callback(self)

    @staticmethod
    def _build_replacement(element: ET._Element, tag: str) -> ET._Element:
        replacement = element.makeelement(tag, dict(element.attrib))
        markers.clear_markers(replacement)
        replacement.text = element.text
        for child in list(element):
            # append() moves the child together with its tail
            replacement.append(child)
        replacement.tail = element.tail
        return replacement
