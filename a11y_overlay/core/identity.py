from __future__ import annotations

"""Stable node identifiers for the editable tree.

Before a check starts every element of the editable gets a sequential
``data-quail-id`` attribute. Engines work on a detached copy of the markup,
and the identifiers recorded on the nodes they report are then used to find
the matching live nodes again. Identifiers are an internal artifact: they are
removed from exported markup by :meth:`IdentityRegistry.output_filter_rule`
and from the live tree by :meth:`IdentityRegistry.unstamp`.
"""

import logging
from typing import Any, Callable, Iterable, Optional

from lxml import etree as ET

from a11y_overlay.config import ConfigManager

from . import document, markers, placeholder
from .models import Issue

__all__ = ["IdentityRegistry"]

logger = logging.getLogger(__name__)

UnmarkCallback = Callable[[Any], None]
FilterRule = Callable[[ET._Element], Optional[ET._Element]]


class IdentityRegistry:
    """Assigns, reads and resolves node identifiers.

    Parameters
    ----------
    id_attribute
        Attribute holding the identifier. Defaults to the ``id_attribute``
        configuration value (``data-quail-id``).
    root_id
        Identifier of the root passed to :meth:`stamp`. Descendants get
        ``root_id + 1``, ``root_id + 2``... in document order.
    """

    def __init__(self, id_attribute: Optional[str] = None,
                 root_id: Optional[int] = None) -> None:
        if id_attribute is None or root_id is None:
            config = ConfigManager()
            id_attribute = id_attribute or config.get_id_attribute()
            root_id = config.get_root_id() if root_id is None else root_id
        self.id_attribute = id_attribute
        self.root_id = int(root_id)

    # ------------------------------------------------------------------
    # Stamping
    # ------------------------------------------------------------------

    def stamp(self, root: ET._Element) -> int:
        """Give *root* and each descendant element a fresh identifier.

        Returns the last identifier assigned.
        """
        last_id = self.root_id
        for element in document.iter_elements(root):
            document.set_attribute(element, self.id_attribute, last_id)
            if placeholder.is_placeholder(element):
                placeholder.write_attribute(element, self.id_attribute, last_id)
            last_id += 1

        logger.debug("Stamped %d elements with %s", last_id - self.root_id, self.id_attribute)
        return last_id - 1

    def unstamp(self, root: ET._Element, unmark: Optional[UnmarkCallback] = None) -> None:
        """Remove identifiers and issue markers from *root*.

        Read-only nodes are skipped. Any node still flagged as having an issue
        is passed to *unmark* (full marker removal by default).
        """
        if unmark is None:
            unmark = markers.clear_markers

        for element in document.iter_elements(root):
            if document.is_writable(element):
                document.remove_attribute(element, self.id_attribute)

            if placeholder.is_placeholder(element):
                placeholder.remove_attribute(element, self.id_attribute)

            if document.has_class(element, markers.ISSUE_CLASS):
                unmark(element)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def read_id(self, node: Any) -> Optional[int]:
        """Return the identifier of *node*, or None when it has none."""
        value = document.get_attribute(node, self.id_attribute)
        if value is None:
            return placeholder.read_attribute(node, self.id_attribute)
        try:
            return int(value)
        except ValueError:
            logger.debug("Ignoring malformed %s value %r", self.id_attribute, value)
            return None

    def find_by_id(self, root: ET._Element, node_id: int) -> Optional[ET._Element]:
        """Return the element of *root* carrying *node_id*."""
        found = root.xpath(
            "descendant-or-self::*[@*[name()=$attr]=$value]",
            attr=self.id_attribute,
            value=str(node_id),
        )
        if len(found) > 1:
            logger.warning("Identifier %s is not unique (%d matches)", node_id, len(found))
        return found[0] if found else None

    def resolve(self, issues: Iterable[Issue], root: ET._Element) -> int:
        """Bind every issue to its live node in *root*.

        Issues whose identifier is missing from *root* are stale: their
        ``element`` is reset to None. Returns the number of resolved issues.
        """
        resolved = 0
        stale = 0
        for issue in issues:
            node_id = self.read_id(issue.original_element)
            issue.element = self.find_by_id(root, node_id) if node_id is not None else None
            if issue.element is None:
                stale += 1
            else:
                resolved += 1

        if stale:
            logger.debug("Resolution left %d stale issue(s) unbound", stale)
        return resolved

    # ------------------------------------------------------------------
    # Serialization boundary
    # ------------------------------------------------------------------

    def output_filter_rule(self, keep_ids: Callable[[], bool],
                           strip_ignore_data: bool = False,
                           ignore_attribute: str = "data-a11y-ignore") -> FilterRule:
        """Build the per-element rule used while exporting markup.

        The identifier is removed unless ``keep_ids()`` returns True. With
        *strip_ignore_data* the *ignore_attribute* is removed as well.
        """
        id_attribute = self.id_attribute

        def strip_identity(element: ET._Element) -> ET._Element:
            if not keep_ids():
                document.remove_attribute(element, id_attribute)
                if placeholder.is_placeholder(element):
                    placeholder.remove_attribute(element, id_attribute)

            if strip_ignore_data:
                document.remove_attribute(element, ignore_attribute)

            return element

        return strip_identity
