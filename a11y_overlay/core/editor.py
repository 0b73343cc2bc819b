from __future__ import annotations

"""Minimal editor host around an ``lxml.html`` editable.

The host owns the editable root, dispatches DOM-like events and exports the
content as HTML through an :class:`OutputFilter`. The filter is the
serialization boundary: rules run once per element of a deep copy, so the
live tree is never touched by exporting.
"""

import copy
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from lxml import etree as ET
from lxml import html as lxml_html

from . import document, placeholder
from .click_router import ClickEvent

__all__ = ["Editor", "OutputFilter", "FilterRule", "restore_placeholder"]

logger = logging.getLogger(__name__)

# A rule returns the element (possibly modified), a replacement element, or
# None to drop the element from the output.
FilterRule = Callable[[ET._Element], Optional[ET._Element]]
Listener = Callable[[Any], None]


def restore_placeholder(element: ET._Element) -> ET._Element:
    """Output rule turning a placeholder back into the element it wraps."""
    if not placeholder.is_placeholder(element):
        return element

    encoded = document.get_attribute(element, placeholder.REAL_ELEMENT_ATTRIBUTE)
    if not encoded:
        return element
    try:
        return lxml_html.fragment_fromstring(placeholder.decode(encoded))
    except (ET.ParserError, ValueError) as exc:
        logger.warning("Keeping placeholder, payload is not a single element: %s", exc)
        return element


def _drop(element: ET._Element) -> None:
    """Remove *element* from its parent, keeping its tail text."""
    parent = element.getparent()
    if parent is None:
        return
    if element.tail:
        previous = element.getprevious()
        if previous is not None:
            previous.tail = (previous.tail or "") + element.tail
        else:
            parent.text = (parent.text or "") + element.tail
    parent.remove(element)


class OutputFilter:
    """Ordered per-element transformations applied while exporting."""

    def __init__(self) -> None:
        self._rules: List[FilterRule] = []

    def add_rule(self, rule: FilterRule) -> None:
        self._rules.append(rule)

    def remove_rule(self, rule: FilterRule) -> bool:
        try:
            self._rules.remove(rule)
            return True
        except ValueError:
            return False

    @property
    def rules(self) -> List[FilterRule]:
        return list(self._rules)

    def apply(self, root: ET._Element) -> ET._Element:
        """Run every rule on each descendant element of *root*, in place."""
        self._walk(root)
        return root

    def _walk(self, parent: ET._Element) -> None:
        for child in list(parent):
            if not document.is_writable(child):
                continue

            result: Optional[ET._Element] = child
            for rule in self._rules:
                result = rule(result)
                if result is None:
                    break

            if result is None:
                _drop(child)
            elif result is not child:
                result.tail = child.tail
                parent.replace(child, result)
            else:
                self._walk(child)


class Editor:
    """Editable surface host.

    Args:
        markup: Initial HTML content. ``None`` leaves the editor without an
            editable until :meth:`set_data` is called.
        config: Host configuration (e.g. ``no_ignore_data``).
    """

    def __init__(self, markup: Optional[str] = None,
                 config: Optional[Dict[str, Any]] = None) -> None:
        self.config: Dict[str, Any] = dict(config or {})
        self.output_filter = OutputFilter()
        self.output_filter.add_rule(restore_placeholder)
        self._listeners: Dict[str, List[Listener]] = {}
        self._editable_listeners: List[Tuple[ET._Element, str, Listener]] = []
        self._editable: Optional[ET._Element] = (
            document.parse_editable(markup) if markup is not None else None
        )

    def editable(self) -> Optional[ET._Element]:
        """Return the editable root, or None if it is not available."""
        return self._editable

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def on(self, name: str, listener: Listener) -> None:
        self._listeners.setdefault(name, []).append(listener)

    def remove_listener(self, name: str, listener: Listener) -> None:
        listeners = self._listeners.get(name, [])
        if listener in listeners:
            listeners.remove(listener)

    def fire(self, name: str, data: Any = None) -> None:
        for listener in list(self._listeners.get(name, [])):
            listener(data)

    def attach_listener(self, editable: ET._Element, name: str, listener: Listener) -> None:
        """Attach a DOM listener to *editable*; it dies with that editable."""
        self._editable_listeners.append((editable, name, listener))

    def click(self, target: Any) -> ClickEvent:
        """Dispatch a click on *target* to the current editable's listeners."""
        event = ClickEvent(target)
        for editable, name, listener in list(self._editable_listeners):
            if editable is self._editable and name == "click":
                listener(event)
        return event

    # ------------------------------------------------------------------
    # Data
    # ------------------------------------------------------------------

    def set_data(self, markup: str) -> None:
        """Replace the editable with freshly parsed *markup*."""
        old = self._editable
        self._editable_listeners = [entry for entry in self._editable_listeners if entry[0] is not old]
        self._editable = document.parse_editable(markup)
        self.fire("content_dom")

    def get_data(self) -> str:
        """Return the exported HTML of the editable content."""
        if self._editable is None:
            return ""
        exported = copy.deepcopy(self._editable)
        self.output_filter.apply(exported)
        return document.inner_html(exported)
