from __future__ import annotations

"""Node helpers for the editable document tree.

The editable surface is an ``lxml.html`` element tree. Everything the checker
stores on a node (identifiers, marker classes) goes through this module so the
rest of the package never needs to probe nodes for methods.

Nodes come in two variants:

- ``Capability.WRITABLE``: a real element; attributes and classes may be
  added and removed.
- ``Capability.READ_ONLY``: comments, processing instructions, entities and
  read-only proxies. Reads return empty values and writes are no-ops.
"""

import logging
from enum import Enum
from typing import Any, Iterator, List, Optional

from lxml import etree as ET
from lxml import html as lxml_html

__all__ = [
    "Capability",
    "capabilities",
    "is_writable",
    "iter_elements",
    "iter_ancestors",
    "get_attribute",
    "set_attribute",
    "remove_attribute",
    "get_classes",
    "has_class",
    "add_class",
    "remove_class",
    "parse_editable",
    "inner_html",
]

logger = logging.getLogger(__name__)


class Capability(Enum):
    """What the checker may do with a node."""

    WRITABLE = "writable"
    READ_ONLY = "read_only"


def capabilities(node: Any) -> Capability:
    """Classify *node* as writable element or read-only node."""
    if isinstance(node, ET._Element) and isinstance(node.tag, str):
        return Capability.WRITABLE
    return Capability.READ_ONLY


def is_writable(node: Any) -> bool:
    return capabilities(node) is Capability.WRITABLE


def iter_elements(root: ET._Element, include_root: bool = True) -> Iterator[ET._Element]:
    """Yield element nodes of *root* in document order.

    Comments and processing instructions are never yielded.
    """
    for element in root.iter(ET.Element):
        if element is root and not include_root:
            continue
        yield element


def iter_ancestors(node: Any) -> Iterator[ET._Element]:
    """Yield the ancestors of *node*, closest first."""
    if not isinstance(node, ET._Element):
        return iter(())
    return node.iterancestors()


# ---------------------------------------------------------------------------
# Attributes
# ---------------------------------------------------------------------------

def get_attribute(node: Any, name: str) -> Optional[str]:
    if not is_writable(node):
        return None
    return node.get(name)


def set_attribute(node: Any, name: str, value: Any) -> bool:
    """Set *name* on *node*; return False when the node is read-only."""
    if not is_writable(node):
        return False
    node.set(name, str(value))
    return True


def remove_attribute(node: Any, name: str) -> bool:
    """Remove *name* from *node*; return True if it was present."""
    if not is_writable(node):
        return False
    return node.attrib.pop(name, None) is not None


# ---------------------------------------------------------------------------
# Classes
# ---------------------------------------------------------------------------

def get_classes(node: Any) -> List[str]:
    value = get_attribute(node, "class")
    return value.split() if value else []


def has_class(node: Any, name: str) -> bool:
    return name in get_classes(node)


def add_class(node: Any, name: str) -> None:
    if not is_writable(node):
        return
    classes = get_classes(node)
    if name not in classes:
        classes.append(name)
        node.set("class", " ".join(classes))


def remove_class(node: Any, *names: str) -> None:
    """Remove every class in *names*; drop the attribute once it is empty."""
    if not is_writable(node):
        return
    classes = get_classes(node)
    remaining = [c for c in classes if c not in names]
    if remaining == classes:
        return
    if remaining:
        node.set("class", " ".join(remaining))
    else:
        node.attrib.pop("class", None)


# ---------------------------------------------------------------------------
# Markup
# ---------------------------------------------------------------------------

def parse_editable(markup: str, tag: str = "div") -> ET._Element:
    """Parse *markup* as the content of a fresh editable root element."""
    return lxml_html.fragment_fromstring(markup or "", create_parent=tag)


def inner_html(root: ET._Element) -> str:
    """Serialize the content of *root* without the root tag itself."""
    parts = [root.text or ""]
    for child in root:
        parts.append(ET.tostring(child, encoding="unicode", method="html", with_tail=True))
    return "".join(parts)
