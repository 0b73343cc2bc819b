from __future__ import annotations

"""Codec for placeholder ("fake object") nodes.

A placeholder stands in for embedded, non-editable content (iframes, flash
objects, anchors without text...). The real element is kept as URL-encoded
HTML inside the ``data-cke-realelement`` attribute, so the identifier of such
node has to be written into that string as well::

    <img data-cke-real-node-type="1"
         data-cke-realelement="%3Ciframe%20src%3D%22x%22%3E%3C%2Fiframe%3E">

The token format is ``name="value"`` placed right after the opening tag name.
Any previous token for the same attribute is stripped before a new one is
injected, so re-stamping never accumulates tokens.
"""

import html
import logging
import re
from typing import Any, Optional
from urllib.parse import quote, unquote

from . import document

__all__ = [
    "REAL_NODE_TYPE_ATTRIBUTE",
    "REAL_ELEMENT_ATTRIBUTE",
    "decode",
    "encode",
    "strip",
    "inject",
    "extract",
    "is_placeholder",
    "read_attribute",
    "write_attribute",
    "remove_attribute",
]

logger = logging.getLogger(__name__)

REAL_NODE_TYPE_ATTRIBUTE = "data-cke-real-node-type"
REAL_ELEMENT_ATTRIBUTE = "data-cke-realelement"

# Same character set encodeURIComponent leaves untouched.
_URI_COMPONENT_SAFE = "-_.!~*'()"

_OPENING_TAG = re.compile(r"^(\s*<[A-Za-z][\w:.-]*)")


def _token_pattern(attr_name: str) -> re.Pattern[str]:
    return re.compile(r'\s+' + re.escape(attr_name) + r'="(\d+)"')


def decode(value: str) -> str:
    """Return the HTML held by an encoded ``data-cke-realelement`` value."""
    return unquote(value or "")


def encode(markup: str) -> str:
    """Encode *markup* the way ``encodeURIComponent`` does."""
    return quote(markup or "", safe=_URI_COMPONENT_SAFE)


def strip(markup: str, attr_name: str) -> str:
    """Remove every ``attr_name="<digits>"`` token from *markup*."""
    return _token_pattern(attr_name).sub("", markup or "")


def inject(markup: str, attr_name: str, value: Any) -> str:
    """Write ``attr_name="value"`` right after the opening tag name.

    Prior tokens for *attr_name* are stripped first. Markup that does not
    start with an opening tag is returned stripped but otherwise unchanged.
    """
    cleaned = strip(markup, attr_name)
    token = ' %s="%s"' % (attr_name, html.escape(str(value), quote=True))
    injected, count = _OPENING_TAG.subn(lambda m: m.group(1) + token, cleaned, count=1)
    if not count:
        logger.debug("No opening tag found in placeholder markup: %r", cleaned[:60])
    return injected


def extract(markup: str, attr_name: str) -> Optional[int]:
    """Return the first numeric ``attr_name`` token value in *markup*."""
    match = _token_pattern(attr_name).search(markup or "")
    return int(match.group(1)) if match else None


# ---------------------------------------------------------------------------
# Element level helpers
# ---------------------------------------------------------------------------

def is_placeholder(node: Any) -> bool:
    """Return True if *node* is a placeholder for a real element."""
    return document.get_attribute(node, REAL_NODE_TYPE_ATTRIBUTE) is not None


def read_attribute(node: Any, attr_name: str) -> Optional[int]:
    encoded = document.get_attribute(node, REAL_ELEMENT_ATTRIBUTE)
    if encoded is None:
        return None
    return extract(decode(encoded), attr_name)


def write_attribute(node: Any, attr_name: str, value: Any) -> bool:
    """Store ``attr_name=value`` inside the placeholder payload of *node*."""
    encoded = document.get_attribute(node, REAL_ELEMENT_ATTRIBUTE)
    if encoded is None:
        return False
    new_markup = inject(decode(encoded), attr_name, value)
    return document.set_attribute(node, REAL_ELEMENT_ATTRIBUTE, encode(new_markup))


def remove_attribute(node: Any, attr_name: str) -> bool:
    """Strip every ``attr_name`` token from the placeholder payload of *node*."""
    encoded = document.get_attribute(node, REAL_ELEMENT_ATTRIBUTE)
    if encoded is None:
        return False
    return document.set_attribute(node, REAL_ELEMENT_ATTRIBUTE, encode(strip(decode(encoded), attr_name)))
