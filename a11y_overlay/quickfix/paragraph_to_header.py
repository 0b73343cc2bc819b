from __future__ import annotations

"""Quick fix converting a paragraph into a heading."""

import re
from typing import Any, Callable, Dict, Optional

from lxml import etree as ET

from .element_replace import ElementReplace

__all__ = ["ParagraphToHeader"]

_HEADING_TAG = re.compile(r"^h[1-6]$", re.IGNORECASE)

DEFAULT_FORMAT_TAGS = "p;h1;h2;h3;h4;h5;h6;pre;address;div"


class ParagraphToHeader(ElementReplace):
    """Turns ``issue.element`` into a heading of the chosen level."""

    lang = {
        "level_label": "Heading level",
        "error_level": "Heading level must be one of h1 to h6",
    }

    def display(self, form) -> None:
        form.set_inputs({
            "level": {
                "type": "text",
                "label": self.lang["level_label"],
                "value": f"h{self.get_preferred_level()}",
            }
        })

    def validate(self, form_attributes: Dict[str, Any]) -> list:
        level = form_attributes.get("level")
        if level and not _HEADING_TAG.match(str(level)):
            return [self.lang["error_level"]]
        return []

    def get_target_name(self, form_attributes: Dict[str, Any]) -> str:
        level = str(form_attributes.get("level") or "")
        if _HEADING_TAG.match(level):
            return level.lower()
        return f"h{self.get_preferred_level()}"

    def get_preferred_level(self) -> int:
        """Return the level following the closest preceding heading, 1 to 6."""
        element = self.issue.element
        root = element.getroottree().getroot()

        previous: Optional[ET._Element] = None
        for node in root.iter(ET.Element):
            if node is element:
                break
            if _HEADING_TAG.match(node.tag):
                previous = node

        if previous is None:
            return 1
        return min(int(previous.tag[1]) + 1, 6)

    @staticmethod
    def possible_levels(format_tags: str = DEFAULT_FORMAT_TAGS,
                        is_allowed: Optional[Callable[[str], bool]] = None) -> Dict[str, int]:
        """Return ``{"min": ..., "max": ...}`` heading levels offered by *format_tags*.

        *format_tags* is a ``;`` separated tag list. *is_allowed* may further
        reject tags. Without any heading left, the full 1 to 6 range is returned.
        """
        levels = sorted(
            int(tag[1])
            for tag in (t.strip() for t in format_tags.split(";"))
            if _HEADING_TAG.match(tag) and (is_allowed is None or is_allowed(tag))
        )
        if not levels:
            return {"min": 1, "max": 6}
        return {"min": levels[0], "max": levels[-1]}
