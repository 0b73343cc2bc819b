from __future__ import annotations

"""Quick fix setting the alternative text of an image."""

import logging
from typing import Any, Dict, List, Optional

from a11y_overlay.core.quickfix.base import FixCallback, QuickFix, QuickFixForm

__all__ = ["ImgAlt"]

logger = logging.getLogger(__name__)


class ImgAlt(QuickFix):
    """Asks for an ``alt`` value and writes it on the issue's image."""

    # Maximal accepted length of the alternative text; 0 disables the check.
    alt_length_limit: int = 100

    lang = {
        "alt_label": "Alternative text",
        "error_empty": "Alternative text can not be empty",
        "error_too_long": (
            "Alternative text is too long. It should be up to {limit} characters "
            "while your has {length}."
        ),
    }

    def display(self, form: QuickFixForm) -> None:
        form.set_inputs({
            "alt": {
                "type": "text",
                "label": self.lang["alt_label"],
                "value": self.issue.element.get("alt", ""),
            }
        })

    def fix(self, form_attributes: Dict[str, Any],
            callback: Optional[FixCallback] = None) -> None:
        self.issue.element.set("alt", form_attributes["alt"])
        logger.debug("Alternative text set on issue %s", self.issue.id)

        if callback:
            callback(self)

    def validate(self, form_attributes: Dict[str, Any]) -> List[str]:
        errors: List[str] = []
        alt = form_attributes.get("alt") or ""
        limit = self.alt_length_limit

        if not alt:
            errors.append(self.lang["error_empty"])
        elif limit and len(alt) > limit:
            errors.append(self.lang["error_too_long"].format(limit=limit, length=len(alt)))

        return errors
