"""Top-level package for the accessibility checker overlay.

The public API lives in :mod:`a11y_overlay.core`. Hosts should import from
here rather than reaching into internal modules directly.
"""

from .core.models import Issue, IssueList, IssueDetails  # re-export for convenience
from .core.decorator import EditableDecorator
from .core.session import CheckingSession

__version__ = "0.3.0"

__all__: list[str] = [
    "Issue",
    "IssueList",
    "IssueDetails",
    "EditableDecorator",
    "CheckingSession",
]
