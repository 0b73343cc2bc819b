"""Marker class names applied to issue nodes in the editable."""

from typing import Any, Dict

from . import document

__all__ = [
    "ISSUE_CLASS",
    "ERROR_CLASS",
    "WARNING_CLASS",
    "NOTICE_CLASS",
    "IGNORED_CLASS",
    "FOCUSED_CLASS",
    "SEVERITY_CLASSES",
    "TESTABILITY_CLASSES",
    "severity_class",
    "clear_markers",
]

ISSUE_CLASS = "cke_a11ychecker_issue"
ERROR_CLASS = "cke_a11ychecker_error"
WARNING_CLASS = "cke_a11ychecker_warning"
NOTICE_CLASS = "cke_a11ychecker_notice"
IGNORED_CLASS = "cke_a11ychecker_ignored"
FOCUSED_CLASS = "cke_a11y_focused"

# Keys are Issue.testability values.
TESTABILITY_CLASSES: Dict[float, str] = {
    0: NOTICE_CLASS,
    0.5: WARNING_CLASS,
    1: ERROR_CLASS,
}

SEVERITY_CLASSES = (ERROR_CLASS, WARNING_CLASS, NOTICE_CLASS)


def severity_class(testability: Any) -> str:
    """Map a testability score to its marker class; unknown means error."""
    try:
        return TESTABILITY_CLASSES.get(testability, ERROR_CLASS)
    except TypeError:  # unhashable score
        return ERROR_CLASS


def clear_markers(node: Any, keep_common: bool = False) -> None:
    """Remove severity, ignored and focused markers from *node*.

    The has-issue marker goes too unless *keep_common* is set.
    """
    names = SEVERITY_CLASSES + (IGNORED_CLASS, FOCUSED_CLASS)
    if not keep_common:
        names += (ISSUE_CLASS,)
    document.remove_class(node, *names)
