"""Shared fixtures and fakes for the checker overlay tests.

The fakes follow the host contracts loosely: a controller that records what
the click router asks of it, and an engine that reports issues for every
element of a given tag in the markup it is handed.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from a11y_overlay.config import ConfigManager
from a11y_overlay.core.editor import Editor
from a11y_overlay.core.engine import Engine
from a11y_overlay.core.models import Issue, IssueDetails, IssueList
from a11y_overlay.core.quickfix.cache import FixTypeCache
from a11y_overlay.core.quickfix.loader import QuickFixLoader

# Configure test logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


SAMPLE_MARKUP = (
    '<p>First paragraph</p>'
    '<img src="logo.png">'
    '<div><p>Nested <b>bold</b></p></div>'
)

PLACEHOLDER_PAYLOAD = '<iframe src="https://example.com/embed"></iframe>'


class FakeController:
    """Records the requests the click router and decorator make."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.disable_filter_strip = False
        self.modes = []
        self.shown = []
        self.focus_requests = 0

    def set_mode(self, mode):
        self.modes.append(mode)

    def show_issue_by_element(self, element, callback=None):
        self.shown.append(element)
        if callback:
            callback()
        return True

    def focus_next_control(self):
        self.focus_requests += 1


class FakeEngine(Engine):
    """Reports one issue per element matching each (tag, issue id, testability) finding."""

    name = "fake"
    fixes_mapping = {
        "imgHasAlt": ["ImgAlt"],
        "pNotUsedAsHeader": ["ParagraphToHeader"],
    }

    def __init__(self, findings: Optional[List[Tuple[str, str, Any]]] = None,
                 fix_cache: Optional[FixTypeCache] = None):
        super().__init__(fix_cache)
        self.findings = findings or []
        self.contexts = []
        self.checked = []
        self.deferred: Optional[Callable[[], None]] = None
        self.defer = False

    def process(self, context, content_element, callback):
        self.contexts.append(context)
        self.checked.append(content_element)

        issues = IssueList()
        for tag, issue_id, testability in self.findings:
            for element in content_element.iter(tag):
                issues.add_item(Issue(issue_id, original_element=element,
                                      testability=testability, engine=self.name))

        if self.defer:
            self.deferred = lambda: callback(issues)
        else:
            callback(issues)

    def get_issue_details(self, issue, callback):
        callback(IssueDetails(title=f"{issue.id} title", descr=f"About {issue.id}"))


def make_placeholder_markup(payload: str = PLACEHOLDER_PAYLOAD) -> str:
    from a11y_overlay.core import placeholder

    return (
        '<p>Before</p>'
        f'<img data-cke-real-node-type="1" data-cke-realelement="{placeholder.encode(payload)}">'
        '<p>After</p>'
    )


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Fresh ConfigManager reading overrides from an empty temp directory."""
    config_dir = tmp_path / "a11y_config"
    config_dir.mkdir()
    monkeypatch.setenv("A11Y_OVERLAY_CONFIG_DIR", str(config_dir))
    ConfigManager._instance = None
    yield config_dir
    ConfigManager._instance = None


@pytest.fixture
def controller():
    return FakeController()


@pytest.fixture
def editor():
    return Editor(SAMPLE_MARKUP)


@pytest.fixture
def placeholder_editor():
    return Editor(make_placeholder_markup())


@pytest.fixture
def fix_cache():
    """Quick-fix cache isolated from the process-wide one."""
    return FixTypeCache(QuickFixLoader(search_packages=["a11y_overlay.quickfix"], plugin_dirs=[]))


@pytest.fixture
def fake_engine(fix_cache):
    return FakeEngine(fix_cache=fix_cache)


@pytest.fixture
def quickfix_plugins_dir():
    """Directory holding quick-fix modules loaded from disk."""
    return Path(__file__).parent / "fixtures" / "quickfixes"
