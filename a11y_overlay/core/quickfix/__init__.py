from __future__ import annotations

"""Quick-fix protocol for the checker overlay.

This package provides:
- The QuickFix base class and the form model it fills in
- Discovery and loading of quick-fix types by name
- The memoizing type cache and the schedulers used to load types
"""

from .base import QuickFix, QuickFixForm
from .loader import QuickFixLoader, module_name_for
from .cache import (
    DeferredScheduler,
    FixTypeCache,
    run_in_thread,
    run_inline,
    shared_fix_cache,
)

__all__ = [
    "QuickFix",
    "QuickFixForm",
    "QuickFixLoader",
    "module_name_for",
    "FixTypeCache",
    "DeferredScheduler",
    "run_inline",
    "run_in_thread",
    "shared_fix_cache",
]
