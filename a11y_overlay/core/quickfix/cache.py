from __future__ import annotations

"""Memoizing cache of loaded quick-fix types.

Loading goes through a *scheduler* so the caller is never blocked. A
scheduler is any callable ``scheduler(work, done)`` that runs ``work()``
at some point and passes its result to ``done``. Three are provided:

- :func:`run_inline` runs the work immediately (CLI, tests).
- :func:`run_in_thread` runs the work on a daemon thread.
- :class:`DeferredScheduler` queues work until :meth:`DeferredScheduler.drain`
  is called, for hosts that pump their own event loop.

Scope: one :class:`FixTypeCache` lives as long as the object that owns it.
:func:`shared_fix_cache` returns the process-wide instance that engines use by
default, which is right for single-document hosts. Hosts editing several
documents that need isolation create one cache per session and pass it to
their engines.
"""

import logging
import threading
from collections import deque
from threading import RLock
from typing import Any, Callable, Deque, Dict, List, Optional, Tuple, Type

from a11y_overlay.core.exceptions import QuickFixLoadError

from .base import QuickFix
from .loader import QuickFixLoader

__all__ = [
    "Scheduler",
    "run_inline",
    "run_in_thread",
    "DeferredScheduler",
    "FixTypeCache",
    "shared_fix_cache",
]

logger = logging.getLogger(__name__)

Scheduler = Callable[[Callable[[], Any], Callable[[Any], None]], None]
TypeCallback = Callable[[Type[QuickFix]], None]
ErrorCallback = Callable[[QuickFixLoadError], None]


def run_inline(work: Callable[[], Any], done: Callable[[Any], None]) -> None:
    done(work())


def run_in_thread(work: Callable[[], Any], done: Callable[[Any], None]) -> None:
    """Run *work* on a daemon thread; *done* is called on that thread."""
    threading.Thread(target=lambda: done(work()), daemon=True).start()


class DeferredScheduler:
    """Queues jobs until :meth:`drain` runs them in FIFO order."""

    def __init__(self) -> None:
        self._jobs: Deque[Tuple[Callable[[], Any], Callable[[Any], None]]] = deque()

    def __call__(self, work: Callable[[], Any], done: Callable[[Any], None]) -> None:
        self._jobs.append((work, done))

    @property
    def pending(self) -> int:
        return len(self._jobs)

    def run_next(self) -> bool:
        """Run the oldest queued job; return False when the queue is empty."""
        if not self._jobs:
            return False
        work, done = self._jobs.popleft()
        done(work())
        return True

    def drain(self) -> int:
        """Run queued jobs, including ones queued meanwhile. Returns the count."""
        count = 0
        while self.run_next():
            count += 1
        return count


class FixTypeCache:
    """Name -> quick-fix type cache with memoized in-flight loads.

    While a name is loading, further requests for it join the pending load
    instead of starting another one; every waiter is notified when it
    settles. Failed loads are not cached, so a later request retries.
    """

    def __init__(self, loader: Optional[QuickFixLoader] = None,
                 scheduler: Scheduler = run_inline) -> None:
        self._loader = loader
        self.scheduler = scheduler
        self._types: Dict[str, Type[QuickFix]] = {}
        self._pending: Dict[str, List[Tuple[Optional[TypeCallback], Optional[ErrorCallback]]]] = {}
        self._lock = RLock()

    @property
    def loader(self) -> QuickFixLoader:
        if self._loader is None:
            self._loader = QuickFixLoader()
        return self._loader

    def __contains__(self, name: str) -> bool:
        with self._lock:
            return name in self._types

    def get(self, name: str) -> Optional[Type[QuickFix]]:
        with self._lock:
            return self._types.get(name)

    def put(self, name: str, fix_type: Type[QuickFix]) -> None:
        with self._lock:
            self._types[name] = fix_type

    def is_loading(self, name: str) -> bool:
        with self._lock:
            return name in self._pending

    def clear(self) -> None:
        """Forget cached types. Pending loads still notify their waiters."""
        with self._lock:
            self._types.clear()

    def request(self, name: str, callback: Optional[TypeCallback] = None,
                on_error: Optional[ErrorCallback] = None) -> None:
        """Deliver the type called *name* to *callback*.

        A cached type is delivered immediately. Otherwise the type is loaded
        through the scheduler, stored, and delivered when loading completes.
        Failures go to *on_error* (and the log); *callback* is not called.
        """
        with self._lock:
            cached = self._types.get(name)
            if cached is None:
                waiters = self._pending.get(name)
                if waiters is not None:
                    waiters.append((callback, on_error))
                    logger.debug("Joined in-flight load of quick fix %s", name)
                    return
                self._pending[name] = [(callback, on_error)]

        if cached is not None:
            if callback:
                callback(cached)
            return

        self.scheduler(lambda: self._load(name), lambda outcome: self._settle(name, outcome))

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------

    def _load(self, name: str) -> Tuple[str, Any]:
        try:
            return ("ok", self.loader.load(name))
        except QuickFixLoadError as ex:
            return ("err", ex)
        except Exception as ex:
            return ("err", QuickFixLoadError(f"Loading quick fix '{name}' failed: {ex}",
                                             fix_name=name, cause=ex))

    def _settle(self, name: str, outcome: Tuple[str, Any]) -> None:
        kind, value = outcome
        with self._lock:
            waiters = self._pending.pop(name, [])
            if kind == "ok":
                self._types[name] = value

        if kind == "ok":
            for callback, _ in waiters:
                if callback:
                    callback(value)
            return

        logger.error("Quick fix %s failed to load: %s", name, value)
        for _, on_error in waiters:
            if on_error:
                on_error(value)


_SHARED_CACHE: Optional[FixTypeCache] = None
_SHARED_LOCK = RLock()


def shared_fix_cache() -> FixTypeCache:
    """Return the process-wide quick-fix type cache."""
    global _SHARED_CACHE
    with _SHARED_LOCK:
        if _SHARED_CACHE is None:
            _SHARED_CACHE = FixTypeCache()
        return _SHARED_CACHE
