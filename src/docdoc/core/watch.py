"""Watch loop coordination for live re-rendering.

The coordinator owns the set of subscribed paths. Each cycle recomputes the
dependency set from the entry document, drops every subscription, subscribes
the new set, and re-renders. The include graph can change shape between edits,
so subscriptions are always replaced wholesale rather than patched.

watchdog delivers events on its own thread; the handler only enqueues raw
paths. Filtering against the subscribed set, dependency collection, and
rendering all run on the thread that called :meth:`WatchCoordinator.run`.
"""
from __future__ import annotations

import logging
import os
import queue
import threading
import time
from enum import Enum
from pathlib import Path
from typing import Any, Callable, FrozenSet, Iterable, List, Optional, Set, Union

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .documents import DocFormat
from .exceptions import DocdocError, WatchError
from .resolver import IncludeResolver

logger = logging.getLogger(__name__)

# Access-only notifications never change content.
IGNORED_EVENT_TYPES = frozenset({"opened", "closed_no_write"})

_STOP = object()


class WatchState(str, Enum):
    IDLE = "idle"
    WATCHING = "watching"
    STOPPED = "stopped"


class ChangeHandler(FileSystemEventHandler):
    """Forward file events to the coordinator's queue."""

    def __init__(self, events: "queue.Queue[Any]") -> None:
        super().__init__()
        self._events = events

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type in IGNORED_EVENT_TYPES:
            return
        for raw in (event.src_path, getattr(event, "dest_path", "")):
            if raw:
                self._events.put(Path(os.fsdecode(raw)))


def _default_report(error: DocdocError) -> None:
    logger.error("%s", error)


class WatchCoordinator:
    """Keep watch subscriptions in sync with an entry document's include tree."""

    def __init__(
        self,
        entry: Union[str, Path],
        render: Callable[[], None],
        *,
        resolver: Optional[IncludeResolver] = None,
        doc_format: Optional[DocFormat] = None,
        debounce_seconds: float = 0.1,
        observer: Optional[Any] = None,
        on_error: Optional[Callable[[DocdocError], None]] = None,
    ) -> None:
        """Initialize the coordinator.

        Args:
            entry: Entry document path
            render: Callback that re-renders the whole tree (may raise DocdocError)
            resolver: Resolver used for dependency collection
            doc_format: Format metadata passed through to the resolver
            debounce_seconds: Window for coalescing change events into one batch
            observer: watchdog observer (a fresh ``Observer`` when omitted)
            on_error: Called with each non-fatal cycle failure
        """
        self.entry = Path(entry)
        self.render = render
        self.resolver = resolver or IncludeResolver()
        self.doc_format = doc_format
        self.debounce_seconds = max(0.0, float(debounce_seconds))
        self.on_error = on_error or _default_report

        self._observer = observer if observer is not None else Observer()
        self._events: "queue.Queue[Any]" = queue.Queue()
        self.handler = ChangeHandler(self._events)
        self._subscribed: FrozenSet[Path] = frozenset()
        self._state = WatchState.IDLE
        self._stop_requested = threading.Event()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> WatchState:
        return self._state

    @property
    def subscribed_paths(self) -> FrozenSet[Path]:
        return self._subscribed

    def is_subscribed(self, path: Union[str, Path]) -> bool:
        return self._normalize(Path(path)) in self._subscribed

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def replace_subscriptions(self, paths: Iterable[Path]) -> FrozenSet[Path]:
        """Unsubscribe everything, then subscribe exactly ``paths``.

        watchdog watches directories, so each distinct parent directory is
        scheduled once (non-recursively) and events are filtered per file.

        Raises:
            WatchError: The observer refused a (un)subscription.
        """
        new_paths = frozenset(Path(p) for p in paths)
        directories = sorted({p.parent for p in new_paths})
        try:
            self._observer.unschedule_all()
            for directory in directories:
                self._observer.schedule(self.handler, str(directory), recursive=False)
        except (OSError, RuntimeError) as exc:
            raise WatchError(
                f"Failed to update watch subscriptions: {exc}",
                context={"directories": [str(d) for d in directories]},
            ) from exc

        self._subscribed = new_paths
        self._state = WatchState.WATCHING
        logger.info("Watching %d file(s) in %d director(ies)", len(new_paths), len(directories))
        return new_paths

    def refresh_subscriptions(self) -> FrozenSet[Path]:
        """Recompute the dependency set and replace subscriptions with it."""
        dependencies = self.resolver.collect_dependencies(self.entry, doc_format=self.doc_format)
        return self.replace_subscriptions(dependencies)

    # ------------------------------------------------------------------
    # Cycles
    # ------------------------------------------------------------------

    def run_cycle(self) -> bool:
        """Recompute subscriptions and re-render once.

        Resolution failures are reported through ``on_error`` and leave the
        previous subscriptions in place. When there are none yet, the entry
        document alone is watched so that fixing it triggers the next cycle.

        Returns:
            True when both the dependency pass and the render succeeded.

        Raises:
            WatchError: A subscription change failed (fatal for the loop).
        """
        try:
            self.refresh_subscriptions()
        except WatchError:
            raise
        except DocdocError as exc:
            self.on_error(exc)
            if not self._subscribed:
                self.replace_subscriptions([self._normalize(self.entry)])
            return False

        try:
            self.render()
        except WatchError:
            raise
        except DocdocError as exc:
            self.on_error(exc)
            return False
        return True

    def collect_batch(self, timeout: Optional[float] = None) -> Optional[List[Path]]:
        """Block for the next change and coalesce everything within the debounce window.

        Returns:
            The changed paths, or None on timeout or stop.
        """
        try:
            first = self._events.get(timeout=timeout)
        except queue.Empty:
            return None
        if first is _STOP:
            return None

        batch: List[Path] = [first]
        deadline = time.monotonic() + self.debounce_seconds
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            try:
                item = self._events.get(timeout=remaining)
            except queue.Empty:
                break
            if item is _STOP:
                # Re-queue so the loop sees it after this batch.
                self._events.put(_STOP)
                break
            batch.append(item)
        return batch

    def is_relevant(self, batch: Iterable[Path]) -> bool:
        """True when any changed path is currently subscribed."""
        return any(self._normalize(p) in self._subscribed for p in batch)

    def handle_batch(self, batch: List[Path]) -> bool:
        """Run a cycle for a batch that touches a subscribed path.

        Returns:
            True when a cycle ran.
        """
        relevant: Set[Path] = {self._normalize(p) for p in batch} & self._subscribed
        if not relevant:
            logger.debug("Ignoring %d change(s) outside the include tree", len(batch))
            return False
        for path in sorted(relevant):
            logger.debug("Change detected: %s", path)
        self.run_cycle()
        return True

    def run(self, *, initial_render: bool = True) -> None:
        """Start watching and block until :meth:`stop` or a fatal WatchError.

        Args:
            initial_render: Run a full cycle before waiting for changes. When
                False the caller has already rendered once, so only the
                subscriptions are set up; a failure to compute them propagates.
        """
        self._stop_requested.clear()
        self._observer.start()
        try:
            if initial_render:
                self.run_cycle()
            else:
                self.refresh_subscriptions()
            while not self._stop_requested.is_set():
                batch = self.collect_batch()
                if batch is None:
                    continue
                self.handle_batch(batch)
        finally:
            self._state = WatchState.STOPPED
            self._observer.stop()
            self._observer.join()

    def stop(self) -> None:
        """Ask a running loop to exit after the current cycle."""
        self._stop_requested.set()
        self._events.put(_STOP)

    @staticmethod
    def _normalize(path: Path) -> Path:
        return Path(path).resolve()


__all__ = ["WatchCoordinator", "WatchState", "ChangeHandler", "IGNORED_EVENT_TYPES"]
