"""Watch linked sources and re-run the sync pass after bursts of changes."""

from __future__ import annotations

import logging
import os
import threading
import time
from collections.abc import Callable, Iterable
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

_DEFAULT_IGNORE_PARTS = frozenset({".git", "node_modules"})


class DebouncedTrigger:
    """Collapses bursts of ``notify()`` calls into single job runs.

    Every notify restarts a quiet-window timer; the job fires once the window
    elapses without further notifications. At most one job runs at a time:
    a timer firing while a job is in flight marks a pending rerun, which is
    scheduled once the running job finishes.
    """

    def __init__(self, job: Callable[[], object], delay: float = 0.5) -> None:
        self._job = job
        self._delay = delay
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._generation = 0
        self._running = False
        self._pending = False
        self._idle = threading.Event()
        self._idle.set()

    def notify(self) -> None:
        with self._lock:
            self._idle.clear()
            self._arm()

    def _arm(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._generation += 1
        self._timer = threading.Timer(self._delay, self._fire, args=(self._generation,))
        self._timer.daemon = True
        self._timer.start()

    def _fire(self, generation: int) -> None:
        with self._lock:
            # A newer notify re-armed the window after this timer went off
            if generation != self._generation:
                return
            self._timer = None
            if self._running:
                self._pending = True
                return
            self._running = True

        try:
            self._job()
        except Exception:
            logger.exception("Scheduled sync pass failed")
        finally:
            with self._lock:
                self._running = False
                if self._pending:
                    self._pending = False
                    self._arm()
                elif self._timer is None:
                    self._idle.set()

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Block until no timer is armed and no job is running."""
        return self._idle.wait(timeout)

    def cancel(self) -> None:
        with self._lock:
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._pending = False
            if not self._running:
                self._idle.set()


class _TriggerHandler(FileSystemEventHandler):
    """Forwards every relevant filesystem event to a shared trigger."""

    def __init__(
        self,
        trigger: DebouncedTrigger,
        ignore_parts: frozenset[str],
        roots: Iterable[Path] = (),
    ) -> None:
        super().__init__()
        self._trigger = trigger
        self._ignore_parts = ignore_parts
        self._roots = [Path(r) for r in roots]

    def _relative_parts(self, path: Path) -> tuple[str, ...]:
        # Only components below the watched root count; a source may itself
        # live somewhere under a directory called node_modules.
        for root in self._roots:
            if path.is_relative_to(root):
                return path.relative_to(root).parts
        return path.parts

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.event_type in ("opened", "closed", "closed_no_write"):
            return
        parts = self._relative_parts(Path(os.fsdecode(event.src_path)))
        if any(part in self._ignore_parts for part in parts):
            return
        self._trigger.notify()


class LinkWatcher:
    """Recursive watch on every linked source directory.

    Events from all directories feed one DebouncedTrigger, so a burst
    anywhere results in a single full sync pass over all dependencies.
    """

    def __init__(
        self,
        paths: Iterable[Path],
        callback: Callable[[], object],
        debounce_seconds: float = 0.5,
        ignore_parts: Iterable[str] | None = None,
    ) -> None:
        self._paths = [Path(p).resolve() for p in paths]
        self.trigger = DebouncedTrigger(callback, debounce_seconds)
        parts = frozenset(ignore_parts) if ignore_parts is not None else _DEFAULT_IGNORE_PARTS
        self._handler = _TriggerHandler(self.trigger, parts, self._paths)
        self._observer: Observer | None = None

    @property
    def paths(self) -> list[Path]:
        return list(self._paths)

    def start(self) -> None:
        """Begin watching every existing source directory recursively."""
        if self._observer is not None:
            return
        self._observer = Observer()
        for path in self._paths:
            if not path.is_dir():
                logger.warning("Not watching missing directory %s", path)
                continue
            self._observer.schedule(self._handler, str(path), recursive=True)
            logger.info("Watching %s for changes", path)
        self._observer.start()

    def stop(self) -> None:
        """Stop watching and drop any pending pass."""
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join(timeout=5)
        self._observer = None
        self.trigger.cancel()
        logger.info("Stopped watching %d directories", len(self._paths))

    def run_forever(self, poll_interval: float = 1.0) -> None:
        """Watch until interrupted by a signal (KeyboardInterrupt)."""
        self.start()
        try:
            while True:
                time.sleep(poll_interval)
        except KeyboardInterrupt:
            pass
        finally:
            self.stop()
