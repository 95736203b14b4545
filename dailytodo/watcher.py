"""Background reload triggers for dailytodo.

Two independent subscriptions feed one reload queue:

- FileChangeSubscription watches the vault with watchdog and requests a
  reload when today's note is created, modified, moved or deleted.
- RolloverSubscription checks periodically whether the local date has moved
  past the date of the last load.

The ReloadQueue runs reloads on a worker thread and keeps at most one reload
pending, so a burst of events collapses into a single re-parse.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from dailytodo.core.notes import is_daily_note_file

if TYPE_CHECKING:
    from watchdog.events import FileSystemEvent

    from dailytodo.core.session import TodoSession

logger = logging.getLogger(__name__)


class ReloadQueue:
    """Run reload requests one at a time, coalescing while one is pending."""

    def __init__(self, reload: Callable[[], object], debounce_seconds: float = 0.0):
        self.reload = reload
        self.debounce_seconds = debounce_seconds
        self.last_request: float = 0.0
        self.stats = {"requested": 0, "coalesced": 0, "reloads": 0, "errors": 0}
        self._pending = threading.Event()
        self._lock = threading.Lock()
        self._stopping = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def pending(self) -> bool:
        return self._pending.is_set()

    def request(self, reason: str) -> bool:
        """Ask for a reload. Returns False if one was already pending."""
        with self._lock:
            self.last_request = time.monotonic()
            if self._pending.is_set():
                self.stats["coalesced"] += 1
                logger.debug("Reload already pending, coalesced: %s", reason)
                return False
            self._pending.set()
            self.stats["requested"] += 1
        logger.debug("Reload requested: %s", reason)
        return True

    def process_pending(self) -> bool:
        """Run the pending reload, if any. Returns True if a reload ran."""
        with self._lock:
            if not self._pending.is_set():
                return False
            if time.monotonic() - self.last_request < self.debounce_seconds:
                return False  # Wait for changes to settle
            self._pending.clear()

        try:
            self.reload()
            self.stats["reloads"] += 1
        except Exception as e:
            logger.warning("Reload failed: %s", e)
            self.stats["errors"] += 1
        return True

    def start(self) -> None:
        """Start processing requests on a background thread."""
        if self._thread is not None:
            return
        self._stopping.clear()
        self._thread = threading.Thread(
            target=self._run, name="dailytodo-reload", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: float = 5.0) -> None:
        self._stopping.set()
        self._pending.set()  # Wake the worker
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        self._pending.clear()

    def _run(self) -> None:
        while not self._stopping.is_set():
            self._pending.wait(timeout=0.5)
            if self._stopping.is_set():
                break
            if not self.process_pending() and self.pending:
                # Debouncing; check again shortly
                self._stopping.wait(min(self.debounce_seconds, 0.1) or 0.05)


class TodayNoteHandler(FileSystemEventHandler):
    """Request a reload when today's note changes on disk."""

    def __init__(self, session: TodoSession, queue: ReloadQueue):
        super().__init__()
        self.session = session
        self.queue = queue

    def _is_today_note(self, path: str | bytes) -> bool:
        if isinstance(path, bytes):
            path = path.decode()
        name = Path(path).name
        if not is_daily_note_file(name):
            return False
        today_path = self.session.today_path()
        return today_path is not None and name == today_path.name

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        if event.event_type not in ("created", "modified", "moved", "deleted"):
            return

        paths = [event.src_path]
        dest_path = getattr(event, "dest_path", None)
        if dest_path:
            paths.append(dest_path)

        if any(self._is_today_note(p) for p in paths):
            self.queue.request(f"{event.event_type}: {event.src_path}")


class FileChangeSubscription:
    """Watch the vault directory for changes to today's note."""

    def __init__(self, session: TodoSession, queue: ReloadQueue):
        self.session = session
        self.queue = queue
        self.handler = TodayNoteHandler(session, queue)
        self._observer: Observer | None = None
        self.watched: Path | None = None

    @property
    def active(self) -> bool:
        return self._observer is not None

    def start(self) -> bool:
        """Start watching. Returns False if there is no vault to watch."""
        vault = self.session.vault_root
        if vault is None or not vault.is_dir():
            logger.warning("Not watching for file changes: no vault directory")
            return False

        observer = Observer()
        # Today's note lives directly in the vault root
        observer.schedule(self.handler, str(vault), recursive=False)
        observer.start()
        self._observer = observer
        self.watched = vault
        logger.info("Watching: %s", vault)
        return True

    def cancel(self) -> None:
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join()
        self._observer = None
        logger.info("Stopped watching: %s", self.watched)
        self.watched = None


class RolloverSubscription:
    """Periodically request a reload once the local date has changed."""

    def __init__(self, session: TodoSession, queue: ReloadQueue, interval: float = 60.0):
        self.session = session
        self.queue = queue
        self.interval = interval
        self._cancelled = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def active(self) -> bool:
        return self._thread is not None

    def check(self) -> bool:
        """Request a reload if the date rolled over. Returns True if it did."""
        if self.session.check_rollover():
            logger.info("Date changed since %s; reloading", self.session.loaded_date)
            self.queue.request("date rollover")
            return True
        return False

    def start(self) -> None:
        if self._thread is not None:
            return
        self._cancelled.clear()
        self._thread = threading.Thread(
            target=self._run, name="dailytodo-rollover", daemon=True
        )
        self._thread.start()

    def cancel(self, timeout: float = 5.0) -> None:
        self._cancelled.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _run(self) -> None:
        while not self._cancelled.wait(self.interval):
            try:
                self.check()
            except Exception as e:
                logger.warning("Rollover check failed: %s", e)


class TodoWatcher:
    """Keep a session's today list in sync with the vault.

    Both triggers feed the same ReloadQueue, which calls ``on_reload``
    (default: ``session.reload``).
    """

    def __init__(
        self,
        session: TodoSession,
        on_reload: Callable[[], object] | None = None,
        rollover_interval: float | None = None,
        debounce_seconds: float | None = None,
    ):
        watch_config = session.config.watch
        if rollover_interval is None:
            rollover_interval = watch_config.rollover_interval
        if debounce_seconds is None:
            debounce_seconds = watch_config.debounce_seconds

        self.session = session
        self.queue = ReloadQueue(on_reload or session.reload, debounce_seconds)
        self.file_changes = FileChangeSubscription(session, self.queue)
        self.rollover = RolloverSubscription(session, self.queue, rollover_interval)

    def start(self) -> None:
        self.queue.start()
        self.file_changes.start()
        self.rollover.start()

    def stop(self) -> None:
        self.rollover.cancel()
        self.file_changes.cancel()
        self.queue.stop()

    def __enter__(self) -> TodoWatcher:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
