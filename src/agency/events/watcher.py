"""Debounced filesystem watcher for the content directory."""

import asyncio
import threading
from collections.abc import Callable, Coroutine
from pathlib import Path
from typing import Any

import structlog
from watchdog.events import (
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from agency.events.types import TEMP_FILE_PATTERNS

logger = structlog.get_logger()

EVENT_PRIORITY: dict[type[FileSystemEvent], int] = {
    FileCreatedEvent: 3,
    FileDeletedEvent: 2,
    FileMovedEvent: 2,
    FileModifiedEvent: 1,
}

EventCallback = Callable[[FileSystemEvent], Coroutine[Any, Any, None]]


def is_temp_file(path: str) -> bool:
    """Check if path is an editor or VCS artifact that should be ignored.

    Args:
        path: File path to check.

    Returns:
        True if the file is a temporary file.
    """
    name = Path(path).name
    return name.startswith(("#", ".#")) or any(
        name.endswith(pattern) for pattern in TEMP_FILE_PATTERNS
    )


def get_event_priority(event: FileSystemEvent) -> int:
    """Get priority value for an event type; higher wins during debouncing."""
    return EVENT_PRIORITY.get(type(event), 0)


class DebouncingHandler(FileSystemEventHandler):
    """Watchdog event handler with per-path debouncing.

    Within the debounce window the highest-priority event for a path is
    kept, so a create followed by several writes is delivered as a single
    create.
    """

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        callback: EventCallback,
        debounce_ms: int = 200,
    ) -> None:
        """Initialize debouncing handler.

        Args:
            loop: Event loop the callback runs on.
            callback: Async function receiving debounced events.
            debounce_ms: Debounce window in milliseconds.
        """
        super().__init__()
        self._loop = loop
        self._callback = callback
        self._debounce_ms = debounce_ms
        self._pending: dict[str, tuple[threading.Timer, FileSystemEvent, int]] = {}
        self._lock = threading.Lock()
        self._coalesced_count = 0

    @property
    def coalesced_events(self) -> int:
        """Number of events coalesced by debouncing."""
        return self._coalesced_count

    def _emit_event(self, path: str) -> None:
        with self._lock:
            entry = self._pending.pop(path, None)
            if entry is None:
                return
            _, event, _ = entry

        logger.debug("watcher_emit", path=path, event_type=event.event_type)
        try:
            future = asyncio.run_coroutine_threadsafe(self._callback(event), self._loop)
            future.result(timeout=5.0)
        except Exception as e:
            logger.error("watcher_callback_error", error=str(e), path=path)

    def _schedule(self, path: str, event: FileSystemEvent, priority: int) -> None:
        timer = threading.Timer(self._debounce_ms / 1000.0, self._emit_event, args=(path,))
        self._pending[path] = (timer, event, priority)
        timer.start()

    def on_any_event(self, event: FileSystemEvent) -> None:
        """Handle a raw filesystem event.

        Args:
            event: Raw watchdog filesystem event.
        """
        if event.is_directory:
            return

        src_path = event.src_path
        if isinstance(src_path, str):
            path = src_path
        else:
            path = bytes(src_path).decode("utf-8", errors="replace")

        event_priority = get_event_priority(event)
        if event_priority == 0:
            return

        # Moves out of a temp file still land on a document path.
        if is_temp_file(path) and not isinstance(event, FileMovedEvent):
            return

        with self._lock:
            existing = self._pending.get(path)
            if existing is None:
                self._schedule(path, event, event_priority)
                return

            timer, stored_event, stored_priority = existing
            timer.cancel()
            if event_priority > stored_priority:
                self._schedule(path, event, event_priority)
            else:
                self._schedule(path, stored_event, stored_priority)
            self._coalesced_count += 1

    def cancel_all(self) -> None:
        """Cancel all pending timers during shutdown."""
        with self._lock:
            for timer, _, _ in self._pending.values():
                timer.cancel()
            self._pending.clear()


class ContentWatcher:
    """Watches the content root and forwards debounced events.

    Attributes:
        root: Directory being watched.
    """

    def __init__(
        self,
        root: Path,
        loop: asyncio.AbstractEventLoop,
        on_event: EventCallback,
        debounce_ms: int = 200,
    ) -> None:
        """Initialize content watcher.

        Args:
            root: Content root to watch recursively.
            loop: Event loop for async callbacks.
            on_event: Async callback for filesystem events.
            debounce_ms: Debounce window in milliseconds.
        """
        self._root = root
        self._handler = DebouncingHandler(loop, on_event, debounce_ms)
        self._observer: Any = None

    @property
    def root(self) -> Path:
        """Directory being watched."""
        return self._root

    def start(self) -> None:
        """Start the filesystem observer.

        Raises:
            ValueError: If the root does not exist or is not a directory.
        """
        if not self._root.exists():
            raise ValueError(f"Watch path does not exist: {self._root}")
        if not self._root.is_dir():
            raise ValueError(f"Watch path is not a directory: {self._root}")

        observer = Observer()
        observer.schedule(self._handler, str(self._root), recursive=True)
        observer.start()
        self._observer = observer
        logger.info("watcher_started", path=str(self._root))

    def stop(self) -> None:
        """Stop the filesystem observer."""
        self._handler.cancel_all()

        if self._observer is not None:
            self._observer.stop()
            self._observer.join(timeout=5.0)
            self._observer = None

        logger.info("watcher_stopped")
