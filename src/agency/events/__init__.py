"""Content change events: filesystem watching and normalization."""
from agency.events.normalizer import normalize_event
from agency.events.types import DocumentEvent, EventType
from agency.events.watcher import ContentWatcher

__all__ = [
    "ContentWatcher",
    "DocumentEvent",
    "EventType",
    "normalize_event",
]
