"""
Event System
=============

A simple event system for decoupled communication between components.
The core components report progress and recoverable problems through it;
the CLI decides what to print.
"""

from typing import Callable, Dict, List, Any
from enum import Enum, auto


class EventType(Enum):
    """Available event types."""
    STATUS_UPDATED = auto()
    WARNING_RAISED = auto()
    ERROR_OCCURRED = auto()
    PROCESSING_STARTED = auto()
    PROCESSING_COMPLETED = auto()
    DOCUMENT_WRITTEN = auto()


class Event:
    """Base event class."""

    def __init__(self, event_type: EventType, data: Any = None):
        self.event_type = event_type
        self.data = data


class EventDispatcher:
    """Manages event registration and dispatch."""

    def __init__(self):
        self._listeners: Dict[EventType, List[Callable[[Event], None]]] = {}

    def add_listener(
        self,
        event_type: EventType,
        listener: Callable[[Event], None]
    ) -> None:
        """
        Add a listener for a specific event type.

        Args:
            event_type: Type of event to listen for
            listener: Callback function to be called when event occurs
        """
        self._listeners.setdefault(event_type, []).append(listener)

    def remove_listener(
        self,
        event_type: EventType,
        listener: Callable[[Event], None]
    ) -> None:
        """
        Remove a listener for a specific event type.

        Args:
            event_type: Type of event the listener is registered for
            listener: Callback function to remove
        """
        if event_type in self._listeners:
            try:
                self._listeners[event_type].remove(listener)
                if not self._listeners[event_type]:
                    del self._listeners[event_type]
            except ValueError:
                pass

    def dispatch(self, event: Event) -> None:
        """
        Dispatch an event to all registered listeners.

        Args:
            event: Event object to dispatch
        """
        for listener in self._listeners.get(event.event_type, []):
            listener(event)

    def dispatch_status(self, message: str) -> None:
        """Dispatch a status update event."""
        self.dispatch(Event(EventType.STATUS_UPDATED, message))

    def dispatch_warning(self, message: str) -> None:
        """
        Dispatch a warning about a recoverable problem (bad link, unreadable
        document) that did not stop processing.

        Args:
            message: Warning message to dispatch
        """
        self.dispatch(Event(EventType.WARNING_RAISED, message))

    def dispatch_error(self, error: str) -> None:
        """Dispatch an error event."""
        self.dispatch(Event(EventType.ERROR_OCCURRED, error))

    def dispatch_processing_started(self, data: Any = None) -> None:
        """Dispatch a processing started event."""
        self.dispatch(Event(EventType.PROCESSING_STARTED, data))

    def dispatch_processing_completed(self, data: Any = None) -> None:
        """
        Dispatch a processing completed event.

        Args:
            data: Optional data associated with processing completion
        """
        self.dispatch(Event(EventType.PROCESSING_COMPLETED, data))

    def dispatch_document_written(self, file_path: str) -> None:
        """
        Dispatch a document written event.

        Args:
            file_path: Path of the document whose content was written
        """
        self.dispatch(Event(EventType.DOCUMENT_WRITTEN, file_path))
