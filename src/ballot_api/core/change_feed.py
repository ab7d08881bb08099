"""In-process change notifications for Store collections.

Services publish a ``ChangeEvent`` after every committed write; listeners
(the live results socket, tests) register a callback per collection and
receive a ``Subscription`` handle they must release when they go away.
Listeners only learn *that* something changed and re-read a fresh snapshot
themselves.
"""

import enum
import threading
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from loguru import logger


class Collection(enum.StrEnum):
    """Store collections that emit change events."""

    VOTERS = "voters"
    POSITIONS = "positions"
    CANDIDATES = "candidates"
    VOTES = "votes"
    ELECTION_CONFIG = "electionConfig"


class ChangeAction(enum.StrEnum):
    """Kind of write that produced a change event."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


@dataclass(frozen=True)
class ChangeEvent:
    """A committed write to one Store collection."""

    collection: str
    action: ChangeAction
    record_id: str | None = None
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))


ChangeCallback = Callable[[ChangeEvent], None]


class Subscription:
    """Handle returned by ``ChangeFeed.subscribe``.

    Calling the handle (or ``unsubscribe()``) removes the callback.  Releasing
    twice is a no-op.
    """

    def __init__(self, feed: "ChangeFeed", collection: str, callback: ChangeCallback) -> None:
        self._feed = feed
        self.collection = collection
        self._callback = callback
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        if not self._active:
            return
        self._active = False
        self._feed._remove(self.collection, self._callback)

    def __call__(self) -> None:
        self.unsubscribe()


class ChangeFeed:
    """Observer registry keyed by collection name."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[ChangeCallback]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, collection: str, callback: ChangeCallback) -> Subscription:
        """Register ``callback`` for changes to ``collection``.

        Args:
            collection: Collection name (see ``Collection``).
            callback: Called synchronously with each ``ChangeEvent``.

        Returns:
            A ``Subscription`` used to stop receiving events.
        """
        with self._lock:
            self._listeners[str(collection)].append(callback)
        return Subscription(self, str(collection), callback)

    def publish(self, collection: str, action: ChangeAction, record_id: str | None = None) -> ChangeEvent:
        """Deliver a change event to every current subscriber of ``collection``.

        A subscriber that raises is logged and skipped; delivery continues.

        Returns:
            The delivered event.
        """
        event = ChangeEvent(collection=str(collection), action=action, record_id=record_id)
        with self._lock:
            listeners = list(self._listeners.get(event.collection, ()))
        for callback in listeners:
            try:
                callback(event)
            except Exception:
                logger.exception(f"Change listener failed for {event.collection} {event.action}")
        return event

    def subscriber_count(self, collection: str) -> int:
        """Return the number of active subscribers for ``collection``."""
        with self._lock:
            return len(self._listeners.get(str(collection), ()))

    def _remove(self, collection: str, callback: ChangeCallback) -> None:
        with self._lock:
            listeners = self._listeners.get(collection)
            if listeners and callback in listeners:
                listeners.remove(callback)
            if not listeners:
                self._listeners.pop(collection, None)


# Singleton instance for the application
change_feed = ChangeFeed()
