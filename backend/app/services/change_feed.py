"""In-process change feed for the tickets table.

Every committed insert, update or delete of a ticket row is published to
the feed's subscribers once the transaction commits. Changes that are rolled
back are never published. Delivery is best effort and unordered across
concurrent writers; subscribers are expected to refetch, not to patch state.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from threading import Lock
from typing import Any
from uuid import UUID

from sqlalchemy import event
from sqlalchemy.orm import Session, object_session

from app.models.ticket import Ticket

logger = logging.getLogger(__name__)

_PENDING_KEY = "ticket_change_events"


@dataclass(frozen=True)
class TicketChangeEvent:
    action: str  # "insert" | "update" | "delete"
    ticket_id: UUID


Subscriber = Callable[[TicketChangeEvent], None]


class ChangeFeed:
    """Fan-out of change events to registered callbacks."""

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []
        self._lock = Lock()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback``; returns a function that unregisters it."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def publish(self, change: TicketChangeEvent) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(change)
            except Exception:
                logger.exception("Change feed subscriber failed for %s", change)


ticket_change_feed = ChangeFeed()


def _queue_change(action: str) -> Callable[[Any, Any, Ticket], None]:
    def listener(mapper: Any, connection: Any, target: Ticket) -> None:
        session = object_session(target)
        if session is None:
            return
        session.info.setdefault(_PENDING_KEY, []).append(
            TicketChangeEvent(action=action, ticket_id=target.id)  # type: ignore[arg-type]
        )

    return listener


event.listen(Ticket, "after_insert", _queue_change("insert"))
event.listen(Ticket, "after_update", _queue_change("update"))
event.listen(Ticket, "after_delete", _queue_change("delete"))


@event.listens_for(Session, "after_commit")
def _publish_pending(session: Session) -> None:
    for change in session.info.pop(_PENDING_KEY, []):
        ticket_change_feed.publish(change)


@event.listens_for(Session, "after_rollback")
def _discard_pending(session: Session) -> None:
    session.info.pop(_PENDING_KEY, None)
