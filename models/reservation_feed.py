"""
Live reservation feed.

Every committed write to the reservations table publishes the full current
collection to all subscribers, synchronously and in subscription order.
"""

import logging

logger = logging.getLogger(__name__)


class ReservationFeed:
    """Process-local publish/subscribe channel for the reservation collection."""

    def __init__(self):
        self._listeners = []
        self._snapshot = None

    @property
    def snapshot(self) -> list | None:
        """Last published collection, or None before the first publish."""
        return self._snapshot

    def subscribe(self, listener):
        """
        Register a listener called with the full collection on every change.

        The last snapshot (if any) is delivered immediately.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)
        if self._snapshot is not None:
            listener(list(self._snapshot))

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, records: list) -> None:
        """Deliver a new snapshot to every listener."""
        self._snapshot = list(records)
        logger.debug(f"[Feed] Publishing {len(self._snapshot)} reservations to {len(self._listeners)} listeners")
        for listener in list(self._listeners):
            listener(list(self._snapshot))
