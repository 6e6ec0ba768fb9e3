"""Change notifications for record collections.

Subscribers are told which collection changed after a write has been
committed, the same way a browser tab hears about another tab's storage
write. Handlers are isolated: if one fails, the others still run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from tess_backoffice.store.types import Collection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CollectionChanged:
    """A committed write to one collection."""

    collection: Collection
    version: int


ChangeHandler = Callable[[CollectionChanged], None]


@dataclass
class _Subscription:
    handler: ChangeHandler
    collections: frozenset[Collection] | None  # None = all collections


class ChangeNotifier:
    """Synchronous publisher of ``CollectionChanged`` events.

    Usage:
        notifier = ChangeNotifier()
        notifier.subscribe(refresh_dashboard, [Collection.SALES, Collection.INVENTORY])
        notifier.publish(CollectionChanged(Collection.SALES, 4))
    """

    def __init__(self) -> None:
        self._subscriptions: list[_Subscription] = []

    def subscribe(
        self,
        handler: ChangeHandler,
        collections: list[Collection] | None = None,
    ) -> None:
        """Register a handler, optionally limited to some collections."""
        self._subscriptions.append(
            _Subscription(
                handler=handler,
                collections=frozenset(collections) if collections else None,
            )
        )

    def unsubscribe(self, handler: ChangeHandler) -> None:
        self._subscriptions = [s for s in self._subscriptions if s.handler != handler]

    def publish(self, event: CollectionChanged) -> None:
        """Deliver an event to every matching handler."""
        for subscription in list(self._subscriptions):
            if subscription.collections is not None and event.collection not in subscription.collections:
                continue
            try:
                subscription.handler(event)
            except Exception:
                logger.exception(
                    "Change handler %r failed for %s (version %d)",
                    subscription.handler,
                    event.collection.value,
                    event.version,
                )
