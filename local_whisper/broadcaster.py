"""ProgressBroadcaster: synchronous, in-order fan-out of ProgressSnapshots."""
import logging
from typing import Callable

from local_whisper.constants import MSG_SUBSCRIBER_FAILED
from local_whisper.models import ProgressSnapshot

logger = logging.getLogger(__name__)

Subscriber = Callable[[ProgressSnapshot], None]
Unsubscribe = Callable[[], None]


class ProgressBroadcaster:
    """Delivers every snapshot to every subscriber, in registration order.

    ``publish`` never awaits, so delivery order per subscriber matches
    publish order. A subscriber that raises is logged and skipped.
    """

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []

    def __len__(self) -> int:
        return len(self._subscribers)

    def subscribe(self, subscriber: Subscriber) -> Unsubscribe:
        self._subscribers.append(subscriber)

        def unsubscribe() -> None:
            match subscriber in self._subscribers:
                case True:
                    self._subscribers.remove(subscriber)
                case False:
                    pass

        return unsubscribe

    def publish(self, snapshot: ProgressSnapshot) -> None:
        # Copy: a subscriber may unsubscribe itself mid-delivery.
        for subscriber in list(self._subscribers):
            try:
                subscriber(snapshot)
            except Exception:
                logger.exception(MSG_SUBSCRIBER_FAILED, subscriber)

    def clear(self) -> None:
        self._subscribers.clear()
