from __future__ import annotations

from typing import Any, Callable, List

Subscriber = Callable[[str, Any], None]


class ChangeBus:
    """
    Change notifications from the pipeline and sequencer to whatever renders them.
    Publishers call publish(topic, payload); subscribers receive (topic, payload)
    synchronously, in subscription order.
    """
    def __init__(self) -> None:
        self._subscribers: List[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, topic: str, payload: Any = None) -> None:
        for callback in list(self._subscribers):
            callback(topic, payload)
