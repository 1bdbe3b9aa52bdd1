from __future__ import annotations

from phrasepair.ui.bridge import ChangeBus


def test_bus_fans_out_in_order_and_unsubscribes() -> None:
    bus = ChangeBus()
    a, b = [], []
    bus.subscribe(lambda topic, payload: a.append((topic, payload)))
    unsubscribe_b = bus.subscribe(lambda topic, payload: b.append(topic))

    bus.publish("progress", 1)
    unsubscribe_b()
    unsubscribe_b()
    bus.publish("pair", 2)

    assert a == [("progress", 1), ("pair", 2)]
    assert b == ["progress"]
