from __future__ import annotations

from preloved.domain.events import CART_CHANGED, FAVORITES_CHANGED, EventChannel


def test_publish_reaches_subscribers_of_topic_only() -> None:
    channel = EventChannel()
    cart_events = []
    fav_events = []
    channel.subscribe(CART_CHANGED, cart_events.append)
    channel.subscribe(FAVORITES_CHANGED, fav_events.append)

    delivered = channel.publish(CART_CHANGED, {"count": 2})

    assert delivered == 1
    assert cart_events == [{"count": 2}]
    assert fav_events == []


def test_unsubscribe_stops_delivery() -> None:
    channel = EventChannel()
    seen = []
    sub = channel.subscribe(CART_CHANGED, seen.append)
    sub.unsubscribe()
    sub.unsubscribe()

    assert channel.publish(CART_CHANGED) == 0
    assert seen == []
    assert channel.subscriber_count(CART_CHANGED) == 0


def test_subscription_as_context_manager() -> None:
    channel = EventChannel()
    seen = []
    with channel.subscribe(CART_CHANGED, seen.append):
        channel.publish(CART_CHANGED, {"n": 1})
    channel.publish(CART_CHANGED, {"n": 2})
    assert seen == [{"n": 1}]


def test_failing_listener_does_not_block_others() -> None:
    channel = EventChannel()
    seen = []

    def broken(_payload):
        raise RuntimeError("boom")

    channel.subscribe(CART_CHANGED, broken)
    channel.subscribe(CART_CHANGED, seen.append)

    assert channel.publish(CART_CHANGED, {"ok": True}) == 1
    assert seen == [{"ok": True}]
