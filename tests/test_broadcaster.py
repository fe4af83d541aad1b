"""Tests for the in-process channel broadcaster."""

from app.services.broadcaster import Broadcaster


def test_publish_reaches_every_subscriber(drain):
    hub = Broadcaster()
    first = hub.join("leads", owner="a")
    second = hub.join("leads", owner="b")

    delivered = hub.publish("leads", "lead-created", {"id": "1"})

    assert delivered == 2
    assert drain(first) == [{"event": "lead-created", "data": {"id": "1"}}]
    assert drain(second) == [{"event": "lead-created", "data": {"id": "1"}}]


def test_publish_without_subscribers_is_a_no_op():
    hub = Broadcaster()
    assert hub.publish("leads", "lead-deleted", {"id": "1"}) == 0


def test_channels_are_isolated(drain):
    hub = Broadcaster()
    leads = hub.join("leads")
    other = hub.join("other")

    hub.publish("leads", "lead-updated", {})

    assert len(drain(leads)) == 1
    assert drain(other) == []


def test_exclude_skips_the_sender(drain):
    hub = Broadcaster()
    sender = hub.join("leads")
    peer = hub.join("leads")

    assert hub.publish("leads", "lead-updated", {"id": "x"}, exclude=sender) == 1
    assert drain(sender) == []
    assert drain(peer) == [{"event": "lead-updated", "data": {"id": "x"}}]


def test_leave_stops_delivery(drain):
    hub = Broadcaster()
    subscription = hub.join("leads")
    assert hub.subscriber_count("leads") == 1

    hub.leave("leads", subscription)
    hub.leave("leads", subscription)

    assert hub.subscriber_count("leads") == 0
    assert hub.publish("leads", "lead-created", {}) == 0
    assert drain(subscription) == []


def test_late_joiner_misses_earlier_events(drain):
    hub = Broadcaster()
    hub.publish("leads", "lead-created", {"id": "early"})
    late = hub.join("leads")
    hub.publish("leads", "lead-created", {"id": "late"})

    assert [message["data"]["id"] for message in drain(late)] == ["late"]


def test_full_queue_drops_events_without_blocking(drain):
    hub = Broadcaster(queue_size=2)
    slow = hub.join("leads")
    fast = hub.join("leads")

    for i in range(3):
        hub.publish("leads", "lead-updated", {"n": i})
        drain(fast)

    assert [message["data"]["n"] for message in drain(slow)] == [0, 1]
    assert hub.publish("leads", "lead-updated", {"n": 3}) == 2
