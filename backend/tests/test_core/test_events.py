"""
Unit tests for the in-process event bus.
"""

from mission_risk.core.events import MISSION_UPDATED, PASSENGER_CREATED, EventBus


class TestEventBus:
    """Test publish, subscribe and history."""

    def test_publish_assigns_increasing_sequence(self):
        bus = EventBus()

        first = bus.publish(PASSENGER_CREATED, {"id": "a"})
        second = bus.publish(MISSION_UPDATED, {"id": "m"})

        assert (first.sequence, second.sequence) == (1, 2)
        assert [e.name for e in bus.history()] == ["passengerCreated", "missionUpdated"]

    def test_subscribers_receive_events(self):
        bus = EventBus()
        received = []
        bus.subscribe(received.append)

        bus.publish(PASSENGER_CREATED, {"id": "a"})

        assert [e.payload for e in received] == [{"id": "a"}]

    def test_unsubscribe(self):
        bus = EventBus()
        received = []
        bus.subscribe(received.append)
        bus.unsubscribe(received.append)

        bus.publish(PASSENGER_CREATED)

        assert received == []

    def test_failing_subscriber_does_not_block_others(self):
        bus = EventBus()
        received = []

        def broken(event):
            raise RuntimeError("subscriber down")

        bus.subscribe(broken)
        bus.subscribe(received.append)

        event = bus.publish(MISSION_UPDATED, {"id": "m"})

        assert received == [event]

    def test_history_after_and_limit(self):
        bus = EventBus()
        for i in range(10):
            bus.publish(PASSENGER_CREATED, {"n": i})

        assert [e.sequence for e in bus.history(after=7)] == [8, 9, 10]
        assert [e.sequence for e in bus.history(after=2, limit=3)] == [3, 4, 5]

    def test_history_is_bounded(self):
        bus = EventBus(history_size=3)
        for i in range(5):
            bus.publish(PASSENGER_CREATED, {"n": i})

        assert [e.sequence for e in bus.history()] == [3, 4, 5]

    def test_clear_keeps_sequence(self):
        bus = EventBus()
        bus.publish(PASSENGER_CREATED)
        bus.clear()

        assert bus.history() == []
        assert bus.publish(PASSENGER_CREATED).sequence == 2

    def test_to_dict(self):
        event = EventBus().publish(MISSION_UPDATED, {"id": "m"})
        data = event.to_dict()

        assert data["name"] == "missionUpdated"
        assert data["payload"] == {"id": "m"}
        assert data["sequence"] == 1
