"""
Tests for MidaEmitter and MidaEvent.

Tests cover:
- Listener registration and delivery
- Wildcard listeners
- Listener removal
- Awaiting the next event through a Future
- Event model validation
"""
import pytest
from pydantic import ValidationError

from mida.schemas.events import MidaEvent
from mida.utils.emitter import MidaEmitter


@pytest.fixture
def emitter() -> MidaEmitter:
    return MidaEmitter()


class TestListeners:
    """Test callback listeners."""

    def test_listener_receives_event(self, emitter):
        """A listener gets the event built by notify_listeners."""
        received = []
        listener_uuid = emitter.on("tick", received.append)

        event = emitter.notify_listeners("tick", {"symbol": "EURUSD", "bid": 1.1025})

        assert isinstance(listener_uuid, str)
        assert received == [event]
        assert event.type == "tick"
        assert event.descriptor == {"symbol": "EURUSD", "bid": 1.1025}

    def test_other_types_not_delivered(self, emitter):
        """Listeners only receive their own event type."""
        received = []
        emitter.on("tick", received.append)

        emitter.notify_listeners("order")

        assert received == []

    def test_wildcard_receives_everything(self, emitter):
        """'*' listeners receive every event, after typed listeners."""
        calls = []
        emitter.on("*", lambda event: calls.append(("any", event.type)))
        emitter.on("tick", lambda event: calls.append(("tick", event.type)))

        emitter.notify_listeners("tick")
        emitter.notify_listeners("order")

        assert calls == [("tick", "tick"), ("any", "tick"), ("any", "order")]

    def test_remove_listener(self, emitter):
        """Removed listeners are not called anymore."""
        received = []
        listener_uuid = emitter.on("tick", received.append)

        assert emitter.remove_event_listener(listener_uuid) is True
        assert emitter.remove_event_listener(listener_uuid) is False

        emitter.notify_listeners("tick")
        assert received == []

    def test_listener_count(self, emitter):
        """Listeners are counted per type and in total."""
        emitter.on("tick", lambda event: None)
        emitter.on("tick", lambda event: None)
        emitter.on("order", lambda event: None)

        assert emitter.listener_count("tick") == 2
        assert emitter.listener_count("period") == 0
        assert emitter.listener_count() == 3

    def test_listener_errors_propagate(self, emitter):
        """Exceptions raised by listeners reach the notifier."""
        def failing(event):
            raise RuntimeError("listener failed")

        emitter.on("tick", failing)

        with pytest.raises(RuntimeError, match="listener failed"):
            emitter.notify_listeners("tick")


class TestFutures:
    """Test awaiting the next event."""

    @pytest.mark.asyncio
    async def test_future_resolved_by_next_event(self, emitter):
        """on() without listener returns a Future for the next event."""
        next_order = emitter.on("order")
        assert not next_order.done()

        emitter.notify_listeners("order", {"ticket": 1})
        emitter.notify_listeners("order", {"ticket": 2})

        event = await next_order
        assert event.descriptor == {"ticket": 1}

    @pytest.mark.asyncio
    async def test_wildcard_future(self, emitter):
        """A wildcard Future resolves with any event."""
        next_event = emitter.on("*")

        emitter.notify_listeners("period")

        assert (await next_event).type == "period"

    def test_future_requires_running_loop(self, emitter):
        """Futures are bound to the running loop."""
        with pytest.raises(RuntimeError):
            emitter.on("order")


class TestMidaEvent:
    """Test the event model."""

    def test_defaults(self):
        """Date is set in UTC and descriptor defaults to empty."""
        event = MidaEvent(type="tick")
        assert event.descriptor == {}
        assert event.date.tzinfo is not None

    def test_wildcard_type_rejected(self):
        """'*' is not a valid event type."""
        with pytest.raises(ValidationError):
            MidaEvent(type="*")

    def test_empty_type_rejected(self):
        """Event type cannot be empty."""
        with pytest.raises(ValidationError):
            MidaEvent(type="")

    def test_frozen(self):
        """Events are immutable."""
        event = MidaEvent(type="tick")
        with pytest.raises(ValidationError):
            event.type = "order"
