"""
Tests for semantic_memory/core/events.py
"""


class TestChangeChannel:
    """Tests for ChangeChannel and Subscription."""

    def test_emit_reaches_every_listener(self):
        """Test that each subscriber receives the event."""
        from semantic_memory.core.events import ChangeChannel

        channel = ChangeChannel("test")
        first, second = [], []
        channel.subscribe(first.append)
        channel.subscribe(second.append)

        channel.emit("added")

        assert first == ["added"]
        assert second == ["added"]

    def test_dispose_stops_delivery(self):
        """Test that a disposed subscription receives nothing."""
        from semantic_memory.core.events import ChangeChannel

        channel = ChangeChannel("test")
        received = []
        subscription = channel.subscribe(received.append)

        subscription.dispose()
        channel.emit("added")

        assert received == []
        assert subscription.disposed
        assert channel.listener_count == 0

    def test_dispose_is_idempotent(self):
        """Test that disposing twice removes only one registration."""
        from semantic_memory.core.events import ChangeChannel

        channel = ChangeChannel("test")
        received = []
        first = channel.subscribe(received.append)
        listener = received.append
        channel.subscribe(listener)

        first.dispose()
        first.dispose()

        assert channel.listener_count == 1

    def test_failing_listener_does_not_block_others(self):
        """Test that a raising listener is skipped."""
        from semantic_memory.core.events import ChangeChannel

        channel = ChangeChannel("test")
        received = []

        def broken(event):
            raise RuntimeError("listener failed")

        channel.subscribe(broken)
        channel.subscribe(received.append)

        channel.emit("cleared")

        assert received == ["cleared"]

    def test_listener_may_unsubscribe_during_emit(self):
        """Test that removing a listener while emitting is safe."""
        from semantic_memory.core.events import ChangeChannel

        channel = ChangeChannel("test")
        received = []
        holder = {}

        def once(event):
            received.append(event)
            holder["sub"].dispose()

        holder["sub"] = channel.subscribe(once)
        channel.emit(1)
        channel.emit(2)

        assert received == [1]
