"""
Unit Tests for ListenerSet and OnceListener
===========================================
"""

import pytest

from herald.event import EventRegistry, ListenerSet, OnceListener
from herald.event.listener_set import listener_key


def _first(payload):
    pass


def _second(payload):
    pass


@pytest.mark.unit
@pytest.mark.event
class TestListenerSet:
    """Test ordered unique membership."""

    def test_add_preserves_insertion_order(self):
        listeners = ListenerSet()

        listeners.add(_second)
        listeners.add(_first)

        assert list(listeners) == [_second, _first]

    def test_add_rejects_duplicates(self):
        listeners = ListenerSet([_first])

        assert listeners.add(_first) is False
        assert len(listeners) == 1

    def test_discard_reports_removal(self):
        listeners = ListenerSet([_first])

        assert listeners.discard(_first) is True
        assert listeners.discard(_first) is False
        assert not listeners

    def test_readding_moves_listener_to_end(self):
        """A removed and re-added listener takes a new position."""
        listeners = ListenerSet([_first, _second])

        listeners.discard(_first)
        listeners.add(_first)

        assert list(listeners) == [_second, _first]

    def test_clear_returns_removed_count(self):
        listeners = ListenerSet([_first, _second])

        assert listeners.clear() == 2
        assert len(listeners) == 0

    def test_snapshot_is_decoupled(self):
        """Changes after a snapshot do not affect it."""
        listeners = ListenerSet([_first])

        snapshot = listeners.snapshot()
        listeners.add(_second)
        listeners.discard(_first)

        assert snapshot == (_first,)

    def test_constructor_deduplicates(self):
        listeners = ListenerSet([_first, _second, _first])

        assert list(listeners) == [_first, _second]

    def test_contains(self):
        listeners = ListenerSet([_first])

        assert _first in listeners
        assert _second not in listeners

    def test_unhashable_members(self):
        """Callables that define __eq__ without __hash__ are stored by identity."""

        class Unhashable:
            __hash__ = None

            def __eq__(self, other):
                return True

            def __call__(self, payload):
                pass

        first, second = Unhashable(), Unhashable()
        listeners = ListenerSet([first, second])

        assert len(listeners) == 2
        assert listeners.discard(first) is True
        assert list(listeners) == [second]

    def test_rebound_methods_share_a_key(self):
        class Audit:
            def record(self, payload):
                pass

        audit, other = Audit(), Audit()

        assert listener_key(audit.record) == listener_key(audit.record)
        assert listener_key(audit.record) != listener_key(other.record)


@pytest.mark.unit
@pytest.mark.event
class TestOnceListener:
    """Test one-shot wrapper identity and firing."""

    def test_wrappers_compare_by_identity(self):
        registry = EventRegistry()
        first = OnceListener(registry, "k", _first)
        second = OnceListener(registry, "k", _first)

        assert first != second
        assert len(ListenerSet([first, second])) == 2

    def test_wraps_matches_the_wrapped_listener_only(self):
        wrapper = OnceListener(EventRegistry(), "k", _first)

        assert wrapper.wraps(_first) is True
        assert wrapper.wraps(_second) is False

    def test_never_equal_to_bare_listener(self):
        wrapper = OnceListener(EventRegistry(), "k", _first)

        assert wrapper != _first
        assert _first not in ListenerSet([wrapper])

    def test_second_call_is_ignored(self, recorder):
        """Calling a fired wrapper directly does nothing."""
        registry = EventRegistry()
        wrapper = OnceListener(registry, "k", recorder.listener("a"))

        wrapper({"n": 1})
        wrapper({"n": 2})

        assert wrapper.fired is True
        assert recorder.calls == [("a", {"n": 1})]

    def test_repr_names_kind_and_listener(self):
        wrapper = OnceListener(EventRegistry(), "user:created", _first)

        assert repr(wrapper) == "OnceListener('user:created', _first)"
