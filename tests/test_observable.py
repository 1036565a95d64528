"""Tests for DefaultObservableValue."""

import pytest

from bindfx import (
    DefaultObservableValue,
    ReentrantMutationError,
    ValueChangeEvent,
    observable_value,
)


class TestObservableValue:
    def test_get_set(self):
        o = observable_value(42)
        assert o.get() == 42
        o.set(100)
        assert o.get() == 100

    def test_default_is_none(self):
        assert DefaultObservableValue().get() is None

    def test_dedup(self):
        """Setting the same value should not notify listeners."""
        o = observable_value("foo")
        log = []
        o.add_listener(log.append, fire_initial=False)
        o.set("foo")
        assert log == []
        assert o.get() == "foo"

    def test_dedup_by_equality_not_identity(self):
        o = observable_value([1, 2])
        log = []
        o.add_listener(log.append, fire_initial=False)
        o.set([1, 2])
        assert log == []

    def test_notifies_listeners(self):
        o = observable_value("hello")
        log = []
        o.add_listener(log.append, fire_initial=False)
        o.set("world")
        assert log == [ValueChangeEvent(o, "hello", "world")]

    def test_none_is_a_valid_value(self):
        o = observable_value("hello")
        log = []
        o.add_listener(lambda e: log.append((e.old_value, e.value)), fire_initial=False)
        o.set(None)
        o.set(None)
        o.set("again")
        assert log == [("hello", None), (None, "again")]

    def test_reentrant_set_rejected(self):
        o = observable_value(1)
        errors = []

        def listener(e):
            try:
                o.set(e.value + 1)
            except ReentrantMutationError as exc:
                errors.append(exc)

        o.add_listener(listener, fire_initial=False)
        o.set(2)
        assert o.get() == 2
        assert len(errors) == 1
        assert errors[0].observable is o

    def test_reentrant_error_propagates_and_resets_flag(self):
        o = observable_value(1)
        registration = o.add_listener(lambda e: o.set(99), fire_initial=False)
        with pytest.raises(ReentrantMutationError):
            o.set(2)
        assert o.get() == 2
        registration.remove()
        o.set(3)
        assert o.get() == 3

    def test_reentrant_same_value_is_noop(self):
        o = observable_value(1)
        o.add_listener(lambda e: o.set(e.value), fire_initial=False)
        o.set(2)
        assert o.get() == 2

    def test_listener_may_set_other_observable(self):
        a = observable_value(1)
        b = observable_value(0)
        a.add_listener(lambda e: b.set(e.value * 10))
        assert b.get() == 10
        a.set(2)
        assert b.get() == 20

    def test_listener_error_propagates_after_commit(self):
        o = observable_value(1)

        def boom(e):
            raise ValueError("boom")

        o.add_listener(boom, fire_initial=False)
        with pytest.raises(ValueError, match="boom"):
            o.set(2)
        assert o.get() == 2

    def test_has_listeners(self):
        o = observable_value(1)
        assert not o.has_listeners()
        o.add_listener(lambda e: None)
        assert o.has_listeners()

    def test_repr(self):
        o = observable_value(5)
        assert "DefaultObservableValue(5)" in repr(o)


class TestValueChangeEvent:
    def test_sender_required(self):
        with pytest.raises(ValueError):
            ValueChangeEvent(None, 1, 2)

    def test_equality(self):
        o = observable_value(1)
        assert ValueChangeEvent(o, 1, 2) == ValueChangeEvent(o, 1, 2)
        assert ValueChangeEvent(o, 1, 2) != ValueChangeEvent(o, 2, 1)

    def test_immutable(self):
        o = observable_value(1)
        event = ValueChangeEvent(o, 1, 2)
        with pytest.raises(AttributeError):
            event.value = 3
