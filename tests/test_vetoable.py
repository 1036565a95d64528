"""Tests for VetoableObservableValue."""

import gc

import pytest

from bindfx import (
    DoublePostponeError,
    ReentrantMutationError,
    StaleProceedError,
    VetoableObservableValue,
    vetoable_value,
)


class TestWithoutVetoableListeners:
    def test_behaves_like_plain_value(self):
        value = vetoable_value("a")
        log = []
        value.add_listener(lambda e: log.append(e.value), fire_initial=False)
        assert value.set("b") is None
        assert value.get() == "b"
        assert log == ["b"]

    def test_dedup(self):
        value = vetoable_value("a")
        decisions = []
        value.add_vetoable_listener(decisions.append)
        value.set("a")
        assert decisions == []

    def test_default_is_none(self):
        assert VetoableObservableValue().get() is None


class TestVeto:
    def test_veto_blocks_change(self):
        value = vetoable_value("a")
        log = []
        value.add_listener(log.append, fire_initial=False)
        value.add_vetoable_listener(lambda e: e.veto())
        assert value.set("b") is None
        assert value.get() == "a"
        assert log == []

    def test_decision_describes_change(self):
        value = vetoable_value("a")
        decisions = []
        value.add_vetoable_listener(decisions.append)
        value.set("b")
        assert len(decisions) == 1
        assert decisions[0].old_value == "a"
        assert decisions[0].value == "b"
        assert decisions[0].event.sender is value
        assert value.get() == "b"

    def test_any_veto_wins(self):
        value = vetoable_value(1)
        value.add_vetoable_listener(lambda e: None)
        value.add_vetoable_listener(lambda e: e.veto())
        value.set(2)
        assert value.get() == 1

    def test_veto_wins_over_postpone(self):
        value = vetoable_value(1)
        value.add_vetoable_listener(lambda e: e.postpone())
        value.add_vetoable_listener(lambda e: e.veto())
        assert value.set(2) is None
        assert value.get() == 1

    def test_removed_vetoable_listener_not_consulted(self):
        value = vetoable_value(1)
        registration = value.add_vetoable_listener(lambda e: e.veto())
        registration.remove()
        value.set(2)
        assert value.get() == 2

    def test_weak_vetoable_listener_collected(self):
        value = vetoable_value(1)

        def vetoer(e):
            e.veto()

        value.add_weak_vetoable_listener(vetoer)
        value.set(2)
        assert value.get() == 1
        del vetoer
        gc.collect()
        assert not value.has_vetoable_listeners()
        value.set(2)
        assert value.get() == 2


class TestPostpone:
    def test_postpone_then_proceed(self):
        value = vetoable_value("")
        handles = []
        value.add_vetoable_listener(lambda e: handles.append(e.postpone()))
        log = []
        value.add_listener(lambda e: log.append((e.old_value, e.value)), fire_initial=False)

        returned = value.set("hello")
        assert value.get() == ""
        assert log == []
        assert returned is handles[0]

        handles[0].proceed()
        assert value.get() == "hello"
        assert log == [("", "hello")]

    def test_postponed_change_exposes_event(self):
        value = vetoable_value("")
        value.add_vetoable_listener(lambda e: e.postpone())
        postponed = value.set("hello")
        assert postponed.event.old_value == ""
        assert postponed.event.value == "hello"

    def test_stale_proceed_rejected(self):
        value = vetoable_value("")
        handles = []
        registration = value.add_vetoable_listener(lambda e: handles.append(e.postpone()))
        value.set("hello")
        registration.remove()
        value.set("other")
        assert value.get() == "other"

        with pytest.raises(StaleProceedError):
            handles[0].proceed()
        assert value.get() == "other"

    def test_double_postpone_rejected(self):
        value = vetoable_value(1)
        errors = []
        value.add_vetoable_listener(lambda e: e.postpone())

        def second(e):
            try:
                e.postpone()
            except DoublePostponeError as exc:
                errors.append(exc)

        value.add_vetoable_listener(second)
        postponed = value.set(2)
        assert len(errors) == 1
        assert value.get() == 1
        postponed.proceed()
        assert value.get() == 2

    def test_double_postpone_by_same_listener(self):
        value = vetoable_value(1)

        def greedy(e):
            e.postpone()
            e.postpone()

        value.add_vetoable_listener(greedy)
        with pytest.raises(DoublePostponeError):
            value.set(2)
        assert value.get() == 1

    def test_proceed_bypasses_vetoable_listeners(self):
        value = vetoable_value(1)
        decisions = []

        def postpone_once(e):
            decisions.append(e)
            e.postpone()

        value.add_vetoable_listener(postpone_once)
        postponed = value.set(2)
        postponed.proceed()
        assert value.get() == 2
        assert len(decisions) == 1

    def test_proceed_guards_reentrant_set(self):
        value = vetoable_value(1)
        registration = value.add_vetoable_listener(lambda e: e.postpone())
        postponed = value.set(2)
        registration.remove()
        value.add_listener(lambda e: value.set(99), fire_initial=False)
        with pytest.raises(ReentrantMutationError):
            postponed.proceed()
        assert value.get() == 2
