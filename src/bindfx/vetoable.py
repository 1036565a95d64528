"""Vetoable values — writable values whose changes listeners can block or delay.

Before a VetoableObservableValue commits a change, every vetoable listener
receives a VetoableEvent describing it. A listener may:

- veto() the change: nothing is committed and no change event fires.
- postpone() the change: nothing is committed now, and the returned
  PostponedChange can commit it later via proceed(), e.g. after the user
  confirmed a dialog. Only one listener may postpone a given change.

If nobody vetoes or postpones, the change commits as usual. Without any
vetoable listeners the value behaves exactly like DefaultObservableValue.
"""

from __future__ import annotations

import logging
from typing import Callable, Generic, TypeVar

from bindfx._registry import ListenerRegistry, Registration
from bindfx.errors import DoublePostponeError, StaleProceedError
from bindfx.observable import DefaultObservableValue, ValueChangeEvent, differs

logger = logging.getLogger("bindfx.vetoable")

T = TypeVar("T")


class PostponedChange(Generic[T]):
    """A postponed change that can be committed later."""

    __slots__ = ("_owner", "event")

    def __init__(self, owner: VetoableObservableValue[T], event: ValueChangeEvent[T]) -> None:
        self._owner = owner
        self.event = event

    def proceed(self) -> None:
        """Commit the postponed change.

        Raises StaleProceedError if the value changed after the change was
        postponed; nothing is committed in that case.
        """
        current = self._owner.get()
        if differs(self.event.old_value, current):
            logger.warning(
                "Refusing stale postponed change %r -> %r (value is now %r)",
                self.event.old_value, self.event.value, current,
            )
            raise StaleProceedError(self.event.old_value, current)
        logger.debug("Proceeding with postponed change to %r", self.event.value)
        self._owner._commit(self.event.value)


class VetoableEvent(Generic[T]):
    """A proposed change, sent to vetoable listeners before it is committed."""

    __slots__ = ("_owner", "event", "vetoed", "postponed")

    def __init__(self, owner: VetoableObservableValue[T], event: ValueChangeEvent[T]) -> None:
        self._owner = owner
        self.event = event
        self.vetoed = False
        self.postponed: PostponedChange[T] | None = None

    @property
    def old_value(self) -> T | None:
        return self.event.old_value

    @property
    def value(self) -> T | None:
        return self.event.value

    def veto(self) -> None:
        """Block the change."""
        self.vetoed = True

    def postpone(self) -> PostponedChange[T]:
        """Delay the change. Call proceed() on the result to commit it."""
        if self.postponed is not None:
            raise DoublePostponeError()
        self.postponed = PostponedChange(self._owner, self.event)
        return self.postponed


VetoableListener = Callable[[VetoableEvent[T]], None]


class VetoableObservableValue(DefaultObservableValue[T]):
    """A writable value that consults vetoable listeners before each change.

    Usage:
        value = vetoable_value("")
        pending = []
        value.add_vetoable_listener(lambda e: pending.append(e.postpone()))

        value.set("hello")
        value.get()            # "", postponed
        pending[0].proceed()
        value.get()            # "hello"
    """

    def __init__(self, initial: T | None = None) -> None:
        super().__init__(initial)
        self._vetoable_listeners: ListenerRegistry[VetoableEvent[T]] | None = None

    def _get_vetoable_listeners(self) -> ListenerRegistry[VetoableEvent[T]]:
        if self._vetoable_listeners is None:
            self._vetoable_listeners = ListenerRegistry()
        return self._vetoable_listeners

    def add_vetoable_listener(self, listener: VetoableListener) -> Registration:
        return self._get_vetoable_listeners().add_listener(listener)

    def add_weak_vetoable_listener(self, listener: VetoableListener) -> None:
        self._get_vetoable_listeners().add_weak_listener(listener)

    def has_vetoable_listeners(self) -> bool:
        return self._vetoable_listeners is not None and self._vetoable_listeners.has_listeners()

    def _request_commit(self, value: T | None) -> PostponedChange[T] | None:
        """Ask the vetoable listeners, then commit unless vetoed or postponed.

        Returns the PostponedChange if a listener postponed the change.
        """
        if not self.has_vetoable_listeners():
            self._commit(value)
            return None
        decision = VetoableEvent(self, ValueChangeEvent(self, self.get(), value))
        self._vetoable_listeners.fire_event(decision)
        if decision.vetoed:
            logger.debug("Change of %r to %r was vetoed", self, value)
            return None
        if decision.postponed is not None:
            logger.debug("Change of %r to %r was postponed", self, value)
            return decision.postponed
        self._commit(value)
        return None


def vetoable_value(initial: T | None = None) -> VetoableObservableValue[T]:
    """Create a vetoable observable value."""
    return VetoableObservableValue(initial)
