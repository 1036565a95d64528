"""Observable values — single slots that notify listeners when they change.

Every observable owns a ListenerRegistry. Listeners receive a
ValueChangeEvent(sender, old_value, value). New listeners get an initial
event with old_value == value by default, so they can initialize themselves
from the current state without waiting for the first real change.

Not thread safe: mutate and subscribe from one thread only.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Generic, TypeVar

from bindfx._registry import Listener, ListenerRegistry, Registration
from bindfx.errors import ReentrantMutationError, require

if TYPE_CHECKING:
    from bindfx.computed import ComputedValue

logger = logging.getLogger("bindfx.observable")

T = TypeVar("T")
E = TypeVar("E")
R = TypeVar("R")


def differs(old: Any, new: Any) -> bool:
    """None-safe value inequality used by every equality gate."""
    return old is not new and old != new


class Observable(ABC, Generic[E]):
    """Anything listeners can subscribe to for events of type E."""

    def __init__(self) -> None:
        self._listeners: ListenerRegistry[E] | None = None

    def _get_listeners(self) -> ListenerRegistry[E]:
        if self._listeners is None:
            self._listeners = ListenerRegistry()
        return self._listeners

    def add_listener(self, listener: Listener, fire_initial: bool = True) -> Registration:
        """Subscribe listener using a strong reference.

        The listener receives events until the returned Registration is
        removed. With fire_initial it is called once right away with an
        event describing the current state.
        """
        registration = self._get_listeners().add_listener(listener)
        if fire_initial:
            self._fire_initial_event(listener)
        return registration

    def add_weak_listener(self, listener: Listener, fire_initial: bool = True) -> None:
        """Subscribe listener using a weak reference.

        The listener receives events until it is garbage collected. Keeping
        it alive is up to the caller.
        """
        self._get_listeners().add_weak_listener(listener)
        if fire_initial:
            self._fire_initial_event(listener)

    def has_listeners(self) -> bool:
        return self._listeners is not None and self._listeners.has_listeners()

    @abstractmethod
    def _fire_initial_event(self, listener: Listener) -> None:
        """Send listener an event that represents the current state."""

    def _fire_event(self, event: E) -> None:
        if self._listeners is not None:
            self._listeners.fire_event(event)


@dataclass(frozen=True)
class ValueChangeEvent(Generic[T]):
    """A change of an ObservableValue from old_value to value."""

    sender: ObservableValue[T]
    old_value: T | None
    value: T | None

    def __post_init__(self) -> None:
        require(self.sender, "sender")


class ObservableValue(Observable[ValueChangeEvent[T]]):
    """A read-only observable holding a single value."""

    @abstractmethod
    def get(self) -> T:
        """Return the current value."""

    def _fire_initial_event(self, listener: Listener) -> None:
        value = self.get()
        listener(ValueChangeEvent(self, value, value))

    def _fire_value_change_event(self, old: T | None, value: T | None) -> None:
        self._fire_event(ValueChangeEvent(self, old, value))

    def map(self, fn: Callable[[T], R]) -> ComputedValue[R]:
        """Derive a new observable value by applying fn to this one.

        The result recomputes on every change of this value and only fires
        when the mapped result actually differs. Keep a reference to it:
        this value only holds the derived one weakly.

        Usage:
            name = observable_value("Joe")
            greeting = name.map(lambda n: f"Hello {n}!")
            greeting.get()  # "Hello Joe!"
        """
        from bindfx.computed import ComputedValue  # noqa: PLC0415

        require(fn, "fn")
        return ComputedValue(lambda: fn(self.get()), [self])

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.get()!r})"


class WritableObservableValue(ObservableValue[T]):
    """An ObservableValue whose owner can change it."""

    @abstractmethod
    def set(self, value: T | None) -> Any:
        """Change the value, notifying listeners if it differs."""


class DefaultObservableValue(WritableObservableValue[T]):
    """Plain in-memory writable value.

    set() is a no-op when the new value equals the current one. A listener
    that sets the same observable while it is notifying gets a
    ReentrantMutationError, which stops feedback loops at the first step.
    """

    def __init__(self, initial: T | None = None) -> None:
        super().__init__()
        self._value = initial
        self._updating = False

    def get(self) -> T | None:
        return self._value

    def set(self, value: T | None) -> Any:
        if differs(self._value, value):
            return self._request_commit(value)
        return None

    def _request_commit(self, value: T | None) -> Any:
        """Hook between the equality gate and the commit."""
        self._commit(value)

    def _commit(self, value: T | None) -> None:
        """Store value and notify, regardless of equality."""
        if self._updating:
            logger.debug("Rejected re-entrant set on %r", self)
            raise ReentrantMutationError(self)
        self._updating = True
        try:
            old, self._value = self._value, value
            self._fire_value_change_event(old, value)
        finally:
            self._updating = False


def observable_value(initial: T | None = None) -> DefaultObservableValue[T]:
    """Create a writable observable value.

    Usage:
        title = observable_value("untitled")
        title.add_listener(lambda e: print(e.value))  # prints "untitled"
        title.set("report")                           # prints "report"
    """
    return DefaultObservableValue(initial)
