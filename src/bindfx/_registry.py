"""Listener registry — the subscriber set behind every observable.

Listeners are held either strongly (until their Registration is removed)
or weakly (until the callable itself is garbage collected). Bound methods
are held through weakref.WeakMethod so that a weak registration lives as
long as the bound object, not as long as the transient method object.

Not thread safe.
"""

from __future__ import annotations

import logging
import weakref
from typing import Callable, Generic, TypeVar

from bindfx.errors import require

logger = logging.getLogger("bindfx.registry")

E = TypeVar("E")

Listener = Callable[[E], None]


def _create_weakref(listener: Callable) -> weakref.ref:
    if hasattr(listener, "__self__") and hasattr(listener, "__func__"):
        return weakref.WeakMethod(listener)
    return weakref.ref(listener)


class Registration:
    """Handle returned by a strong subscription. remove() is idempotent."""

    __slots__ = ("_remover",)

    def __init__(self, remover: Callable[[], None]) -> None:
        self._remover: Callable[[], None] | None = remover

    @property
    def removed(self) -> bool:
        return self._remover is None

    def remove(self) -> None:
        """Unsubscribe the listener. Calling this again does nothing."""
        remover, self._remover = self._remover, None
        if remover is not None:
            remover()

    @classmethod
    def combine(cls, *registrations: Registration) -> Registration:
        """One handle that removes all the given registrations."""

        def _remove_all() -> None:
            for registration in registrations:
                registration.remove()

        return cls(_remove_all)


class ListenerRegistry(Generic[E]):
    """Strong and weak subscribers of a single observable."""

    __slots__ = ("_strong", "_weak")

    def __init__(self) -> None:
        # dicts double as insertion-ordered sets
        self._strong: dict[Listener, None] = {}
        self._weak: list[weakref.ref] = []

    def add_listener(self, listener: Listener) -> Registration:
        """Hold listener strongly. Returns the handle that removes it."""
        require(listener, "listener")
        self._strong[listener] = None
        return Registration(lambda: self._strong.pop(listener, None))

    def add_weak_listener(self, listener: Listener) -> None:
        """Hold listener weakly. It stops receiving events once collected."""
        require(listener, "listener")
        for ref in self._weak:
            if ref() == listener:
                return
        self._weak.append(_create_weakref(listener))

    def has_listeners(self) -> bool:
        if self._strong:
            return True
        return any(ref() is not None for ref in self._weak)

    def listeners(self) -> list[Listener]:
        """Snapshot of the live listeners, strong first, without duplicates."""
        snapshot = list(self._strong)
        alive = []
        for ref in self._weak:
            listener = ref()
            if listener is None:
                continue
            alive.append(ref)
            if listener not in self._strong:
                snapshot.append(listener)
        if len(alive) != len(self._weak):
            logger.debug("Pruned %d collected weak listeners", len(self._weak) - len(alive))
            self._weak = alive
        return snapshot

    def fire_event(self, event: E) -> None:
        """Call every current listener with event.

        Listeners added or removed during dispatch do not affect this round.
        """
        require(event, "event")
        for listener in self.listeners():
            listener(event)
