"""Computed values — observable values derived from other observables.

A ComputedValue caches the result of a supplier function. Whenever any of
its dependencies fires an event, the supplier runs again and the result is
compared with the cached one; listeners are only notified when it differs.
Reads always return the last notified value.

Dependencies hold the computed value's listener weakly, so a computed value
lives exactly as long as its holders keep it. The computed value holds its
own listener and, through the supplier, its sources.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, TypeVar

from bindfx.errors import require
from bindfx.observable import Observable, ObservableValue, differs

T = TypeVar("T")


class ComputedValue(ObservableValue[T]):
    """An ObservableValue computed from explicitly listed dependencies."""

    def __init__(self, supplier: Callable[[], T], dependencies: Iterable[Observable]) -> None:
        super().__init__()
        require(supplier, "supplier")
        require(dependencies, "dependencies")
        self._supplier = supplier
        self._cached: T | None = None
        self._dependency_listener = self._on_dependency_event
        for dependency in dependencies:
            require(dependency, "dependency")
            dependency.add_weak_listener(self._dependency_listener, fire_initial=False)
        self._update_cached_value()

    def get(self) -> T | None:
        return self._cached

    def _on_dependency_event(self, event: Any) -> None:
        self._update_cached_value()

    def _update_cached_value(self) -> None:
        old = self._cached
        new = self._supplier()
        if differs(old, new):
            self._cached = new
            self._fire_value_change_event(old, new)


def computed_value(supplier: Callable[[], T], *dependencies: Observable) -> ComputedValue[T]:
    """Create a ComputedValue that recomputes when any dependency fires.

    Usage:
        name = observable_value("Joe")

        greeting = computed_value(lambda: f"Hello {name.get()}!", name)
        greeting.get()  # "Hello Joe!"
        name.set("Max")
        greeting.get()  # "Hello Max!"
    """
    return ComputedValue(supplier, dependencies)
