"""Observable lists — ordered sequences that describe their own changes.

Every structural change fires an ItemChangeEvent in one of four shapes,
determined only by its (old_position, new_position) pair:

    added          (-1, n)
    removed        (o, -1)
    moved          (o, n)
    list_changed   (-1, -1)   bulk reset, no per-item detail

A list also exposes two observable values, size and empty, which are
updated before the structural event fires.

move_at(index, new_position) treats new_position as the item's final index
once the move is done: moving index 1 to 2 in [a, b, c] yields [a, c, b].
Both positions must lie in [0, len(list)).

Not thread safe.
"""

from __future__ import annotations

import logging
from abc import abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, Iterator, TypeVar

from bindfx._registry import Listener
from bindfx.errors import IndexOutOfRangeError, InvalidArgumentError, require
from bindfx.observable import DefaultObservableValue, Observable, ObservableValue

logger = logging.getLogger("bindfx.observable_list")

T = TypeVar("T")
R = TypeVar("R")

NO_POSITION = -1


@dataclass(frozen=True)
class ItemChangeEvent(Generic[T]):
    """A structural change of an ObservableList.

    Build instances through item_added, item_removed, item_moved and
    list_changed only.
    """

    sender: ObservableList[T]
    item: T | None
    old_position: int
    new_position: int

    def __post_init__(self) -> None:
        require(self.sender, "sender")
        if self.old_position < NO_POSITION or self.new_position < NO_POSITION:
            raise InvalidArgumentError(
                f"positions must be >= -1, got ({self.old_position}, {self.new_position})"
            )
        if self.is_list_changed() and self.item is not None:
            raise InvalidArgumentError("a list_changed event carries no item")

    @classmethod
    def item_added(cls, sender: ObservableList[T], item: T, new_position: int) -> ItemChangeEvent[T]:
        return cls(sender, item, NO_POSITION, new_position)

    @classmethod
    def item_removed(cls, sender: ObservableList[T], item: T, old_position: int) -> ItemChangeEvent[T]:
        return cls(sender, item, old_position, NO_POSITION)

    @classmethod
    def item_moved(
        cls, sender: ObservableList[T], item: T, old_position: int, new_position: int
    ) -> ItemChangeEvent[T]:
        return cls(sender, item, old_position, new_position)

    @classmethod
    def list_changed(cls, sender: ObservableList[T]) -> ItemChangeEvent[T]:
        return cls(sender, None, NO_POSITION, NO_POSITION)

    def is_item_added(self) -> bool:
        return self.old_position == NO_POSITION and self.new_position > NO_POSITION

    def is_item_removed(self) -> bool:
        return self.new_position == NO_POSITION and self.old_position > NO_POSITION

    def is_item_moved(self) -> bool:
        return self.old_position > NO_POSITION and self.new_position > NO_POSITION

    def is_list_changed(self) -> bool:
        return self.old_position == NO_POSITION and self.new_position == NO_POSITION


class ReadOnlyListView(Sequence):
    """Live, read-only view of a list."""

    __slots__ = ("_items",)

    def __init__(self, items: list) -> None:
        self._items = items

    def __getitem__(self, index):
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ReadOnlyListView):
            return self._items == other._items
        if isinstance(other, (list, tuple)):
            return self._items == list(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ReadOnlyListView({self._items!r})"


class ObservableList(Observable[ItemChangeEvent[T]]):
    """Read side of an observable list."""

    def __init__(self) -> None:
        super().__init__()
        self._size: DefaultObservableValue[int] = DefaultObservableValue(0)
        self._empty: DefaultObservableValue[bool] = DefaultObservableValue(True)

    @abstractmethod
    def get_items(self) -> Sequence[T]:
        """Return a read-only view of the items."""

    @property
    def size(self) -> ObservableValue[int]:
        """Item count, updated before each structural event.

        Its listeners must not mutate this list: the nested change is rejected
        with ReentrantMutationError after the items have already changed.
        """
        return self._size

    @property
    def empty(self) -> ObservableValue[bool]:
        return self._empty

    def is_empty(self) -> bool:
        return len(self.get_items()) == 0

    def index_of(self, item: T) -> int:
        """Index of the first item equal to item, or -1."""
        for index, candidate in enumerate(self.get_items()):
            if candidate is item or candidate == item:
                return index
        return NO_POSITION

    def get(self, index: int) -> T:
        items = self.get_items()
        if not 0 <= index < len(items):
            raise IndexOutOfRangeError(index, len(items))
        return items[index]

    def __getitem__(self, index):
        """Python indexing: negative indices and slices work like on a list."""
        return self.get_items()[index]

    def __len__(self) -> int:
        return len(self.get_items())

    def __iter__(self) -> Iterator[T]:
        return iter(self.get_items())

    def __contains__(self, item: object) -> bool:
        return self.index_of(item) != NO_POSITION

    def _update_observable_values(self) -> None:
        count = len(self.get_items())
        self._empty.set(count == 0)
        self._size.set(count)

    def _fire_initial_event(self, listener: Listener) -> None:
        listener(ItemChangeEvent.list_changed(self))

    def map(self, fn: Callable[[T], R]) -> ObservableList[R]:
        """Derive a list holding fn(item) for every item of this list.

        The derived list follows this one incrementally: only added items
        are mapped, removed and moved items keep their mapped instance.
        Keep a reference to it: this list only holds it weakly.

        Usage:
            numbers = observable_list(0, 1, 2)
            labels = numbers.map(str)
            list(labels)   # ["0", "1", "2"]
            numbers.add(3)
            list(labels)   # ["0", "1", "2", "3"]
        """
        return MappedObservableList(self, fn)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({list(self.get_items())!r})"


class WritableObservableList(ObservableList[T]):
    """An ObservableList whose owner can change it."""

    def add(self, item: T) -> None:
        """Append item. Fires added."""
        self.insert(len(self), item)

    @abstractmethod
    def insert(self, index: int, item: T) -> None:
        """Insert item at index in [0, len]. Fires added."""

    @abstractmethod
    def add_all(self, items: Iterable[T]) -> None:
        """Append all items. Fires list_changed if anything was added."""

    def remove(self, item: T) -> None:
        """Remove the first item equal to item. Does nothing if absent."""
        index = self.index_of(item)
        if index != NO_POSITION:
            self.remove_at(index)

    @abstractmethod
    def remove_at(self, index: int) -> None:
        """Remove the item at index. Fires removed."""

    @abstractmethod
    def remove_if(self, predicate: Callable[[T], bool]) -> None:
        """Remove every matching item, last to first, one removed event each."""

    def move(self, item: T, new_position: int) -> None:
        """Move the first item equal to item so that it ends at new_position."""
        index = self.index_of(item)
        if index == NO_POSITION:
            raise InvalidArgumentError(f"{item!r} is not in the list")
        self.move_at(index, new_position)

    @abstractmethod
    def move_at(self, index: int, new_position: int) -> None:
        """Move the item at index so that it ends at new_position. Fires moved."""

    @abstractmethod
    def clear(self) -> None:
        """Remove all items. Fires list_changed."""

    @abstractmethod
    def set_items(self, items: Iterable[T]) -> None:
        """Replace all items. Fires list_changed."""


class DefaultObservableList(WritableObservableList[T]):
    """Plain in-memory writable list."""

    def __init__(self, initial: Iterable[T] | None = None) -> None:
        super().__init__()
        self._items: list[T] = []
        self._view = ReadOnlyListView(self._items)
        if initial is not None:
            self.add_all(initial)

    def get_items(self) -> Sequence[T]:
        return self._view

    def _check_index(self, index: int, *, inclusive: bool = False) -> None:
        size = len(self._items)
        upper = size if inclusive else size - 1
        if not 0 <= index <= upper:
            raise IndexOutOfRangeError(index, size, inclusive=inclusive)

    def insert(self, index: int, item: T) -> None:
        self._check_index(index, inclusive=True)
        self._items.insert(index, item)
        self._update_observable_values()
        self._fire_event(ItemChangeEvent.item_added(self, item, index))

    def add_all(self, items: Iterable[T]) -> None:
        require(items, "items")
        new_items = list(items)
        if not new_items:
            return
        self._items.extend(new_items)
        self._update_observable_values()
        self._fire_event(ItemChangeEvent.list_changed(self))

    def remove_at(self, index: int) -> None:
        self._check_index(index)
        item = self._items.pop(index)
        self._update_observable_values()
        self._fire_event(ItemChangeEvent.item_removed(self, item, index))

    def remove_if(self, predicate: Callable[[T], bool]) -> None:
        require(predicate, "predicate")
        for index in range(len(self._items) - 1, -1, -1):
            item = self._items[index]
            if predicate(item):
                del self._items[index]
                self._update_observable_values()
                self._fire_event(ItemChangeEvent.item_removed(self, item, index))

    def move_at(self, index: int, new_position: int) -> None:
        self._check_index(index)
        self._check_index(new_position)
        if index == new_position:
            return
        item = self._items.pop(index)
        self._items.insert(new_position, item)
        self._fire_event(ItemChangeEvent.item_moved(self, item, index, new_position))

    def clear(self) -> None:
        self._items.clear()
        self._update_observable_values()
        self._fire_event(ItemChangeEvent.list_changed(self))

    def set_items(self, items: Iterable[T]) -> None:
        require(items, "items")
        new_items = list(items)
        self._items[:] = new_items
        self._update_observable_values()
        self._fire_event(ItemChangeEvent.list_changed(self))


class MappedObservableList(ObservableList[R], Generic[T, R]):
    """A list that mirrors a source list through a per-item function."""

    def __init__(self, source: ObservableList[T], fn: Callable[[T], R]) -> None:
        super().__init__()
        self._source = require(source, "source")
        self._fn = require(fn, "fn")
        self._mapped: list[R] = []
        self._view = ReadOnlyListView(self._mapped)
        self._source_listener = self._on_source_event
        source.add_weak_listener(self._source_listener, fire_initial=True)

    def get_items(self) -> Sequence[R]:
        return self._view

    def _on_source_event(self, event: ItemChangeEvent[T]) -> None:
        if event.is_item_added():
            item = self._fn(event.item)
            self._mapped.insert(event.new_position, item)
            self._update_observable_values()
            self._fire_event(ItemChangeEvent.item_added(self, item, event.new_position))
        elif event.is_item_removed():
            item = self._mapped.pop(event.old_position)
            self._update_observable_values()
            self._fire_event(ItemChangeEvent.item_removed(self, item, event.old_position))
        elif event.is_item_moved():
            item = self._mapped.pop(event.old_position)
            self._mapped.insert(event.new_position, item)
            self._fire_event(
                ItemChangeEvent.item_moved(self, item, event.old_position, event.new_position)
            )
        else:
            logger.debug("Rebuilding %d mapped items", len(self._source))
            self._mapped[:] = [self._fn(item) for item in self._source]
            self._update_observable_values()
            self._fire_event(ItemChangeEvent.list_changed(self))


def observable_list(*items: T) -> DefaultObservableList[T]:
    """Create a writable observable list holding items.

    Usage:
        todos = observable_list("write", "review")
        todos.add_listener(print, fire_initial=False)
        todos.add("ship")  # prints an item_added event at position 2
    """
    return DefaultObservableList(items)


def observable_list_of(items: Iterable[T] | None = None) -> DefaultObservableList[T]:
    """Create a writable observable list from any iterable."""
    return DefaultObservableList(items)
