"""Minimal observable value and list used to drive the map and list views."""

from __future__ import annotations

from typing import Callable, Generic, Iterator, List, TypeVar

T = TypeVar("T")

Callback = Callable[[T], None]
Unsubscribe = Callable[[], None]


class Observable(Generic[T]):
    """A value that notifies subscribers whenever it changes."""

    def __init__(self, value: T) -> None:
        self._value = value
        self._subscribers: List[Callback] = []

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        if value == self._value:
            return
        self._value = value
        self._notify()

    def subscribe(self, callback: Callback) -> Unsubscribe:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        for callback in list(self._subscribers):
            callback(self._value)


class ObservableList(Observable[List[T]]):
    """Append-only list; subscribers receive a copy of the items after each change."""

    def __init__(self) -> None:
        super().__init__([])

    @property
    def value(self) -> List[T]:
        return list(self._value)

    def append(self, item: T) -> None:
        self._value.append(item)
        self._notify()

    def set(self, value: List[T]) -> None:
        raise TypeError("ObservableList is append-only")

    def _notify(self) -> None:
        snapshot = list(self._value)
        for callback in list(self._subscribers):
            callback(snapshot)

    def __len__(self) -> int:
        return len(self._value)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._value))

    def __getitem__(self, index: int) -> T:
        return self._value[index]
