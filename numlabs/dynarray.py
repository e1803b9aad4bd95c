"""A list-backed array that grows its capacity in fixed steps."""

from __future__ import annotations

from typing import Generic, Iterator, TypeVar

GROWTH_AMOUNT = 100
MAX_STR_LEN = 256

T = TypeVar("T")


class DynamicArray(Generic[T]):
    """Append-only array whose capacity grows by ``GROWTH_AMOUNT`` when full."""

    def __init__(self, initial_size: int = 0) -> None:
        if initial_size < 0:
            raise ValueError("initial size must not be negative")
        self._capacity = initial_size
        self._items: list[T] = []

    @property
    def capacity(self) -> int:
        """Number of items the array can hold before it next grows."""
        return self._capacity

    def push(self, item: T) -> int:
        """Append ``item`` and return the index it was stored at."""
        if len(self._items) >= self._capacity:
            self._capacity += GROWTH_AMOUNT
        self._items.append(item)
        return len(self._items) - 1

    def clear(self) -> None:
        """Drop every item and release the capacity."""
        self._items.clear()
        self._capacity = 0

    def search(self, key: T) -> T | None:
        """Return the first stored item equal to ``key``, or None.

        Strings are compared on their first ``MAX_STR_LEN`` characters only.
        """
        for item in self._items:
            if isinstance(item, str) and isinstance(key, str):
                if item[:MAX_STR_LEN] == key[:MAX_STR_LEN]:
                    return item
            elif item == key:
                return item
        return None

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __getitem__(self, index: int) -> T:
        return self._items[index]