"""Bounded stack used for values and call frames."""

from typing import Generic, Iterator, List, Tuple, TypeVar

from .errors import StackOverflow, StackTooLow

T = TypeVar("T")


class Stack(Generic[T]):
    """A last-in first-out stack holding at most ``size`` items."""

    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError("stack size must not be negative")
        self._size = size
        self._items: List[T] = []

    @property
    def capacity(self) -> int:
        """Maximum number of items."""
        return self._size

    def push(self, item: T) -> None:
        """Push an item, raising StackOverflow when full."""
        if len(self._items) == self._size:
            raise StackOverflow()
        self._items.append(item)

    def pop(self) -> T:
        """Pop the top item, raising StackTooLow when empty."""
        if not self._items:
            raise StackTooLow()
        return self._items.pop()

    def stack_pointer(self) -> int:
        """Number of items on the stack."""
        return len(self._items)

    def free(self) -> int:
        """Number of unused slots."""
        return self._size - len(self._items)

    def buffer(self) -> Tuple[T, ...]:
        """Snapshot of the live items, bottom first."""
        return tuple(self._items)

    def set(self, index: int, value: T) -> None:
        """Replace the live item at ``index``; IndexError if there is none."""
        if not 0 <= index < len(self._items):
            raise IndexError(f"no live stack slot at index {index}")
        self._items[index] = value

    def duplicate(self) -> None:
        """Push a copy of the top item."""
        if not self._items:
            raise StackTooLow()
        self.push(self._items[-1])

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(tuple(self._items))

    def __repr__(self) -> str:
        return f"Stack: \n{self._items!r}"