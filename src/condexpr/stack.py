"""
LIFO stack used for the operand and operator stacks of the evaluator.
"""

from typing import Generic, List, TypeVar

T = TypeVar("T")


class Stack(Generic[T]):
    """Minimal last-in first-out container."""

    def __init__(self) -> None:
        self._items: List[T] = []

    def push(self, item: T) -> None:
        self._items.append(item)

    def pop(self) -> T:
        """Removes and returns the top item. Raises IndexError when empty."""
        if not self._items:
            raise IndexError("pop from empty stack")
        return self._items.pop()

    def peek(self) -> T:
        """Returns the top item without removing it. Raises IndexError when empty."""
        if not self._items:
            raise IndexError("peek at empty stack")
        return self._items[-1]

    def empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"Stack({self._items!r})"
