"""A pair of values where one is read while the other is written."""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

T = TypeVar("T")


class DoubleBuffer(Generic[T]):
    """Holds two values built by the same factory and flips their roles on swap.

    Before the first swap the first value is the read side and the second
    value is the write side.
    """

    def __init__(self, factory: Callable[[], T]) -> None:
        self._a = factory()
        self._b = factory()
        self._read_a = True

    def swap(self) -> None:
        """Exchange the read and write sides."""
        self._read_a = not self._read_a

    def read(self) -> T:
        """Return the value currently designated for reading."""
        return self._a if self._read_a else self._b

    def write(self) -> T:
        """Return the value currently designated for writing."""
        return self._b if self._read_a else self._a