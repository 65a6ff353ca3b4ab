"""Source cursors for module sequences.

A cursor is the minimal capability set a dependency-aware sequence needs
from its source: rewind to the start, read the current element, move to the
next one, and tell whether the position holds an element. Adapters below
normalize the input shapes callers typically have at hand.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import Any

_CURSOR_METHODS = ("rewind", "current", "next", "valid")


class ModuleCursor(ABC):
    """Abstract base class for module source cursors."""

    @abstractmethod
    def rewind(self) -> None:
        """Move back to the first element."""

    @abstractmethod
    def current(self) -> Any | None:
        """Return the element at the current position, or None."""

    @abstractmethod
    def next(self) -> None:
        """Move forward by one element."""

    @abstractmethod
    def valid(self) -> bool:
        """Return True if the current position holds an element."""


class ListCursor(ModuleCursor):
    """Cursor over a random-access sequence."""

    def __init__(self, items: Sequence[Any]) -> None:
        self._items = items
        self._index = 0

    def rewind(self) -> None:
        self._index = 0

    def current(self) -> Any | None:
        if 0 <= self._index < len(self._items):
            return self._items[self._index]
        return None

    def next(self) -> None:
        self._index += 1

    def valid(self) -> bool:
        return self._index < len(self._items)


class IterableCursor(ModuleCursor):
    """
    Cursor over an arbitrary iterable.

    Elements are pulled lazily and kept in a buffer, so rewinding replays
    what was already pulled without iterating the source a second time.
    This keeps single-pass generators rewindable.
    """

    def __init__(self, iterable: Iterable[Any]) -> None:
        self._iterator: Iterator[Any] = iter(iterable)
        self._buffer: list[Any] = []
        self._exhausted = False
        self._index = 0

    def _fill(self) -> None:
        while not self._exhausted and len(self._buffer) <= self._index:
            try:
                self._buffer.append(next(self._iterator))
            except StopIteration:
                self._exhausted = True

    def rewind(self) -> None:
        self._index = 0

    def current(self) -> Any | None:
        self._fill()
        if self._index < len(self._buffer):
            return self._buffer[self._index]
        return None

    def next(self) -> None:
        self._fill()
        if self._index < len(self._buffer):
            self._index += 1

    def valid(self) -> bool:
        self._fill()
        return self._index < len(self._buffer)


def is_cursor(candidate: Any) -> bool:
    """Check whether an object already provides the cursor methods."""
    if isinstance(candidate, ModuleCursor):
        return True
    return all(callable(getattr(candidate, name, None)) for name in _CURSOR_METHODS)


def normalize_source(source: Any) -> ModuleCursor:
    """
    Normalize a module source into a cursor.

    Accepted shapes:
    - objects already implementing rewind/current/next/valid (returned as-is)
    - mappings (their values are used, in insertion order)
    - sequences such as lists and tuples
    - any other iterable, generators included

    Args:
        source: The module source

    Returns:
        A cursor over the source

    Raises:
        TypeError: If the source cannot be iterated
    """
    if is_cursor(source):
        return source
    if isinstance(source, (str, bytes)):
        raise TypeError(f"Cannot use {type(source).__name__} as a module source")
    if isinstance(source, Mapping):
        return ListCursor(list(source.values()))
    if isinstance(source, Sequence):
        return ListCursor(source)
    if isinstance(source, Iterable):
        return IterableCursor(source)
    raise TypeError(f"Cannot use {type(source).__name__} as a module source")
