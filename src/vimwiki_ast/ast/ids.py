#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/vimwiki_ast/ast/ids.py
"""Range-based unique id allocation for element trees.

An :class:`IdAllocator` hands out fixed-size ranges of integer ids. Every
:class:`IdPool` draws ranges from one allocator as it needs them and gives
all of its ranges back when released, so several trees built from the same
allocator never share an id.

The allocator is an ordinary object passed to whoever needs it; there is no
process-wide instance. Its lock is only held while a range is handed out
or returned.

Running out of ids raises :class:`~vimwiki_ast.exceptions.IdSpaceExhaustedError`.
That error signals a broken process, not a retryable condition.

"""

from __future__ import annotations

import logging
import threading
from types import TracebackType
from typing import Iterable, Optional

from vimwiki_ast.constants import DEFAULT_ID_RANGE_SIZE, MAX_ELEMENT_ID
from vimwiki_ast.exceptions import IdSpaceExhaustedError

logger = logging.getLogger(__name__)


class IdAllocator:
    """Thread-safe source of id ranges.

    Parameters
    ----------
    range_size : int, default = 10
        Number of ids in each range handed out
    max_id : int, default = 2**64 - 1
        Largest id that may ever be handed out
    start : int, default = 0
        First id of the first range

    """

    def __init__(
        self,
        range_size: int = DEFAULT_ID_RANGE_SIZE,
        max_id: int = MAX_ELEMENT_ID,
        start: int = 0,
    ):
        if range_size < 1:
            raise ValueError(f"range_size must be positive, got {range_size}")
        if start < 0 or start > max_id:
            raise ValueError(f"start must be within [0, {max_id}], got {start}")
        self.range_size = range_size
        self.max_id = max_id
        self._next_id = start
        self._freed: list[range] = []
        self._lock = threading.Lock()

    @property
    def free_count(self) -> int:
        """Number of returned ranges waiting to be reused."""
        with self._lock:
            return len(self._freed)

    def next_range(self) -> range:
        """Hand out a range of unused ids.

        Returned ranges are reused before any fresh range is created.

        Raises
        ------
        IdSpaceExhaustedError
            If fewer than ``range_size`` ids remain and nothing was returned

        """
        with self._lock:
            if self._freed:
                return self._freed.pop()

            # max_id itself is a valid id
            if self.max_id + 1 - self._next_id < self.range_size:
                raise IdSpaceExhaustedError(
                    f"Id space exhausted: cannot allocate {self.range_size} ids past {self._next_id}"
                )

            start = self._next_id
            self._next_id += self.range_size
            return range(start, self._next_id)

    def extend(self, ranges: Iterable[range]) -> None:
        """Return ranges so that later pools can reuse them."""
        returned = [r for r in ranges if len(r) > 0]
        if not returned:
            return
        with self._lock:
            self._freed.extend(returned)
        logger.debug("Returned %d id range(s) to allocator", len(returned))


class IdPool:
    """Per-tree source of ids backed by an :class:`IdAllocator`.

    A pool only talks to its allocator when its current range runs out.
    Call :meth:`release` (or use the pool as a context manager) to give every
    consumed range back.

    Parameters
    ----------
    allocator : IdAllocator
        Allocator to draw ranges from

    Examples
    --------
        >>> allocator = IdAllocator(range_size=2)
        >>> with IdPool(allocator) as pool:
        ...     [pool.next_id() for _ in range(3)]
        [0, 1, 2]

    """

    def __init__(self, allocator: IdAllocator):
        self.allocator = allocator
        self._available: Optional[range] = None
        self._cursor = 0
        self._used: list[range] = []

    def next_id(self) -> int:
        if self._available is None or self._cursor >= len(self._available):
            self._available = self.allocator.next_range()
            self._used.append(self._available)
            self._cursor = 0

        value = self._available[self._cursor]
        self._cursor += 1
        return value

    @property
    def ranges(self) -> list[range]:
        """Ranges drawn by this pool so far."""
        return list(self._used)

    def merge(self, other: IdPool) -> None:
        """Take ownership of another pool's ranges.

        Both pools must draw from the same allocator. The other pool is left
        empty, so releasing it afterwards is a no-op.

        """
        if other.allocator is not self.allocator:
            raise ValueError("Cannot merge id pools backed by different allocators")
        self._used.extend(other._used)
        other._used = []
        other._available = None
        other._cursor = 0

    def release(self) -> None:
        """Return every consumed range to the allocator."""
        used, self._used = self._used, []
        self._available = None
        self._cursor = 0
        self.allocator.extend(used)

    def __enter__(self) -> IdPool:
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.release()


__all__ = ["IdAllocator", "IdPool"]
