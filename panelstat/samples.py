# SPDX-License-Identifier: GPL-3.0-or-later
# Bounded sample series

"""Fixed-capacity sample buffer shared by every sensor."""

from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, Iterator, List


class SampleSeries:
    """Ordered FIFO buffer of numeric samples with a fixed length.

    The series is pre-filled with zeros so that its length is always
    exactly ``capacity``. Pushing a new sample evicts the oldest one.
    Iteration runs oldest to newest and can be restarted at will.
    """

    __slots__ = ('_samples',)

    def __init__(self, capacity: int, initial: Iterable[float] = ()) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._samples: Deque[float] = deque([0.0] * capacity, maxlen=capacity)
        for value in initial:
            self.push(value)

    @property
    def capacity(self) -> int:
        return self._samples.maxlen or 0

    def push(self, value: float) -> None:
        """Append a sample, evicting the oldest one."""
        self._samples.append(float(value))

    def latest(self) -> float:
        """Return the most recently pushed sample (0.0 if none)."""
        if not self._samples:
            return 0.0
        return self._samples[-1]

    def clear(self) -> None:
        """Reset every sample to zero, keeping the length."""
        self._samples.extend([0.0] * self.capacity)

    def max(self) -> float:
        return max(self._samples, default=0.0)

    def tail(self, count: int) -> List[float]:
        """Return the most recent ``count`` samples, oldest first."""
        if count <= 0:
            return []
        start = max(len(self._samples) - count, 0)
        return list(self._samples)[start:]

    def __iter__(self) -> Iterator[float]:
        return iter(list(self._samples))

    def __reversed__(self) -> Iterator[float]:
        return reversed(list(self._samples))

    def __len__(self) -> int:
        return len(self._samples)

    def __getitem__(self, index: int) -> float:
        return self._samples[index]

    def __repr__(self) -> str:
        return f"SampleSeries({list(self._samples)!r})"
