from __future__ import annotations

"""Bounded FIFO sample histories used for smoothing."""

from collections import deque
from typing import Iterable, Iterator

import numpy as np


class SampleHistory:
    """Fixed-capacity FIFO; the oldest sample is evicted once full."""

    def __init__(self, capacity: int, samples: Iterable[float] = ()) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = int(capacity)
        self._buf: deque[float] = deque(maxlen=self.capacity)
        for s in samples:
            self.push(s)

    def push(self, value: float) -> None:
        self._buf.append(float(value))

    def average(self) -> float:
        if not self._buf:
            return 0.0
        return float(np.mean(self._buf))

    def __len__(self) -> int:
        return len(self._buf)

    def __iter__(self) -> Iterator[float]:
        return iter(self._buf)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(capacity={self.capacity}, samples={list(self._buf)})"


class ReactivityHistory(SampleHistory):
    """Last three reactivity samples."""

    CAPACITY = 3

    def __init__(self, samples: Iterable[float] = ()) -> None:
        super().__init__(self.CAPACITY, samples)


class IodineHistory(SampleHistory):
    pass
