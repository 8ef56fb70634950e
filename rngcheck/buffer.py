"""Typed, channel-interleaved sample storage."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .errors import PreconditionError
from .kinds import ElementKind

MAX_CHANNELS = 4


@dataclass(frozen=True)
class SampleBuffer:
    """A ``(length, channels)`` array of samples of a single element kind.

    Rows are consecutive samples, columns are channels; flattening the array
    in row-major order yields the interleaved stream the generator produces.
    """

    kind: ElementKind
    data: np.ndarray

    @classmethod
    def allocate(cls, kind: ElementKind, channels: int, length: int) -> "SampleBuffer":
        if not 1 <= channels <= MAX_CHANNELS:
            raise PreconditionError(
                f"Channel count must be between 1 and {MAX_CHANNELS} (got {channels})."
            )
        if length < 0:
            raise PreconditionError(f"Buffer length must be non-negative (got {length}).")
        return cls(kind=kind, data=np.zeros((length, channels), dtype=kind.dtype))

    @property
    def channels(self) -> int:
        return self.data.shape[1]

    @property
    def length(self) -> int:
        return self.data.shape[0]

    @property
    def element_count(self) -> int:
        return self.data.size

    def channel(self, index: int) -> np.ndarray:
        """Return a strided, read-only view of one channel."""

        if not 0 <= index < self.channels:
            raise PreconditionError(
                f"Channel {index} out of range for a {self.channels}-channel buffer."
            )
        view = self.data[:, index]
        view.flags.writeable = False
        return view

    def rows(self, start: int, stop: int) -> np.ndarray:
        """Return a writable view over rows ``[start, stop)``."""

        return self.data[start:stop]

    def interleaved(self) -> np.ndarray:
        """Return the elements in generator order, channels interleaved."""

        return self.data.reshape(-1)

    def mismatch_count(self, other: "SampleBuffer") -> int:
        """Return how many elements differ between the two buffers."""

        if self.data.shape != other.data.shape or self.kind is not other.kind:
            raise PreconditionError("Buffers with different layouts cannot be compared.")
        return int(np.count_nonzero(self.data != other.data))

    def equals(self, other: "SampleBuffer") -> bool:
        return self.mismatch_count(other) == 0


__all__ = ["MAX_CHANNELS", "SampleBuffer"]
