"""Check that slicing the fill calls does not change the generated stream."""

from __future__ import annotations

from typing import List, Sequence

import numpy as np

from ..buffer import SampleBuffer
from ..errors import InvalidOutputError, PreconditionError
from ..generators import RandomGenerator
from ..kinds import ChannelSpec, ElementKind

DEFAULT_MAX_SLICES = 1000


def random_partition(total: int, max_slices: int, source: np.random.Generator) -> List[int]:
    """Split ``total`` rows into at most ``max_slices`` consecutive slice lengths.

    Each slice takes a random share of what is left, so lengths are skewed
    and zero-length slices are common; the last slice takes the remainder.
    """

    if total < 0 or max_slices < 1:
        raise PreconditionError(
            f"Cannot partition {total} rows into {max_slices} slice(s)."
        )
    lengths: List[int] = []
    used = 0
    for index in range(max_slices):
        if index + 1 < max_slices:
            length = int(source.integers(0, total - used + 1))
        else:
            length = total - used
        lengths.append(length)
        used += length
    return lengths


def fill_in_slices(
    generator: RandomGenerator,
    buffer: SampleBuffer,
    channels: Sequence[ChannelSpec],
    lengths: Sequence[int],
) -> None:
    """Fill ``buffer`` with one generator call per slice length."""

    if sum(lengths) != buffer.length:
        raise PreconditionError(
            f"Slices cover {sum(lengths)} rows but the buffer holds {buffer.length}."
        )
    start = 0
    for length in lengths:
        generator.fill(buffer.rows(start, start + length), channels)
        start += length


def check_reproducibility(
    generator: RandomGenerator,
    kind: ElementKind,
    channels: Sequence[ChannelSpec],
    length: int,
    source: np.random.Generator,
    *,
    max_slices: int = DEFAULT_MAX_SLICES,
) -> SampleBuffer:
    """Fill two buffers from the same state with different slicing.

    The first buffer is filled with a single call, the second through
    :func:`random_partition`.  Returns the first buffer when both are equal,
    otherwise raises :class:`InvalidOutputError`.
    """

    reference = SampleBuffer.allocate(kind, len(channels), length)
    sliced = SampleBuffer.allocate(kind, len(channels), length)

    saved_state = generator.get_state()
    generator.fill(reference.rows(0, length), channels)
    generator.set_state(saved_state)
    fill_in_slices(generator, sliced, channels, random_partition(length, max_slices, source))

    mismatches = reference.mismatch_count(sliced)
    if mismatches:
        raise InvalidOutputError(
            "RNG output depends on the array lengths (some generated numbers get lost?): "
            f"{mismatches} of {reference.element_count} element(s) differ.",
            check="reproducibility",
            expected=0.0,
            observed=float(mismatches),
        )
    return reference


__all__ = [
    "DEFAULT_MAX_SLICES",
    "check_reproducibility",
    "fill_in_slices",
    "random_partition",
]
