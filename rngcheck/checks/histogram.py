"""Histogram construction and range membership checks for one channel."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..buffer import SampleBuffer
from ..errors import InvalidOutputError, PreconditionError
from ..kinds import ChannelSpec, NormalSpec, UniformSpec

DEFAULT_MAX_HISTOGRAM_SIZE = 1000

NORMAL_RANGE_SIGMAS = 4
"""Normal histograms cover ``mean ± NORMAL_RANGE_SIGMAS * stddev``."""

NORMAL_BUCKETS_PER_SIGMA = 9

NORMAL_MIN_IN_RANGE_FRACTION = 0.90
"""Minimum share of normal samples that must fall inside the histogram."""


@dataclass(frozen=True)
class HistogramLayout:
    """Bucket count and affine value-to-index map for one channel."""

    bucket_count: int
    scale: float
    offset: float
    lower: float
    upper: float


@dataclass(frozen=True)
class Histogram:
    """Bucket counts for one channel of a sample buffer."""

    counts: np.ndarray
    scale: float
    offset: float
    in_range: int
    out_of_range: int

    @property
    def bucket_count(self) -> int:
        return int(self.counts.size)

    @property
    def total(self) -> int:
        return self.in_range + self.out_of_range


def histogram_layout(spec: ChannelSpec, max_size: int = DEFAULT_MAX_HISTOGRAM_SIZE) -> HistogramLayout:
    """Return the histogram geometry used to analyse a channel of ``spec``."""

    if isinstance(spec, UniformSpec):
        lower, upper = float(spec.low), float(spec.high)
        bucket_count = int(min(spec.high - spec.low, max_size))
    elif isinstance(spec, NormalSpec):
        spread = NORMAL_RANGE_SIGMAS * spec.stddev
        lower, upper = spec.mean - spread, spec.mean + spread
        bucket_count = int(min(spec.stddev * NORMAL_BUCKETS_PER_SIGMA, max_size))
    else:  # pragma: no cover - closed set of specs
        raise PreconditionError(f"Unsupported channel specification: {spec!r}")
    bucket_count = max(bucket_count, 1)
    scale = bucket_count / (upper - lower)
    return HistogramLayout(
        bucket_count=bucket_count,
        scale=scale,
        offset=-lower * scale,
        lower=lower,
        upper=upper,
    )


def build_histogram(
    buffer: SampleBuffer,
    channel: int,
    scale: float,
    offset: float,
    bucket_count: int,
    *,
    upper_bound: float | None = None,
) -> Histogram:
    """Count the samples of ``channel`` per bucket.

    A sample lands in bucket ``floor(value * scale + offset)`` when that index
    lies in ``[0, bucket_count)``.  When ``upper_bound`` is given, samples equal
    to it are credited to the last bucket instead of being reported as out of
    range; floating-point uniform generators may round up to the exclusive
    bound.
    """

    if bucket_count < 1:
        raise PreconditionError(f"Bucket count must be positive (got {bucket_count}).")
    values = buffer.channel(channel).astype(np.float64)
    indices = np.floor(values * scale + offset)
    inside = (indices >= 0) & (indices < bucket_count)
    counts = np.bincount(indices[inside].astype(np.intp), minlength=bucket_count)
    in_range = int(np.count_nonzero(inside))
    if upper_bound is not None:
        credited = int(np.count_nonzero(~inside & (values == upper_bound)))
        counts[-1] += credited
        in_range += credited
    return Histogram(
        counts=counts.astype(np.int64),
        scale=scale,
        offset=offset,
        in_range=in_range,
        out_of_range=int(values.size) - in_range,
    )


def histogram_for_channel(
    buffer: SampleBuffer,
    channel: int,
    spec: ChannelSpec,
    *,
    max_size: int = DEFAULT_MAX_HISTOGRAM_SIZE,
) -> Histogram:
    """Build the histogram of ``channel`` using the layout derived from ``spec``."""

    layout = histogram_layout(spec, max_size)
    upper_bound = None
    if isinstance(spec, UniformSpec) and buffer.kind.is_float:
        upper_bound = layout.upper
    return build_histogram(
        buffer,
        channel,
        layout.scale,
        layout.offset,
        layout.bucket_count,
        upper_bound=upper_bound,
    )


def check_range_membership(
    histogram: Histogram,
    spec: ChannelSpec,
    channel: int,
    channels: int,
) -> None:
    """Raise :class:`InvalidOutputError` when too many samples fell outside."""

    total = histogram.total
    if isinstance(spec, UniformSpec):
        if histogram.in_range != total:
            raise InvalidOutputError(
                f"Uniform RNG gave {histogram.out_of_range} value(s) out of the range "
                f"[{spec.low:g}, {spec.high:g}) on channel {channel}/{channels}.",
                check="range",
                channel=channel,
                expected=float(total),
                observed=float(histogram.in_range),
            )
        return
    minimum = total * NORMAL_MIN_IN_RANGE_FRACTION
    if histogram.in_range < minimum:
        raise InvalidOutputError(
            "Normal RNG gave too many values out of the range "
            f"({spec.mean:g} - {NORMAL_RANGE_SIGMAS}*{spec.stddev:g}, "
            f"{spec.mean:g} + {NORMAL_RANGE_SIGMAS}*{spec.stddev:g}) "
            f"on channel {channel}/{channels}: {histogram.in_range} of {total} inside.",
            check="range",
            channel=channel,
            expected=minimum,
            observed=float(histogram.in_range),
        )


__all__ = [
    "DEFAULT_MAX_HISTOGRAM_SIZE",
    "Histogram",
    "HistogramLayout",
    "build_histogram",
    "check_range_membership",
    "histogram_for_channel",
    "histogram_layout",
]
