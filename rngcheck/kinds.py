"""Element representations and per-channel distribution parameters."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Sequence, Tuple, Union

import numpy as np

from .errors import PreconditionError


class ElementKind(enum.Enum):
    """The seven numeric representations a sample buffer can hold.

    Each member carries its numpy dtype and the value range test cases draw
    their distribution parameters from.
    """

    U8 = ("u8", np.uint8, 0, 256)
    S8 = ("s8", np.int8, -128, 128)
    U16 = ("u16", np.uint16, 0, 65536)
    S16 = ("s16", np.int16, -32768, 32768)
    S32 = ("s32", np.int32, -1_000_000, 1_000_000)
    F32 = ("f32", np.float32, -1000, 1000)
    F64 = ("f64", np.float64, -1000, 1000)

    def __init__(self, label: str, scalar_type: type, low: int, high: int) -> None:
        self.label = label
        self.dtype = np.dtype(scalar_type)
        self.test_range: Tuple[int, int] = (low, high)

    @property
    def is_float(self) -> bool:
        return self.dtype.kind == "f"

    def saturate(self, values: np.ndarray) -> np.ndarray:
        """Round and clamp ``values`` into this representation."""

        if self.is_float:
            return values.astype(self.dtype)
        info = np.iinfo(self.dtype)
        return np.clip(np.rint(values), info.min, info.max).astype(self.dtype)


class DistributionKind(str, enum.Enum):
    UNIFORM = "uniform"
    NORMAL = "normal"


@dataclass(frozen=True)
class UniformSpec:
    """Uniform distribution over ``[low, high)``."""

    low: float
    high: float

    def __post_init__(self) -> None:
        if not self.low < self.high:
            raise PreconditionError(
                f"Uniform bounds must satisfy low < high (got [{self.low}, {self.high}))."
            )
        if self.high - self.low < 2:
            raise PreconditionError(
                f"Uniform range [{self.low}, {self.high}) must admit at least two values."
            )

    @property
    def kind(self) -> DistributionKind:
        return DistributionKind.UNIFORM

    @property
    def width(self) -> float:
        return self.high - self.low

    def describe(self) -> str:
        return f"uniform[{self.low:g}, {self.high:g})"


@dataclass(frozen=True)
class NormalSpec:
    """Normal distribution with ``mean`` and standard deviation ``stddev``."""

    mean: float
    stddev: float

    def __post_init__(self) -> None:
        if not self.stddev > 0:
            raise PreconditionError(
                f"Normal scale must be positive (got {self.stddev})."
            )

    @property
    def kind(self) -> DistributionKind:
        return DistributionKind.NORMAL

    def describe(self) -> str:
        return f"normal(mean={self.mean:g}, stddev={self.stddev:g})"


ChannelSpec = Union[UniformSpec, NormalSpec]


def distribution_of(channels: Sequence[ChannelSpec]) -> DistributionKind:
    """Return the distribution kind shared by all ``channels``."""

    if not channels:
        raise PreconditionError("At least one channel specification is required.")
    kinds = {spec.kind for spec in channels}
    if len(kinds) != 1:
        raise PreconditionError("All channels of a buffer must use the same distribution kind.")
    return kinds.pop()


__all__ = [
    "ChannelSpec",
    "DistributionKind",
    "ElementKind",
    "NormalSpec",
    "UniformSpec",
    "distribution_of",
]
