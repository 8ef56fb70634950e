"""Generator collaborators that fill sample buffers.

The checker treats the generator under test as an external collaborator
described by :class:`RandomGenerator`.  Two implementations ship with the
package: :class:`NumpyGenerator`, a reference generator backed by numpy's
Philox bit generator, and :class:`ConstantGenerator`, a deliberately broken
generator useful for exercising failure paths.
"""

from __future__ import annotations

import copy
import importlib
from typing import Any, Callable, Protocol, Sequence

import numpy as np

from .errors import InvalidConfigurationError, PreconditionError
from .kinds import (
    ChannelSpec,
    DistributionKind,
    ElementKind,
    NormalSpec,
    UniformSpec,
    distribution_of,
)


class RandomGenerator(Protocol):
    """Protocol implemented by every generator the checker can validate.

    ``fill`` must be a pure function of the generator state and the number of
    rows requested: filling ``n`` rows at once or as several consecutive
    slices has to produce the same values.
    """

    name: str

    def get_state(self) -> Any:
        """Return an opaque snapshot of the generator state."""

    def set_state(self, state: Any) -> None:
        """Restore a snapshot previously returned by :meth:`get_state`."""

    def fill(self, out: np.ndarray, channels: Sequence[ChannelSpec]) -> None:
        """Fill the ``(rows, channels)`` array ``out`` in place."""


GeneratorFactory = Callable[[int], RandomGenerator]


def _channel_parameters(channels: Sequence[ChannelSpec]) -> tuple[np.ndarray, np.ndarray]:
    first: list[float] = []
    second: list[float] = []
    for spec in channels:
        if isinstance(spec, UniformSpec):
            first.append(spec.low)
            second.append(spec.high)
        elif isinstance(spec, NormalSpec):
            first.append(spec.mean)
            second.append(spec.stddev)
        else:  # pragma: no cover - closed set of specs
            raise PreconditionError(f"Unsupported channel specification: {spec!r}")
    return np.asarray(first, dtype=np.float64), np.asarray(second, dtype=np.float64)


def _element_kind(out: np.ndarray) -> ElementKind:
    for kind in ElementKind:
        if kind.dtype == out.dtype:
            return kind
    raise PreconditionError(f"Unsupported buffer dtype: {out.dtype}")


def _check_layout(out: np.ndarray, channels: Sequence[ChannelSpec]) -> None:
    if out.ndim != 2 or out.shape[1] != len(channels):
        raise PreconditionError(
            f"Buffer of shape {out.shape} does not match {len(channels)} channel specification(s)."
        )


class NumpyGenerator:
    """Reference generator drawing from :class:`numpy.random.Philox`.

    Values are drawn sequentially from one bit generator stream, so a fill of
    ``n`` rows leaves the state exactly where ``n`` single-row fills would.
    The ziggurat normal sampler consumes a variable number of draws per value,
    which does not matter as long as nothing is drawn out of order.
    """

    name = "numpy-philox"

    def __init__(self, seed: int = 0) -> None:
        self.seed = seed
        self._generator = np.random.Generator(np.random.Philox(seed))

    def get_state(self) -> dict[str, Any]:
        return copy.deepcopy(self._generator.bit_generator.state)

    def set_state(self, state: dict[str, Any]) -> None:
        self._generator.bit_generator.state = copy.deepcopy(state)

    def fill(self, out: np.ndarray, channels: Sequence[ChannelSpec]) -> None:
        _check_layout(out, channels)
        if out.shape[0] == 0:
            return
        kind = _element_kind(out)
        first, second = _channel_parameters(channels)
        if distribution_of(channels) is DistributionKind.UNIFORM:
            unit = self._generator.random(out.shape)
            values = first + unit * (second - first)
            if not kind.is_float:
                values = np.minimum(np.floor(values), second - 1)
        else:
            values = first + second * self._generator.standard_normal(out.shape)
        out[...] = kind.saturate(values)


class ConstantGenerator:
    """Generator that ignores the requested distribution and writes ``value``."""

    name = "constant"

    def __init__(self, value: float = 0.0) -> None:
        self.value = value

    def get_state(self) -> float:
        return self.value

    def set_state(self, state: float) -> None:
        self.value = state

    def fill(self, out: np.ndarray, channels: Sequence[ChannelSpec]) -> None:
        _check_layout(out, channels)
        out[...] = np.asarray(self.value).astype(out.dtype)


def load_generator_factory(path: str) -> GeneratorFactory:
    """Resolve a ``package.module:callable`` path into a generator factory.

    The callable receives the generator seed and must return an object
    implementing :class:`RandomGenerator`.
    """

    module_name, sep, attribute = path.partition(":")
    if not sep or not module_name or not attribute:
        raise InvalidConfigurationError(
            f"Generator '{path}' must use the 'package.module:callable' form."
        )
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise InvalidConfigurationError(f"Could not import generator module '{module_name}'.") from exc
    factory = module
    for part in attribute.split("."):
        try:
            factory = getattr(factory, part)
        except AttributeError as exc:
            raise InvalidConfigurationError(
                f"Module '{module_name}' has no attribute '{attribute}'."
            ) from exc
    if not callable(factory):
        raise InvalidConfigurationError(f"Generator factory '{path}' is not callable.")
    return factory


__all__ = [
    "ConstantGenerator",
    "GeneratorFactory",
    "NumpyGenerator",
    "RandomGenerator",
    "load_generator_factory",
]
