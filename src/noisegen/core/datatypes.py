import math
from dataclasses import dataclass, asdict
from typing import Any, ClassVar, Dict, Optional, Tuple, Union

import numpy as np

from .exceptions import InvalidParameter

SAMPLE_DTYPE = np.uint8
SAMPLE_MIN = int(np.iinfo(SAMPLE_DTYPE).min)
SAMPLE_MAX = int(np.iinfo(SAMPLE_DTYPE).max)


def _check_number(name: str, value: Any):
    if isinstance(value, bool) or not isinstance(value, (int, float, np.integer, np.floating)):
        raise InvalidParameter(name, value, "must be a number")
    if not math.isfinite(value):
        raise InvalidParameter(name, value, "must be finite")


def _check_stddev(value: Any):
    _check_number('stddev', value)
    if value <= 0:
        raise InvalidParameter('stddev', value, "standard deviation must be strictly positive")


def _check_amplitude(value: Any):
    _check_number('amplitude', value)
    if value < 0:
        raise InvalidParameter('amplitude', value, "amplitude must be non-negative")


def _check_uniform_range(mean: Any, amplitude: Any):
    low, high = mean - amplitude, mean + amplitude
    if not (math.isfinite(low) and math.isfinite(high) and math.isfinite(high - low)):
        raise InvalidParameter('amplitude', amplitude,
                               f"noise range [mean - amplitude, mean + amplitude] overflows for mean {mean}")


def _check_probability(value: Any):
    _check_number('probability', value)
    if value < 0.0 or value > 1.0:
        raise InvalidParameter('probability', value, "probability needs to be between 0 and 1")


def _is_integer(value: Any) -> bool:
    return not isinstance(value, bool) and isinstance(value, (int, np.integer))


class _ModelFields:
    """
    Validation and helpers shared by every noise model dataclass.

    Each model carries inclusive output bounds (default: the full uint8 range)
    and an optional seed. A seed of None means the generators are seeded from
    OS entropy every time the model is applied.
    """
    name: ClassVar[str] = ""

    def __post_init__(self):
        for key in ('output_min', 'output_max'):
            value = getattr(self, key)
            if not _is_integer(value):
                raise InvalidParameter(key, value, "output bounds must be integers")
            if value < SAMPLE_MIN or value > SAMPLE_MAX:
                raise InvalidParameter(key, value, f"must lie in [{SAMPLE_MIN}, {SAMPLE_MAX}]")
        if self.output_max <= self.output_min:
            raise InvalidParameter('output_max', self.output_max,
                                   f"invalid bounds: [{self.output_min}; {self.output_max}]")
        if self.seed is not None and (not _is_integer(self.seed) or self.seed < 0):
            raise InvalidParameter('seed', self.seed, "seed must be a non-negative integer")

        if hasattr(self, 'mean'):
            _check_number('mean', self.mean)
        if hasattr(self, 'stddev'):
            _check_stddev(self.stddev)
        if hasattr(self, 'amplitude'):
            _check_amplitude(self.amplitude)
            _check_uniform_range(self.mean, self.amplitude)
        if hasattr(self, 'probability'):
            _check_probability(self.probability)

    @property
    def bounds(self) -> Tuple[int, int]:
        return (self.output_min, self.output_max)

    @property
    def is_sparse(self) -> bool:
        return self.name.startswith("sparse-")

    def to_dict(self) -> Dict[str, Any]:
        """Parameters plus the 'noise_type' tag, e.g. for logging."""
        params = {'noise_type': self.name}
        params.update(asdict(self))
        return params


# --- Dense models ---

@dataclass(frozen=True)
class AdditiveGaussian(_ModelFields):
    """v = A + N(mean, stddev)"""
    mean: float = 0.0
    stddev: float = 1.0
    output_min: int = SAMPLE_MIN
    output_max: int = SAMPLE_MAX
    seed: Optional[int] = None

    name: ClassVar[str] = "gaussian"


@dataclass(frozen=True)
class AdditiveUniform(_ModelFields):
    """v = A + U(mean - amplitude, mean + amplitude)"""
    mean: float = 0.0
    amplitude: float = 1.0
    output_min: int = SAMPLE_MIN
    output_max: int = SAMPLE_MAX
    seed: Optional[int] = None

    name: ClassVar[str] = "uniform"

    @property
    def noise_range(self) -> Tuple[float, float]:
        return (self.mean - self.amplitude, self.mean + self.amplitude)


@dataclass(frozen=True)
class MultiplicativeGaussian(_ModelFields):
    """v = A * N(mean, stddev)"""
    mean: float = 1.0
    stddev: float = 1.0
    output_min: int = SAMPLE_MIN
    output_max: int = SAMPLE_MAX
    seed: Optional[int] = None

    name: ClassVar[str] = "mult-gaussian"


@dataclass(frozen=True)
class Impulse(_ModelFields):
    """Salt and pepper: a touched pixel becomes output_min or output_max."""
    probability: float = 0.01
    output_min: int = SAMPLE_MIN
    output_max: int = SAMPLE_MAX
    seed: Optional[int] = None

    name: ClassVar[str] = "impulse"


# --- Sparse models: the dense formula, gated per pixel by `probability` ---

@dataclass(frozen=True)
class SparseAdditiveGaussian(_ModelFields):
    probability: float = 0.01
    mean: float = 0.0
    stddev: float = 1.0
    output_min: int = SAMPLE_MIN
    output_max: int = SAMPLE_MAX
    seed: Optional[int] = None

    name: ClassVar[str] = "sparse-gaussian"


@dataclass(frozen=True)
class SparseAdditiveUniform(_ModelFields):
    probability: float = 0.01
    mean: float = 0.0
    amplitude: float = 1.0
    output_min: int = SAMPLE_MIN
    output_max: int = SAMPLE_MAX
    seed: Optional[int] = None

    name: ClassVar[str] = "sparse-uniform"

    @property
    def noise_range(self) -> Tuple[float, float]:
        return (self.mean - self.amplitude, self.mean + self.amplitude)


@dataclass(frozen=True)
class SparseMultiplicativeGaussian(_ModelFields):
    probability: float = 0.01
    mean: float = 1.0
    stddev: float = 1.0
    output_min: int = SAMPLE_MIN
    output_max: int = SAMPLE_MAX
    seed: Optional[int] = None

    name: ClassVar[str] = "sparse-mult-gaussian"


NoiseModel = Union[
    AdditiveGaussian,
    AdditiveUniform,
    MultiplicativeGaussian,
    Impulse,
    SparseAdditiveGaussian,
    SparseAdditiveUniform,
    SparseMultiplicativeGaussian,
]

NOISE_MODEL_TYPES = (
    AdditiveGaussian,
    AdditiveUniform,
    MultiplicativeGaussian,
    Impulse,
    SparseAdditiveGaussian,
    SparseAdditiveUniform,
    SparseMultiplicativeGaussian,
)
