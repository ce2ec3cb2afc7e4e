import numpy as np
from dataclasses import fields
from typing import Any, Callable, Dict, NamedTuple, Optional

from ..core.datatypes import (
    NoiseModel, SAMPLE_DTYPE,
    AdditiveGaussian, AdditiveUniform, MultiplicativeGaussian, Impulse,
    SparseAdditiveGaussian, SparseAdditiveUniform, SparseMultiplicativeGaussian,
)
from ..core.exceptions import InvalidParameter, UnknownModel
from .random_source import RandomSource
from .clamp import clamp
from .gaussian import (apply_additive_gaussian, apply_multiplicative_gaussian,
                       apply_sparse_additive_gaussian, apply_sparse_multiplicative_gaussian)
from .uniform import apply_additive_uniform, apply_sparse_additive_uniform
from .impulse import apply_impulse

Kernel = Callable[[Any, np.ndarray, RandomSource], np.ndarray]

# Noise Factory: CLI name -> model type
NOISE_CLASS_MAP = {
    "gaussian": AdditiveGaussian,
    "sparse-gaussian": SparseAdditiveGaussian,
    "uniform": AdditiveUniform,
    "sparse-uniform": SparseAdditiveUniform,
    "impulse": Impulse,
    "mult-gaussian": MultiplicativeGaussian,
    "sparse-mult-gaussian": SparseMultiplicativeGaussian,
}

# Dispatch table: model type -> vectorized kernel
NOISE_KERNELS: Dict[type, Kernel] = {
    AdditiveGaussian: apply_additive_gaussian,
    AdditiveUniform: apply_additive_uniform,
    MultiplicativeGaussian: apply_multiplicative_gaussian,
    Impulse: apply_impulse,
    SparseAdditiveGaussian: apply_sparse_additive_gaussian,
    SparseAdditiveUniform: apply_sparse_additive_uniform,
    SparseMultiplicativeGaussian: apply_sparse_multiplicative_gaussian,
}


class NoiseResult(NamedTuple):
    """Outcome of `try_create_noise`: exactly one of the two is set."""
    model: Optional[NoiseModel]
    error: Optional[Exception]

    @property
    def ok(self) -> bool:
        return self.error is None


def create_noise(noise_config: Dict[str, Any]) -> NoiseModel:
    """
    Factory function to create noise models.

    Reads the model name from 'noise_type' (or 'type'). Only the keys the
    selected model understands are used; other keys and None values are
    ignored, so the model defaults apply.

    Raises:
        UnknownModel: The name matches no model.
        InvalidParameter: A parameter is outside its domain.
    """
    noise_type = str(noise_config.get('noise_type', noise_config.get('type', '')) or '').strip().lower()
    model_class = NOISE_CLASS_MAP.get(noise_type)
    if model_class is None:
        raise UnknownModel(noise_type, NOISE_CLASS_MAP.keys())

    accepted = {f.name for f in fields(model_class)}
    parameters = {key: value for key, value in noise_config.items()
                  if key in accepted and value is not None}
    return model_class(**parameters)


def try_create_noise(noise_config: Dict[str, Any]) -> NoiseResult:
    """Like `create_noise`, but returns configuration failures as a value."""
    try:
        return NoiseResult(create_noise(noise_config), None)
    except (UnknownModel, InvalidParameter) as e:
        return NoiseResult(None, e)


def apply_noise_array(model: NoiseModel, samples: np.ndarray, rng: RandomSource) -> np.ndarray:
    """
    Applies `model` independently to every sample of `samples`.

    Args:
        model (NoiseModel): One of the seven noise model values.
        samples (np.ndarray): Samples of any shape (any numeric dtype).
        rng (RandomSource): Generator owned by the caller.

    Returns:
        np.ndarray: uint8 array of the same shape.
    """
    kernel = NOISE_KERNELS.get(type(model))
    if kernel is None:
        raise UnknownModel(type(model).__name__, NOISE_CLASS_MAP.keys())
    samples = np.asarray(samples, dtype=np.float64)
    noisy = kernel(model, samples.reshape(-1), rng)
    return noisy.reshape(samples.shape)


def apply_noise(model: NoiseModel, sample: int, rng: RandomSource) -> int:
    """Applies `model` to a single sample and returns the new sample value."""
    return int(apply_noise_array(model, np.array([sample]), rng)[0])


__all__ = [
    "NOISE_CLASS_MAP",
    "NOISE_KERNELS",
    "NoiseResult",
    "RandomSource",
    "SAMPLE_DTYPE",
    "apply_noise",
    "apply_noise_array",
    "clamp",
    "create_noise",
    "try_create_noise",
]
