import numpy as np

from ..core.datatypes import AdditiveUniform, SparseAdditiveUniform
from .base_noise import apply_gated
from .clamp import clamp
from .random_source import RandomSource


def additive_uniform(samples: np.ndarray, mean: float, amplitude: float, rng: RandomSource) -> np.ndarray:
    """
    v = A + U(mean - amplitude, mean + amplitude), unclamped.

    A zero amplitude degenerates to v = A + mean.
    """
    with np.errstate(over="ignore"):
        return samples + rng.uniform(mean - amplitude, mean + amplitude, samples.shape)


def apply_additive_uniform(model: AdditiveUniform, samples: np.ndarray, rng: RandomSource) -> np.ndarray:
    noisy = additive_uniform(samples, model.mean, model.amplitude, rng)
    return clamp(noisy, model.output_min, model.output_max)


def apply_sparse_additive_uniform(model: SparseAdditiveUniform, samples: np.ndarray,
                                  rng: RandomSource) -> np.ndarray:
    def formula(touched):
        noisy = additive_uniform(touched, model.mean, model.amplitude, rng)
        return clamp(noisy, model.output_min, model.output_max)

    return apply_gated(samples, model.probability, rng, formula)
