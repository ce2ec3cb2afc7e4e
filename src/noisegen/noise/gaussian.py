import numpy as np

from ..core.datatypes import (AdditiveGaussian, MultiplicativeGaussian,
                              SparseAdditiveGaussian, SparseMultiplicativeGaussian)
from .base_noise import apply_gated
from .clamp import clamp
from .random_source import RandomSource


def additive_gaussian(samples: np.ndarray, mean: float, stddev: float, rng: RandomSource) -> np.ndarray:
    """v = A + N(mean, stddev), unclamped."""
    with np.errstate(over="ignore", invalid="ignore"):
        return samples + rng.normal(mean, stddev, samples.shape)


def multiplicative_gaussian(samples: np.ndarray, mean: float, stddev: float, rng: RandomSource) -> np.ndarray:
    """v = A * N(mean, stddev), unclamped. Overflow may yield inf or NaN (0 * inf), which clamp saturates."""
    with np.errstate(over="ignore", invalid="ignore"):
        return samples * rng.normal(mean, stddev, samples.shape)


def apply_additive_gaussian(model: AdditiveGaussian, samples: np.ndarray, rng: RandomSource) -> np.ndarray:
    noisy = additive_gaussian(samples, model.mean, model.stddev, rng)
    return clamp(noisy, model.output_min, model.output_max)


def apply_multiplicative_gaussian(model: MultiplicativeGaussian, samples: np.ndarray,
                                  rng: RandomSource) -> np.ndarray:
    noisy = multiplicative_gaussian(samples, model.mean, model.stddev, rng)
    return clamp(noisy, model.output_min, model.output_max)


def apply_sparse_additive_gaussian(model: SparseAdditiveGaussian, samples: np.ndarray,
                                   rng: RandomSource) -> np.ndarray:
    def formula(touched):
        noisy = additive_gaussian(touched, model.mean, model.stddev, rng)
        return clamp(noisy, model.output_min, model.output_max)

    return apply_gated(samples, model.probability, rng, formula)


def apply_sparse_multiplicative_gaussian(model: SparseMultiplicativeGaussian, samples: np.ndarray,
                                         rng: RandomSource) -> np.ndarray:
    def formula(touched):
        noisy = multiplicative_gaussian(touched, model.mean, model.stddev, rng)
        return clamp(noisy, model.output_min, model.output_max)

    return apply_gated(samples, model.probability, rng, formula)
