import numpy as np
from typing import Callable

from ..core.datatypes import SAMPLE_DTYPE
from .random_source import RandomSource

# Touched float64 samples -> clamped uint8 samples
DenseFormula = Callable[[np.ndarray], np.ndarray]


def passthrough(samples: np.ndarray) -> np.ndarray:
    """Returns the samples unchanged, narrowed back to the sample type."""
    return samples.astype(SAMPLE_DTYPE)


def gate(samples: np.ndarray, probability: float, rng: RandomSource) -> np.ndarray:
    """
    Draws one gating value per sample and returns the mask of touched samples.

    A sample is touched when its draw g ~ U[0, 1) satisfies g <= probability.
    The comparison is inclusive for every gated model.
    """
    return rng.uniform(0.0, 1.0, samples.shape) <= probability


def apply_gated(samples: np.ndarray, probability: float, rng: RandomSource,
                formula: DenseFormula) -> np.ndarray:
    """
    Applies `formula` to the gated subset of `samples`, passes the rest through.

    The gating draws are made for the whole block first, so they never share a
    draw with the magnitude of the perturbation. `formula` receives only the
    touched samples and must return them clamped, as uint8.

    Args:
        samples (np.ndarray): Float64 samples.
        probability (float): Per-sample probability of being touched.
        rng (RandomSource): Source for both the gating and the formula draws.
        formula (DenseFormula): Dense noise formula followed by the clamp.

    Returns:
        np.ndarray: uint8 array with the same shape as `samples`.
    """
    touched = gate(samples, probability, rng)
    output = passthrough(samples)
    if touched.any():
        output[touched] = formula(samples[touched])
    return output
