import numpy as np

from ..core.datatypes import SAMPLE_DTYPE, Impulse
from .base_noise import apply_gated
from .random_source import RandomSource


def apply_impulse(model: Impulse, samples: np.ndarray, rng: RandomSource) -> np.ndarray:
    """
    Applies salt and pepper (impulse) noise.

    A touched sample is replaced by `output_min` (pepper) when a second draw
    falls below 0.5, by `output_max` (salt) otherwise. Untouched samples are
    returned as they are, even when they lie outside the output bounds.

    Args:
        model (Impulse): Probability and output bounds.
        samples (np.ndarray): Float64 samples.
        rng (RandomSource): Generator for the gating and salt/pepper draws.

    Returns:
        np.ndarray: uint8 samples.
    """
    def salt_or_pepper(touched):
        pick = rng.uniform(0.0, 1.0, touched.shape)
        return np.where(pick < 0.5, model.output_min, model.output_max).astype(SAMPLE_DTYPE)

    return apply_gated(samples, model.probability, rng, salt_or_pepper)
