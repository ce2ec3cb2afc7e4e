from .datatypes import (
    SAMPLE_DTYPE, SAMPLE_MIN, SAMPLE_MAX,
    NoiseModel, NOISE_MODEL_TYPES,
    AdditiveGaussian, AdditiveUniform, MultiplicativeGaussian, Impulse,
    SparseAdditiveGaussian, SparseAdditiveUniform, SparseMultiplicativeGaussian,
)
from .exceptions import (
    NoiseGenError, InvalidParameter, UnknownModel, InvalidGrid,
    ImageIOError, ImageReadError, ImageWriteError,
)

__all__ = [
    "SAMPLE_DTYPE",
    "SAMPLE_MIN",
    "SAMPLE_MAX",
    "NoiseModel",
    "NOISE_MODEL_TYPES",
    "AdditiveGaussian",
    "AdditiveUniform",
    "MultiplicativeGaussian",
    "Impulse",
    "SparseAdditiveGaussian",
    "SparseAdditiveUniform",
    "SparseMultiplicativeGaussian",
    "NoiseGenError",
    "InvalidParameter",
    "UnknownModel",
    "InvalidGrid",
    "ImageIOError",
    "ImageReadError",
    "ImageWriteError",
]
