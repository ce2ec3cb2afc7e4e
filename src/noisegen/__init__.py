__version__ = "0.1.0" # Basic versioning

# Expose the models, the applicator and the image I/O
from .core import (
    NoiseModel,
    AdditiveGaussian, AdditiveUniform, MultiplicativeGaussian, Impulse,
    SparseAdditiveGaussian, SparseAdditiveUniform, SparseMultiplicativeGaussian,
    NoiseGenError, InvalidParameter, UnknownModel, InvalidGrid,
    ImageIOError, ImageReadError, ImageWriteError,
)
from .noise import RandomSource, clamp, create_noise, try_create_noise, apply_noise, apply_noise_array
from .applicator import GridApplicator, apply_noise_to_grid
from .config_loader import load_config
from .utils import read_grid, write_grid

__all__ = [
    "NoiseModel",
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
    "RandomSource",
    "clamp",
    "create_noise",
    "try_create_noise",
    "apply_noise",
    "apply_noise_array",
    "GridApplicator",
    "apply_noise_to_grid",
    "load_config",
    "read_grid",
    "write_grid",
    "__version__",
]
