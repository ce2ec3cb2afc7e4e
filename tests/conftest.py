import os
import sys

import numpy as np
import pytest

# Allow running the tests without installing the package
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from noisegen.noise import RandomSource


@pytest.fixture
def rng():
    return RandomSource(seed=12345)


@pytest.fixture
def all_values():
    """Every representable sample value, as a float64 array."""
    return np.arange(256, dtype=np.float64)


@pytest.fixture
def flat_grid():
    """A (4, 64, 64) uint8 grid filled with 100."""
    return np.full((4, 64, 64), 100, dtype=np.uint8)


@pytest.fixture
def ramp_grid():
    """A (3, 16, 16) uint8 grid holding every value 0..255 in each slice."""
    ramp = np.arange(256, dtype=np.uint8).reshape(16, 16)
    return np.stack([ramp, ramp[::-1], ramp.T], axis=0)
