import numpy as np
from typing import List, Optional, Tuple, Union

Size = Optional[Union[int, Tuple[int, ...]]]


class RandomSource:
    """
    Uniform and normal draws backed by a numpy Generator.

    Each instance owns its generator, so it must not be shared between threads
    without a lock. Use `spawn` to hand independent children to workers.
    """

    def __init__(self, seed: Optional[int] = None,
                 seed_sequence: Optional[np.random.SeedSequence] = None):
        """
        Args:
            seed (Optional[int]): Master seed. None draws fresh OS entropy.
            seed_sequence (Optional[np.random.SeedSequence]): Use this sequence
                directly (takes precedence over `seed`). Used by `spawn`.
        """
        if seed_sequence is None:
            seed_sequence = np.random.SeedSequence(seed)
        self._seed_sequence = seed_sequence
        self._generator = np.random.default_rng(seed_sequence)

    @property
    def seed(self):
        """Entropy the source was created from (the master seed, if any)."""
        return self._seed_sequence.entropy

    def uniform(self, lo: float = 0.0, hi: float = 1.0, size: Size = None):
        """Draw from U[lo, hi). lo == hi returns lo."""
        return self._generator.uniform(lo, hi, size)

    def normal(self, mean: float = 0.0, stddev: float = 1.0, size: Size = None):
        """Draw from N(mean, stddev)."""
        return self._generator.normal(mean, stddev, size)

    def spawn(self, n: int) -> List["RandomSource"]:
        """
        Create `n` statistically independent child sources.

        Calling spawn twice on the same source yields different children; build
        a fresh source from the same seed to get the same children again.
        """
        return [RandomSource(seed_sequence=child) for child in self._seed_sequence.spawn(n)]

    def __repr__(self):
        return f"RandomSource(seed={self.seed!r})"
