import numpy as np
from typing import Union

from ..core.datatypes import SAMPLE_DTYPE

ArrayOrScalar = Union[np.ndarray, float]


def clamp(value: ArrayOrScalar, lo: int, hi: int) -> ArrayOrScalar:
    """
    Saturates `value` to [lo, hi] and narrows it to the sample type.

    Values below `lo` become `lo`, values above `hi` become `hi`. The
    remaining fractional part is dropped (truncation toward zero), which is
    well defined because the clip already put the value inside the type.
    NaN maps to `lo`, +inf to `hi` and -inf to `lo`.

    Args:
        value: Float sample(s) produced by a noise formula.
        lo (int): Inclusive lower output bound.
        hi (int): Inclusive upper output bound.

    Returns:
        uint8 array of the same shape, or a Python int for scalar input.
    """
    value = np.nan_to_num(value, nan=lo, posinf=hi, neginf=lo)
    clipped = np.clip(value, lo, hi)
    if np.ndim(clipped) == 0:
        return int(clipped)
    return clipped.astype(SAMPLE_DTYPE)
