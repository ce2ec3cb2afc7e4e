import os
import time
import logging
import numpy as np
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Tuple

from .core import SAMPLE_DTYPE, NoiseModel, InvalidGrid, InvalidParameter
from .noise import RandomSource, apply_noise_array

logger = logging.getLogger(__name__)


def validate_grid(grid: np.ndarray):
    """Raises InvalidGrid unless `grid` is a 3D uint8 array (z, y, x)."""
    if not isinstance(grid, np.ndarray):
        raise InvalidGrid(f"Expected a numpy array, got {type(grid).__name__}")
    if grid.ndim != 3:
        raise InvalidGrid(f"Expected a 3D grid (depth, height, width), got shape {grid.shape}")
    if grid.dtype != SAMPLE_DTYPE:
        raise InvalidGrid(f"Expected {np.dtype(SAMPLE_DTYPE).name} samples, got {grid.dtype}")


# Rows per block when a single slice has to be split
BLOCK_ROWS = 32


def split_blocks(shape) -> List[Tuple[slice, slice]]:
    """
    Splits a (depth, height, width) shape into disjoint (z, y) blocks.

    The split runs along the outermost axis with more than one element: one
    block per slice when depth > 1, otherwise blocks of BLOCK_ROWS rows of
    the single slice. The layout depends on the shape only.
    """
    depth, height = shape[0], shape[1]
    if depth > 1:
        return [(slice(z, z + 1), slice(0, height)) for z in range(depth)]
    return [(slice(0, depth), slice(y, min(y + BLOCK_ROWS, height)))
            for y in range(0, height, BLOCK_ROWS)]


class GridApplicator:
    """
    Applies a noise model to every sample of a grid, one block per task.

    The grid is split along its outermost axis with more than one element
    (see `split_blocks`). Block i is processed with its own RandomSource, the
    i-th child spawned from the model seed, so no generator is ever shared
    between threads and a seeded model gives the same output whatever the
    number of workers.
    """

    def __init__(self, workers: Optional[int] = None):
        """
        Args:
            workers (Optional[int]): Number of worker threads. Defaults to the
                number of CPUs.
        """
        if workers is not None and (isinstance(workers, bool) or not isinstance(workers, int) or workers < 1):
            raise InvalidParameter('workers', workers, "number of workers must be a positive integer")
        self.workers = workers or os.cpu_count() or 1

    def apply(self, model: NoiseModel, grid: np.ndarray) -> np.ndarray:
        """
        Applies `model` to `grid` and returns a new grid of identical shape.

        The input is never modified. Every coordinate of the output is written
        exactly once before this returns.

        Args:
            model (NoiseModel): The noise model to apply.
            grid (np.ndarray): uint8 array of shape (depth, height, width).

        Returns:
            np.ndarray: Fresh uint8 array with the noisy samples.
        """
        validate_grid(grid)
        output = np.empty_like(grid)
        if grid.size == 0:
            return output

        blocks = split_blocks(grid.shape)
        sources = RandomSource(model.seed).spawn(len(blocks))
        n_workers = min(self.workers, len(blocks))
        logger.debug(f"Applying {model.name} noise to grid {grid.shape} "
                     f"in {len(blocks)} block(s) with {n_workers} worker(s)")
        start_time = time.time()

        def process_block(i: int):
            zs, ys = blocks[i]
            output[zs, ys] = apply_noise_array(model, grid[zs, ys], sources[i])

        if n_workers == 1:
            for i in range(len(blocks)):
                process_block(i)
        else:
            with ThreadPoolExecutor(max_workers=n_workers) as executor:
                futures = [executor.submit(process_block, i) for i in range(len(blocks))]
                for future in futures:
                    future.result()  # Re-raises worker exceptions

        logger.debug(f"Noise applied in {time.time() - start_time:.3f} seconds")
        return output


def apply_noise_to_grid(model: NoiseModel, grid: np.ndarray, workers: Optional[int] = None) -> np.ndarray:
    """Convenience wrapper around GridApplicator(workers).apply(model, grid)."""
    return GridApplicator(workers).apply(model, grid)
