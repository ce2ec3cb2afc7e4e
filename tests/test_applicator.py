import threading
from dataclasses import dataclass
from typing import Optional

import numpy as np
import pytest

import noisegen.applicator as applicator_module
from noisegen.applicator import BLOCK_ROWS, GridApplicator, apply_noise_to_grid, split_blocks, validate_grid
from noisegen.core import (AdditiveGaussian, AdditiveUniform, Impulse, SparseAdditiveGaussian,
                           InvalidGrid, InvalidParameter, UnknownModel)


def test_small_grid_end_to_end():
    grid = np.array([10, 250, 0, 255], dtype=np.uint8).reshape(1, 2, 2)
    model = AdditiveGaussian(mean=0.0, stddev=0.01)
    applicator = GridApplicator()
    for _ in range(50):
        out = applicator.apply(model, grid)
        assert out.shape == grid.shape
        assert out.dtype == np.uint8
        assert np.all(np.abs(out.astype(int) - grid.astype(int)) <= 5)


def test_every_cell_is_written():
    grid = np.zeros((5, 7, 9), dtype=np.uint8)
    out = GridApplicator(workers=3).apply(Impulse(probability=1.0, output_min=10, output_max=20), grid)
    assert set(np.unique(out).tolist()) == {10, 20}


def test_visits_every_coordinate_once(monkeypatch, ramp_grid):
    visited = []
    real_apply = applicator_module.apply_noise_array

    def counting_apply(model, samples, rng):
        visited.append(samples.size)
        return real_apply(model, samples, rng)

    monkeypatch.setattr(applicator_module, "apply_noise_array", counting_apply)
    out = GridApplicator(workers=2).apply(AdditiveUniform(amplitude=3.0), ramp_grid)
    depth, height, width = ramp_grid.shape
    assert len(visited) == depth
    assert sum(visited) == depth * height * width
    assert out.shape == ramp_grid.shape


def test_input_is_not_modified(ramp_grid):
    before = ramp_grid.copy()
    out = GridApplicator().apply(AdditiveGaussian(stddev=40.0), ramp_grid)
    assert np.array_equal(ramp_grid, before)
    assert out is not ramp_grid


def test_seeded_model_is_reproducible(flat_grid):
    model = SparseAdditiveGaussian(probability=0.5, mean=0.0, stddev=20.0, seed=1234)
    a = GridApplicator().apply(model, flat_grid)
    b = GridApplicator().apply(model, flat_grid)
    assert np.array_equal(a, b)


@pytest.mark.parametrize("workers", [2, 3, 8])
def test_output_independent_of_worker_count(flat_grid, workers):
    model = AdditiveGaussian(stddev=15.0, seed=77)
    single = GridApplicator(workers=1).apply(model, flat_grid)
    multi = GridApplicator(workers=workers).apply(model, flat_grid)
    assert np.array_equal(single, multi)


def test_different_seeds_differ(flat_grid):
    a = GridApplicator().apply(AdditiveGaussian(stddev=15.0, seed=1), flat_grid)
    b = GridApplicator().apply(AdditiveGaussian(stddev=15.0, seed=2), flat_grid)
    assert not np.array_equal(a, b)


def test_unseeded_runs_differ(flat_grid):
    model = AdditiveGaussian(stddev=15.0)
    assert not np.array_equal(GridApplicator().apply(model, flat_grid), GridApplicator().apply(model, flat_grid))


def test_slices_use_independent_generators():
    grid = np.full((2, 32, 32), 100, dtype=np.uint8)
    out = GridApplicator().apply(AdditiveGaussian(stddev=15.0, seed=5), grid)
    assert not np.array_equal(out[0], out[1])


def test_sparse_zero_probability_grid_unchanged(ramp_grid):
    out = GridApplicator(workers=4).apply(SparseAdditiveGaussian(probability=0.0, stddev=50.0), ramp_grid)
    assert np.array_equal(out, ramp_grid)


def test_empty_grid():
    grid = np.zeros((0, 4, 4), dtype=np.uint8)
    out = GridApplicator().apply(AdditiveGaussian(), grid)
    assert out.shape == (0, 4, 4)


@pytest.mark.parametrize("grid", [
    np.zeros((4, 4), dtype=np.uint8),
    np.zeros((1, 4, 4, 3), dtype=np.uint8),
    np.zeros((1, 4, 4), dtype=np.float32),
    np.zeros((1, 4, 4), dtype=np.uint16),
    [[[0, 1], [2, 3]]],
])
def test_invalid_grids_rejected(grid):
    with pytest.raises(InvalidGrid):
        GridApplicator().apply(AdditiveGaussian(), grid)


def test_validate_grid_accepts_uint8_volume(ramp_grid):
    validate_grid(ramp_grid)


@pytest.mark.parametrize("workers", [0, -2, 1.5])
def test_invalid_worker_count_rejected(workers):
    with pytest.raises(InvalidParameter):
        GridApplicator(workers=workers)


def test_default_worker_count_positive():
    assert GridApplicator().workers >= 1


def test_worker_errors_propagate():
    @dataclass(frozen=True)
    class BogusModel:
        seed: Optional[int] = None
        name = "bogus"

    grid = np.zeros((3, 4, 4), dtype=np.uint8)
    with pytest.raises(UnknownModel):
        GridApplicator(workers=2).apply(BogusModel(), grid)


def test_apply_noise_to_grid(ramp_grid):
    out = apply_noise_to_grid(AdditiveUniform(mean=0.0, amplitude=0.0), ramp_grid, workers=2)
    assert np.array_equal(out, ramp_grid)


def test_blocks_follow_outermost_axis():
    blocks = split_blocks((3, 100, 20))
    assert len(blocks) == 3
    assert all(ys == slice(0, 100) for _, ys in blocks)


def test_single_slice_split_into_row_blocks():
    blocks = split_blocks((1, 2 * BLOCK_ROWS + 5, 20))
    assert len(blocks) == 3
    assert [ys.stop - ys.start for _, ys in blocks] == [BLOCK_ROWS, BLOCK_ROWS, 5]
    assert all(zs == slice(0, 1) for zs, _ in blocks)


def test_single_slice_runs_on_several_threads(monkeypatch):
    grid = np.full((1, 8 * BLOCK_ROWS, 64), 100, dtype=np.uint8)
    real_apply = applicator_module.apply_noise_array
    barrier = threading.Barrier(2, timeout=5)
    lock = threading.Lock()
    calls = []
    threads = set()

    def concurrent_apply(model, samples, rng):
        with lock:
            calls.append(samples.size)
            threads.add(threading.get_ident())
            first_two = len(calls) <= 2
        if first_two:
            # Only passes once two blocks are being processed at the same time
            barrier.wait()
        return real_apply(model, samples, rng)

    monkeypatch.setattr(applicator_module, "apply_noise_array", concurrent_apply)
    out = GridApplicator(workers=4).apply(AdditiveGaussian(stddev=10.0, seed=3), grid)
    assert len(threads) > 1
    assert len(calls) == 8
    assert sum(calls) == grid.size
    assert out.shape == grid.shape


@pytest.mark.parametrize("workers", [2, 4, 16])
def test_single_slice_output_independent_of_worker_count(workers):
    grid = np.full((1, 5 * BLOCK_ROWS + 3, 40), 100, dtype=np.uint8)
    model = SparseAdditiveGaussian(probability=0.5, stddev=20.0, seed=21)
    single = GridApplicator(workers=1).apply(model, grid)
    multi = GridApplicator(workers=workers).apply(model, grid)
    assert np.array_equal(single, multi)


def test_row_blocks_use_independent_generators():
    grid = np.full((1, 2 * BLOCK_ROWS, 32), 100, dtype=np.uint8)
    out = GridApplicator().apply(AdditiveGaussian(stddev=15.0, seed=5), grid)
    assert not np.array_equal(out[0, :BLOCK_ROWS], out[0, BLOCK_ROWS:])
