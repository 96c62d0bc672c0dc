"""Shared pytest fixtures for the median filter tests."""
import threading

import numpy as np
import pytest

from median_filter.distributed import apply_median_filter_mpi
from median_filter.grid import PixelGrid
from median_filter.transport import InMemoryHub


def make_random_grid(width, height, seed=0):
    rng = np.random.default_rng(seed)
    return PixelGrid(rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8))


def run_ranks(size, image, kernel_size, timeout=10.0):
    """Run every rank of one distributed call in its own thread over an in-memory hub."""
    hub = InMemoryHub(size, timeout=timeout)
    results = [None] * size
    errors = [None] * size

    def target(rank):
        try:
            results[rank] = apply_median_filter_mpi(
                hub.context(rank), image if rank == 0 else None, kernel_size
            )
        except Exception as e:  # re-raised in the test thread below
            errors[rank] = e

    threads = [threading.Thread(target=target, args=(rank,)) for rank in range(size)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout * 2)
        assert not t.is_alive(), "rank thread did not finish"
    for e in errors:
        if e is not None:
            raise e
    return results, hub


@pytest.fixture
def random_grid():
    return make_random_grid(13, 11)


@pytest.fixture
def constant_grid():
    return PixelGrid(np.full((9, 7, 3), (12, 200, 77), dtype=np.uint8))


@pytest.fixture
def scenario_grid():
    """4x4 black image with a single red pixel at (2, 2)."""
    grid = PixelGrid.new_empty(4, 4)
    grid.put_pixel(2, 2, (255, 0, 0))
    return grid
