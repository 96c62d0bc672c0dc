"""Tests for the row partitioner."""
import pytest

from median_filter.grid import mirror_index
from median_filter.partition import RowRange, WorkAssignment, partition, rows_per_band


class TestOwnedRanges:
    """Owned ranges split [0, height) exactly once."""

    @pytest.mark.parametrize("height", [1, 2, 3, 4, 5, 7, 10, 16, 31, 100])
    @pytest.mark.parametrize("worker_count", [1, 2, 3, 4, 7, 8, 13])
    def test_coverage_without_gaps_or_overlaps(self, height, worker_count):
        counts = [0] * height
        for a in partition(height, worker_count, 1):
            for y in range(a.owned.start, a.owned.end):
                counts[y] += 1
        assert counts == [1] * height

    def test_one_assignment_per_worker_in_order(self):
        assignments = partition(10, 4, 1)
        assert [a.worker_id for a in assignments] == [0, 1, 2, 3]

    def test_bands_use_ceiling_division(self):
        assignments = partition(10, 4, 1)
        assert rows_per_band(10, 4) == 3
        assert [a.owned for a in assignments] == [
            RowRange(0, 3), RowRange(3, 6), RowRange(6, 9), RowRange(9, 10),
        ]

    def test_surplus_workers_get_empty_ranges(self):
        assignments = partition(4, 7, 1)
        assert [a.empty for a in assignments] == [False] * 4 + [True] * 3
        # ceil(4/3) = 2 rows per band leaves the third worker without rows
        assert partition(4, 3, 1)[2].empty

    def test_single_worker_owns_everything(self):
        (a,) = partition(9, 1, 2)
        assert a.owned == RowRange(0, 9)
        assert a.ghost == RowRange(0, 9)

    def test_invalid_worker_count(self):
        with pytest.raises(ValueError):
            partition(10, 0, 1)

    def test_pure_function(self):
        assert partition(37, 5, 2) == partition(37, 5, 2)


class TestGhostRanges:
    """Ghost ranges pad the owned range by half the kernel, clamped to the image."""

    def test_interior_band_is_padded_both_sides(self):
        a = partition(12, 3, 2)[1]
        assert a.owned == RowRange(4, 8)
        assert a.ghost == RowRange(2, 10)
        assert a.local_owned == RowRange(2, 6)

    def test_edges_are_clamped(self):
        first, last = partition(12, 2, 2)
        assert first.ghost == RowRange(0, 8)
        assert last.ghost == RowRange(4, 12)

    @pytest.mark.parametrize("height", [1, 2, 3, 5, 8, 11])
    @pytest.mark.parametrize("worker_count", [1, 2, 3, 7])
    @pytest.mark.parametrize("kernel_size", [3, 5])
    def test_ghost_contains_owned_and_stays_in_image(self, height, worker_count, kernel_size):
        for a in partition(height, worker_count, kernel_size // 2):
            if a.empty:
                continue
            assert a.ghost.start <= a.owned.start
            assert a.ghost.end >= a.owned.end
            assert 0 <= a.ghost.start and a.ghost.end <= height

    @pytest.mark.parametrize("height", [1, 2, 3, 4, 5, 8, 11])
    @pytest.mark.parametrize("worker_count", [1, 2, 3, 7])
    @pytest.mark.parametrize("kernel_size", [3, 5])
    def test_ghost_sufficiency(self, height, worker_count, kernel_size):
        """Every row a window touches is in the ghost band after edge mirroring,
        and mirroring on the local band picks the same global row."""
        half = kernel_size // 2
        for a in partition(height, worker_count, half):
            if a.empty:
                continue
            local_height = len(a.ghost)
            for y in range(a.owned.start, a.owned.end):
                for dy in range(-half, half + 1):
                    global_row = int(mirror_index(y + dy, height))
                    assert a.ghost.start <= global_row < a.ghost.end
                    local_row = int(mirror_index(y - a.ghost.start + dy, local_height))
                    assert a.ghost.start + local_row == global_row


class TestRowRange:
    def test_len_and_empty(self):
        assert len(RowRange(3, 7)) == 4
        assert len(RowRange(5, 5)) == 0
        assert RowRange(5, 5).empty
        assert not RowRange(0, 1).empty

    def test_assignment_is_empty_when_owned_is(self):
        empty = RowRange(4, 4)
        assert WorkAssignment(3, empty, empty).empty
