"""Tests for the cumulative cost table."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import itertools
import torch
import pytest
from image_alg.cost import CostTable

from conftest import WORKED_TABLE


def all_paths(H, W):
    """Every top-to-bottom path with column steps of at most one."""
    for start in range(W):
        for steps in itertools.product((-1, 0, 1), repeat=H - 1):
            path = [start]
            for step in steps:
                path.append(path[-1] + step)
            if all(0 <= c < W for c in path):
                yield path


class TestCostTable:
    def test_worked_scenario(self, worked_energy):
        """Bottom-up recurrence on the hand-computed 4x3 example."""
        table = CostTable.from_energy(worked_energy)
        assert table.values.tolist() == WORKED_TABLE
        assert table.width == 4
        assert table.height == 3

    def test_bottom_row_is_energy(self):
        torch.manual_seed(42)
        energy = torch.randint(0, 100, (6, 7))
        table = CostTable.from_energy(energy)
        assert torch.equal(table.values[-1], energy[-1])

    def test_right_border_uses_own_energy(self):
        """The last column adds its own energy, not the first column's."""
        energy = torch.tensor([[0, 0, 0, 7],
                               [0, 0, 0, 0]])
        table = CostTable.from_energy(energy)
        assert table.values[0].tolist() == [0, 0, 0, 7]

    def test_border_columns_see_two_neighbours(self):
        """No wraparound: column 0 never reaches column W-1 below it."""
        energy = torch.tensor([[0, 5, 5, 0],
                               [9, 9, 9, 0]])
        table = CostTable.from_energy(energy)
        assert table.values[0].tolist() == [9, 14, 5, 0]

    def test_row_zero_minimum_is_optimal(self):
        """The best row-0 cost equals the cheapest of all valid paths."""
        torch.manual_seed(7)
        H, W = 5, 4
        energy = torch.randint(0, 50, (H, W))
        table = CostTable.from_energy(energy)

        brute_force = min(table.path_cost(path) for path in all_paths(H, W))
        assert table.min_cost() == brute_force

    def test_every_entry_is_optimal_from_its_cell(self):
        torch.manual_seed(3)
        H, W = 4, 5
        energy = torch.randint(0, 20, (H, W))
        table = CostTable.from_energy(energy)

        for path in all_paths(H, W):
            assert table.get(0, path[0]) <= table.path_cost(path)

    def test_two_column_table(self):
        energy = torch.tensor([[1, 2],
                               [3, 4],
                               [5, 6]])
        table = CostTable.from_energy(energy)
        assert table.values.tolist() == [[9, 10], [8, 9], [5, 6]]

    def test_single_row_table(self):
        energy = torch.tensor([[4, 1, 3]])
        table = CostTable.from_energy(energy)
        assert table.values.tolist() == [[4, 1, 3]]
        assert table.start_column() == 1

    def test_tall_image_does_not_overflow_16_bits(self):
        """Accumulation is int64; sums far beyond 65535 stay exact."""
        H, W = 100, 6
        energy = torch.full((H, W), 4000, dtype=torch.int64)
        table = CostTable.from_energy(energy)
        assert table.values.dtype == torch.int64
        assert (table.values[0] == 4000 * H).all()


class TestCostTableAccess:
    def test_get_reads_values(self, worked_energy):
        table = CostTable.from_energy(worked_energy)
        assert table.get(1, 2) == 10
        assert table.get(0, 3) == 3

    def test_get_bounds_checked(self, worked_energy):
        table = CostTable.from_energy(worked_energy)
        for row, col in [(-1, 0), (3, 0), (0, -1), (0, 4)]:
            with pytest.raises(IndexError):
                table.get(row, col)

    def test_start_column_leftmost_on_tie(self, worked_energy):
        """Row 0 is [3, 11, 11, 3]; the first 3 wins."""
        table = CostTable.from_energy(worked_energy)
        assert table.start_column() == 0

    def test_path_cost(self, worked_energy):
        table = CostTable.from_energy(worked_energy)
        assert table.path_cost([0, 0, 0]) == 3
        assert table.path_cost([3, 2, 2]) == 11
        with pytest.raises(ValueError):
            table.path_cost([0, 0])


class TestCostTableValidation:
    def test_rejects_non_2d(self):
        with pytest.raises(ValueError):
            CostTable.from_energy(torch.zeros(3, 4, 5, dtype=torch.int64))

    def test_rejects_single_column(self):
        with pytest.raises(ValueError):
            CostTable.from_energy(torch.zeros(4, 1, dtype=torch.int64))

    def test_rejects_negative_energy(self):
        energy = torch.zeros(3, 3, dtype=torch.int64)
        energy[1, 1] = -1
        with pytest.raises(ValueError):
            CostTable.from_energy(energy)

    def test_rejects_float_energy(self):
        with pytest.raises(ValueError):
            CostTable.from_energy(torch.rand(3, 3))
