"""
Cumulative cost table for vertical seams.

table[r, c] is the cheapest total energy of a path that starts at (r, c) and
walks down to the last row, stepping to column c-1, c or c+1 each row. The
outermost columns only see their two in-image neighbours (no wraparound).

The table is filled bottom-up, one row at a time: row r only reads row r+1,
so each row is a single vectorized min over shifted copies of the row below.
"""

import torch


class CostTable:
    """
    Bottom-up dynamic programming table over an energy map.

    Values are int64. Per-pixel energies stay below 2^13, so even very tall
    images cannot overflow and no saturation is applied.
    """

    def __init__(self, values: torch.Tensor, energy: torch.Tensor):
        """
        Args:
            values: Cumulative costs (H, W), int64
            energy: Energy map the table was built from (H, W)
        """
        self.values = values
        self.energy = energy
        self.height, self.width = values.shape

    @classmethod
    def from_energy(cls, energy: torch.Tensor):
        """
        Build the table from an energy map.

        table[H-1, c] = E[H-1, c]
        table[r, c]   = E[r, c] + min(table[r+1, c-1], table[r+1, c], table[r+1, c+1])
        table[r, 0]   = E[r, 0] + min(table[r+1, 0], table[r+1, 1])
        table[r, W-1] = E[r, W-1] + min(table[r+1, W-1], table[r+1, W-2])

        Args:
            energy: Non-negative energy map (H, W), H >= 1, W >= 2

        Returns:
            CostTable
        """
        if energy.dim() != 2:
            raise ValueError(f"Energy must be 2-D (H, W), got shape {tuple(energy.shape)}")
        H, W = energy.shape
        if H < 1 or W < 2:
            raise ValueError(f"Cost table needs at least 2 columns and 1 row, got {W}x{H}")
        if energy.is_floating_point():
            raise ValueError(f"Energy must hold integers, got {energy.dtype}")
        if (energy < 0).any():
            raise ValueError("Energy must be non-negative")

        energy = energy.to(torch.int64)
        table = torch.empty_like(energy)
        table[H - 1] = energy[H - 1]

        for r in range(H - 2, -1, -1):
            below = table[r + 1]
            best = torch.empty_like(below)
            if W > 2:
                best[1:-1] = torch.minimum(torch.minimum(below[:-2], below[1:-1]), below[2:])
            best[0] = torch.minimum(below[0], below[1])
            best[W - 1] = torch.minimum(below[W - 1], below[W - 2])
            table[r] = energy[r] + best

        return cls(table, energy)

    def get(self, row: int, col: int) -> int:
        """Bounds-checked read of table[row, col]."""
        if not (0 <= row < self.height and 0 <= col < self.width):
            raise IndexError(
                f"Cost table index ({row}, {col}) out of range for {self.width}x{self.height}")
        return int(self.values[row, col])

    def start_column(self) -> int:
        """Column of the smallest cost in row 0; the leftmost one wins ties."""
        # torch.argmin returns the first occurrence of the minimum
        return int(torch.argmin(self.values[0]))

    def min_cost(self) -> int:
        return int(self.values[0].min())

    def path_cost(self, seam) -> int:
        """Total energy along a path given as one column index per row."""
        seam = torch.as_tensor(seam, dtype=torch.long)
        if seam.shape != (self.height,):
            raise ValueError(f"Path must have {self.height} entries, got {tuple(seam.shape)}")
        rows = torch.arange(self.height)
        return int(self.energy[rows, seam].sum())

    def __repr__(self):
        return f"CostTable(width={self.width}, height={self.height})"
