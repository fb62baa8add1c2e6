"""
Seam extraction and removal.

A vertical seam is one column index per row, top to bottom, where adjacent
rows differ by at most one column. Extraction walks the cost table from the
cheapest start in row 0; removal deletes the seam's pixel from every row.
"""

import torch
from typing import List, Tuple

from .cost import CostTable


def next_column(table: CostTable, row: int, col: int) -> int:
    """
    Choose the column of `row` given the seam's column `col` in the row above.

    Interior columns compare left, middle and right; the left neighbour wins
    any tie with the minimum, then the right one, otherwise the seam goes
    straight down. At the borders the seam only moves inwards when the inner
    neighbour is strictly cheaper.

    Args:
        table: Cost table
        row: Row being entered (1 <= row < height)
        col: Seam column in row - 1

    Returns:
        Seam column in `row`
    """
    last = table.width - 1
    if col == 0:
        if table.get(row, 1) < table.get(row, 0):
            return 1
        return 0
    if col == last:
        if table.get(row, last - 1) < table.get(row, last):
            return last - 1
        return last

    left = table.get(row, col - 1)
    middle = table.get(row, col)
    right = table.get(row, col + 1)
    minimum = min(left, middle, right)
    if minimum == left:
        return col - 1
    elif minimum == right:
        return col + 1
    return col


def extract_seam(table: CostTable) -> torch.Tensor:
    """
    Backtrack one vertical seam through a cost table.

    Args:
        table: Cost table (H, W)

    Returns:
        Seam indices (H,) with the column index per row
    """
    seam = torch.zeros(table.height, dtype=torch.long)
    col = table.start_column()
    seam[0] = col

    for row in range(1, table.height):
        col = next_column(table, row, col)
        seam[row] = col

    return seam


def seam_coordinates(seam: torch.Tensor) -> List[Tuple[int, int]]:
    """(x, y) pixel coordinates of a seam, for drawing overlays."""
    return [(int(col), row) for row, col in enumerate(seam.tolist())]


def validate_seam(seam: torch.Tensor, height: int, width: int):
    """
    Check a vertical seam against an image of the given size.

    Raises:
        ValueError: wrong length, an index outside [0, width), or a jump of
            more than one column between rows
    """
    if seam.dim() != 1 or seam.shape[0] != height:
        raise ValueError(f"Seam must have {height} entries, got shape {tuple(seam.shape)}")
    if seam.is_floating_point():
        raise ValueError(f"Seam indices must be integers, got {seam.dtype}")
    if height == 0:
        return
    if seam.min() < 0 or seam.max() >= width:
        raise ValueError(f"Seam index out of range [0, {width}): {seam.tolist()}")
    if height > 1 and (seam[1:] - seam[:-1]).abs().max() > 1:
        raise ValueError("Seam columns of adjacent rows must differ by at most 1")


def remove_seam(image: torch.Tensor, seam: torch.Tensor) -> torch.Tensor:
    """
    Remove a vertical seam from an image.

    Args:
        image: Image tensor (C, H, W) or (H, W)
        seam: Column index per row (H,)

    Returns:
        Carved image with one column removed (C, H, W-1) or (H, W-1)
    """
    if image.dim() == 2:
        image = image.unsqueeze(0)
        squeeze_output = True
    else:
        squeeze_output = False

    C, H, W = image.shape
    validate_seam(seam, H, W)

    keep = torch.ones(H, W, dtype=torch.bool, device=image.device)
    keep[torch.arange(H, device=image.device), seam.to(image.device)] = False

    # Boolean indexing walks rows in order, so each row keeps its
    # remaining pixels left to right, shifted over the gap.
    carved = image[:, keep].reshape(C, H, W - 1)

    if squeeze_output:
        carved = carved.squeeze(0)

    return carved
