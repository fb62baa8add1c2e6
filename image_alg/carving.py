"""
High-level carving functions that orchestrate the seam carving workflow.

Every iteration recomputes energy -> cost table -> seam from the current
image and removes that seam. Nothing is cached across iterations because
each removal changes the content the next energy map is computed from.
"""

import torch
from typing import NamedTuple, Optional

from .cost import CostTable
from .energy import channel_gradient_magnitude, check_rgb_image, sobel_magnitudes
from .seam import extract_seam, remove_seam


class CarveDiagnostics(NamedTuple):
    """First-iteration intermediates, for rendering only."""
    energy: Optional[torch.Tensor]
    cost_table: Optional[CostTable]
    seam: Optional[torch.Tensor]


def clamp_seam_count(width: int, n_seams: int) -> int:
    """Limit a requested reduction so at least one column survives."""
    if n_seams < 0:
        raise ValueError(f"Number of seams must be non-negative, got {n_seams}")
    return min(n_seams, width - 1)


def carve_image_with_diagnostics(image: torch.Tensor, n_seams: int,
                                 verbose: bool = False):
    """
    Reduce the width of an RGB image by removing vertical seams.

    Args:
        image: RGB image tensor (3, H, W), uint8, at least 3x3
        n_seams: Columns to remove; clamped to W - 1
        verbose: Print progress every 20 seams

    Returns:
        (carved image (3, H, W - n), CarveDiagnostics of the first iteration)
    """
    check_rgb_image(image)
    _, H, W = image.shape
    if H < 3 or W < 3:
        raise ValueError(f"Seam carving needs at least a 3x3 image, got {W}x{H}")
    n_seams = clamp_seam_count(W, n_seams)

    carved = image.clone()
    diagnostics = CarveDiagnostics(None, None, None)

    for i in range(n_seams):
        if i == 0:
            energy = channel_gradient_magnitude(carved)
        else:
            # The strip may be narrower than 3 columns by now; the Sobel
            # operator is still defined there thanks to replicated borders.
            energy = sobel_magnitudes(carved).sum(dim=0)
        table = CostTable.from_energy(energy)
        seam = extract_seam(table)

        if i == 0:
            diagnostics = CarveDiagnostics(energy, table, seam)

        carved = remove_seam(carved, seam)

        if verbose and (i + 1) % 20 == 0:
            print(f"  Removed {i + 1}/{n_seams} seams, size: {tuple(carved.shape)}")

    return carved, diagnostics


def carve_image(image: torch.Tensor, n_seams: int) -> torch.Tensor:
    """
    Content-aware width reduction.

    Args:
        image: RGB image tensor (3, H, W), uint8, at least 3x3
        n_seams: Number of columns to remove (clamped to W - 1)

    Returns:
        Carved image (3, H, W - n_seams)
    """
    carved, _ = carve_image_with_diagnostics(image, n_seams)
    return carved
