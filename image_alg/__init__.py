"""
Batch image analysis and content-aware resizing.

Seam carving after Avidan & Shamir 2007: per-channel Sobel energy, a
bottom-up cumulative cost table, deterministic seam backtracking and
column removal, repeated once per removed column.
"""

__version__ = "0.1.0"

from .energy import channel_gradient_magnitude, sobel_magnitudes
from .cost import CostTable
from .seam import next_column, extract_seam, seam_coordinates, validate_seam, remove_seam
from .carving import (
    CarveDiagnostics,
    carve_image,
    carve_image_with_diagnostics,
)

__all__ = [
    'channel_gradient_magnitude',
    'sobel_magnitudes',
    'CostTable',
    'next_column',
    'extract_seam',
    'seam_coordinates',
    'validate_seam',
    'remove_seam',
    'CarveDiagnostics',
    'carve_image',
    'carve_image_with_diagnostics',
]
