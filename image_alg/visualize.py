"""
Diagnostic renderings: colour constants, energy/cost grids and seam overlays.
"""

import torch
from typing import Sequence

from .cost import CostTable
from .energy import channel_gradient_magnitude
from .seam import seam_coordinates

COLOR_BLACK = (0, 0, 0)
COLOR_WHITE = (255, 255, 255)
COLOR_RED = (230, 50, 50)
COLOR_GREEN = (34, 139, 34)
COLOR_SEAM = (253, 218, 13)

GRADIENT_VISUAL_SCALE = 100


def color_tensor(color: Sequence[int], device=None) -> torch.Tensor:
    """RGB triple as a uint8 (3, 1) tensor, ready to broadcast over pixels."""
    return torch.tensor(color, dtype=torch.uint8, device=device).view(3, 1)


def energy_image(image: torch.Tensor, visual_scale: int = GRADIENT_VISUAL_SCALE) -> torch.Tensor:
    """Scaled gradient magnitude of an RGB image, for 16-bit output."""
    return channel_gradient_magnitude(image, visual_scale=visual_scale)


def cost_table_image(table: CostTable) -> torch.Tensor:
    """Copy of the cumulative costs (H, W), for 16-bit output."""
    return table.values.clone()


def draw_seam(image: torch.Tensor, seam: torch.Tensor,
              color: Sequence[int] = COLOR_SEAM) -> torch.Tensor:
    """Paint a vertical seam onto a copy of an RGB image (3, H, W)."""
    img_vis = image.clone()
    coords = seam_coordinates(seam)
    xs = torch.tensor([x for x, _ in coords], dtype=torch.long)
    ys = torch.tensor([y for _, y in coords], dtype=torch.long)
    img_vis[:, ys, xs] = color_tensor(color, device=image.device)
    return img_vis
