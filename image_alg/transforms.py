"""
Geometric and intensity transforms on uint8 RGB tensors (3, H, W).
"""

import math
import torch
import torch.nn.functional as F
from typing import List

from .energy import check_rgb_image

BLOCK_MEAN_SIZES = (3, 11, 21)
REGION_MEAN_SIZES = (3, 5, 7)


def rotate_90(image: torch.Tensor) -> torch.Tensor:
    """Rotate a quarter turn clockwise: (3, H, W) -> (3, W, H)."""
    check_rgb_image(image)
    return torch.rot90(image, k=-1, dims=(1, 2)).contiguous()


def rotated_dimensions(width: int, height: int):
    """Side of the square canvas that holds the image at any rotation."""
    side = int(round(math.sqrt(width ** 2 + height ** 2)))
    return side, side


def rotate_45(image: torch.Tensor) -> torch.Tensor:
    """
    Rotate 45 degrees clockwise about the centre.

    The image is first centred on a black square canvas whose side is its
    diagonal, so no corner is cut off. Sampling is bilinear and anything
    that maps from outside the canvas is black.
    """
    check_rgb_image(image)
    C, H, W = image.shape
    new_w, new_h = rotated_dimensions(W, H)
    x_offset = (new_w - W) // 2
    y_offset = (new_h - H) // 2

    canvas = torch.zeros(C, new_h, new_w, dtype=torch.float32, device=image.device)
    canvas[:, y_offset:y_offset + H, x_offset:x_offset + W] = image.to(torch.float32)

    theta = math.pi / 4
    cos_t, sin_t = math.cos(theta), math.sin(theta)
    cx, cy = new_w / 2.0, new_h / 2.0

    y_coords = torch.arange(new_h, dtype=torch.float32, device=image.device)
    x_coords = torch.arange(new_w, dtype=torch.float32, device=image.device)
    y_grid, x_grid = torch.meshgrid(y_coords, x_coords, indexing='ij')

    # Inverse mapping: where each output pixel comes from
    x_src = cos_t * (x_grid - cx) + sin_t * (y_grid - cy) + cx
    y_src = -sin_t * (x_grid - cx) + cos_t * (y_grid - cy) + cy

    x_norm = 2.0 * x_src / max(new_w - 1, 1) - 1.0
    y_norm = 2.0 * y_src / max(new_h - 1, 1) - 1.0
    grid = torch.stack([x_norm, y_norm], dim=-1).unsqueeze(0)

    rotated = F.grid_sample(
        canvas.unsqueeze(0), grid,
        mode='bilinear', padding_mode='zeros', align_corners=True
    ).squeeze(0)

    return rotated.round().clamp(0, 255).to(torch.uint8)


def quantize_intensity(image: torch.Tensor, factor: int) -> torch.Tensor:
    """Snap every sample down to a multiple of `factor`."""
    check_rgb_image(image)
    if not 1 <= factor <= 255:
        raise ValueError(f"Quantization factor must be in [1, 255], got {factor}")
    return image // factor * factor


def intensity_factors(levels: int) -> List[int]:
    """Doubling quantization factors 2, 4, 8, ... for `levels` levels, capped at 128."""
    factors = []
    factor = 1
    for _ in range(levels):
        if factor == 128:
            break
        factor *= 2
        factors.append(factor)
    return factors


def _check_block_size(block_size: int):
    if block_size < 1 or block_size % 2 == 0:
        raise ValueError(f"block_size must be odd (eg: 1, 3, 5, 7..), got {block_size}")


def block_mean(image: torch.Tensor, block_size: int) -> torch.Tensor:
    """
    Replace every pixel by the mean of the block_size x block_size window
    around it. Windows are clipped at the image border and the mean is
    floored per channel.
    """
    check_rgb_image(image)
    _check_block_size(block_size)
    C, H, W = image.shape
    offset = block_size // 2

    kernel = torch.ones(1, 1, block_size, block_size, dtype=torch.float64, device=image.device)
    samples = image.to(torch.float64).unsqueeze(1)
    # Sums of at most 21*21 bytes are exact in float64
    sums = F.conv2d(samples, kernel, padding=offset).squeeze(1)
    counts = F.conv2d(torch.ones(1, 1, H, W, dtype=torch.float64, device=image.device),
                      kernel, padding=offset).squeeze(0)

    mean = torch.div(sums.to(torch.int64), counts.to(torch.int64), rounding_mode='floor')
    return mean.to(torch.uint8)


def region_block_mean(image: torch.Tensor, block_size: int) -> torch.Tensor:
    """
    Flatten each full block_size x block_size tile to its floored mean
    colour. Partial tiles along the right and bottom edges stay unchanged.
    """
    check_rgb_image(image)
    _check_block_size(block_size)
    C, H, W = image.shape
    rows, cols = H // block_size, W // block_size
    if rows == 0 or cols == 0:
        return image.clone()

    h, w = rows * block_size, cols * block_size
    tiles = image[:, :h, :w].to(torch.int64).reshape(C, rows, block_size, cols, block_size)
    mean = tiles.sum(dim=(2, 4)) // (block_size * block_size)
    mean = mean.repeat_interleave(block_size, dim=1).repeat_interleave(block_size, dim=2)

    out = image.clone()
    out[:, :h, :w] = mean.to(torch.uint8)
    return out


def transform_image(image: torch.Tensor, intensity_levels: int = 3):
    """
    Run every transform once.

    Returns:
        List of (name, image) pairs in output order
    """
    results = [
        ('rotate_45', rotate_45(image)),
        ('rotate_90', rotate_90(image)),
    ]
    for level, factor in enumerate(intensity_factors(intensity_levels)):
        results.append((f'intensity_level_{level}', quantize_intensity(image, factor)))
    for size in BLOCK_MEAN_SIZES:
        results.append((f'pixels_to_block_mean_{size}x{size}', block_mean(image, size)))
    for size in REGION_MEAN_SIZES:
        results.append((f'region_to_block_mean_{size}x{size}', region_block_mean(image, size)))
    return results
