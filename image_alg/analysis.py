"""
Boundary detection from projection profiles.

The image is reduced to gray levels, summed along rows and columns, the two
profiles are smoothed, and the deepest local minima of each profile are taken
as candidate boundaries between content regions (e.g. gaps between text
lines or columns).
"""

import torch
from typing import Dict, List, Sequence, Tuple

from .energy import check_rgb_image
from .visualize import COLOR_BLACK, COLOR_GREEN, COLOR_RED, COLOR_WHITE, color_tensor

SMOOTH_FACTOR = 4
MINIMA_COUNT = 3

# Channel sums at or above this threshold become white
BLACK_WHITE_THRESHOLD = (255 * 3) // 2

# Luma weights from https://en.wikipedia.org/wiki/Grayscale
LUMA_WEIGHTS = (0.299, 0.587, 0.114)


def to_black_white(image: torch.Tensor) -> torch.Tensor:
    """Threshold an RGB image (3, H, W) to pure black and white."""
    check_rgb_image(image)
    total = image.to(torch.int32).sum(dim=0)
    white = (total >= BLACK_WHITE_THRESHOLD).unsqueeze(0).expand_as(image)
    return torch.where(white,
                       torch.full_like(image, COLOR_WHITE[0]),
                       torch.full_like(image, COLOR_BLACK[0]))


def gray_levels(image: torch.Tensor) -> torch.Tensor:
    """Luma of an RGB image as float32 in [0, 1], shape (H, W)."""
    check_rgb_image(image)
    rgb = image.to(torch.float32) / 255.0
    return rgb[0] * LUMA_WEIGHTS[0] + rgb[1] * LUMA_WEIGHTS[1] + rgb[2] * LUMA_WEIGHTS[2]


def to_grayscale(image: torch.Tensor) -> torch.Tensor:
    """Grayscale version of an RGB image, still 3 identical channels."""
    level = (gray_levels(image) * 255.0).clamp(0, 255).to(torch.uint8)
    return level.unsqueeze(0).expand(3, -1, -1).clone()


def projection_profiles(gray: torch.Tensor) -> Tuple[torch.Tensor, torch.Tensor]:
    """
    Sum a grayscale image along both axes.

    Args:
        gray: Grayscale RGB image (3, H, W), uint8

    Returns:
        (horizontal (H,) with one sum per row, vertical (W,) with one sum per column)
    """
    level = gray[0].to(torch.float32) / 255.0
    return level.sum(dim=1), level.sum(dim=0)


def smooth_profile(profile: torch.Tensor, factor: int = SMOOTH_FACTOR) -> torch.Tensor:
    """Mean of consecutive chunks of `factor` samples; the last chunk may be shorter."""
    if factor < 1:
        raise ValueError(f"Smoothing factor must be >= 1, got {factor}")
    return torch.stack([chunk.mean() for chunk in torch.split(profile, factor)])


def find_local_minima(data: Sequence[float], count: int = MINIMA_COUNT) -> List[int]:
    """
    Pick up to `count` local minima of a 1-D profile.

    Each interior sample is scored by how much the profile climbs away from
    it: the strictly increasing run walking left (starting two samples away)
    plus the run walking right. A sample with no climb on either side scores
    zero. The highest scores are taken first, the later index winning a tie.
    Each index is returned at most once, so a short profile yields fewer
    than `count` minima.
    """
    data = [float(v) for v in data]
    if len(data) < 3:
        return []

    scores = []
    for idx in range(1, len(data) - 1):
        value = data[idx]

        left_last, left_growth = value, 0.0
        for v in reversed(data[:idx - 1]):
            diff = v - left_last
            if diff <= 0.0:
                break
            left_last = v
            left_growth += diff

        right_last, right_growth = value, 0.0
        for v in data[idx + 1:]:
            diff = v - right_last
            if diff <= 0.0:
                break
            right_last = v
            right_growth += diff

        if left_growth == 0.0 or right_growth == 0.0:
            scores.append(0.0)
        else:
            scores.append(left_growth + right_growth)

    minima = []
    for _ in range(min(count, len(scores))):
        best = max(range(len(scores)), key=lambda i: (scores[i], i))
        minima.append(best + 1)
        scores[best] = float('-inf')
    return minima


def _paint(image: torch.Tensor, mask: torch.Tensor, color) -> torch.Tensor:
    return torch.where(mask.unsqueeze(0), color_tensor(color, image.device).view(3, 1, 1), image)


def _index_mask(length: int, indices: List[int], factor: int) -> torch.Tensor:
    chunk = torch.arange(length) // factor
    mask = torch.zeros(length, dtype=torch.bool)
    for i in indices:
        mask |= chunk == i
    return mask


def render_horizontal_profile(gray: torch.Tensor, profile: torch.Tensor, minima: List[int],
                              factor: int = SMOOTH_FACTOR) -> torch.Tensor:
    """Row profile drawn as bars growing right from x=0; minima rows in green."""
    _, H, W = gray.shape
    level = profile.to(torch.int64)[torch.arange(H) // factor].unsqueeze(1)
    xs = torch.arange(W).unsqueeze(0)

    out = _paint(gray, xs < level, COLOR_WHITE)
    out = _paint(out, xs == level, COLOR_RED)
    rows = _index_mask(H, minima, factor).unsqueeze(1).expand(H, W)
    return _paint(out, rows, COLOR_GREEN)


def render_vertical_profile(gray: torch.Tensor, profile: torch.Tensor, minima: List[int],
                            factor: int = SMOOTH_FACTOR) -> torch.Tensor:
    """Column profile drawn as bars growing up from the bottom; minima columns in green."""
    _, H, W = gray.shape
    level = profile.to(torch.int64)[torch.arange(W) // factor].unsqueeze(0)
    height_above = (H - torch.arange(H)).unsqueeze(1)

    out = _paint(gray, height_above < level, COLOR_WHITE)
    out = _paint(out, height_above == level, COLOR_RED)
    cols = _index_mask(W, minima, factor).unsqueeze(0).expand(H, W)
    return _paint(out, cols, COLOR_GREEN)


def render_bounds(gray: torch.Tensor, h_minima: List[int], v_minima: List[int],
                  factor: int = SMOOTH_FACTOR) -> torch.Tensor:
    """Grayscale image crossed by green lines at every detected boundary."""
    _, H, W = gray.shape
    rows = _index_mask(H, h_minima, factor).unsqueeze(1)
    cols = _index_mask(W, v_minima, factor).unsqueeze(0)
    return _paint(gray, rows | cols, COLOR_GREEN)


def analyze_image(image: torch.Tensor) -> Dict[str, torch.Tensor]:
    """
    Run the full boundary analysis.

    Returns:
        Result images keyed by name: black_white, grayscale, horizontal,
        vertical, bounds
    """
    gray = to_grayscale(image)
    horizontal, vertical = projection_profiles(gray)
    h_reduced = smooth_profile(horizontal)
    v_reduced = smooth_profile(vertical)
    h_minima = find_local_minima(h_reduced.tolist())
    v_minima = find_local_minima(v_reduced.tolist())

    return {
        'black_white': to_black_white(image),
        'grayscale': gray,
        'horizontal': render_horizontal_profile(gray, h_reduced, h_minima),
        'vertical': render_vertical_profile(gray, v_reduced, v_minima),
        'bounds': render_bounds(gray, h_minima, v_minima),
    }
