"""Shared test fixtures for the image_alg test suite."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import torch
import pytest
from image_alg.cost import CostTable


# Per-pixel gradient values of the hand-computed 4x3 scenario
WORKED_ENERGY = [[1, 9, 9, 1],
                 [1, 1, 9, 1],
                 [1, 9, 1, 1]]

WORKED_TABLE = [[3, 11, 11, 3],
                [2, 2, 10, 2],
                [1, 9, 1, 1]]


@pytest.fixture
def worked_energy():
    return torch.tensor(WORKED_ENERGY, dtype=torch.int64)


@pytest.fixture
def random_image():
    """Seeded random 20x30 RGB image."""
    torch.manual_seed(42)
    return torch.randint(0, 256, (3, 20, 30), dtype=torch.uint8)


def make_flat_image(H, W, value=128):
    """Constant-colour RGB image."""
    return torch.full((3, H, W), value, dtype=torch.uint8)


def make_stripe_image(H, W, col, value=255):
    """Black RGB image with one bright vertical line at `col`."""
    img = torch.zeros(3, H, W, dtype=torch.uint8)
    img[:, :, col] = value
    return img


def make_table(values):
    """CostTable over explicit cumulative values (energy is irrelevant for backtracking)."""
    values = torch.tensor(values, dtype=torch.int64)
    return CostTable(values, torch.zeros_like(values))
