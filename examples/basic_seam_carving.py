"""
Basic seam carving example.

Carves a synthetic test image (or a PNG given on the command line) and shows
the original, its energy map with the first seam, and the carved result side
by side.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import argparse
import torch
import matplotlib.pyplot as plt

from image_alg.carving import carve_image_with_diagnostics
from image_alg.image_io import load_image


def make_demo_image(H: int = 120, W: int = 200) -> torch.Tensor:
    """Sky-blue background with two solid blocks that seams should avoid."""
    image = torch.zeros(3, H, W, dtype=torch.uint8)
    image[0], image[1], image[2] = 135, 206, 235
    image[:, 40:100, 30:60] = torch.tensor([200, 40, 40], dtype=torch.uint8).view(3, 1, 1)
    image[:, 20:90, 140:170] = torch.tensor([40, 160, 40], dtype=torch.uint8).view(3, 1, 1)
    return image


def to_display(image: torch.Tensor):
    return image.permute(1, 2, 0).numpy()


def main():
    parser = argparse.ArgumentParser(description="Seam carving demo")
    parser.add_argument('image', nargs='?', help='PNG to carve (default: synthetic image)')
    parser.add_argument('--seams', type=int, default=60, help='Columns to remove (default: 60)')
    parser.add_argument('--output', type=str, default=None,
                        help='Save the figure here instead of showing it')
    args = parser.parse_args()
    if args.seams < 1:
        parser.error("--seams must be at least 1")

    image = load_image(args.image) if args.image else make_demo_image()
    C, H, W = image.shape
    print(f"Image shape: {C} x {H} x {W}")

    print(f"Carving image (removing {args.seams} seams)...")
    carved, diagnostics = carve_image_with_diagnostics(image, args.seams, verbose=True)

    fig, axes = plt.subplots(1, 3, figsize=(15, 4))
    axes[0].imshow(to_display(image))
    axes[0].set_title(f'Original ({W}x{H})')

    axes[1].imshow(diagnostics.energy.numpy(), cmap='gray')
    axes[1].plot(diagnostics.seam.numpy(), range(H), color='yellow', linewidth=1)
    axes[1].set_title('Energy and first seam')

    axes[2].imshow(to_display(carved))
    axes[2].set_title(f'Carved ({carved.shape[2]}x{H})')

    for ax in axes:
        ax.axis('off')
    plt.tight_layout()

    if args.output:
        plt.savefig(args.output, dpi=150)
        print(f"Saved: {args.output}")
    else:
        plt.show()


if __name__ == '__main__':
    main()
