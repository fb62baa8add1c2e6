"""
PNG discovery, decoding and encoding.

Images travel through the package as uint8 tensors (3, H, W); Pillow does
the file work and NumPy bridges the two.
"""

import numpy as np
import torch
from pathlib import Path
from PIL import Image
from typing import List, Optional, Union

OUTPUT_DIR_NAME = 'output'


def find_images(target: Union[str, Path]) -> List[Path]:
    """
    Resolve a PNG file or a directory of PNG files.

    Directories are not searched recursively. Results are sorted by name.
    """
    target = Path(target)
    if not target.exists():
        raise FileNotFoundError(f"No such file or directory: {target}")

    if target.is_file():
        if target.suffix.lower() != '.png':
            raise ValueError(f"Not a PNG file: {target}")
        return [target]

    return sorted(p for p in target.iterdir()
                  if p.is_file() and p.suffix.lower() == '.png')


def load_image(path: Union[str, Path], verbose: bool = True) -> torch.Tensor:
    """Load an image file as a uint8 RGB tensor (3, H, W)."""
    img = Image.open(path)
    if verbose:
        print(f"opened: `{path}`, color: `{img.mode}`, size `{img.width}x{img.height}`")
    img_array = np.array(img.convert('RGB'), dtype=np.uint8)
    return torch.from_numpy(img_array).permute(2, 0, 1).contiguous()


def _prepare(path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def save_image(tensor: torch.Tensor, path: Union[str, Path], verbose: bool = True):
    """Save a uint8 RGB tensor (3, H, W) as PNG."""
    if tensor.dim() != 3 or tensor.shape[0] != 3 or tensor.dtype != torch.uint8:
        raise ValueError(f"Expected a uint8 (3, H, W) tensor, got {tensor.dtype} {tuple(tensor.shape)}")
    path = _prepare(path)
    img_array = tensor.permute(1, 2, 0).cpu().numpy()
    Image.fromarray(img_array).save(path, format='PNG')
    if verbose:
        print(f"saved: `{path}`")


def save_gray16(grid: torch.Tensor, path: Union[str, Path], verbose: bool = True):
    """
    Save an integer grid (H, W) as a 16-bit grayscale PNG.

    Values above 65535 saturate instead of wrapping.
    """
    if grid.dim() != 2:
        raise ValueError(f"Expected a 2-D grid, got shape {tuple(grid.shape)}")
    path = _prepare(path)
    img_array = grid.to(torch.int64).clamp(0, 65535).cpu().numpy().astype(np.uint16)
    Image.fromarray(img_array).save(path, format='PNG')
    if verbose:
        print(f"saved: `{path}`")


def output_path(source: Union[str, Path], suffix: str,
                out_dir: Optional[Union[str, Path]] = None) -> Path:
    """Result path `<out_dir>/<stem>_<suffix>.png` (default out_dir: <source dir>/output)."""
    source = Path(source)
    if out_dir is None:
        out_dir = source.parent / OUTPUT_DIR_NAME
    return Path(out_dir) / f"{source.stem}_{suffix}.png"
