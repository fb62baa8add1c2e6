"""
Command line entry point.

    image-alg analyze PATH
    image-alg resize PATH COLUMNS
    image-alg transform PATH [--levels N]

PATH is a PNG file or a directory of PNG files. Results are written next to
the input in an `output/` directory unless --output-dir is given.
"""

import argparse
import sys

from .analysis import analyze_image
from .carving import carve_image_with_diagnostics
from .image_io import find_images, load_image, output_path, save_gray16, save_image
from .transforms import transform_image
from .visualize import GRADIENT_VISUAL_SCALE, cost_table_image, draw_seam, energy_image


def _run_batch(args, process):
    """Apply `process` to every image; a failing image is reported and skipped."""
    failures = 0
    for path in find_images(args.path):
        try:
            process(path, args)
        except (ValueError, OSError) as e:
            print(f"Error: {path}: {e}", file=sys.stderr)
            failures += 1
    return 1 if failures else 0


def _analyze_one(path, args):
    image = load_image(path)
    for name, result in analyze_image(image).items():
        save_image(result, output_path(path, name, args.output_dir))


def _resize_one(path, args):
    image = load_image(path)
    W = image.shape[2]
    if args.columns >= W:
        print(f"  Limiting reduction to {W - 1} columns (image is {W} wide)")

    save_gray16(energy_image(image, GRADIENT_VISUAL_SCALE),
                output_path(path, 'gradient', args.output_dir))

    carved, diagnostics = carve_image_with_diagnostics(image, args.columns, verbose=True)

    if diagnostics.seam is not None:
        save_image(draw_seam(image, diagnostics.seam),
                   output_path(path, 'removed_path', args.output_dir))
        save_gray16(cost_table_image(diagnostics.cost_table),
                    output_path(path, 'dp_table_weights', args.output_dir))

    save_image(carved, output_path(path, 'resized', args.output_dir))


def _transform_one(path, args):
    image = load_image(path)
    for name, result in transform_image(image, args.levels):
        save_image(result, output_path(path, name, args.output_dir))


def cmd_analyze(args):
    return _run_batch(args, _analyze_one)


def cmd_resize(args):
    return _run_batch(args, _resize_one)


def cmd_transform(args):
    return _run_batch(args, _transform_one)



def non_negative_int(value):
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value}")
    return number


def _add_common_arguments(sub):
    sub.add_argument('path', help='PNG file or directory of PNG files')
    sub.add_argument('--output-dir', type=str, default=None,
                     help='Directory for results (default: <input dir>/output)')


def build_parser():
    parser = argparse.ArgumentParser(
        prog='image-alg',
        description="Batch image analysis and content-aware resizing of PNG files"
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    analyze = subparsers.add_parser(
        'analyze', help='Black/white, grayscale and projection-profile boundaries')
    _add_common_arguments(analyze)
    analyze.set_defaults(func=cmd_analyze)

    resize = subparsers.add_parser(
        'resize', help='Remove COLUMNS vertical seams (seam carving)')
    _add_common_arguments(resize)
    resize.add_argument('columns', type=non_negative_int,
                        help='Number of columns to remove (limited to width - 1)')
    resize.set_defaults(func=cmd_resize)

    transform = subparsers.add_parser(
        'transform', help='Rotations, intensity levels and block means')
    _add_common_arguments(transform)
    transform.add_argument('--levels', type=non_negative_int, default=3,
                           help='Number of intensity quantization levels (default: 3)')
    transform.set_defaults(func=cmd_transform)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
