"""
Allow running the package directly: python -m mandelbrot_explorer
"""
import logging
import sys
from argparse import ArgumentParser

from .app import run
from .colormaps import list_colormap_names
from .config import load_settings
from .renderer import MandelbrotRenderer


def build_parser():
    parser = ArgumentParser(prog='mandelbrot_explorer',
                            description='Interactive Mandelbrot set explorer.')

    parser.add_argument('--resolution', type=int, dest='resolution', metavar='N',
                        help='side length of the square field in pixels')
    parser.add_argument('--max-iter', type=int, dest='max_iterations', metavar='N',
                        help='initial iteration budget')
    parser.add_argument('--colormap', type=str, dest='colormap', metavar='NAME',
                        help='color mapping, one of: ' + ', '.join(list_colormap_names()))
    parser.add_argument('--serial', action='store_false', dest='parallel', default=None,
                        help='compute the field on a single thread')
    parser.add_argument('--settings', type=str, dest='settings_path', metavar='PATH',
                        help='settings file to use instead of the bundled settings.json')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='log every recompute')

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(name)s %(levelname)s - %(message)s',
    )
    try:
        settings = load_settings(
            args.settings_path,
            resolution=args.resolution,
            max_iterations=args.max_iterations,
            colormap=args.colormap,
            parallel=args.parallel,
        )
        renderer = MandelbrotRenderer.from_settings(settings)
    except ValueError as e:
        logging.getLogger(__name__).error("%s", e)
        return 2
    run(renderer)
    return 0


if __name__ == "__main__":
    sys.exit(main())
