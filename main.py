#!/usr/bin/env python3
"""
PathForge - A Python Path Tracer

Main entry point for rendering scenes.
"""

import argparse
import dataclasses
import logging
import sys
import time
from typing import Optional, Sequence

import numpy as np

from pathforge.renderer import Renderer, RenderSettings
from pathforge.scene_parser import SceneParseError, load_scene
from pathforge.scenes import SCENES, build_scene
from pathforge.image_io import ImageWriteError, save_image

logger = logging.getLogger("pathforge")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='PathForge - A Python Path Tracer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --scene spheres --output render.ppm
  python main.py --scene random --width 1200 --height 675 --samples 500 --output random.png
  python main.py --scene-file scenes/demo.yaml --seed 7
        '''
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument('--scene', type=str, default='random', choices=sorted(SCENES),
                        help='Built-in scene to render (default: random)')
    source.add_argument('--scene-file', type=str, help='YAML or JSON scene description')

    parser.add_argument('--width', type=int, help='Image width (default: 400)')
    parser.add_argument('--height', type=int, help='Image height (default: 225)')
    parser.add_argument('--samples', type=int, help='Samples per pixel (default: 100)')
    parser.add_argument('--depth', type=int, help='Max ray depth (default: 50)')
    parser.add_argument('--threads', type=int, help='Number of threads (0=auto)')
    parser.add_argument('--seed', type=int, help='Random seed for a reproducible render')
    parser.add_argument('--output', type=str, default='output/render.ppm', help='Output filename')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log per-pass details')
    return parser


def apply_overrides(settings: RenderSettings, args: argparse.Namespace) -> RenderSettings:
    """Return settings with any values given on the command line replaced."""
    overrides = {
        'width': args.width,
        'height': args.height,
        'samples_per_pixel': args.samples,
        'max_depth': args.depth,
        'num_threads': args.threads,
        'seed': args.seed,
    }
    return dataclasses.replace(settings, **{key: value for key, value in overrides.items() if value is not None})


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    try:
        if args.scene_file:
            logger.info("Loading scene file: %s", args.scene_file)
            scene, file_settings = load_scene(args.scene_file)
            settings = apply_overrides(file_settings, args)
            if settings.aspect_ratio != file_settings.aspect_ratio:
                logger.warning("Image size overridden; the camera keeps the scene file's aspect ratio")
        else:
            settings = apply_overrides(RenderSettings(), args)
            logger.info("Creating scene: %s", args.scene)
            scene = build_scene(args.scene, settings.aspect_ratio, np.random.default_rng(settings.seed))
    except (SceneParseError, ValueError) as e:
        logger.error("%s", e)
        return 1

    renderer = Renderer(settings)

    # Progress tracking
    last_progress = [0]

    def progress_callback(progress: float):
        pct = int(progress * 100)
        if pct > last_progress[0]:
            last_progress[0] = pct
            bar_len = 40
            filled = int(bar_len * progress)
            bar = '█' * filled + '░' * (bar_len - filled)
            print(f'\rRendering: [{bar}] {pct}%', end='', file=sys.stderr, flush=True)

    renderer.set_progress_callback(progress_callback)

    start_time = time.time()
    pixels = renderer.render_image(scene)
    elapsed = time.time() - start_time
    print(file=sys.stderr)

    rays = settings.width * settings.height * settings.samples_per_pixel
    logger.info("Primary rays per second: %.0f", rays / elapsed if elapsed > 0 else float('inf'))

    try:
        save_image(pixels, args.output)
    except (ImageWriteError, OSError) as e:
        logger.error("Could not save image: %s", e)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
