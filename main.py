#!/usr/bin/env python3
"""
raycore - A Python Ray Tracer

Main entry point for rendering scenes.
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from raycore.renderer import Renderer, RenderSettings
from raycore.sampling import spawn_rngs
from raycore.scenes import random_scene, three_spheres
from raycore.scene_parser import SceneParseError, load_scene


def layout_rng(seed):
    """Generator for placing scene objects.

    A spawned child of ``seed``, so it never replays the renderer's stream,
    which is seeded with ``seed`` directly.
    """
    return spawn_rngs(seed, 1)[0]


def build_scene(args):
    """Return (world, camera, settings) for the scene named on the command line."""
    if args.scene in ('random', 'three'):
        settings = RenderSettings(
            width=args.width,
            height=args.height,
            samples_per_pixel=args.samples,
            max_depth=args.depth,
            seed=args.seed
        )
        if args.scene == 'random':
            world, camera = random_scene(layout_rng(args.seed), settings.aspect_ratio)
        else:
            world, camera = three_spheres(settings.aspect_ratio)
        return world, camera, settings

    world, camera, settings = load_scene(args.scene)
    if args.seed is not None:
        settings.seed = args.seed
    return world, camera, settings


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='raycore - A Python Ray Tracer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --scene three --output three.png
  python main.py --width 600 --height 400 --samples 50 --seed 7 --output final.png
  python main.py --scene scenes/glass.yaml --output glass.ppm
        '''
    )

    parser.add_argument('--width', type=int, default=300, help='Image width (default: 300)')
    parser.add_argument('--height', type=int, default=200, help='Image height (default: 200)')
    parser.add_argument('--samples', type=int, default=10, help='Samples per pixel (default: 10)')
    parser.add_argument('--depth', type=int, default=50, help='Max ray depth (default: 50)')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for reproducible output')
    parser.add_argument('--output', type=str, default='output/render.png', help='Output filename')
    parser.add_argument('--scene', type=str, default='random',
                        help="Scene to render: 'random', 'three' or a YAML/JSON scene file (default: random)")
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(name)s %(levelname)s: %(message)s'
    )

    try:
        world, camera, settings = build_scene(args)
    except SceneParseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print("=" * 60)
    print("raycore Ray Tracer")
    print("=" * 60)
    print(f"\nRender Settings:")
    print(f"  Resolution: {settings.width}x{settings.height}")
    print(f"  Samples: {settings.samples_per_pixel}")
    print(f"  Max Depth: {settings.max_depth}")
    print(f"  Seed: {settings.seed}")
    print(f"\nScene: {args.scene}")
    print(f"  Objects in scene: {len(world)}")

    renderer = Renderer(settings)

    last_progress = [0]

    def progress_callback(progress: float):
        pct = int(progress * 100)
        if pct > last_progress[0]:
            last_progress[0] = pct
            bar_len = 40
            filled = int(bar_len * progress)
            bar = '█' * filled + '░' * (bar_len - filled)
            print(f'\rRendering: [{bar}] {pct}%', end='', flush=True)

    renderer.set_progress_callback(progress_callback)

    print("\nRendering...")
    start_time = time.time()

    image = renderer.render(world, camera)

    elapsed = time.time() - start_time
    print(f"\nRender completed in {elapsed:.2f} seconds")

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    print(f"\nSaving to: {args.output}")
    renderer.save_image(image, str(output_path))

    print("\nDone!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
