#!/usr/bin/env python3
"""
RayForge - A Python Path Tracing Renderer

Main entry point for rendering scenes.
"""

import argparse
import logging
import os
import sys
import time
from pathlib import Path

import numpy as np

from rayforge.renderer import Renderer, RenderSettings
from rayforge.scenes import SCENES, scene_by_name
from rayforge.scene_parser import SceneParseError, load_scene


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='RayForge - A Python Path Tracing Renderer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --scene sample --output sample.png
  python main.py --width 800 --height 450 --samples 500 --output hd_render.png
  python main.py --scene scenes/bubble.yaml --threads 4
        '''
    )

    parser.add_argument('--width', type=int, default=400, help='Image width (default: 400)')
    parser.add_argument('--height', type=int, default=225, help='Image height (default: 225)')
    parser.add_argument('--samples', type=int, default=100, help='Samples per pixel (default: 100)')
    parser.add_argument('--threads', type=int, default=os.cpu_count() or 4,
                        help='Number of threads (default: CPU count)')
    parser.add_argument('--seed', type=int, default=283, help='Random seed (default: 283)')
    parser.add_argument('--output', type=str, default='out.png', help='Output filename')
    parser.add_argument('--scene', type=str, default='spheres',
                        help=f"Scene name ({', '.join(SCENES)}) or a YAML/JSON scene file "
                             "(default: spheres)")
    parser.add_argument('--verbose', action='store_true', help='Log every traced ray')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    # Print header
    print("=" * 60)
    print("RayForge Path Tracer")
    print("=" * 60)

    settings = RenderSettings(
        width=args.width,
        height=args.height,
        samples_per_pixel=args.samples,
        num_threads=args.threads,
        seed=args.seed
    )
    try:
        settings.validate()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    # Create scene
    print(f"\nCreating scene: {args.scene}")
    if args.scene in SCENES:
        aspect_ratio = settings.width / settings.height
        scene = scene_by_name(args.scene, aspect_ratio, np.random.default_rng(settings.seed))
    elif Path(args.scene).suffix in ('.yaml', '.yml', '.json'):
        try:
            scene, settings = load_scene(args.scene)
        except SceneParseError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
    else:
        scene = None

    if scene is None:
        print(f"Error: Unknown scene: {args.scene}", file=sys.stderr)
        return 1

    print(f"  Objects in scene: {len(scene)}")

    print(f"\nRender Settings:")
    print(f"  Resolution: {settings.width}x{settings.height}")
    print(f"  Samples: {settings.samples_per_pixel}")
    print(f"  Threads: {settings.num_threads}")
    print(f"  Seed: {settings.seed}")

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

    # Render
    print("\nRendering...")
    start_time = time.time()

    image = renderer.render(scene.camera, scene.objects)

    elapsed = time.time() - start_time
    print(f"\nRender completed in {elapsed:.2f} seconds")
    print(f"  Samples per second: {(settings.width * settings.height * settings.samples_per_pixel) / max(elapsed, 1e-9):.0f}")

    print(f"\nSaving to: {args.output}")
    renderer.save_image(image, args.output)

    print("\nDone!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
