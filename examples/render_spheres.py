#!/usr/bin/env python3
"""Render the three-sphere demo scene (or a scene file).

Usage:
    python -m examples.render_spheres [options]

Options:
    --width WIDTH         Image width in pixels (default: 200)
    --height HEIGHT       Image height in pixels (default: 100)
    --samples SAMPLES     Number of samples per pixel (default: 100)
    --seed SEED           Random seed (default: 0)
    --scene FILE          JSON scene file (default: built-in demo scene)
    --output OUTPUT       Output file path (default: bin/image.png)
    --batch-size SIZE     Samples per progress update (default: 10)
    --arch {gpu,cpu}      Taichi backend (default: gpu, falls back to cpu)
    --lookfrom X Y Z      Camera position (default: -2 2 1)
    --lookat X Y Z        Point the camera looks at (default: 0 0 -1)
    --vfov DEGREES        Vertical field of view (default: 30)
    --quiet               Suppress progress output
    --verbose             Enable info logging

Example:
    python -m examples.render_spheres --width 400 --height 200 --samples 50
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render spheres with the lux path tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=200,
        help="Image width in pixels (default: 200)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=100,
        help="Image height in pixels (default: 100)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=100,
        help="Number of samples per pixel (default: 100)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Random seed (default: 0)",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON scene file (default: built-in demo scene)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="bin/image.png",
        help="Output file path (default: bin/image.png)",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=10,
        help="Samples per progress update (default: 10)",
    )
    parser.add_argument(
        "--arch",
        choices=["gpu", "cpu"],
        default="gpu",
        help="Taichi backend (default: gpu, falls back to cpu)",
    )
    parser.add_argument(
        "--lookfrom",
        type=float,
        nargs=3,
        default=[-2.0, 2.0, 1.0],
        metavar=("X", "Y", "Z"),
        help="Camera position (default: -2 2 1)",
    )
    parser.add_argument(
        "--lookat",
        type=float,
        nargs=3,
        default=[0.0, 0.0, -1.0],
        metavar=("X", "Y", "Z"),
        help="Point the camera looks at (default: 0 0 -1)",
    )
    parser.add_argument(
        "--vfov",
        type=float,
        default=30.0,
        help="Vertical field of view in degrees (default: 30)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable info logging",
    )
    return parser.parse_args(argv)


def render_spheres(
    width: int = 200,
    height: int = 100,
    num_samples: int = 100,
    seed: int = 0,
    scene_path: str | None = None,
    output_path: str = "bin/image.png",
    batch_size: int = 10,
    lookfrom: tuple[float, float, float] = (-2.0, 2.0, 1.0),
    lookat: tuple[float, float, float] = (0.0, 0.0, -1.0),
    vfov: float = 30.0,
    quiet: bool = False,
) -> Path:
    """Render a scene and save it as a PNG.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        num_samples: Number of samples per pixel.
        seed: Seed for the per-pixel random streams.
        scene_path: Optional JSON scene file; the demo scene is used if None.
        output_path: Output file path (PNG). Parent directories are created.
        batch_size: Number of samples to render between progress updates.
        lookfrom: Camera position.
        lookat: Point the camera looks at.
        vfov: Vertical field of view in degrees.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from src.lux.camera.pinhole import setup_camera
    from src.lux.core.renderer import Renderer
    from src.lux.scene.intersection import upload_scene
    from src.lux.scene.manager import load_scene_file
    from src.lux.scene.presets import create_default_camera, create_default_scene

    aspect_ratio = width / height

    if scene_path is None:
        if not quiet:
            print(f"Creating demo scene ({width}x{height})...")
        scene, _ = create_default_scene(aspect_ratio)
    else:
        if not quiet:
            print(f"Loading scene from {scene_path} ({width}x{height})...")
        scene = load_scene_file(scene_path)

    camera = create_default_camera(
        aspect_ratio=aspect_ratio,
        lookfrom=(lookfrom[0], lookfrom[1], lookfrom[2]),
        lookat=(lookat[0], lookat[1], lookat[2]),
        vfov=vfov,
    )

    upload_scene(scene)
    setup_camera(camera)

    renderer = Renderer(width, height, seed=seed)

    if not quiet:
        print(f"Rendering {len(scene)} objects, {num_samples} samples per pixel...")

    start_time = time.time()

    def progress_callback(current: int, target: int) -> None:
        if not quiet:
            elapsed = time.time() - start_time
            progress_pct = (current / target) * 100 if target > 0 else 0
            samples_per_sec = current / elapsed if elapsed > 0 else 0
            print(
                f"\r  Progress: {current}/{target} samples "
                f"({progress_pct:.1f}%) - {samples_per_sec:.1f} spp/s",
                end="",
                flush=True,
            )

    renderer.render(
        num_samples=num_samples,
        batch_size=batch_size,
        callback=progress_callback,
    )

    if not quiet:
        print()  # Newline after progress

    output_file = renderer.save_image(output_path)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize Taichi, falling back to CPU if no GPU backend is available
    if args.arch == "gpu":
        try:
            ti.init(arch=ti.gpu)
            if not args.quiet:
                print("Using GPU backend")
        except Exception:
            ti.init(arch=ti.cpu)
            if not args.quiet:
                print("Using CPU backend")
    else:
        ti.init(arch=ti.cpu)
        if not args.quiet:
            print("Using CPU backend")

    try:
        render_spheres(
            width=args.width,
            height=args.height,
            num_samples=args.samples,
            seed=args.seed,
            scene_path=args.scene,
            output_path=args.output,
            batch_size=args.batch_size,
            lookfrom=tuple(args.lookfrom),
            lookat=tuple(args.lookat),
            vfov=args.vfov,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
