#!/usr/bin/env python3
"""Render the demo scene, or a scene loaded from JSON.

Usage:
    python examples/render_scene.py [options]

Options:
    --width WIDTH         Image width in pixels (default: 1024)
    --height HEIGHT       Image height in pixels (default: 768)
    --fov DEGREES         Vertical field of view in degrees
    --max-depth DEPTH     Maximum reflection/refraction depth (default: 4)
    --scene PATH          JSON scene file (default: built-in demo scene)
    --output OUTPUT       Output file path (default: render.png)
    --gamma GAMMA         Gamma applied when saving (default: 1.0)
    --cpu                 Force the CPU backend
    --quiet               Suppress progress output
    --log-level LEVEL     Logging level (default: WARNING)

A scene file holds the output of SceneManager.to_dict(), optionally with a
"settings" block of RenderSettings fields. Command-line options override
the file's settings.

Example:
    python examples/render_scene.py --width 320 --height 240 --max-depth 2
"""

from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a scene with the Whitted-style ray tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--width", type=int, default=None, help="Image width in pixels")
    parser.add_argument("--height", type=int, default=None, help="Image height in pixels")
    parser.add_argument("--fov", type=float, default=None, help="Vertical field of view (deg)")
    parser.add_argument(
        "--max-depth",
        type=int,
        default=None,
        help="Maximum reflection/refraction depth",
    )
    parser.add_argument("--scene", type=str, default=None, help="JSON scene file")
    parser.add_argument(
        "--output",
        type=str,
        default="render.png",
        help="Output file path (default: render.png)",
    )
    parser.add_argument(
        "--gamma",
        type=float,
        default=1.0,
        help="Gamma applied when saving (default: 1.0)",
    )
    parser.add_argument("--cpu", action="store_true", help="Force the CPU backend")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace, base: dict | None = None):
    """Merge file settings and command-line overrides into RenderSettings."""
    from tinytrace.core.settings import RenderSettings

    values = dict(base or {})
    overrides = {
        "width": args.width,
        "height": args.height,
        "fov": args.fov,
        "max_depth": args.max_depth,
    }
    values.update({key: value for key, value in overrides.items() if value is not None})
    return RenderSettings.from_dict(values)


def render_scene(args: argparse.Namespace) -> Path:
    """Build the scene, render it and save the image.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from tinytrace.core.renderer import FrameRenderer
    from tinytrace.scene.manager import SceneManager
    from tinytrace.scene.presets import create_demo_scene

    if args.scene is not None:
        data = json.loads(Path(args.scene).read_text())
        settings = build_settings(args, data.pop("settings", None))
        scene = SceneManager()
        scene.from_dict(data)
    else:
        _, settings = create_demo_scene(build_settings(args))
        scene = None

    if not args.quiet:
        source = args.scene if args.scene is not None else "demo scene"
        print(f"Rendering {source} ({settings.width}x{settings.height}, depth {settings.max_depth})...")
        if scene is not None:
            print(f"  {scene.get_sphere_count()} spheres, {scene.get_light_count()} lights")

    start_time = time.time()
    renderer = FrameRenderer(settings)
    renderer.render()

    output_file = Path(args.output)
    renderer.save_png(str(output_file), gamma=args.gamma)

    total_time = time.time() - start_time
    if not args.quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    from tinytrace.logging_config import setup_logging

    setup_logging(args.log_level)

    # Use GPU if available, fall back to CPU
    if args.cpu:
        ti.init(arch=ti.cpu)
    else:
        try:
            ti.init(arch=ti.gpu)
            if not args.quiet:
                print("Using GPU backend")
        except Exception:
            ti.init(arch=ti.cpu)
            if not args.quiet:
                print("Using CPU backend")

    try:
        render_scene(args)
        return 0
    except (OSError, ValueError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
