#!/usr/bin/env python3
"""
Hoversort — Hover Pixel-Sort Gallery
CLI entry point. Also importable as a library.

Usage:
    python hoversort.py show
    python hoversort.py show images/a.jpg images/b.png --step 8 --columns 3
    python hoversort.py show --dir images/ --sort-by luminance
    python hoversort.py show --config gallery.json
    python hoversort.py export images/a.jpg out.gif --hold 20
    python hoversort.py export images/a.jpg frames/ --format png
    python hoversort.py keys
"""

import sys
import os
import logging
import argparse

# Add project root to path so imports work
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from core.config import GalleryConfig, load_config
from core.export import export_animation, EXPORT_FORMATS, DEFAULT_HOLD_FRAMES
from core.image_source import find_images
from core.log import setup_logging
from effects import list_sort_keys, SORT_KEYS

__version__ = "0.1.0"

logger = logging.getLogger("hoversort")


def _build_config(args) -> GalleryConfig:
    """Defaults, then --config file, then explicit flags."""
    config = load_config(args.config) if getattr(args, "config", None) else GalleryConfig()

    image_paths = None
    if getattr(args, "images", None):
        image_paths = list(args.images)
    elif getattr(args, "dir", None):
        image_paths = [str(p) for p in find_images(args.dir)]
        if not image_paths:
            raise FileNotFoundError(f"No images found in {args.dir}")

    return config.with_overrides(
        image_paths=image_paths,
        step_size=args.step,
        max_width=args.max_width,
        sort_by=args.sort_by,
        fps=args.fps,
        columns=getattr(args, "columns", None),
    )


def cmd_show(args):
    """Open the gallery window."""
    config = _build_config(args)
    logger.info("Showing %d images (step=%d, key=%s)",
                len(config.image_paths), config.step_size, config.sort_by)
    from gallery_ui import main as launch_gallery
    launch_gallery(config)


def cmd_export(args):
    """Render one hover cycle to a GIF or PNG sequence."""
    config = _build_config(args)
    output = export_animation(args.image, args.output, config,
                              fmt=args.format, hold_frames=args.hold)
    print(f"Exported: {output}")


def cmd_keys(args):
    """List sort keys."""
    keys = list_sort_keys()
    print(f"\n  Sort Keys ({len(keys)} available)")
    print(f"  {'-' * 50}")
    for k in keys:
        default = " (default)" if k["default"] else ""
        lo, hi = k["range"]
        print(f"    {k['name']:12s} {lo:g}-{hi:g}  {k['description']}{default}")
    print()


def _add_engine_options(p):
    p.add_argument("--config", help="JSON config file")
    p.add_argument("--step", type=int, help="Columns processed per frame (default 4)")
    p.add_argument("--max-width", type=int, help="Downscale images wider than this (default 800)")
    p.add_argument("--sort-by", choices=sorted(SORT_KEYS), help="Sort key")
    p.add_argument("--fps", type=int, help="Animation frame rate (default 60)")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="hoversort",
        description="Hoversort — hover-triggered column pixel sorting",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--log-file", help="Also write logs to this file")
    sub = parser.add_subparsers(dest="command")

    # show
    p = sub.add_parser("show", help="Open the hover gallery window")
    p.add_argument("images", nargs="*", help="Image files (default: config image list)")
    p.add_argument("--dir", help="Show every image in this directory")
    p.add_argument("--columns", type=int, help="Grid columns (default 2)")
    _add_engine_options(p)

    # export
    p = sub.add_parser("export", help="Render one hover cycle to GIF or PNG frames")
    p.add_argument("image", help="Source image")
    p.add_argument("output", help="Output .gif file, or directory for --format png")
    p.add_argument("--format", choices=EXPORT_FORMATS, default="gif")
    p.add_argument("--hold", type=int, default=DEFAULT_HOLD_FRAMES,
                   help="Frames to hold the fully sorted image")
    _add_engine_options(p)

    # keys
    sub.add_parser("keys", help="List sort keys")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)

    commands = {
        "show": cmd_show,
        "export": cmd_export,
        "keys": cmd_keys,
    }

    if args.command in commands:
        try:
            commands[args.command](args)
        except Exception as e:
            logger.debug("Command failed", exc_info=True)
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
