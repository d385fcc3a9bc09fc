from __future__ import annotations

import argparse
from typing import Optional

from mandelbmp.bitmap import read_header
from mandelbmp.config import build_settings, load_config
from mandelbmp.errors import RenderError
from mandelbmp.renderer import FractalRenderer
from mandelbmp.util.logging_setup import LEVELS, configure_logging, get_logger
from mandelbmp.util.manifest import build_manifest, write_manifest

def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="mandelbmp", description="Histogram-coloured Mandelbrot renderer writing 24-bit bitmaps.")
    p.add_argument("--log-level", type=str, default="INFO", choices=LEVELS, help="Log level.")
    p.add_argument("--log-file", type=str, default="", help="Rotating log file path. Empty disables file logging.")
    sub = p.add_subparsers(dest="cmd", required=True)

    r = sub.add_parser("render", help="Render the fractal to a bitmap file.")
    r.add_argument("--config", type=str, default=None, help="Path to config JSON. If omitted, built-in defaults are used.")
    r.add_argument("--output", type=str, default=None, help="Output bitmap (defaults to config.output, image.bmp).")
    r.add_argument("--width", type=int, default=None, help="Image width in pixels.")
    r.add_argument("--height", type=int, default=None, help="Image height in pixels.")
    r.add_argument("--max-iterations", type=int, default=None, help="Iteration cap.")
    r.add_argument("--original-scale", type=float, default=None, help="Pixels per unit used to locate the zoom center.")
    r.add_argument("--scale", type=float, default=None, help="Pixels per unit used to render.")
    r.add_argument("--zoom-center", type=float, nargs=2, metavar=("X", "Y"), default=None, help="Zoom center in pixels.")
    r.add_argument("--preview", type=str, default=None, help="Also save the image through Pillow (e.g. preview.png).")
    r.add_argument("--manifest", type=str, default=None, help="Write a JSON run manifest to this path.")
    r.add_argument("--no-progress", action="store_true", help="Disable the progress bar.")

    i = sub.add_parser("info", help="Print the header of a bitmap file.")
    i.add_argument("path", type=str, help="Bitmap to inspect.")

    return p

def _apply_overrides(cfg: dict, args: argparse.Namespace) -> dict:
    overrides = {
        "width": args.width,
        "height": args.height,
        "max_iterations": args.max_iterations,
        "original_scale": args.original_scale,
        "scale": args.scale,
        "zoom_center": args.zoom_center,
        "output": args.output,
    }
    for k, v in overrides.items():
        if v is not None:
            cfg[k] = v
    return cfg

def _render(args: argparse.Namespace) -> int:
    logger = get_logger()
    cfg = _apply_overrides(load_config(args.config), args)
    settings = build_settings(cfg)
    output = str(cfg.get("output") or "image.bmp")

    logger.info("Processing image >_")
    renderer = FractalRenderer(settings, show_progress=not args.no_progress)
    image = renderer.render(output)

    if args.preview:
        image.to_pil().save(args.preview)
        logger.info("Preview written: %s", args.preview)
    if args.manifest:
        write_manifest(args.manifest, build_manifest(settings=settings.as_dict(), output=output))
        logger.info("Run manifest written: %s", args.manifest)

    logger.info("Finished!")
    return 0

def _info(args: argparse.Namespace) -> int:
    header = read_header(args.path)
    print(f"{args.path}: {header.width}x{header.height} {header.bits_per_pixel}bpp "
          f"file_size={header.file_size} data_offset={header.data_offset}")
    return 0

def main(argv: Optional[list] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    log_file = args.log_file if args.log_file and args.log_file.strip() else None
    logger = configure_logging(level=args.log_level, console=True, log_file=log_file)

    try:
        if args.cmd == "render":
            return _render(args)
        if args.cmd == "info":
            return _info(args)
        raise RuntimeError("Unknown command.")
    except (RenderError, OSError, ValueError) as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 1
