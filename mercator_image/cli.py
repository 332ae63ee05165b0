#!/usr/bin/env python3
# mercator_image/cli.py
"""
Entry point for the mercator-image command line.
Loads configuration, sets up logging and runs one subcommand:

    mercator-image fit -10 50 10 40 --width 200 --height 100
    mercator-image tile 3 4 2
    mercator-image locate 13.4 52.5 12
    mercator-image project 13.4 52.5 --tile 12 2200 1343
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterable, List, Optional

from mercator_image.bbox import BBox
from mercator_image.config import Config
from mercator_image.logging_conf import setup_logging
from mercator_image.tile import TileTransform, tile_at
from mercator_image.transform import CoordinateTransformer, project
from mercator_image.version import version_info
from mercator_image.viewport import ViewportTransform

log = logging.getLogger(__name__)


def _fmt(values: Iterable[float], precision: int) -> str:
    return " ".join(f"{v:.{precision}f}" for v in values)


def _bbox_arg(text: str) -> BBox:
    try:
        return BBox.parse(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc))


def _add_tile_size(p: argparse.ArgumentParser) -> None:
    p.add_argument("--tile-width", type=int, help="tile width in pixels")
    p.add_argument("--tile-height", type=int, help="tile height in pixels")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mercator-image",
        description="Map lon/lat to pixels on Mercator images and XYZ tiles.",
    )
    parser.add_argument("--config", help="path to JSON config (default: per-user config file)")
    parser.add_argument("--log-level", help="override configured log level, e.g. DEBUG")
    parser.add_argument("--version", action="version", version=version_info())
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("fit", help="fit a bounding box into an image of the given size")
    for name in ("lon1", "lat1", "lon2", "lat2"):
        p.add_argument(name, type=float)
    p.add_argument("--width", type=int, help="image width in pixels")
    p.add_argument("--height", type=int, help="image height in pixels")

    p = sub.add_parser("tile", help="show the geographic box of tile ZOOM X Y")
    p.add_argument("zoom", type=int)
    p.add_argument("x", type=int)
    p.add_argument("y", type=int)
    _add_tile_size(p)

    p = sub.add_parser("locate", help="find the tile containing LON LAT at ZOOM")
    p.add_argument("lon", type=float)
    p.add_argument("lat", type=float)
    p.add_argument("zoom", type=int)
    _add_tile_size(p)

    p = sub.add_parser("project", help="project LON LAT onto an image or a tile")
    p.add_argument("lon", type=float)
    p.add_argument("lat", type=float)
    target = p.add_mutually_exclusive_group(required=True)
    target.add_argument("--bbox", type=_bbox_arg, metavar="LON1,LAT1,LON2,LAT2")
    target.add_argument("--tile", type=int, nargs=3, metavar=("ZOOM", "X", "Y"))
    p.add_argument("--width", type=int, help="image width in pixels (with --bbox)")
    p.add_argument("--height", type=int, help="image height in pixels (with --bbox)")
    _add_tile_size(p)

    return parser


def _check_zoom(parser: argparse.ArgumentParser, zoom: int, cfg: Config) -> None:
    max_zoom = cfg["tile"]["max_zoom"]
    if not 0 <= zoom <= max_zoom:
        parser.error(f"zoom must be within 0..{max_zoom}, got {zoom}")


def _check_size(parser: argparse.ArgumentParser, *sizes: int) -> None:
    if any(s <= 0 for s in sizes):
        parser.error("sizes must be positive")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    cfg = Config.load(args.config)
    setup_logging(cfg, args.log_level)
    precision = cfg["output"]["precision"]
    vp_w, vp_h = cfg.viewport_size
    tile_w = getattr(args, "tile_width", None)
    tile_h = getattr(args, "tile_height", None)
    if tile_w is None:
        tile_w = cfg["tile"]["width"]
    if tile_h is None:
        tile_h = cfg["tile"]["height"]
    log.debug("Running %s with config %s", args.command, cfg.path)

    if args.command == "fit":
        width = vp_w if args.width is None else args.width
        height = vp_h if args.height is None else args.height
        _check_size(parser, width, height)
        image = ViewportTransform(args.lon1, args.lat1, args.lon2, args.lat2, width, height)
        print(f"size {image.width} {image.height}")
        print(f"world_size {image.world_size:.{precision}f}")
        print(f"offset {_fmt((image.sx, image.sy), precision)}")
        print(f"defining {_fmt(image.defining_bounding_box().as_tuple(), precision)}")
        print(f"visible {_fmt(image.visible_bounding_box().as_tuple(), precision)}")
        return 0

    if args.command == "tile":
        _check_zoom(parser, args.zoom, cfg)
        _check_size(parser, tile_w, tile_h)
        tile = TileTransform(args.zoom, args.x, args.y, tile_w, tile_h)
        print(f"tile {tile}")
        print(f"bbox {_fmt(tile.bounding_box().as_tuple(), precision)}")
        return 0

    if args.command == "locate":
        _check_zoom(parser, args.zoom, cfg)
        _check_size(parser, tile_w, tile_h)
        tile = tile_at(args.lon, args.lat, args.zoom, tile_w, tile_h)
        print(f"tile {tile}")
        print(f"pixel {_fmt(project(tile, args.lon, args.lat), precision)}")
        return 0

    # project
    transformer: CoordinateTransformer
    if args.tile is not None:
        zoom, x, y = args.tile
        _check_zoom(parser, zoom, cfg)
        _check_size(parser, tile_w, tile_h)
        transformer = TileTransform(zoom, x, y, tile_w, tile_h)
    else:
        width = vp_w if args.width is None else args.width
        height = vp_h if args.height is None else args.height
        _check_size(parser, width, height)
        transformer = ViewportTransform.from_bbox(args.bbox, width, height)
    print(f"pixel {_fmt(project(transformer, args.lon, args.lat), precision)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
