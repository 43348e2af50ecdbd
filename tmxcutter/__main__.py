"""
Main entry point for the tmxcutter command line tool.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional
from .constants import DEFAULT_WORLD_SCALE
from .converter import CutterOptions, MapCutter
from .errors import TmxCutterError
from .utils import parse_associations
from .logging_config import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tmxcutter",
        description="Cut a Tiled (.tmx) map into per-cell tile images and a placement manifest"
    )
    parser.add_argument(
        "map",
        help="Path to the .tmx map file (XML or CSV layer data)"
    )
    parser.add_argument(
        "--assets",
        default=None,
        help="Folder holding the tileset textures (default: resolve image sources next to the map)"
    )
    parser.add_argument(
        "--output",
        required=True,
        help="Output directory for tile images and the scene manifest"
    )
    parser.add_argument(
        "--texture",
        action="append",
        default=[],
        metavar="NAME=PATH",
        help="Texture for a tileset name; may be repeated"
    )
    parser.add_argument(
        "--tile-size",
        type=int,
        default=None,
        help="Tile size in pixels used for world spacing (default: map tile width)"
    )
    parser.add_argument(
        "--world-scale",
        type=float,
        default=DEFAULT_WORLD_SCALE,
        help=f"World units per pixel (default: {DEFAULT_WORLD_SCALE})"
    )
    parser.add_argument(
        "--no-scene",
        action="store_true",
        help="Do not write the scene manifest"
    )
    parser.add_argument(
        "--no-tiles",
        action="store_true",
        help="Do not export per-tile images"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show detailed progress information"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Show debug information (implies verbose)"
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write log messages to this file"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    
    logger = setup_logging(args.verbose, args.debug, args.log_file)
    
    try:
        textures = parse_associations(args.texture)
    except ValueError as e:
        parser.error(str(e))
    
    if args.tile_size is not None and args.tile_size <= 0:
        parser.error("--tile-size must be positive")
    
    map_path = Path(args.map).resolve()
    output_dir = Path(args.output).resolve()
    asset_dir = Path(args.assets).resolve() if args.assets else None
    
    if not map_path.exists():
        logger.error(f"Map file does not exist: {map_path}")
        return 1
    if asset_dir is not None and not asset_dir.is_dir():
        logger.error(f"Asset folder does not exist: {asset_dir}")
        return 1
    
    logger.info(f"Map: {map_path}")
    logger.info(f"Output directory: {output_dir}")
    
    options = CutterOptions(
        map_path=map_path,
        output_dir=output_dir,
        asset_dir=asset_dir,
        tile_size=args.tile_size,
        world_scale=args.world_scale,
        textures=textures,
        export_tiles=not args.no_tiles,
        write_scene=not args.no_scene,
    )
    
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        result = MapCutter(options).run()
    except TmxCutterError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    except OSError as e:
        logger.error(f"I/O error: {e}")
        return 1
    
    print(f"Placed {result.placed} tiles ({result.empty} empty cells) from {map_path.name}")
    if result.scene_path is not None:
        print(f"Scene manifest: {result.scene_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
