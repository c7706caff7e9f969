#!/usr/bin/env python3
"""
Tilemap Optimizer

This script compacts the tiles of a Tiled JSON map into new chunk atlases.

The script:
1. Loads the map and the image of each embedded tileset
2. Renumbers the tiles used by the layers into a dense id space
3. Repacks their pixels into chunk-<n>.png atlases of bounded size
4. Writes the rewritten map and the chunk images to the output directory

Usage:
    tilemap-optimize maps/town.json -o build/town
    tilemap-optimize maps/town.json -o build/town --tile-size 16 --chunk-width 1024
"""

import argparse
import logging
import os
import sys

from .config import DEFAULT_CHUNK_HEIGHT, DEFAULT_CHUNK_WIDTH, DEFAULT_TILE_SIZE, OptimizeOptions
from .optimizer import optimize_map
from .storage import load_map, load_tileset_images, save_optimized
from .utils.logger import setup_logger, log_script_start, log_script_end

SCRIPT_NAME = "optimize_map.py"

# Set up logger
logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Deduplicate the tiles of a Tiled JSON map into new atlases"
    )
    parser.add_argument("map", help="Path to the Tiled JSON map")
    parser.add_argument(
        "-o", "--output", required=True, help="Directory receiving the map and chunk images"
    )
    parser.add_argument(
        "--tile-size", type=int, default=DEFAULT_TILE_SIZE, help="Tile size in pixels"
    )
    parser.add_argument(
        "--chunk-width", type=int, default=DEFAULT_CHUNK_WIDTH, help="Chunk width in pixels"
    )
    parser.add_argument(
        "--chunk-height", type=int, default=DEFAULT_CHUNK_HEIGHT, help="Chunk height in pixels"
    )
    parser.add_argument(
        "--workers", type=int, default=None, help="Tile extraction threads"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Do not log optimization progress"
    )
    parser.add_argument(
        "--log-dir", default=None, help="Directory of the log file (default: ./logs)"
    )
    return parser.parse_args(argv)


def main(args):
    """Main function"""
    tilemap = load_map(args.map)
    tileset_images = load_tileset_images(tilemap, os.path.dirname(os.path.abspath(args.map)))

    options = OptimizeOptions(
        tile_size=args.tile_size,
        chunk_width=args.chunk_width,
        chunk_height=args.chunk_height,
        logs=not args.quiet,
        workers=args.workers,
    )
    source_tilesets = len(tilemap.tilesets)
    result = optimize_map(tilemap, tileset_images, options)

    written = save_optimized(result, args.output, os.path.basename(args.map))

    logger.info(
        f"{source_tilesets} source tileset(s) packed into {len(result.images)} chunk(s)"
    )
    for path in written:
        logger.info(f"  - {path}")
    return written


def run(argv=None):
    """Console script entry point"""
    args = parse_args(argv)
    script_logger = setup_logger(
        "tilemap_optimizer",
        log_level=logging.WARNING if args.quiet else logging.INFO,
        log_dir=args.log_dir,
    )

    log_script_start(script_logger, SCRIPT_NAME)
    try:
        main(args)
        log_script_end(script_logger, SCRIPT_NAME, success=True)
    except Exception as e:
        script_logger.error(f"Script failed with error: {e}", exc_info=True)
        log_script_end(script_logger, SCRIPT_NAME, success=False)
        raise


if __name__ == "__main__":
    sys.exit(run())
