"""
Loading and saving of maps and atlas images.

Maps are Tiled JSON files with embedded tilesets; tileset images are read
relative to the map file. Optimized maps are written next to their chunk
PNG files.
"""

import json
import logging
import os
from pathlib import Path
from typing import Dict, List

from PIL import Image

from .models import OptimizedMap, TileMap, Tileset
from .utils.validation import (
    MapFormatError,
    validate_and_log,
    validate_map_data,
    validate_tileset_data,
)

logger = logging.getLogger(__name__)


def load_map(map_path) -> TileMap:
    """
    Load a Tiled JSON map.

    Args:
        map_path: Path to the map file

    Returns:
        TileMap

    Raises:
        MapFormatError: the file is not a map the optimizer can read
    """
    map_path = Path(map_path)
    with open(map_path, "r", encoding="utf-8") as f:
        try:
            map_data = json.load(f)
        except json.JSONDecodeError as e:
            raise MapFormatError(f"{map_path} is not valid JSON: {e}") from e

    if not isinstance(map_data, dict):
        raise MapFormatError(f"{map_path} does not contain a map object")

    errors = validate_and_log(map_data, validate_map_data, f"map {map_path.name}")
    for tileset_data in map_data.get("tilesets") or []:
        errors.extend(validate_and_log(tileset_data, validate_tileset_data, "tileset"))

    if errors:
        raise MapFormatError(f"{map_path} cannot be optimized: {'; '.join(errors)}")

    tilemap = TileMap.from_dict(map_data)
    logger.info(
        f"Loaded {map_path.name}: {len(tilemap.layers)} layers, {len(tilemap.tilesets)} tilesets"
    )
    return tilemap


def load_tileset_images(tilemap: TileMap, base_dir) -> Dict[Tileset, Image.Image]:
    """
    Load the image of every tileset of a map.

    Args:
        tilemap: Loaded map
        base_dir: Directory tileset image paths are relative to

    Returns:
        Dictionary mapping each tileset to its RGBA image
    """
    images = {}

    for tileset in tilemap.tilesets:
        image_path = os.path.join(base_dir, tileset.image)
        with Image.open(image_path) as img:
            images[tileset] = img.convert("RGBA")
        logger.debug(f"Loaded {tileset.name} image {image_path}")

    return images


def save_optimized(result: OptimizedMap, output_dir, map_name: str) -> List[Path]:
    """
    Write an optimized map and its chunk images.

    Args:
        result: Optimizer output
        output_dir: Destination directory (created if needed)
        map_name: File name of the written map JSON

    Returns:
        Paths of every written file, map first
    """
    output_dir = Path(output_dir)
    os.makedirs(output_dir, exist_ok=True)

    map_path = output_dir / map_name
    with open(map_path, "w", encoding="utf-8") as f:
        json.dump(result.map.to_dict(), f, indent=2)
    written = [map_path]

    for image_name, image in result.images.items():
        image_path = output_dir / image_name
        image.save(image_path, format="PNG")
        written.append(image_path)

    logger.info(f"Saved {map_path} and {len(result.images)} chunk image(s)")
    return written
