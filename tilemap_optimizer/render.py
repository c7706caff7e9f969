"""
Map rendering.

Paints the tile layers of a map onto one RGBA image, using the same tile
geometry as the optimizer. Rendering a map before and after optimization
gives the same pixels.
"""

import logging
from typing import Dict

from PIL import Image

from .config import EMPTY_TILE
from .extractor import extract_tile
from .models import TileMap, Tileset, find_tileset
from .utils.validation import IntegrityError

logger = logging.getLogger(__name__)


def render_map(
    tilemap: TileMap,
    tileset_images: Dict[Tileset, Image.Image],
    tile_size: int,
) -> Image.Image:
    """
    Render every tile layer of a map, in layer order.

    Args:
        tilemap: Map to render
        tileset_images: Image of every tileset the layers refer to
        tile_size: Tile width and height in pixels

    Returns:
        RGBA image of width*tile_size x height*tile_size pixels
    """
    map_width = tilemap.width
    map_height = tilemap.height
    canvas = Image.new("RGBA", (map_width * tile_size, map_height * tile_size), (0, 0, 0, 0))

    # Cache cropped tiles to avoid repeated extraction
    tiles = {}

    for layer in tilemap.layers:
        if not layer.data:
            continue

        layer_width = layer.extra.get("width", map_width)
        if layer_width <= 0:
            raise ValueError(f"Cannot render layer {layer.name}: unknown width")

        for position, gid in enumerate(layer.data):
            if gid == EMPTY_TILE:
                continue

            if gid not in tiles:
                tileset = find_tileset(tileset_images.keys(), gid)
                if tileset is None:
                    raise IntegrityError(f"Corrupted layers or undefined tileset (tile {gid})")
                tile = extract_tile(tileset_images[tileset], tileset, gid, tile_size)
                tiles[gid] = tile if tile.mode == "RGBA" else tile.convert("RGBA")

            x = (position % layer_width) * tile_size
            y = (position // layer_width) * tile_size
            canvas.alpha_composite(tiles[gid], dest=(x, y))

    logger.debug(f"Rendered {len(tilemap.layers)} layers with {len(tiles)} distinct tiles")
    return canvas


def chunk_images_by_tileset(tilemap: TileMap, images: Dict[str, Image.Image]) -> Dict[Tileset, Image.Image]:
    """Key chunk images (by image name) by the tilesets that use them"""
    return {tileset: images[tileset.image] for tileset in tilemap.tilesets}
