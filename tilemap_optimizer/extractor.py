"""
Tile extraction from source atlases.

Tiles are numbered row-major inside an atlas, starting at the tileset's
`firstgid`. Extraction is a pure crop, so jobs can run on any thread.
"""

from dataclasses import dataclass
from typing import Tuple

from PIL import Image

from .models import Tileset
from .utils.validation import ExtractionError


def tile_rect(tileset: Tileset, gid: int, tile_size: int) -> Tuple[int, int, int, int]:
    """Get the (left, top, width, height) pixel rectangle of `gid` in its atlas

    The position is 1-based inside the atlas: the first tile of every row
    sits in column 1, and a tile whose index is a multiple of the column
    count is the last one of its row.

    Args:
        tileset: Tileset owning `gid`
        gid: Global tile id
        tile_size: Tile width and height in pixels

    Returns:
        (left, top, width, height) tuple
    """
    columns = tileset.imagewidth // tile_size
    if columns < 1:
        raise ExtractionError(
            f"Tileset {tileset.name} is narrower ({tileset.imagewidth}px) than one tile"
        )

    local_index = gid - tileset.firstgid + 1

    if local_index <= columns:
        column = local_index
        row = 0
    else:
        column = local_index % columns or columns
        row = (local_index - 1) // columns

    left = (column - 1) * tile_size
    top = row * tile_size
    return left, top, tile_size, tile_size


def extract_tile(image: Image.Image, tileset: Tileset, gid: int, tile_size: int) -> Image.Image:
    """Crop the tile `gid` out of its decoded atlas image"""
    left, top, width, height = tile_rect(tileset, gid, tile_size)

    if left + width > image.width or top + height > image.height:
        raise ExtractionError(
            f"Tile {gid} at ({left}, {top}) is outside of {tileset.name} image "
            f"({image.width}x{image.height})"
        )

    return image.crop((left, top, left + width, top + height))


@dataclass
class ExtractionJob:
    """A deferred tile crop, resolved when its chunk is rendered"""

    tileset: Tileset
    image: Image.Image
    gid: int
    tile_size: int

    def run(self) -> Image.Image:
        return extract_tile(self.image, self.tileset, self.gid, self.tile_size)
