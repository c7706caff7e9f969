"""
Configuration for the tilemap optimizer.

This module contains the defaults and the option set shared by the optimizer,
the command line entry point and the viewer.
"""

from dataclasses import dataclass
from typing import Optional

# Tile geometry
DEFAULT_TILE_SIZE = 32  # Every source tileset must use this tile size

# Output atlas size in pixels
DEFAULT_CHUNK_WIDTH = 2048
DEFAULT_CHUNK_HEIGHT = 2048

# Cell value / animation frame meaning "no tile"
EMPTY_TILE = 0

# Output naming
CHUNK_IMAGE_TEMPLATE = "chunk-{index}.png"
CHUNK_NAME_TEMPLATE = "Chunk {index}"

# Mode of the composed chunk images
CHUNK_IMAGE_MODE = "RGBA"


def chunk_image_name(index):
    """
    Get the image file name of the chunk created in position `index`.

    Args:
        index: 1-based creation order of the chunk

    Returns:
        The chunk image name, e.g. "chunk-1.png"
    """
    return CHUNK_IMAGE_TEMPLATE.format(index=index)


def chunk_name(index):
    """Get the tileset name of the chunk created in position `index`."""
    return CHUNK_NAME_TEMPLATE.format(index=index)


@dataclass
class OptimizeOptions:
    """Options accepted by the optimizer"""

    tile_size: int = DEFAULT_TILE_SIZE
    chunk_width: int = DEFAULT_CHUNK_WIDTH  # pixels
    chunk_height: int = DEFAULT_CHUNK_HEIGHT  # pixels
    logs: bool = True
    workers: Optional[int] = None  # extraction threads, None for the pool default

    @property
    def max_columns(self) -> int:
        return self.chunk_width // self.tile_size

    @property
    def max_lines(self) -> int:
        return self.chunk_height // self.tile_size

    @property
    def capacity(self) -> int:
        """Number of tiles a single chunk can hold"""
        return self.max_columns * self.max_lines
