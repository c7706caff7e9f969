"""
Map optimization.

The Optimizer scans every tile layer, renumbers the tiles in use into a
dense id space and repacks their pixels into size-bounded chunk atlases.
The map is rewritten in place; the chunk images are returned by name.
"""

import logging
from typing import Dict, List, Optional

from PIL import Image

from .config import EMPTY_TILE, OptimizeOptions
from .models import OptimizedMap, TileMap, Tileset
from .packer import ChunkPacker, PackedChunk
from .remapper import IdentifierRemapper
from .utils.validation import ConfigurationError, validate_options, validate_tile_size

logger = logging.getLogger(__name__)


class Optimizer:
    """
    Deduplicates the tiles of a map into new chunk atlases.

    Args:
        tilemap: Map to optimize, rewritten in place
        tileset_images: Decoded image of every source tileset
        options: OptimizeOptions (defaults when omitted)

    Raises:
        ConfigurationError: options are invalid or a source tileset does not
            use the configured tile size
    """

    def __init__(
        self,
        tilemap: TileMap,
        tileset_images: Dict[Tileset, Image.Image],
        options: Optional[OptimizeOptions] = None,
    ):
        self.tilemap = tilemap
        self.tileset_images = tileset_images
        self.options = options or OptimizeOptions()
        self.allow_logs = self.options.logs

        errors = validate_options(self.options)
        for tileset in tileset_images:
            errors.extend(validate_tile_size(tileset, self.options.tile_size))
        if errors:
            raise ConfigurationError("; ".join(errors))

        # Decode up front so extraction threads never load the same file
        for image in tileset_images.values():
            image.load()

        self.remapper = IdentifierRemapper(
            tileset_images, self.options.tile_size, allow_logs=self.allow_logs
        )
        self.chunks: List[PackedChunk] = []
        self.packer = self._new_packer(index=1, firstgid=1)

    def _new_packer(self, index, firstgid):
        return ChunkPacker(
            index,
            firstgid,
            self.options.tile_size,
            self.options.max_columns,
            self.options.max_lines,
            workers=self.options.workers,
            allow_logs=self.allow_logs,
        )

    def optimize(self) -> OptimizedMap:
        """Run the optimization and return the rewritten map and chunk images"""
        if self.allow_logs:
            logger.info("Start map optimization...")

        for layer in self.tilemap.layers:
            if not layer.data:
                continue

            for position, gid in enumerate(layer.data):
                if gid == EMPTY_TILE:
                    continue

                if self.packer.is_full:
                    self._flush()

                layer.data[position] = self.remapper.resolve(gid, self.packer)

        if len(self.packer):
            self._flush()

        self.tilemap.tilesets = [chunk.tileset for chunk in self.chunks]
        images = {chunk.tileset.image: chunk.image for chunk in self.chunks}

        if self.allow_logs:
            logger.info(
                f"Map optimization has been done: {len(self.remapper)} tiles "
                f"in {len(self.chunks)} chunk(s)"
            )

        return OptimizedMap(map=self.tilemap, images=images)

    def _flush(self):
        chunk, self.packer = self.packer.flush(next_firstgid=len(self.remapper) + 1)
        self.chunks.append(chunk)


def optimize_map(
    tilemap: TileMap,
    tileset_images: Dict[Tileset, Image.Image],
    options: Optional[OptimizeOptions] = None,
) -> OptimizedMap:
    """
    Optimize a map in one call.

    Example:
        result = optimize_map(tilemap, images, OptimizeOptions(tile_size=16))
        result.images["chunk-1.png"].save("chunk-1.png")
    """
    return Optimizer(tilemap, tileset_images, options).optimize()
