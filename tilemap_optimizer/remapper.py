"""
Dense identifier remapping.

Every distinct gid met during the scan receives the next dense id, starting
at 1. The first time a gid is met its crop is scheduled on the active chunk
and its metadata (shared tileset properties, own properties, animation) is
copied over with identifiers rewritten.
"""

import logging
from typing import Dict, Iterable, Optional, Tuple

from PIL import Image

from .animation import PendingAnimation, pending_animation, resolve_animations
from .extractor import ExtractionJob
from .models import TileData, Tileset, find_tileset
from .packer import ChunkPacker
from .utils.validation import IntegrityError

logger = logging.getLogger(__name__)


class IdentifierRemapper:
    """Maps original gids to dense ids, scheduling each new tile once"""

    def __init__(
        self,
        tileset_images: Dict[Tileset, Image.Image],
        tile_size: int,
        allow_logs: bool = True,
    ):
        self.tileset_images = tileset_images
        self.tile_size = tile_size
        self.allow_logs = allow_logs
        self.mapping: Dict[int, int] = {}

    @property
    def tilesets(self) -> Iterable[Tileset]:
        return self.tileset_images.keys()

    def __len__(self):
        return len(self.mapping)

    def __contains__(self, gid):
        return gid in self.mapping

    def find_tileset(self, gid: int) -> Tileset:
        """Get the source tileset owning `gid`"""
        tileset = find_tileset(self.tilesets, gid)
        if tileset is not None:
            return tileset
        raise IntegrityError(f"Corrupted layers or undefined tileset (tile {gid})")

    def resolve(self, gid: int, packer: ChunkPacker) -> int:
        """
        Get the dense id of `gid`, registering it on first sight.

        Args:
            gid: Original global tile id (nonzero)
            packer: Chunk receiving newly registered tiles

        Returns:
            The dense id
        """
        if gid in self.mapping:
            return self.mapping[gid]

        new_id, animation = self._register(gid, packer)
        if animation is not None:
            resolve_animations(animation, lambda frame_gid: self._register(frame_gid, packer))
        return new_id

    def _register(self, gid: int, packer: ChunkPacker) -> Tuple[int, Optional[PendingAnimation]]:
        if gid in self.mapping:
            return self.mapping[gid], None

        if self.allow_logs:
            logger.debug(f"{gid} tile is optimizing...")

        tileset = self.find_tileset(gid)
        new_id = len(self.mapping) + 1
        self.mapping[gid] = new_id

        packer.add_job(
            ExtractionJob(
                tileset=tileset,
                image=self.tileset_images[tileset],
                gid=gid,
                tile_size=self.tile_size,
            )
        )

        record = None
        if tileset.properties:
            record = TileData(id=new_id, properties=list(tileset.properties))
            packer.add_tile_data(record)

        tile = tileset.find_tile(gid)
        if tile is None:
            return new_id, None

        if record is None:
            record = TileData(id=new_id)
            packer.add_tile_data(record)

        if tile.properties:
            if record.properties is None:
                record.properties = []
            record.properties.extend(tile.properties)

        if tile.animation is not None:
            return new_id, pending_animation(record, tile.animation)

        return new_id, None
