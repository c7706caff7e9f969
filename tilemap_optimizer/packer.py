"""
Chunk packing.

A ChunkPacker collects the extraction jobs of one output atlas. Once full
(or at the end of the scan) it is flushed: the jobs are resolved on a thread
pool, the tiles are pasted row-major in the order they were scheduled and a
fresh packer is handed back for the next chunk.
"""

import enum
import logging
import math
from dataclasses import dataclass
from multiprocessing.pool import ThreadPool
from typing import List, Optional, Tuple

from PIL import Image

from .config import CHUNK_IMAGE_MODE, chunk_image_name, chunk_name
from .extractor import ExtractionJob
from .models import TileData, Tileset
from .utils.validation import PackerStateError

logger = logging.getLogger(__name__)


class ChunkState(enum.Enum):
    ACCUMULATING = "accumulating"
    FULL = "full"
    RENDERING = "rendering"
    CLOSED = "closed"


@dataclass
class PackedChunk:
    """A rendered chunk: its tileset metadata and composed atlas image"""

    tileset: Tileset
    image: Image.Image


def chunk_geometry(tile_count: int, max_columns: int) -> Tuple[int, int]:
    """
    Get the (columns, lines) grid of a chunk holding `tile_count` tiles.

    A chunk narrower than `max_columns` is a single line; otherwise lines
    are added until every tile fits.
    """
    column_count = min(tile_count, max_columns)
    line_count = 1 if tile_count < max_columns else math.ceil(tile_count / column_count)
    return column_count, line_count


class ChunkPacker:
    """Accumulates the tiles of one output chunk"""

    def __init__(
        self,
        index: int,
        firstgid: int,
        tile_size: int,
        max_columns: int,
        max_lines: int,
        workers: Optional[int] = None,
        allow_logs: bool = True,
    ):
        self.index = index
        self.firstgid = firstgid
        self.tile_size = tile_size
        self.max_columns = max_columns
        self.max_lines = max_lines
        self.workers = workers
        self.allow_logs = allow_logs
        self.jobs: List[ExtractionJob] = []
        self.tiles: List[TileData] = []
        self._rendering = False
        self._closed = False

        if self.allow_logs:
            logger.info("Generate a new tileset data")

    @property
    def capacity(self) -> int:
        return self.max_columns * self.max_lines

    @property
    def state(self) -> ChunkState:
        if self._closed:
            return ChunkState.CLOSED
        if self._rendering:
            return ChunkState.RENDERING
        if len(self.jobs) >= self.capacity:
            return ChunkState.FULL
        return ChunkState.ACCUMULATING

    @property
    def is_full(self) -> bool:
        return self.state is ChunkState.FULL

    def __len__(self):
        return len(self.jobs)

    def add_job(self, job: ExtractionJob) -> None:
        """Schedule a tile crop; its paste position follows scheduling order"""
        self._check_open("add a tile to")
        # Animation frames pulled in by one tile may push a chunk past its
        # capacity; the chunk then grows extra lines.
        self.jobs.append(job)

    def add_tile_data(self, tile: TileData) -> None:
        """Record per-tile metadata to ship in the chunk's tileset"""
        self._check_open("add tile metadata to")
        self.tiles.append(tile)

    def flush(self, next_firstgid: int) -> Tuple[PackedChunk, "ChunkPacker"]:
        """
        Render the chunk and open the next one.

        Args:
            next_firstgid: First dense id of the next chunk

        Returns:
            (rendered chunk, fresh packer)
        """
        self._check_open("flush")
        if not self.jobs:
            raise PackerStateError(f"Cannot flush {chunk_name(self.index)}: no tiles were added")

        self._rendering = True
        chunk = self._render()
        self._rendering = False
        self._closed = True

        next_packer = ChunkPacker(
            self.index + 1,
            next_firstgid,
            self.tile_size,
            self.max_columns,
            self.max_lines,
            workers=self.workers,
            allow_logs=self.allow_logs,
        )
        return chunk, next_packer

    def _check_open(self, action):
        if self._closed or self._rendering:
            raise PackerStateError(
                f"Cannot {action} {chunk_name(self.index)} while {self.state.value}"
            )

    def _render(self) -> PackedChunk:
        name = chunk_name(self.index)
        if self.allow_logs:
            logger.info(f"Rendering of {name} tileset...")

        tile_count = len(self.jobs)
        column_count, line_count = chunk_geometry(tile_count, self.max_columns)
        image_width = column_count * self.tile_size
        image_height = line_count * self.tile_size

        canvas = Image.new(CHUNK_IMAGE_MODE, (image_width, image_height), (0, 0, 0, 0))
        if self.allow_logs:
            logger.info("Empty image generated")
            logger.info("Loading of all tiles who will be optimized...")

        with ThreadPool(processes=self.workers) as pool:
            tile_images = pool.map(ExtractionJob.run, self.jobs)

        if self.allow_logs:
            logger.info("Tiles loading finished")
            logger.info("Tileset optimized image generating...")

        x = 0
        y = 0
        for tile_image in tile_images:
            if x == image_width:
                y += self.tile_size
                x = 0
            canvas.paste(tile_image, (x, y))
            x += self.tile_size

        tileset = Tileset(
            firstgid=self.firstgid,
            tilecount=tile_count,
            tilewidth=self.tile_size,
            tileheight=self.tile_size,
            imagewidth=image_width,
            imageheight=image_height,
            columns=column_count,
            image=chunk_image_name(self.index),
            name=name,
            margin=0,
            spacing=0,
            properties=[],
            tiles=self.tiles,
        )

        if self.allow_logs:
            logger.info("Tileset optimized image generated")
            logger.info("The tileset has been rendered")

        return PackedChunk(tileset=tileset, image=canvas)
