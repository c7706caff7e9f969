import pytest
from PIL import Image

from tilemap_optimizer.models import Frame, Layer, TileData, TileMap, Tileset


def tile_color(tileset_index, local_index):
    """Distinct opaque color of one source tile"""
    return (tileset_index * 40 % 256, local_index * 7 % 256, (local_index * 13 + 50) % 256, 255)


def make_atlas(columns, rows, tile_size, tileset_index=1):
    """Atlas whose tile n (1-based, row-major) is filled with tile_color(tileset_index, n)"""
    image = Image.new("RGBA", (columns * tile_size, rows * tile_size))
    for local_index in range(1, columns * rows + 1):
        left = (local_index - 1) % columns * tile_size
        top = (local_index - 1) // columns * tile_size
        image.paste(
            tile_color(tileset_index, local_index),
            (left, top, left + tile_size, top + tile_size),
        )
    return image


def make_tileset(firstgid, columns, rows, tile_size, name="tiles", **kwargs):
    return Tileset(
        firstgid=firstgid,
        tilecount=columns * rows,
        tilewidth=tile_size,
        tileheight=tile_size,
        imagewidth=columns * tile_size,
        imageheight=rows * tile_size,
        columns=columns,
        image=f"{name}.png",
        name=name,
        **kwargs,
    )


def animated(gid, frames, duration=100):
    return TileData(id=gid, animation=[Frame(tileid=frame, duration=duration) for frame in frames])


@pytest.fixture
def tile_size():
    return 8


@pytest.fixture
def source(tile_size):
    """One 4x3 source tileset (gids 1-12) and its image"""
    tileset = make_tileset(1, 4, 3, tile_size)
    return tileset, make_atlas(4, 3, tile_size)


@pytest.fixture
def two_sources(tile_size):
    """Two source tilesets: gids 1-12 (4x3) and 13-18 (2x3)"""
    first = make_tileset(1, 4, 3, tile_size, name="ground")
    second = make_tileset(13, 2, 3, tile_size, name="props")
    return {
        first: make_atlas(4, 3, tile_size, tileset_index=1),
        second: make_atlas(2, 3, tile_size, tileset_index=2),
    }


@pytest.fixture
def make_map():
    def factory(layers, tilesets, width=None, height=None):
        extra = {}
        if width is not None:
            extra["width"] = width
            extra["height"] = height
        return TileMap(
            layers=[Layer(data=list(cells), name=f"layer {i}") for i, cells in enumerate(layers)],
            tilesets=list(tilesets),
            extra=extra,
        )

    return factory
