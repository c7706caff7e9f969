import pytest

from tilemap_optimizer.extractor import ExtractionJob
from tilemap_optimizer.models import TileData
from tilemap_optimizer.packer import ChunkPacker, ChunkState, chunk_geometry
from tilemap_optimizer.utils.validation import ExtractionError, PackerStateError

from conftest import tile_color


@pytest.mark.parametrize(
    "tile_count, max_columns, expected",
    [
        (1, 4, (1, 1)),
        (3, 4, (3, 1)),
        (4, 4, (4, 1)),
        (5, 4, (4, 2)),
        (16, 4, (4, 4)),
        (2, 2, (2, 1)),
        (3, 2, (2, 2)),
        (5, 1, (1, 5)),
    ],
)
def test_chunk_geometry(tile_count, max_columns, expected):
    assert chunk_geometry(tile_count, max_columns) == expected


def make_packer(tile_size, max_columns=2, max_lines=2, **kwargs):
    return ChunkPacker(1, 1, tile_size, max_columns, max_lines, workers=2, **kwargs)


def job(source, gid, tile_size):
    tileset, image = source
    return ExtractionJob(tileset=tileset, image=image, gid=gid, tile_size=tile_size)


def test_new_packer_is_accumulating(tile_size):
    packer = make_packer(tile_size)
    assert packer.state is ChunkState.ACCUMULATING
    assert len(packer) == 0
    assert packer.capacity == 4


def test_packer_is_full_at_capacity(source, tile_size):
    packer = make_packer(tile_size)
    for gid in (1, 2, 3):
        packer.add_job(job(source, gid, tile_size))
    assert not packer.is_full

    packer.add_job(job(source, 4, tile_size))
    assert packer.is_full
    assert packer.state is ChunkState.FULL


def test_flush_closes_and_opens_next_chunk(source, tile_size):
    packer = make_packer(tile_size)
    for gid in (1, 2, 3, 4):
        packer.add_job(job(source, gid, tile_size))

    chunk, next_packer = packer.flush(next_firstgid=5)

    assert packer.state is ChunkState.CLOSED
    assert next_packer.state is ChunkState.ACCUMULATING
    assert next_packer.index == 2
    assert next_packer.firstgid == 5
    assert len(next_packer) == 0

    tileset = chunk.tileset
    assert tileset.firstgid == 1
    assert tileset.tilecount == 4
    assert tileset.columns == 2
    assert (tileset.imagewidth, tileset.imageheight) == (2 * tile_size, 2 * tile_size)
    assert tileset.image == "chunk-1.png"
    assert tileset.name == "Chunk 1"
    assert tileset.tilewidth == tileset.tileheight == tile_size
    assert chunk.image.size == (2 * tile_size, 2 * tile_size)


def test_tiles_are_pasted_in_scheduling_order(source, tile_size):
    packer = make_packer(tile_size)
    gids = [9, 2, 7]
    for gid in gids:
        packer.add_job(job(source, gid, tile_size))

    chunk, _ = packer.flush(next_firstgid=4)
    image = chunk.image

    assert image.size == (2 * tile_size, 2 * tile_size)
    assert image.getpixel((0, 0)) == tile_color(1, 9)
    assert image.getpixel((tile_size, 0)) == tile_color(1, 2)
    assert image.getpixel((0, tile_size)) == tile_color(1, 7)
    # Unused slot stays transparent
    assert image.getpixel((tile_size, tile_size)) == (0, 0, 0, 0)


def test_partial_chunk_is_a_single_line(source, tile_size):
    packer = make_packer(tile_size, max_columns=4, max_lines=4)
    for gid in (3, 1):
        packer.add_job(job(source, gid, tile_size))

    chunk, _ = packer.flush(next_firstgid=3)

    assert chunk.tileset.columns == 2
    assert chunk.image.size == (2 * tile_size, tile_size)


def test_tile_metadata_is_carried_into_the_chunk(source, tile_size):
    packer = make_packer(tile_size)
    packer.add_job(job(source, 1, tile_size))
    record = TileData(id=1, properties=[{"name": "solid", "type": "bool", "value": True}])
    packer.add_tile_data(record)

    chunk, _ = packer.flush(next_firstgid=2)

    assert chunk.tileset.tiles == [record]
    assert chunk.tileset.properties == []


def test_closed_packer_rejects_changes(source, tile_size):
    packer = make_packer(tile_size)
    packer.add_job(job(source, 1, tile_size))
    packer.flush(next_firstgid=2)

    with pytest.raises(PackerStateError):
        packer.add_job(job(source, 2, tile_size))
    with pytest.raises(PackerStateError):
        packer.add_tile_data(TileData(id=2))
    with pytest.raises(PackerStateError):
        packer.flush(next_firstgid=2)


def test_empty_packer_cannot_flush(tile_size):
    with pytest.raises(PackerStateError):
        make_packer(tile_size).flush(next_firstgid=1)


def test_failed_extraction_propagates(source, tile_size):
    tileset, image = source
    packer = make_packer(tile_size)
    # gid 40 lies far outside the 4x3 atlas
    packer.add_job(ExtractionJob(tileset=tileset, image=image, gid=40, tile_size=tile_size))

    with pytest.raises(ExtractionError):
        packer.flush(next_firstgid=2)
