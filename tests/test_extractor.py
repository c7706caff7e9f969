import pytest

from tilemap_optimizer.extractor import ExtractionJob, extract_tile, tile_rect
from tilemap_optimizer.utils.validation import ExtractionError

from conftest import make_atlas, make_tileset, tile_color


@pytest.mark.parametrize(
    "local_index, expected",
    [
        (1, (0, 0, 32, 32)),
        (2, (32, 0, 32, 32)),
        (4, (96, 0, 32, 32)),
        (5, (0, 32, 32, 32)),
        (6, (32, 32, 32, 32)),
        (8, (96, 32, 32, 32)),
        (9, (0, 64, 32, 32)),
        (12, (96, 64, 32, 32)),
    ],
)
def test_tile_rect_row_major(local_index, expected):
    tileset = make_tileset(1, 4, 3, 32)
    assert tile_rect(tileset, local_index, 32) == expected


def test_tile_rect_offsets_by_firstgid():
    tileset = make_tileset(101, 4, 3, 32)
    assert tile_rect(tileset, 101, 32) == (0, 0, 32, 32)
    assert tile_rect(tileset, 105, 32) == (0, 32, 32, 32)


def test_tile_rect_single_column():
    tileset = make_tileset(1, 1, 3, 16)
    assert tile_rect(tileset, 1, 16) == (0, 0, 16, 16)
    assert tile_rect(tileset, 2, 16) == (0, 16, 16, 16)
    assert tile_rect(tileset, 3, 16) == (0, 32, 16, 16)


def test_tile_rect_rejects_atlas_narrower_than_a_tile():
    tileset = make_tileset(1, 1, 1, 16)
    tileset.imagewidth = 8
    with pytest.raises(ExtractionError):
        tile_rect(tileset, 1, 16)


def test_extract_tile_returns_the_tile_pixels(source, tile_size):
    tileset, image = source
    for gid in (1, 4, 5, 7, 12):
        tile = extract_tile(image, tileset, gid, tile_size)
        assert tile.size == (tile_size, tile_size)
        assert tile.getpixel((0, 0)) == tile_color(1, gid)
        assert tile.getpixel((tile_size - 1, tile_size - 1)) == tile_color(1, gid)


def test_extract_tile_outside_of_image_raises(tile_size):
    # Metadata claims three rows, the decoded image only has one
    tileset = make_tileset(1, 4, 3, tile_size)
    image = make_atlas(4, 1, tile_size)
    assert extract_tile(image, tileset, 4, tile_size).getpixel((0, 0)) == tile_color(1, 4)
    with pytest.raises(ExtractionError):
        extract_tile(image, tileset, 5, tile_size)


def test_extraction_job_runs_the_crop(source, tile_size):
    tileset, image = source
    job = ExtractionJob(tileset=tileset, image=image, gid=6, tile_size=tile_size)
    assert job.run().getpixel((1, 1)) == tile_color(1, 6)
