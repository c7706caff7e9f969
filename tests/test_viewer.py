import pytest

from tilemap_optimizer.viewer import gid_at, screen_to_tile_coords, zoom_around


@pytest.mark.parametrize(
    "screen, offset, zoom, expected",
    [
        ((0, 0), (0, 0), 1.0, (0, 0)),
        ((31, 31), (0, 0), 1.0, (0, 0)),
        ((32, 64), (0, 0), 1.0, (1, 2)),
        ((100, 100), (36, 36), 1.0, (2, 2)),
        ((64, 64), (0, 0), 0.5, (4, 4)),
        ((10, 10), (20, 20), 1.0, (-1, -1)),
    ],
)
def test_screen_to_tile_coords(screen, offset, zoom, expected):
    assert screen_to_tile_coords(*screen, *offset, 32, zoom) == expected


def test_gid_at_returns_top_most_tile(make_map):
    tilemap = make_map([[1, 2, 3, 4], [0, 9, 0, 0]], [], width=2, height=2)

    assert gid_at(tilemap, 0, 0) == 1
    assert gid_at(tilemap, 1, 0) == 9
    assert gid_at(tilemap, 1, 1) == 4
    assert gid_at(tilemap, 2, 0) == 0
    assert gid_at(tilemap, -1, 0) == 0


def test_zoom_keeps_point_under_mouse():
    # Mouse at the map center stays at the center after doubling the size
    offset = zoom_around((150, 150), (100, 100), (100, 100), (200, 200))
    assert offset == (50, 50)
