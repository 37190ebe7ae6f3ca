import pytest

from volume.errors import OutOfRange
from volume.voxel_grid import VoxelGrid


def _grid():
    # z=0: "ABCD" / "EFGH", z=1: "IJKL" / "MNOP"
    return VoxelGrid.from_flat("ABCDEFGHIJKLMNOP", (2, 2, 4))


def test_full_region_defaults():
    region = _grid().region()
    assert region.origin == (0, 0, 0)
    assert region.extents == (2, 2, 4)
    assert region.volume == 16
    assert region.at(1, 1, 3) == ord("P")


def test_window_translates_local_coordinates():
    region = _grid().region((1, 0, 2), (1, 2, 2))
    assert region.at(0, 0, 0) == ord("K")
    assert region.at(0, 1, 1) == ord("P")
    assert region.world_origin == (2, 0, 1)


def test_access_outside_window_fails():
    region = _grid().region((0, 0, 1), (1, 1, 2))
    with pytest.raises(OutOfRange):
        region.at(0, 0, 2)
    with pytest.raises(OutOfRange):
        region.at(1, 0, 0)
    with pytest.raises(OutOfRange):
        region.at(0, -1, 0)


@pytest.mark.parametrize(
    "origin, extents",
    [
        ((0, 0, 0), (3, 2, 4)),
        ((0, 1, 0), (2, 2, 4)),
        ((0, 0, 3), (1, 1, 2)),
        ((-1, 0, 0), (1, 1, 1)),
        ((0, 0, 0), (1, -1, 1)),
    ],
)
def test_construction_outside_grid_fails(origin, extents):
    with pytest.raises(OutOfRange):
        _grid().region(origin, extents)


def test_values_are_read_only():
    region = _grid().region()
    with pytest.raises(ValueError):
        region.values[0, 0, 0] = 0
    # the backing grid stays writable
    region.grid.set(0, 0, 0, "Z")
    assert region.at(0, 0, 0) == ord("Z")


def test_row_and_window_bounds():
    region = _grid().region((0, 0, 1), (2, 2, 3))
    assert bytes(region.row(0, 1, 0, 3)) == b"FGH"
    assert region.row(0, 0, 2, 2).size == 0
    with pytest.raises(OutOfRange):
        region.row(0, 0, 1, 4)
    with pytest.raises(OutOfRange):
        region.window(0, 3, 0, 1, 0, 1)


def test_subregion_composes_origins():
    region = _grid().region((0, 0, 1), (2, 2, 3))
    sub = region.subregion((1, 1, 1), (1, 1, 2))
    assert sub.origin == (1, 1, 2)
    assert sub.at(0, 0, 0) == ord("O")
    with pytest.raises(OutOfRange):
        region.subregion((1, 1, 2), (1, 1, 2))


def test_overlaps():
    grid = _grid()
    left = grid.region((0, 0, 0), (2, 2, 2))
    right = grid.region((0, 0, 2), (2, 2, 2))
    middle = grid.region((0, 0, 1), (1, 1, 2))
    assert not left.overlaps(right)
    assert left.overlaps(middle)
    assert right.overlaps(middle)
    assert not left.overlaps(_grid().region())
